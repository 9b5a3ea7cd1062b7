import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from tracker import models  # noqa: E402
from tracker.database import get_db  # noqa: E402
from tracker.main import app  # noqa: E402
from tracker.store import InventoryStore  # noqa: E402


WIDGET_FORM = {
    "item_name": "Widget",
    "description": "Blue widget",
    "item_cost": "10",
    "purchase_shipping_cost": "2",
    "purchase_sales_tax": "0",
    "quantity_in_stock": "5",
    "supplier": "Acme",
    "purchase_date": "2024-06-01",
}


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def store():
    return InventoryStore()


@pytest.fixture
def widget_form():
    return dict(WIDGET_FORM)
