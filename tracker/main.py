"""
    Tracker API

    This module implements a FastAPI service for tracking inventory items and the sales
    logged against them. It provides endpoints for creating, reading, updating, and deleting
    inventory items and for logging sales that take sold units out of stock, with
    SQLAlchemy database persistence.

    The service exposes:
    - Inventory endpoints under /api/inventory
    - Sales endpoints under /api/sales
    - Root endpoint: a static welcome message
    - Health endpoint: Provides service health status for monitoring and orchestration

    Run it with the ``tracker-api`` command or ``python -m tracker.main``.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models
from .config import settings
from .database import engine
from .routers.inventory import router as inventory_router
from .routers.sales import router as sales_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    models.Base.metadata.create_all(bind=engine)
    logger.info(f"Server is running on http://localhost:{settings.port}")
    yield
    logger.info("Shutting down server...")
    engine.dispose()


app = FastAPI(title="tracker-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials="*" not in settings.cors_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Report any error not handled by a route as a generic 500 JSON response.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Something went wrong!", "details": str(exc)},
    )


@app.get("/")
def read_root():
    """
    Welcome message, useful to check the API is reachable.

    Example:
        GET /
        Response: {"message": "Welcome to the Tracker API!"}
    """
    return {"message": "Welcome to the Tracker API!"}

@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the tracker service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): "healthy" if the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}


app.include_router(inventory_router, prefix="/api/inventory", tags=["inventory"])
app.include_router(sales_router, prefix="/api/sales", tags=["sales"])


def serve():
    """Start the API server on the configured host and port."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    uvicorn.run("tracker.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
