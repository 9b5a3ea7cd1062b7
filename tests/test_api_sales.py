from decimal import Decimal

from sqlalchemy.dialects import postgresql

from tracker.crud import _item_for_update


def _create_item(client, quantity=5):
    response = client.post("/api/inventory/", json={
        "item_name": "Widget",
        "item_cost": "10",
        "purchase_shipping_cost": "2",
        "quantity_in_stock": quantity,
        "purchase_date": "2024-06-01",
    })
    assert response.status_code == 201, response.text
    return response.json()


def _sale_payload(item_id, quantity=1, **overrides):
    payload = {
        "inventory_item_id": item_id,
        "sale_date": "2024-06-10",
        "platform": "eBay",
        "quantity_sold": quantity,
        "sale_price": "15.00",
    }
    payload.update(overrides)
    return payload


def test_list_platforms(client):
    assert client.get("/api/sales/platforms").json() == [
        "eBay", "Facebook Marketplace", "Nextdoor", "Etsy", "Other"
    ]


def test_log_sale_decrements_stock(client):
    item = _create_item(client, quantity=5)

    response = client.post("/api/sales/", json=_sale_payload(item["id"], quantity=3, platform_fees="1.20"))

    assert response.status_code == 201, response.text
    sale = response.json()
    assert sale["inventory_item_number"] == item["item_number"]
    assert sale["item_name"] == "Widget"
    assert sale["quantity_sold"] == 3
    assert Decimal(sale["platform_fees"]) == Decimal("1.20")
    assert Decimal(sale["shipping_cost"]) == Decimal("0")

    stock = client.get(f"/api/inventory/{item['id']}").json()["quantity_in_stock"]
    assert stock == 2


def test_sale_over_stock_is_rejected(client):
    item = _create_item(client, quantity=2)

    response = client.post("/api/sales/", json=_sale_payload(item["id"], quantity=3))

    assert response.status_code == 400
    assert response.json()["detail"] == "Quantity Sold cannot exceed available stock (2)."
    assert client.get(f"/api/inventory/{item['id']}").json()["quantity_in_stock"] == 2
    assert client.get("/api/sales/").json() == []


def test_sale_on_out_of_stock_item_is_rejected(client):
    item = _create_item(client, quantity=0)
    response = client.post("/api/sales/", json=_sale_payload(item["id"]))
    assert response.status_code == 400
    assert "out of stock" in response.json()["detail"]


def test_sale_for_unknown_item_returns_404(client):
    response = client.post("/api/sales/", json=_sale_payload("_inv_missing"))
    assert response.status_code == 404


def test_sale_input_validation(client):
    item = _create_item(client)
    assert client.post("/api/sales/", json=_sale_payload(item["id"], quantity=0)).status_code == 422
    assert client.post("/api/sales/", json=_sale_payload(item["id"], platform="Craigslist")).status_code == 422
    assert client.post("/api/sales/", json=_sale_payload(item["id"], sale_price="-1")).status_code == 422


def test_list_and_get_sales(client):
    first = _create_item(client, quantity=5)
    second = _create_item(client, quantity=5)
    client.post("/api/sales/", json=_sale_payload(first["id"], quantity=1))
    client.post("/api/sales/", json=_sale_payload(second["id"], quantity=2))

    sales = client.get("/api/sales/").json()
    assert len(sales) == 2

    only_first = client.get("/api/sales/", params={"item_number": first["item_number"]}).json()
    assert [sale["quantity_sold"] for sale in only_first] == [1]

    sale_id = only_first[0]["id"]
    assert client.get(f"/api/sales/{sale_id}").json()["inventory_item_number"] == first["item_number"]
    assert client.get("/api/sales/9999").status_code == 404


def test_sale_money_beyond_column_range_is_rejected(client):
    item = _create_item(client)
    response = client.post("/api/sales/", json=_sale_payload(item["id"], sale_price="1e27"))
    assert response.status_code == 422
    response = client.post("/api/sales/", json=_sale_payload(item["id"], platform_fees="100000000"))
    assert response.status_code == 422
    assert client.get(f"/api/inventory/{item['id']}").json()["quantity_in_stock"] == 5


def test_sale_item_query_locks_the_row(db_session):
    statement = _item_for_update(db_session, "_inv_abc").statement
    assert "FOR UPDATE" in str(statement.compile(dialect=postgresql.dialect()))
