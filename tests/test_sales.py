import uuid
from datetime import date

import pytest
from httpx import AsyncClient

from stockroom.models.customer import Customer
from stockroom.models.product import Product


async def _stock(client: AsyncClient, token: str, product: Product, location, quantity: int) -> dict:
    r = await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": quantity},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_sale_takes_stock_out(
    client: AsyncClient, manager_token: str, product: Product, location, customer: Customer
):
    record = await _stock(client, manager_token, product, location, 10)

    r = await client.post(
        "/api/v1/sales",
        json={
            "customer_id": str(customer.id),
            "sale_date": date.today().isoformat(),
            "items": [{"product_id": str(product.id), "quantity": 3}],
            "payment_method": "pix",
        },
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 201, r.text
    sale = r.json()["data"]
    assert sale["total_amount"] == 30.0
    assert sale["items"][0]["total_price"] == 30.0
    assert sale["payment_status"] == "pending"

    headers = {"Authorization": f"Bearer {manager_token}"}
    inventory = await client.get(f"/api/v1/inventory/{record['id']}", headers=headers)
    assert inventory.json()["data"]["quantity"] == 7

    movements = await client.get("/api/v1/stock-movements", params={"type": "venda"}, headers=headers)
    [movement] = movements.json()["data"]
    assert movement["reference_id"] == sale["id"]
    assert movement["reference_type"] == "sale"
    assert movement["quantity"] == 3

    detail = await client.get(f"/api/v1/sales/{sale['id']}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["id"] == sale["id"]


@pytest.mark.asyncio
async def test_failed_line_rolls_back_sale(
    client: AsyncClient, manager_token: str, product: Product, location, customer: Customer
):
    record = await _stock(client, manager_token, product, location, 10)
    headers = {"Authorization": f"Bearer {manager_token}"}

    r = await client.post(
        "/api/v1/sales",
        json={
            "customer_id": str(customer.id),
            "sale_date": date.today().isoformat(),
            "items": [
                {"product_id": str(product.id), "quantity": 2},
                {"product_id": str(uuid.uuid4()), "quantity": 1},
            ],
        },
        headers=headers,
    )
    assert r.status_code == 400

    listing = await client.get("/api/v1/sales", headers=headers)
    assert listing.json()["total"] == 0
    inventory = await client.get(f"/api/v1/inventory/{record['id']}", headers=headers)
    assert inventory.json()["data"]["quantity"] == 10


@pytest.mark.asyncio
async def test_sale_requires_items(client: AsyncClient, manager_token: str, customer: Customer):
    r = await client.post(
        "/api/v1/sales",
        json={"customer_id": str(customer.id), "sale_date": date.today().isoformat(), "items": []},
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_viewer_cannot_sell(client: AsyncClient, viewer_token: str, product: Product, customer: Customer):
    r = await client.post(
        "/api/v1/sales",
        json={
            "customer_id": str(customer.id),
            "sale_date": date.today().isoformat(),
            "items": [{"product_id": str(product.id), "quantity": 1}],
        },
        headers={"Authorization": f"Bearer {viewer_token}"},
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_operator_cannot_sell(
    client: AsyncClient, manager_token: str, operator_token: str, product: Product, location, customer: Customer
):
    record = await _stock(client, manager_token, product, location, 10)
    r = await client.post(
        "/api/v1/sales",
        json={
            "customer_id": str(customer.id),
            "sale_date": date.today().isoformat(),
            "items": [{"product_id": str(product.id), "quantity": 1}],
        },
        headers={"Authorization": f"Bearer {operator_token}"},
    )
    assert r.status_code == 403

    headers = {"Authorization": f"Bearer {manager_token}"}
    assert (await client.get("/api/v1/sales", headers=headers)).json()["total"] == 0
    inventory = await client.get(f"/api/v1/inventory/{record['id']}", headers=headers)
    assert inventory.json()["data"]["quantity"] == 10


@pytest.mark.asyncio
async def test_unknown_sale_is_forbidden(client: AsyncClient, manager_token: str):
    r = await client.get(f"/api/v1/sales/{uuid.uuid4()}", headers={"Authorization": f"Bearer {manager_token}"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_list_filters(client: AsyncClient, admin_token: str, product: Product, location, customer: Customer):
    headers = {"Authorization": f"Bearer {admin_token}"}
    await _stock(client, admin_token, product, location, 5)
    for status in ("paid", "pending"):
        r = await client.post(
            "/api/v1/sales",
            json={
                "customer_id": str(customer.id),
                "sale_date": date.today().isoformat(),
                "items": [{"product_id": str(product.id), "quantity": 1, "unit_price": 5}],
                "payment_status": status,
            },
            headers=headers,
        )
        assert r.status_code == 201, r.text

    paid = await client.get("/api/v1/sales", params={"status": "paid"}, headers=headers)
    assert paid.json()["total"] == 1
    by_customer = await client.get("/api/v1/sales", params={"customer": str(customer.id)}, headers=headers)
    assert by_customer.json()["total"] == 2
