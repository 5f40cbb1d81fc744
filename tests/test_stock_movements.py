from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from stockroom.models.product import Product


@pytest.mark.asyncio
async def test_manual_movements(client: AsyncClient, manager_token: str, product: Product, location):
    headers = {"Authorization": f"Bearer {manager_token}"}
    base = {"product_id": str(product.id), "location_id": str(location.id)}

    entrada = await client.post(
        "/api/v1/stock-movements", json={**base, "movement_type": "entrada", "quantity": 6}, headers=headers
    )
    assert entrada.status_code == 201, entrada.text

    too_much = await client.post(
        "/api/v1/stock-movements", json={**base, "movement_type": "venda", "quantity": 7}, headers=headers
    )
    assert too_much.status_code == 400
    assert too_much.json()["code"] == "insufficient_stock"
    rejected = await client.get("/api/v1/stock-movements", params={"type": "venda"}, headers=headers)
    assert rejected.json()["total"] == 0
    unchanged = await client.get("/api/v1/inventory", params={"product": str(product.id)}, headers=headers)
    assert unchanged.json()["data"][0]["quantity"] == 6

    perda = await client.post(
        "/api/v1/stock-movements", json={**base, "movement_type": "perda", "quantity": 2}, headers=headers
    )
    assert perda.status_code == 201, perda.text
    assert perda.json()["data"]["created_by"] is not None

    listing = await client.get("/api/v1/stock-movements", params={"type": "perda"}, headers=headers)
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert listing.json()["limit"] == 50

    inventory = await client.get("/api/v1/inventory", params={"product": str(product.id)}, headers=headers)
    assert inventory.json()["data"][0]["quantity"] == 4


@pytest.mark.asyncio
async def test_movement_without_record(client: AsyncClient, admin_token: str, product: Product, location):
    r = await client.post(
        "/api/v1/stock-movements",
        json={
            "product_id": str(product.id),
            "location_id": str(location.id),
            "movement_type": "transferencia",
            "quantity": 1,
        },
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_date_filters(client: AsyncClient, manager_token: str, product: Product, location):
    headers = {"Authorization": f"Bearer {manager_token}"}
    await client.post(
        "/api/v1/stock-movements",
        json={"product_id": str(product.id), "location_id": str(location.id), "movement_type": "entrada", "quantity": 1},
        headers=headers,
    )
    today = date.today()

    hit = await client.get(
        "/api/v1/stock-movements",
        params={"dateFrom": (today - timedelta(days=1)).isoformat(), "dateTo": (today + timedelta(days=1)).isoformat()},
        headers=headers,
    )
    assert hit.json()["total"] == 1

    miss = await client.get(
        "/api/v1/stock-movements", params={"dateFrom": (today + timedelta(days=2)).isoformat()}, headers=headers
    )
    assert miss.json()["total"] == 0

    inverted = await client.get(
        "/api/v1/stock-movements",
        params={"dateFrom": today.isoformat(), "dateTo": (today - timedelta(days=1)).isoformat()},
        headers=headers,
    )
    assert inverted.status_code == 400


@pytest.mark.asyncio
async def test_viewer_cannot_record_movement(client: AsyncClient, viewer_token: str, product: Product, location):
    r = await client.post(
        "/api/v1/stock-movements",
        json={"product_id": str(product.id), "location_id": str(location.id), "movement_type": "entrada", "quantity": 1},
        headers={"Authorization": f"Bearer {viewer_token}"},
    )
    assert r.status_code == 403
