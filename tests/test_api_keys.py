from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from stockroom.models.company import Company
from stockroom.models.product import Product


async def _create_key(client: AsyncClient, admin_token: str, **payload) -> dict:
    r = await client.post(
        "/api/v1/api-keys",
        json={"name": "erp-sync", **payload},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_key_is_shown_once(client: AsyncClient, admin_token: str, company: Company):
    created = await _create_key(client, admin_token, company_id=str(company.id))
    assert created["key"].startswith("sk_")
    assert created["key_prefix"] == created["key"][:12]

    listing = await client.get("/api/v1/api-keys", headers={"Authorization": f"Bearer {admin_token}"})
    [item] = listing.json()["data"]
    assert "key" not in item
    assert item["is_active"] is True


@pytest.mark.asyncio
async def test_stock_lookup_with_key(
    client: AsyncClient, admin_token: str, manager_token: str, company: Company, product: Product, location
):
    await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": 9},
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    created = await _create_key(client, admin_token, company_id=str(company.id))

    r = await client.get("/api/v1/integrations/stock", params={"sku": product.sku}, headers={"x-api-key": created["key"]})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["total_quantity"] == 9
    assert data["locations"][0]["location_name"] == "Main warehouse"

    listing = await client.get("/api/v1/api-keys", headers={"Authorization": f"Bearer {admin_token}"})
    assert listing.json()["data"][0]["last_used_at"] is not None

    missing = await client.get("/api/v1/integrations/stock", params={"sku": "NOPE"}, headers={"x-api-key": created["key"]})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_key_scoped_to_other_company_sees_nothing(
    client: AsyncClient, admin_token: str, manager_token: str, other_company: Company, product: Product, location
):
    await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": 9},
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    created = await _create_key(client, admin_token, company_id=str(other_company.id))

    r = await client.get("/api/v1/integrations/stock", params={"sku": product.sku}, headers={"x-api-key": created["key"]})
    assert r.status_code == 200
    assert r.json()["data"]["locations"] == []


@pytest.mark.asyncio
async def test_missing_invalid_and_revoked_keys(client: AsyncClient, admin_token: str):
    missing = await client.get("/api/v1/integrations/stock", params={"sku": "X"})
    assert missing.status_code == 401

    invalid = await client.get("/api/v1/integrations/stock", params={"sku": "X"}, headers={"x-api-key": "sk_wrong"})
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid API key"

    created = await _create_key(client, admin_token)
    revoked = await client.delete(
        f"/api/v1/api-keys/{created['id']}", headers={"Authorization": f"Bearer {admin_token}"}
    )
    assert revoked.status_code == 200
    assert revoked.json()["data"]["is_active"] is False

    r = await client.get("/api/v1/integrations/stock", params={"sku": "X"}, headers={"x-api-key": created["key"]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_expired_key(client: AsyncClient, admin_token: str):
    expired_at = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    created = await _create_key(client, admin_token, expires_at=expired_at)

    r = await client.get("/api/v1/integrations/stock", params={"sku": "X"}, headers={"x-api-key": created["key"]})
    assert r.status_code == 401
    assert r.json()["message"] == "API key expired"
