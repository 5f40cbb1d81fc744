import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_request_id_is_generated_and_propagated(client: AsyncClient):
    generated = await client.get("/health")
    assert generated.headers.get("x-request-id")

    propagated = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert propagated.headers["x-request-id"] == "abc-123"


@pytest.mark.asyncio
async def test_metrics_exposes_stock_counters(client: AsyncClient, manager_token: str, product, location):
    await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": 1},
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    r = await client.get("/metrics")
    assert r.status_code == 200
    assert "stockroom_stock_movements_total" in r.text
    assert "stockroom_auth_login_attempts_total" in r.text


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(client: AsyncClient):
    r = await client.get("/api/v1/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found", "message": "Not Found"}


@pytest.mark.asyncio
async def test_openapi_declares_security_schemes(client: AsyncClient):
    schema = (await client.get("/openapi.json")).json()
    schemes = schema["components"]["securitySchemes"]
    assert {"BearerAuth", "ApiKeyAuth"} <= set(schemes)
