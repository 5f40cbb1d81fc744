# tests/test_products.py
import base64
import io

import pytest
from httpx import AsyncClient
from PIL import Image

from stockroom.models.product import Category, Product


def _payload(category: Category, **overrides) -> dict:
    return {
        "sku": "  TAB-0001 ",
        "name": "Tablet 10in",
        "category_id": str(category.id),
        "product_type": "tablet",
        "status": "novo",
        "sale_price": 1200.0,
        "minimum_stock": 1,
        **overrides,
    }


def _png_size(data_url: str) -> tuple[int, int]:
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(data_url[len(prefix):]))).size


@pytest.mark.asyncio
async def test_create_product_with_qr_and_initial_stock(
    client: AsyncClient, manager_token: str, category: Category, location
):
    headers = {"Authorization": f"Bearer {manager_token}"}
    r = await client.post(
        "/api/v1/products",
        json=_payload(category, initial_stock=4, location_id=str(location.id)),
        headers=headers,
    )
    assert r.status_code == 201, r.text
    product = r.json()["data"]
    assert product["sku"] == "TAB-0001"
    assert product["is_active"] is True
    assert _png_size(product["qr_code"]) == (200, 200)

    detail = await client.get(f"/api/v1/products/{product['id']}", headers=headers)
    assert detail.status_code == 200, detail.text
    data = detail.json()["data"]
    assert data["category"]["name"] == "Totems"
    assert data["inventory"][0]["quantity"] == 4
    assert data["movements"][0]["movement_type"] == "entrada"


@pytest.mark.asyncio
async def test_initial_stock_needs_location(client: AsyncClient, manager_token: str, category: Category):
    r = await client.post(
        "/api/v1/products",
        json=_payload(category, initial_stock=4),
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_sku(client: AsyncClient, manager_token: str, category: Category, product: Product):
    r = await client.post(
        "/api/v1/products",
        json=_payload(category, sku=product.sku),
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 400
    assert "already registered" in r.json()["message"]


@pytest.mark.asyncio
async def test_update_product_regenerates_qr(client: AsyncClient, manager_token: str, category: Category):
    headers = {"Authorization": f"Bearer {manager_token}"}
    created = (await client.post("/api/v1/products", json=_payload(category), headers=headers)).json()["data"]

    r = await client.put(
        f"/api/v1/products/{created['id']}",
        json={"name": "Tablet 11in", "qr_code": "ignored"},
        headers=headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["name"] == "Tablet 11in"
    assert r.json()["data"]["qr_code"] == created["qr_code"]

    renamed = await client.put(f"/api/v1/products/{created['id']}", json={"sku": "TAB-0002"}, headers=headers)
    assert renamed.json()["data"]["qr_code"] != created["qr_code"]

    nulled = await client.put(f"/api/v1/products/{created['id']}", json={"name": None}, headers=headers)
    assert nulled.status_code == 400


@pytest.mark.asyncio
async def test_list_filters_and_pagination(
    client: AsyncClient, admin_token: str, category: Category, product: Product
):
    headers = {"Authorization": f"Bearer {admin_token}"}
    for index in range(3):
        r = await client.post(
            "/api/v1/products",
            json=_payload(category, sku=f"WOB-{index}", name=f"Wobbler {index}", product_type="wobbler"),
            headers=headers,
        )
        assert r.status_code == 201, r.text

    page = await client.get("/api/v1/products", params={"limit": 2, "type": "wobbler"}, headers=headers)
    body = page.json()
    assert body["total"] == 3
    assert body["totalPages"] == 2
    assert len(body["data"]) == 2

    search = await client.get("/api/v1/products", params={"search": "totem"}, headers=headers)
    assert [item["id"] for item in search.json()["data"]] == [str(product.id)]

    await client.delete(f"/api/v1/products/{product.id}", headers=headers)
    hidden = await client.get("/api/v1/products", params={"search": "totem"}, headers=headers)
    assert hidden.json()["total"] == 0
    shown = await client.get(
        "/api/v1/products", params={"search": "totem", "includeInactive": "true"}, headers=headers
    )
    assert shown.json()["total"] == 1


@pytest.mark.asyncio
async def test_product_not_found(client: AsyncClient, viewer_token: str):
    r = await client.get(
        "/api/v1/products/00000000-0000-0000-0000-000000000000",
        headers={"Authorization": f"Bearer {viewer_token}"},
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Not Found"


@pytest.mark.asyncio
async def test_qr_code_endpoint(client: AsyncClient, viewer_token: str, product: Product):
    headers = {"Authorization": f"Bearer {viewer_token}"}
    r = await client.get(f"/api/v1/products/{product.id}/qr-code", headers=headers)
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["sku"] == product.sku
    assert _png_size(data["qr_code"]) == (200, 200)

    # Stored on first request.
    again = await client.get(f"/api/v1/products/{product.id}/qr-code", headers=headers)
    assert again.json()["data"]["qr_code"] == data["qr_code"]

    sized = await client.get(f"/api/v1/products/{product.id}/qr-code", params={"size": 300}, headers=headers)
    assert _png_size(sized.json()["data"]["qr_code"]) == (300, 300)

    too_small = await client.get(f"/api/v1/products/{product.id}/qr-code", params={"size": 10}, headers=headers)
    assert too_small.status_code == 400


@pytest.mark.asyncio
async def test_bulk_import(client: AsyncClient, manager_token: str, category: Category, product: Product):
    headers = {"Authorization": f"Bearer {manager_token}"}
    rows = [
        _payload(category, sku="BULK-1", name="Bulk one"),
        _payload(category, sku="BULK-1", name="Bulk one again"),
        _payload(category, sku=product.sku, name="Existing"),
        {"sku": "BULK-2", "name": "Missing fields"},
        _payload(category, sku="BULK-3", name="Bulk three"),
    ]
    r = await client.post("/api/v1/products/bulk-import", json={"products": rows}, headers=headers)
    assert r.status_code == 200, r.text
    result = r.json()["data"]
    assert result["success"] == 2
    assert result["warnings"] == 2
    assert result["errors"] == 1
    assert result["errors_details"][0]["row"] == 4

    empty = await client.post("/api/v1/products/bulk-import", json={"products": []}, headers=headers)
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_low_stock_report(client: AsyncClient, manager_token: str, product: Product, location):
    headers = {"Authorization": f"Bearer {manager_token}"}
    await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": 1},
        headers=headers,
    )

    r = await client.get("/api/v1/products/reports/low-stock", headers=headers)
    assert r.status_code == 200, r.text
    [row] = r.json()["data"]
    assert row["sku"] == product.sku
    assert row["available_quantity"] == 1
    assert row["minimum_stock"] == 2
