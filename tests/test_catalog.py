import pytest
from httpx import AsyncClient

from stockroom.models.company import Company


@pytest.mark.asyncio
async def test_categories(client: AsyncClient, manager_token: str, viewer_token: str):
    headers = {"Authorization": f"Bearer {manager_token}"}
    r = await client.post("/api/v1/categories", json={"name": "Placas", "product_type": "placa"}, headers=headers)
    assert r.status_code == 201, r.text

    dup = await client.post("/api/v1/categories", json={"name": " placas ", "product_type": "placa"}, headers=headers)
    assert dup.status_code == 400

    bad_type = await client.post("/api/v1/categories", json={"name": "X", "product_type": "nope"}, headers=headers)
    assert bad_type.status_code == 400

    listing = await client.get("/api/v1/categories", headers={"Authorization": f"Bearer {viewer_token}"})
    assert [item["name"] for item in listing.json()["data"]] == ["Placas"]


@pytest.mark.asyncio
async def test_customers(client: AsyncClient, manager_token: str):
    headers = {"Authorization": f"Bearer {manager_token}"}
    for name, document in (("Ana Lima", "12345678900"), ("Bruno Costa", "98765432100")):
        r = await client.post(
            "/api/v1/customers", json={"name": name, "cpf_cnpj": document}, headers=headers
        )
        assert r.status_code == 201, r.text

    dup = await client.post("/api/v1/customers", json={"name": "Other", "cpf_cnpj": "12345678900"}, headers=headers)
    assert dup.status_code == 400

    search = await client.get("/api/v1/customers", params={"search": "bruno"}, headers=headers)
    assert search.json()["total"] == 1
    assert search.json()["data"][0]["customer_type"] == "individual"


@pytest.mark.asyncio
async def test_suppliers(client: AsyncClient, admin_token: str, operator_token: str):
    payload = {"name": "Acrilicos SA", "category": "fabricante", "rating": 4.5, "delivery_time": 7}
    denied = await client.post(
        "/api/v1/suppliers", json=payload, headers={"Authorization": f"Bearer {operator_token}"}
    )
    assert denied.status_code == 403

    headers = {"Authorization": f"Bearer {admin_token}"}
    created = await client.post("/api/v1/suppliers", json=payload, headers=headers)
    assert created.status_code == 201, created.text
    assert created.json()["data"]["rating"] == 4.5

    too_good = await client.post("/api/v1/suppliers", json={**payload, "rating": 6}, headers=headers)
    assert too_good.status_code == 400

    by_category = await client.get("/api/v1/suppliers", params={"category": "servico"}, headers=headers)
    assert by_category.json()["total"] == 0


@pytest.mark.asyncio
async def test_companies_admin_only(client: AsyncClient, admin_token: str, manager_token: str):
    denied = await client.post(
        "/api/v1/companies", json={"name": "New Co"}, headers={"Authorization": f"Bearer {manager_token}"}
    )
    assert denied.status_code == 403

    created = await client.post(
        "/api/v1/companies",
        json={"name": "New Co", "cnpj": "11222333000181"},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert created.status_code == 201, created.text

    dup = await client.post(
        "/api/v1/companies",
        json={"name": "Copy Co", "cnpj": "11222333000181"},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert dup.status_code == 400


@pytest.mark.asyncio
async def test_locations_follow_caller_company(
    client: AsyncClient, manager_token: str, company: Company, other_company: Company
):
    headers = {"Authorization": f"Bearer {manager_token}"}
    own = await client.post("/api/v1/locations", json={"name": "Showroom"}, headers=headers)
    assert own.status_code == 201, own.text
    assert own.json()["data"]["company_id"] == str(company.id)

    foreign = await client.post(
        "/api/v1/locations", json={"name": "Theirs", "company_id": str(other_company.id)}, headers=headers
    )
    assert foreign.status_code == 403

    listing = await client.get("/api/v1/locations", params={"company": str(company.id)}, headers=headers)
    assert [item["name"] for item in listing.json()["data"]] == ["Showroom"]


@pytest.mark.asyncio
async def test_admin_location_needs_company(client: AsyncClient, admin_token: str):
    r = await client.post(
        "/api/v1/locations", json={"name": "Nowhere"}, headers={"Authorization": f"Bearer {admin_token}"}
    )
    assert r.status_code == 400
    assert r.json()["message"] == "company_id is required"
