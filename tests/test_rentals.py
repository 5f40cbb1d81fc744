from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from stockroom.models.customer import Customer
from stockroom.models.product import Product


async def _setup_rental(client: AsyncClient, token: str, product: Product, location, customer: Customer, **overrides):
    headers = {"Authorization": f"Bearer {token}"}
    entry = await client.post(
        "/api/v1/inventory/entry",
        json={"product_id": str(product.id), "location_id": str(location.id), "quantity": 5},
        headers=headers,
    )
    assert entry.status_code == 201, entry.text

    payload = {
        "customer_id": str(customer.id),
        "rental_date": date.today().isoformat(),
        "expected_return_date": (date.today() + timedelta(days=5)).isoformat(),
        "location_id": str(location.id),
        "items": [{"product_id": str(product.id), "quantity": 2}],
        "deposit_amount": 50,
        **overrides,
    }
    r = await client.post("/api/v1/rentals", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return entry.json()["data"], r.json()["data"]


@pytest.mark.asyncio
async def test_rental_reserves_stock(client: AsyncClient, manager_token: str, product: Product, location, customer):
    record, rental = await _setup_rental(client, manager_token, product, location, customer)
    assert rental["status"] == "active"
    assert rental["total_amount"] == 8.0
    assert rental["items"][0]["returned_quantity"] == 0

    inventory = await client.get(
        f"/api/v1/inventory/{record['id']}", headers={"Authorization": f"Bearer {manager_token}"}
    )
    data = inventory.json()["data"]
    assert data["quantity"] == 5
    assert data["reserved_quantity"] == 2
    assert data["available_quantity"] == 3


@pytest.mark.asyncio
async def test_full_return_closes_rental(client: AsyncClient, manager_token: str, product: Product, location, customer):
    headers = {"Authorization": f"Bearer {manager_token}"}
    record, rental = await _setup_rental(client, manager_token, product, location, customer)
    item_id = rental["items"][0]["id"]

    r = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": item_id, "quantity": 2}]},
        headers=headers,
    )
    assert r.status_code == 200, r.text
    returned = r.json()["data"]
    assert returned["status"] == "returned"
    assert returned["return_date"] == date.today().isoformat()

    inventory = (await client.get(f"/api/v1/inventory/{record['id']}", headers=headers)).json()["data"]
    assert inventory["reserved_quantity"] == 0
    assert inventory["quantity"] == 5

    again = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": item_id, "quantity": 1}]},
        headers=headers,
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_partial_returns(client: AsyncClient, manager_token: str, product, location, customer):
    _, rental = await _setup_rental(client, manager_token, product, location, customer)
    item_id = rental["items"][0]["id"]
    headers = {"Authorization": f"Bearer {manager_token}"}

    first = await client.post(
        f"/api/v1/rentals/{rental['id']}/return", json={"items": [{"id": item_id, "quantity": 1}]}, headers=headers
    )
    assert first.status_code == 200, first.text
    assert first.json()["data"]["status"] == "active"
    assert first.json()["data"]["items"][0]["returned_quantity"] == 1

    second = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": item_id, "quantity": 1}], "return_date": "2030-01-02"},
        headers=headers,
    )
    assert second.json()["data"]["status"] == "returned"
    assert second.json()["data"]["return_date"] == "2030-01-02"


@pytest.mark.asyncio
async def test_over_return_changes_nothing(client: AsyncClient, manager_token: str, product, location, customer):
    headers = {"Authorization": f"Bearer {manager_token}"}
    record, rental = await _setup_rental(client, manager_token, product, location, customer)

    r = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": rental["items"][0]["id"], "quantity": 3}]},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["code"] == "return_quantity_exceeded"

    detail = (await client.get(f"/api/v1/rentals/{rental['id']}", headers=headers)).json()["data"]
    assert detail["items"][0]["returned_quantity"] == 0
    inventory = (await client.get(f"/api/v1/inventory/{record['id']}", headers=headers)).json()["data"]
    assert inventory["reserved_quantity"] == 2

    movements = await client.get("/api/v1/stock-movements", params={"type": "devolucao"}, headers=headers)
    assert movements.json()["total"] == 0


@pytest.mark.asyncio
async def test_return_unknown_item(client: AsyncClient, manager_token: str, product, location, customer):
    _, rental = await _setup_rental(client, manager_token, product, location, customer)
    r = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": rental["id"], "quantity": 1}]},
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_expected_return_before_rental_date(client: AsyncClient, manager_token: str, product, customer):
    r = await client.post(
        "/api/v1/rentals",
        json={
            "customer_id": str(customer.id),
            "rental_date": date.today().isoformat(),
            "expected_return_date": (date.today() - timedelta(days=1)).isoformat(),
            "items": [{"product_id": str(product.id), "quantity": 1}],
        },
        headers={"Authorization": f"Bearer {manager_token}"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_mark_overdue_endpoint(client: AsyncClient, manager_token: str, product, location, customer):
    headers = {"Authorization": f"Bearer {manager_token}"}
    await _setup_rental(
        client,
        manager_token,
        product,
        location,
        customer,
        rental_date=(date.today() - timedelta(days=10)).isoformat(),
        expected_return_date=(date.today() - timedelta(days=1)).isoformat(),
    )

    r = await client.post("/api/v1/rentals/mark-overdue", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["updated"] == 1

    overdue = await client.get("/api/v1/rentals", params={"status": "overdue"}, headers=headers)
    assert overdue.json()["total"] == 1


@pytest.mark.asyncio
async def test_operator_cannot_write_rentals(
    client: AsyncClient, operator_token: str, manager_token: str, product, location, customer
):
    record, rental = await _setup_rental(client, manager_token, product, location, customer)
    headers = {"Authorization": f"Bearer {operator_token}"}

    created = await client.post(
        "/api/v1/rentals",
        json={
            "customer_id": str(customer.id),
            "rental_date": date.today().isoformat(),
            "expected_return_date": (date.today() + timedelta(days=2)).isoformat(),
            "location_id": str(location.id),
            "items": [{"product_id": str(product.id), "quantity": 2}],
        },
        headers=headers,
    )
    assert created.status_code == 403

    returned = await client.post(
        f"/api/v1/rentals/{rental['id']}/return",
        json={"items": [{"id": rental["items"][0]["id"], "quantity": 1}]},
        headers=headers,
    )
    assert returned.status_code == 403

    overdue = await client.post("/api/v1/rentals/mark-overdue", headers=headers)
    assert overdue.status_code == 403

    manager_headers = {"Authorization": f"Bearer {manager_token}"}
    assert (await client.get("/api/v1/rentals", headers=manager_headers)).json()["total"] == 1
    inventory = (await client.get(f"/api/v1/inventory/{record['id']}", headers=manager_headers)).json()["data"]
    assert inventory["reserved_quantity"] == 2
