"""Async Python client for the Stockroom API.

``AuthStore`` keeps the session (tokens and current user) and ``ProductStore``
keeps a cached, filterable product list on top of it::

    async with StockroomClient("http://localhost:8000") as client:
        auth = AuthStore(client)
        await auth.login("admin@example.com", "secret123")
        products = ProductStore(client)
        await products.fetch_products()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_API_PREFIX = "/api/v1"


class ApiClientError(Exception):
    """Non-2xx response or transport failure."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class StockroomClient:
    def __init__(
        self,
        base_url: str,
        *,
        api_prefix: str = DEFAULT_API_PREFIX,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + api_prefix,
            timeout=timeout,
            transport=transport,
        )
        self.access_token: str | None = None

    async def __aenter__(self) -> "StockroomClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {**self.auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            payload = _json_or_text(exc.response)
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiClientError(
                message or f"Request failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
                payload=payload,
            ) from exc
        except httpx.HTTPError as exc:
            raise ApiClientError(f"Connection error: {exc}") from exc
        return _json_or_text(response)


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class AuthStore:
    """Session state: tokens plus the logged-in user."""

    def __init__(self, client: StockroomClient) -> None:
        self.client = client
        self.user: dict[str, Any] | None = None
        self.refresh_token: str | None = None
        self.loading = False
        self.error: str | None = None

    @property
    def access_token(self) -> str | None:
        return self.client.access_token

    @property
    def is_authenticated(self) -> bool:
        return self.client.access_token is not None

    async def _run(self, coro):
        self.loading = True
        self.error = None
        try:
            return await coro
        except ApiClientError as exc:
            self.error = exc.message
            raise
        finally:
            self.loading = False

    async def login(self, email: str, password: str) -> dict[str, Any]:
        data = await self._run(
            self.client.request("POST", "/auth/login", data={"username": email, "password": password})
        )
        self.client.access_token = data["access_token"]
        self.refresh_token = data["refresh_token"]
        self.user = data["user"]
        return self.user

    async def register(self, **user_data: Any) -> dict[str, Any]:
        data = await self._run(self.client.request("POST", "/auth/register", json=user_data))
        return data["user"]

    async def logout(self) -> None:
        try:
            if self.is_authenticated:
                await self._run(self.client.request("POST", "/auth/logout"))
        finally:
            self.clear()

    async def refresh(self) -> str:
        if not self.refresh_token:
            raise ApiClientError("No refresh token available")
        data = await self._run(
            self.client.request("POST", "/auth/refresh", json={"refresh_token": self.refresh_token})
        )
        self.client.access_token = data["access_token"]
        self.refresh_token = data["refresh_token"]
        return data["access_token"]

    async def fetch_me(self) -> dict[str, Any]:
        data = await self._run(self.client.request("GET", "/auth/me"))
        self.user = data["user"]
        return self.user

    def clear(self) -> None:
        self.client.access_token = None
        self.refresh_token = None
        self.user = None
        self.error = None


@dataclass
class ProductFilters:
    search: str | None = None
    category: str | None = None
    status: str | None = None
    type: str | None = None
    location: str | None = None
    include_inactive: bool = False
    page: int = 1
    limit: int = 10

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "limit": self.limit}
        for name in ("search", "category", "status", "type", "location"):
            value = getattr(self, name)
            if value:
                params[name] = value
        if self.include_inactive:
            params["includeInactive"] = "true"
        return params


@dataclass
class ProductStore:
    """Cached product list and the product currently being viewed."""

    client: StockroomClient
    products: list[dict[str, Any]] = field(default_factory=list)
    current_product: dict[str, Any] | None = None
    filters: ProductFilters = field(default_factory=ProductFilters)
    total: int = 0
    total_pages: int = 0
    loading: bool = False
    error: str | None = None

    async def _run(self, coro):
        self.loading = True
        self.error = None
        try:
            return await coro
        except ApiClientError as exc:
            self.error = exc.message
            raise
        finally:
            self.loading = False

    def set_filters(self, **changes: Any) -> ProductFilters:
        # Any filter change other than paging starts again from the first page.
        if "page" not in changes:
            changes["page"] = 1
        for key, value in changes.items():
            if not hasattr(self.filters, key):
                raise ValueError(f"Unknown product filter: {key}")
            setattr(self.filters, key, value)
        return self.filters

    async def fetch_products(self) -> list[dict[str, Any]]:
        data = await self._run(self.client.request("GET", "/products", params=self.filters.to_params()))
        self.products = data["data"]
        self.total = data["total"]
        self.total_pages = data["totalPages"]
        return self.products

    async def fetch_product(self, product_id: str) -> dict[str, Any]:
        data = await self._run(self.client.request("GET", f"/products/{product_id}"))
        self.current_product = data["data"]
        return self.current_product

    async def create_product(self, product: dict[str, Any]) -> dict[str, Any]:
        data = await self._run(self.client.request("POST", "/products", json=product))
        created = data["data"]
        self.products = [created, *self.products]
        self.total += 1
        return created

    async def update_product(self, product_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        data = await self._run(self.client.request("PUT", f"/products/{product_id}", json=changes))
        updated = data["data"]
        self.products = [updated if item["id"] == product_id else item for item in self.products]
        if self.current_product and self.current_product.get("id") == product_id:
            self.current_product = {**self.current_product, **updated}
        return updated

    async def delete_product(self, product_id: str) -> None:
        await self._run(self.client.request("DELETE", f"/products/{product_id}"))
        self.products = [item for item in self.products if item["id"] != product_id]
        self.total = max(self.total - 1, 0)
        if self.current_product and self.current_product.get("id") == product_id:
            self.current_product = None

    async def fetch_stock_movements(self, product_id: str, *, limit: int = 50) -> list[dict[str, Any]]:
        data = await self._run(
            self.client.request("GET", "/stock-movements", params={"product": product_id, "limit": limit})
        )
        return data["data"]

    async def add_stock_movement(self, movement: dict[str, Any]) -> dict[str, Any]:
        data = await self._run(self.client.request("POST", "/stock-movements", json=movement))
        product_id = movement.get("product_id")
        if product_id and self.current_product and self.current_product.get("id") == str(product_id):
            await self.fetch_product(str(product_id))
        return data["data"]

    async def generate_qr_code(self, product_id: str, size: int | None = None) -> str:
        params = {"size": size} if size else None
        data = await self._run(self.client.request("GET", f"/products/{product_id}/qr-code", params=params))
        return data["data"]["qr_code"]

    async def import_products(self, rows: list[dict[str, Any]]) -> dict[str, Any]:
        data = await self._run(self.client.request("POST", "/products/bulk-import", json={"products": rows}))
        await self.fetch_products()
        return data["data"]
