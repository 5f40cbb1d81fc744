# stockroom/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from stockroom.api.error_handlers import register_exception_handlers
from stockroom.api.routers import (
    api_keys,
    auth,
    categories,
    companies,
    customers,
    integrations,
    inventory,
    products,
    rentals,
    reports,
    sales,
    stock_movements,
    suppliers,
)
from stockroom.core.config import settings
from stockroom.core.logging import get_logger, setup_logging
from stockroom.core.metrics import export_metrics
from stockroom.initial_data import create_initial_admin_user
from stockroom.middleware import ObservabilityMiddleware

# Registers every table on Base.metadata for Alembic.
import stockroom.models  # noqa: F401

logger = get_logger("stockroom")

TAGS_METADATA = [
    {"name": "auth", "description": "Registration, login, token refresh and profile."},
    {"name": "products", "description": "Product catalog, QR codes, bulk import and low-stock report."},
    {"name": "inventory", "description": "Stock per product and location: entries and adjustments."},
    {"name": "stock-movements", "description": "Append-only stock movement log."},
    {"name": "sales", "description": "Sales; each line takes stock out of inventory."},
    {"name": "rentals", "description": "Rentals, returns and overdue tracking."},
    {"name": "customers", "description": "Customer records."},
    {"name": "suppliers", "description": "Supplier records."},
    {"name": "categories", "description": "Product categories."},
    {"name": "companies", "description": "Companies and their inventory locations."},
    {"name": "reports", "description": "Dashboard and KPI figures."},
    {"name": "api-keys", "description": "API keys for integrations (admin only)."},
    {"name": "integrations", "description": "Endpoints authenticated with `x-api-key`."},
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    await create_initial_admin_user()
    logger.info("Application started", extra={"environment": settings.ENVIRONMENT})
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    description=(
        "Inventory, sales and rental back office.\n\n"
        "- **Inventory**: stock entries, adjustments and a full movement log.\n"
        "- **Sales / Rentals**: stock is taken out or reserved as orders are recorded.\n"
        "- **Reports**: dashboard and KPI figures.\n\n"
        "Use the **Authorize** button to try the protected endpoints."
    ),
    openapi_tags=TAGS_METADATA,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={
        "persistAuthorization": True,
        "displayRequestDuration": True,
    },
)

# --- Middlewares ---
app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# --- Routers ---
for module in (
    auth,
    products,
    inventory,
    stock_movements,
    sales,
    rentals,
    customers,
    suppliers,
    categories,
    companies,
    reports,
    api_keys,
    integrations,
):
    app.include_router(module.router, prefix=settings.API_V1_STR)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=TAGS_METADATA,
    )

    comps = openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    comps["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Paste your access token. Format: `Bearer <token>`",
    }
    comps["ApiKeyAuth"] = {"type": "apiKey", "in": "header", "name": "x-api-key"}
    openapi_schema["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "docs_url": "/docs", "redoc_url": "/redoc"}


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok", "environment": settings.ENVIRONMENT}


@app.get("/metrics", include_in_schema=False)
def metrics():
    payload, content_type = export_metrics()
    return Response(content=payload, media_type=content_type)
