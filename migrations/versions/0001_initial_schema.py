"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)

user_role = sa.Enum("admin", "manager", "operator", "viewer", name="user_role")
product_type = sa.Enum(
    "totem",
    "tablet",
    "insumo",
    "peca_acrilico",
    "wobbler",
    "totem_eliptico",
    "adesivo",
    "placa",
    "material_corte",
    name="product_type",
)
# Second reference to an existing type; created with the categories table.
product_type_ref = postgresql.ENUM(*product_type.enums, name="product_type", create_type=False)
product_status = sa.Enum("novo", "usado", "rb", "ativo", "manutencao", "descartado", name="product_status")
movement_type = sa.Enum(
    "entrada", "saida", "transferencia", "venda", "locacao", "devolucao", "perda", name="movement_type"
)
movement_reference = sa.Enum("sale", "rental", name="movement_reference")
customer_type = sa.Enum("individual", "company", name="customer_type")
supplier_category = sa.Enum("fabricante", "distribuidor", "servico", "outro", name="supplier_category")
payment_status = sa.Enum("pending", "paid", "partial", "cancelled", name="payment_status")
rental_status = sa.Enum("active", "returned", "overdue", "cancelled", name="rental_status")


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))]
    if with_updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("cnpj", sa.String(length=20), nullable=True, unique=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_companies_name", "companies", ["name"])

    op.create_table(
        "inventory_locations",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("company_id", UUID, sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_inventory_locations_company_id", "inventory_locations", ["company_id"])

    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="viewer"),
        sa.Column("company_id", UUID, sa.ForeignKey("companies.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_company_id", "users", ["company_id"])

    op.create_table(
        "api_keys",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("key_hash", sa.String(length=64), nullable=False),
        sa.Column("key_prefix", sa.String(length=12), nullable=False),
        sa.Column("company_id", UUID, sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=True),
        sa.Column("created_by", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_api_keys_key_hash", "api_keys", ["key_hash"], unique=True)
    op.create_index("ix_api_keys_company_id", "api_keys", ["company_id"])

    op.create_table(
        "categories",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("product_type", product_type, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_categories_name", "categories", ["name"])

    op.create_table(
        "products",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category_id", UUID, sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("product_type", product_type_ref, nullable=False),
        sa.Column("status", product_status, nullable=False),
        sa.Column("barcode", sa.String(length=64), nullable=True),
        sa.Column("qr_code", sa.Text(), nullable=True),
        sa.Column("serial_number", sa.String(length=120), nullable=True),
        sa.Column("unit", sa.String(length=30), nullable=False, server_default="unidade"),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("rental_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("minimum_stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("maximum_stock", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Numeric(10, 3), nullable=True),
        sa.Column("dimensions", sa.JSON(), nullable=True),
        sa.Column("specifications", sa.JSON(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_category_id", "products", ["category_id"])

    op.create_table(
        "inventory",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "location_id", UUID, sa.ForeignKey("inventory_locations.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reserved_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_movement_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("product_id", "location_id", name="uq_inventory_product_location"),
    )
    op.create_index("ix_inventory_product_id", "inventory", ["product_id"])
    op.create_index("ix_inventory_location_id", "inventory", ["location_id"])

    op.create_table(
        "stock_movements",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "location_id", UUID, sa.ForeignKey("inventory_locations.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("movement_type", movement_type, nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("total_cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("reference_id", UUID, nullable=True),
        sa.Column("reference_type", movement_reference, nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_stock_movements_product_id", "stock_movements", ["product_id"])
    op.create_index("ix_stock_movements_location_id", "stock_movements", ["location_id"])
    op.create_index("ix_stock_movements_movement_type", "stock_movements", ["movement_type"])
    op.create_index("ix_stock_movements_product_created", "stock_movements", ["product_id", "created_at"])
    op.create_index("ix_stock_movements_reference", "stock_movements", ["reference_type", "reference_id"])

    op.create_table(
        "customers",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("cpf_cnpj", sa.String(length=20), nullable=True),
        sa.Column("customer_type", customer_type, nullable=False, server_default="individual"),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_customers_name", "customers", ["name"])
    op.create_index("ix_customers_cpf_cnpj", "customers", ["cpf_cnpj"])

    op.create_table(
        "suppliers",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("cnpj", sa.String(length=20), nullable=True),
        sa.Column("category", supplier_category, nullable=False),
        sa.Column("contact_person", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("payment_terms", sa.String(length=120), nullable=True),
        sa.Column("delivery_time", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Numeric(3, 1), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])

    op.create_table(
        "sales",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("customer_id", UUID, sa.ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "location_id", UUID, sa.ForeignKey("inventory_locations.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("payment_method", sa.String(length=50), nullable=True),
        sa.Column("payment_status", payment_status, nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_sales_customer_id", "sales", ["customer_id"])
    op.create_index("ix_sales_sale_date", "sales", ["sale_date"])

    op.create_table(
        "sale_items",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("sale_id", UUID, sa.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_sale_items_sale_id", "sale_items", ["sale_id"])
    op.create_index("ix_sale_items_product_id", "sale_items", ["product_id"])

    op.create_table(
        "rentals",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("customer_id", UUID, sa.ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "location_id", UUID, sa.ForeignKey("inventory_locations.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("rental_date", sa.Date(), nullable=False),
        sa.Column("expected_return_date", sa.Date(), nullable=False),
        sa.Column("return_date", sa.Date(), nullable=True),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("deposit_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("status", rental_status, nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", UUID, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_rentals_customer_id", "rentals", ["customer_id"])
    op.create_index("ix_rentals_rental_date", "rentals", ["rental_date"])
    op.create_index("ix_rentals_status", "rentals", ["status"])

    op.create_table(
        "rental_items",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("rental_id", UUID, sa.ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("returned_quantity", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_rental_items_rental_id", "rental_items", ["rental_id"])
    op.create_index("ix_rental_items_product_id", "rental_items", ["product_id"])


def downgrade() -> None:
    for table in (
        "rental_items",
        "rentals",
        "sale_items",
        "sales",
        "suppliers",
        "customers",
        "stock_movements",
        "inventory",
        "products",
        "categories",
        "api_keys",
        "users",
        "inventory_locations",
        "companies",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        rental_status,
        payment_status,
        supplier_category,
        customer_type,
        movement_reference,
        movement_type,
        product_status,
        product_type,
        user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
