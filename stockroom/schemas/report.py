# stockroom/schemas/report.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PeriodSales(_CamelModel):
    total: float
    count: int


class DashboardRead(_CamelModel):
    period_days: int
    total_products: int
    total_inventory_value: float
    low_stock_count: int
    period_sales: PeriodSales
    active_rentals: int


class InventoryKpis(_CamelModel):
    total_products: int
    total_stock: int
    total_reserved: int
    available_stock: int


class SalesKpis(_CamelModel):
    total_sales: float
    sales_count: int


class RentalKpis(_CamelModel):
    active_rentals: int
    overdue_rentals: int


class KpisRead(_CamelModel):
    period_days: int
    inventory: InventoryKpis
    sales: SalesKpis
    rentals: RentalKpis
