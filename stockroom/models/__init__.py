# Import every model so string relationships resolve and Alembic sees the full metadata.
from stockroom.models.company import Company, InventoryLocation
from stockroom.models.user import ApiKey, User
from stockroom.models.product import Category, Product
from stockroom.models.inventory import InventoryRecord, StockMovement
from stockroom.models.customer import Customer
from stockroom.models.supplier import Supplier
from stockroom.models.sale import Sale, SaleItem
from stockroom.models.rental import Rental, RentalItem

__all__ = [
    "ApiKey",
    "Category",
    "Company",
    "Customer",
    "InventoryLocation",
    "InventoryRecord",
    "Product",
    "Rental",
    "RentalItem",
    "Sale",
    "SaleItem",
    "StockMovement",
    "Supplier",
    "User",
]
