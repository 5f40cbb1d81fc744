from . import api_keys
from . import auth
from . import categories
from . import companies
from . import customers
from . import integrations
from . import inventory
from . import products
from . import rentals
from . import reports
from . import sales
from . import stock_movements
from . import suppliers

__all__ = [
    "api_keys",
    "auth",
    "categories",
    "companies",
    "customers",
    "integrations",
    "inventory",
    "products",
    "rentals",
    "reports",
    "sales",
    "stock_movements",
    "suppliers",
]
