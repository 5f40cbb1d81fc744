from .read import (
    list_products,
    get_product,
    get_product_detail,
    low_stock_report,
)

from .crud import (
    create_product,
    update_product,
    deactivate_product,
    get_qr_code,
)

from .bulk_import import bulk_import_products

from .qr import generate_qr_data_url

__all__ = [
    # read
    "list_products", "get_product", "get_product_detail", "low_stock_report",
    # crud
    "create_product", "update_product", "deactivate_product", "get_qr_code",
    # import
    "bulk_import_products",
    # qr
    "generate_qr_data_url",
]
