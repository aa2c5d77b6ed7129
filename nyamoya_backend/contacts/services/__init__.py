from .contact_service import (
    bump_customer_spend,
    create_customer,
    create_supplier,
    get_customer,
    get_supplier,
    update_customer,
)

__all__ = [
    "bump_customer_spend",
    "create_customer",
    "create_supplier",
    "get_customer",
    "get_supplier",
    "update_customer",
]
