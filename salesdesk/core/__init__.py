"""Core building blocks for the salesdesk package."""
from salesdesk.core.logging import configure_logging
from salesdesk.core.models import (
    Address,
    BusinessTrip,
    Country,
    Customer,
    CustomerPrice,
    CustomerStatus,
    CustomerType,
    Offer,
    Order,
    Product,
    ProductFamily,
    Task,
    TodoItem,
)
from salesdesk.core.state import CrmState

__all__ = [
    "configure_logging",
    "Address",
    "BusinessTrip",
    "Country",
    "CrmState",
    "Customer",
    "CustomerPrice",
    "CustomerStatus",
    "CustomerType",
    "Offer",
    "Order",
    "Product",
    "ProductFamily",
    "Task",
    "TodoItem",
]
