"""Export helpers for catalog and dashboard tables."""
from salesdesk.reporting.sinks import push_to_google_sheets, write_csv, write_excel
from salesdesk.reporting.templates import (
    CUSTOMER_HEADERS,
    ORDER_HEADERS,
    PRICE_LIST_HEADERS,
    customer_rows,
    order_rows,
    price_list_rows,
)

__all__ = [
    "CUSTOMER_HEADERS",
    "ORDER_HEADERS",
    "PRICE_LIST_HEADERS",
    "customer_rows",
    "order_rows",
    "price_list_rows",
    "push_to_google_sheets",
    "write_csv",
    "write_excel",
]
