"""Derived views over the in-memory CRM state, plus the import pipeline."""
from salesdesk.processing.calculator import certification_price
from salesdesk.processing.catalog import (
    PricedProduct,
    average_price,
    customer_index,
    customer_label,
    customer_pricing,
    find_product,
)
from salesdesk.processing.dashboard import (
    DashboardSummary,
    build_dashboard,
    is_overdue,
    order_table,
)
from salesdesk.processing.filters import (
    customer_countries,
    filter_customers,
    filter_trips,
    sort_customer_tasks,
    trip_countries,
)

__all__ = [
    "DashboardSummary",
    "PricedProduct",
    "average_price",
    "build_dashboard",
    "certification_price",
    "customer_countries",
    "customer_index",
    "customer_label",
    "customer_pricing",
    "filter_customers",
    "filter_trips",
    "find_product",
    "is_overdue",
    "order_table",
    "sort_customer_tasks",
    "trip_countries",
]
