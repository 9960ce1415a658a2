"""Mapping utilities that flatten catalog and dashboard records into table rows."""
from typing import Any, Dict, Iterable, List

from salesdesk.core.models import Customer, ProductFamily
from salesdesk.processing.catalog import customer_index, customer_label, customer_type_label
from salesdesk.processing.dashboard import DashboardOrder


PRICE_LIST_HEADERS = [
    "Family",
    "Product",
    "SKU",
    "Base_Price",
    "Customer_ID",
    "Customer",
    "Customer_Type",
    "Price",
    "Discounted_Price",
]

CUSTOMER_HEADERS = [
    "ID",
    "Name",
    "Type",
    "Status",
    "Email",
    "Phone",
    "Country",
    "Created",
    "Last_Contact",
]

ORDER_HEADERS = [
    "Date",
    "Customer",
    "Offer_Name",
    "Project",
    "Final_User",
    "OC_Name",
    "Amount",
    "Paid",
    "Source",
]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def _format_amount(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def price_list_rows(families: Iterable[ProductFamily], customers: Iterable[Customer]) -> List[Dict[str, Any]]:
    """One row per product and customer price; unpriced products get a single blank row."""

    index = customer_index(customers)
    rows: List[Dict[str, Any]] = []
    for family in families:
        for product in family.products:
            base = {
                "Family": _clean_text(family.name),
                "Product": _clean_text(product.name),
                "SKU": product.sku or "",
                "Base_Price": _format_amount(product.base_price),
            }
            if not product.customer_prices:
                rows.append({**base, "Customer_ID": "", "Customer": "", "Customer_Type": "", "Price": "", "Discounted_Price": ""})
                continue
            for entry in product.customer_prices:
                rows.append(
                    {
                        **base,
                        "Customer_ID": entry.customer_id,
                        "Customer": customer_label(entry.customer_id, index),
                        "Customer_Type": customer_type_label(entry.customer_id, index),
                        "Price": _format_amount(entry.price),
                        "Discounted_Price": _format_amount(entry.discounted_price),
                    }
                )
    return rows


def customer_rows(customers: Iterable[Customer]) -> List[Dict[str, Any]]:
    return [
        {
            "ID": customer.id,
            "Name": _clean_text(customer.name),
            "Type": customer.type.value,
            "Status": customer.status.value,
            "Email": customer.email or "",
            "Phone": customer.phone or "",
            "Country": customer.address.country.value,
            "Created": customer.created_at or "",
            "Last_Contact": customer.last_contact or "",
        }
        for customer in customers
    ]


def order_rows(orders: Iterable[DashboardOrder]) -> List[Dict[str, Any]]:
    """Convert dashboard order rows into display/export dictionaries."""

    return [
        {
            "Date": order.date,
            "Customer": _clean_text(order.customer_name),
            "Offer_Name": _clean_text(order.offer_name),
            "Project": _clean_text(order.project_name),
            "Final_User": _clean_text(order.final_user),
            "OC_Name": _clean_text(order.oc_name),
            "Amount": _format_amount(order.amount),
            "Paid": "Yes" if order.paid else "No",
            "Source": "offer" if order.from_offer else "order",
        }
        for order in orders
    ]
