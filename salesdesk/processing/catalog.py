"""Lookups that join product prices back to the customers they reference."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from salesdesk.core.models import Customer, Product, ProductFamily

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class PricedProduct:
    product: Product
    price: float
    discounted_price: float


def customer_index(customers: Iterable[Customer]) -> Dict[str, Customer]:
    return {customer.id: customer for customer in customers}


def customer_label(customer_id: str, index: Mapping[str, Customer]) -> str:
    """Name of the referenced customer, or ``"Unknown"`` for a dangling id."""

    customer = index.get(customer_id)
    return customer.name if customer else UNKNOWN_LABEL


def customer_type_label(customer_id: str, index: Mapping[str, Customer]) -> str:
    customer = index.get(customer_id)
    return customer.type.value if customer else UNKNOWN_LABEL


def find_product(families: Iterable[ProductFamily], product_id: str) -> Optional[Product]:
    for family in families:
        for product in family.products:
            if product.id == product_id:
                return product
    return None


def customer_pricing(customer_id: str, families: Iterable[ProductFamily]) -> Dict[str, List[PricedProduct]]:
    """Group the products priced for one customer by family name.

    Families where the customer has no price are left out. A missing
    discounted price falls back to the regular price.
    """

    pricing: Dict[str, List[PricedProduct]] = {}
    for family in families:
        rows: List[PricedProduct] = []
        for product in family.products:
            entry = next((cp for cp in product.customer_prices if cp.customer_id == customer_id), None)
            if entry is None:
                continue
            discounted = entry.discounted_price if entry.discounted_price else entry.price
            rows.append(PricedProduct(product=product, price=entry.price, discounted_price=discounted))
        if rows:
            pricing.setdefault(family.name, []).extend(rows)
    return pricing


def average_price(product: Product) -> float:
    """Mean of the product's customer prices, ``0.0`` when none are recorded."""

    prices = [entry.price for entry in product.customer_prices]
    return sum(prices) / len(prices) if prices else 0.0
