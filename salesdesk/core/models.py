"""Data models for customers, sales records, tasks, trips, and catalogs."""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, List, Optional


class _ChoiceEnum(str, Enum):
    """String enum that refuses values outside its closed set."""

    @classmethod
    def from_value(cls, raw: Any) -> "_ChoiceEnum":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            allowed = ", ".join(repr(member.value) for member in cls)
            raise ValueError(f"{raw!r} is not a valid {cls.__name__} (expected one of {allowed})") from None


class CustomerType(_ChoiceEnum):
    CUSTOMER = "Customer"
    OEM = "OEM"
    AGENT = "Agent"


class CustomerStatus(_ChoiceEnum):
    ACTIVE = "Active"
    PROSPECT = "Prospect"


class Country(_ChoiceEnum):
    UNSPECIFIED = ""
    KSA = "KSA"
    KUWAIT = "Kuwait"
    UAE = "UAE"
    QATAR = "Qatar"
    IRAQ = "Iraq"
    EGYPT = "Egypt"


@dataclass
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: Country = Country.UNSPECIFIED


@dataclass
class Contact:
    id: str
    name: str
    email: str = ""
    phone: str = ""
    role: str = ""


@dataclass
class Note:
    id: str
    title: str
    content: str = ""
    date: str = ""
    created_at: str = ""


@dataclass
class Document:
    """A file attached to a customer record."""

    id: str
    name: str
    type: str = ""
    size: int = 0
    url: str = ""
    uploaded_at: str = ""


@dataclass
class Attachment:
    """A file attached to an offer or an order."""

    id: str
    name: str
    type: str = ""
    size: int = 0
    url: str = ""


@dataclass
class Offer:
    """A quotation; ``marked_as_ordered`` promotes it into the orders view."""

    id: str
    date: str
    final_user: str = ""
    project_name: str = ""
    offer_name: str = ""
    amount: float = 0.0
    oc_name: str = ""
    paid: bool = False
    marked_as_ordered: bool = False
    documents: List[Attachment] = field(default_factory=list)


@dataclass
class Order:
    id: str
    date: str
    final_user: str = ""
    project_name: str = ""
    offer_name: str = ""
    amount: float = 0.0
    oc_name: str = ""
    paid: bool = False
    documents: List[Attachment] = field(default_factory=list)
    original_offer_id: Optional[str] = None


@dataclass
class Task:
    id: str
    title: str
    description: str = ""
    registration_date: str = ""
    expiry_date: str = ""
    completed: bool = False
    created_at: str = ""
    urgent: bool = False
    very_urgent: bool = False


@dataclass
class Customer:
    """A customer, OEM key-account, or agent together with everything it owns."""

    id: str
    name: str
    type: CustomerType = CustomerType.CUSTOMER
    status: CustomerStatus = CustomerStatus.ACTIVE
    email: str = ""
    phone: str = ""
    address: Address = field(default_factory=Address)
    payment_terms: str = ""
    created_at: str = ""
    last_contact: str = ""
    contacts: List[Contact] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    offers: List[Offer] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation."""

        return asdict(self)


@dataclass
class TodoItem:
    id: str
    task: str
    completed: bool = False


@dataclass
class BusinessTrip:
    id: str
    start_date: str
    end_date: str
    customers_visited: List[str] = field(default_factory=list)
    countries_visited: List[str] = field(default_factory=list)
    details: str = ""
    todo_list: List[TodoItem] = field(default_factory=list)
    created_at: str = ""


@dataclass
class CustomerPrice:
    customer_id: str
    price: float
    discounted_price: Optional[float] = None


@dataclass
class Product:
    id: str
    name: str
    sku: str = ""
    description: str = ""
    base_price: float = 0.0
    customer_prices: List[CustomerPrice] = field(default_factory=list)


@dataclass
class ProductFamily:
    id: str
    name: str
    description: str = ""
    products: List[Product] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation."""

        return asdict(self)
