"""In-memory application state and the edits the console applies to it."""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, TYPE_CHECKING

from salesdesk.core.models import (
    Address,
    BusinessTrip,
    Contact,
    Customer,
    CustomerStatus,
    CustomerType,
    Note,
    Offer,
    Order,
    ProductFamily,
    Task,
    TodoItem,
)
from salesdesk.core.utils import parse_timestamp, today_iso

if TYPE_CHECKING:
    from salesdesk.ingestion.workbook import ImportResult

logger = logging.getLogger(__name__)

_NESTED_COLLECTIONS = ("contacts", "notes", "offers", "orders", "documents", "tasks")


def with_default_collections(customer: Customer) -> Customer:
    """Return the customer with any missing nested list replaced by ``[]``."""

    missing = {name: [] for name in _NESTED_COLLECTIONS if getattr(customer, name, None) is None}
    return replace(customer, **missing) if missing else customer


def toggle_ordered(offer: Offer) -> Offer:
    """Return a copy of the offer with ``marked_as_ordered`` flipped."""

    return replace(offer, marked_as_ordered=not offer.marked_as_ordered)


def complete_task(task: Task, done: bool = True) -> Task:
    """Return a copy of the task with its completion flag set."""

    return replace(task, completed=done)


def _require(**values: str) -> None:
    blank = [name.replace("_", " ") for name, value in values.items() if not (value or "").strip()]
    if blank:
        raise ValueError(f"Missing required field(s): {', '.join(blank)}")


def _edited(record: Any, changes: dict, required: Iterable[str]) -> Any:
    if "id" in changes:
        raise ValueError("Record ids cannot be changed")
    updated = replace(record, **changes)
    _require(**{name: getattr(updated, name) for name in required})
    return updated


@dataclass
class CrmState:
    """Everything the console holds for one session.

    Customers exclusively own their nested records; products refer to
    customers by id only.
    """

    customers: List[Customer] = field(default_factory=list)
    product_families: List[ProductFamily] = field(default_factory=list)
    global_tasks: List[Task] = field(default_factory=list)
    business_trips: List[BusinessTrip] = field(default_factory=list)
    _task_counter: itertools.count = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False, compare=False
    )
    _record_counter: itertools.count = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False, compare=False
    )

    def _new_id(self, prefix: str, taken: Iterable[str]) -> str:
        existing = set(taken)
        while True:
            candidate = f"{prefix}-{next(self._record_counter)}"
            if candidate not in existing:
                return candidate

    def apply_import(self, result: "ImportResult") -> bool:
        """Replace customers and product families with an import result.

        Nothing changes unless the result carries both customers and
        families; the return value tells whether the replace happened.
        """

        if not result.can_apply:
            logger.warning(
                "Skipping import with %d customers and %d families",
                len(result.customers),
                len(result.product_families),
            )
            return False
        self.customers = [with_default_collections(customer) for customer in result.customers]
        self.product_families = list(result.product_families)
        logger.info(
            "Imported %d customers and %d product families",
            len(self.customers),
            len(self.product_families),
        )
        return True

    # Customers

    def customer_by_id(self, customer_id: str) -> Optional[Customer]:
        return next((customer for customer in self.customers if customer.id == customer_id), None)

    def add_customer(self, customer: Customer) -> Customer:
        stored = with_default_collections(customer)
        self.customers.append(stored)
        return stored

    def create_customer(
        self,
        name: str,
        customer_type: CustomerType = CustomerType.CUSTOMER,
        status: CustomerStatus = CustomerStatus.PROSPECT,
        email: str = "",
        phone: str = "",
        address: Address | None = None,
        payment_terms: str = "",
    ) -> Customer:
        """Build a new customer from form input and append it."""

        _require(name=name)
        today = today_iso()
        customer = Customer(
            id=self._new_id("customer", (c.id for c in self.customers)),
            name=name.strip(),
            type=CustomerType.from_value(customer_type),
            status=CustomerStatus.from_value(status),
            email=email,
            phone=phone,
            address=address or Address(),
            payment_terms=payment_terms,
            created_at=today,
            last_contact=today,
        )
        logger.info("Added customer %s (%s)", customer.id, customer.name)
        return self.add_customer(customer)

    def update_customer(self, customer: Customer) -> Customer:
        for index, existing in enumerate(self.customers):
            if existing.id == customer.id:
                self.customers[index] = customer
                return customer
        raise KeyError(f"Unknown customer id {customer.id!r}")

    def delete_customer(self, customer_id: str) -> None:
        self.customers = [customer for customer in self.customers if customer.id != customer_id]

    def _customer_or_raise(self, customer_id: str) -> Customer:
        customer = self.customer_by_id(customer_id)
        if customer is None:
            raise KeyError(f"Unknown customer id {customer_id!r}")
        return customer

    def _replace_item(self, customer_id: str, collection: str, item_id: str, change: Callable[[Any], Any]) -> Any:
        customer = self._customer_or_raise(customer_id)
        items = getattr(customer, collection)
        for index, item in enumerate(items):
            if item.id == item_id:
                updated = change(item)
                items[index] = updated
                return updated
        raise KeyError(f"Unknown {collection[:-1]} id {item_id!r} for customer {customer_id!r}")

    def _remove_item(self, customer_id: str, collection: str, item_id: str) -> None:
        customer = self._customer_or_raise(customer_id)
        setattr(customer, collection, [item for item in getattr(customer, collection) if item.id != item_id])

    # Global tasks

    def add_global_task(
        self,
        title: str,
        description: str,
        registration_date: str | None = None,
        expiry_date: str | None = None,
        urgent: bool = False,
        very_urgent: bool = False,
    ) -> Task:
        """Create a global task and put it at the top of the list."""

        if not title.strip() or not description.strip():
            raise ValueError("Global tasks need a title and a description")
        today = today_iso()
        task = Task(
            id=f"global-{next(self._task_counter)}",
            title=title,
            description=description,
            registration_date=registration_date or today,
            expiry_date=expiry_date or today,
            completed=False,
            created_at=datetime.now().isoformat(),
            urgent=urgent,
            very_urgent=very_urgent,
        )
        self.global_tasks.insert(0, task)
        return task

    def delete_global_task(self, task_id: str) -> None:
        self.global_tasks = [task for task in self.global_tasks if task.id != task_id]

    def clear_global_tasks(self) -> int:
        """Drop every global task; customer tasks are left alone."""

        removed = len(self.global_tasks)
        self.global_tasks = []
        return removed

    def set_global_task_completed(self, task_id: str, done: bool = True) -> None:
        self.global_tasks = [
            complete_task(task, done) if task.id == task_id else task for task in self.global_tasks
        ]

    # Offers

    def add_offer(
        self,
        customer_id: str,
        final_user: str,
        project_name: str,
        date: str | None = None,
        offer_name: str = "",
        amount: float = 0.0,
        oc_name: str = "",
    ) -> Offer:
        """Create an offer at the top of the customer's list; it starts unflagged."""

        _require(final_user=final_user, project_name=project_name)
        customer = self._customer_or_raise(customer_id)
        offer = Offer(
            id=self._new_id("offer", (o.id for o in customer.offers)),
            date=date or today_iso(),
            final_user=final_user,
            project_name=project_name,
            offer_name=offer_name,
            amount=float(amount),
            oc_name=oc_name,
        )
        customer.offers.insert(0, offer)
        return offer

    def update_offer(self, customer_id: str, offer_id: str, **changes: Any) -> Offer:
        return self._replace_item(
            customer_id, "offers", offer_id, lambda offer: _edited(offer, changes, ("final_user", "project_name"))
        )

    def delete_offer(self, customer_id: str, offer_id: str) -> None:
        self._remove_item(customer_id, "offers", offer_id)

    def set_offer_ordered(self, customer_id: str, offer_id: str, ordered: bool) -> Offer:
        """Flag or unflag an offer as ordered, leaving every other field alone."""

        return self._replace_item(
            customer_id, "offers", offer_id, lambda offer: replace(offer, marked_as_ordered=ordered)
        )

    def toggle_offer_ordered(self, customer_id: str, offer_id: str) -> Offer:
        return self._replace_item(customer_id, "offers", offer_id, toggle_ordered)

    # Orders

    def add_order(
        self,
        customer_id: str,
        final_user: str,
        project_name: str,
        date: str | None = None,
        offer_name: str = "",
        amount: float = 0.0,
        oc_name: str = "",
        paid: bool = False,
    ) -> Order:
        _require(final_user=final_user, project_name=project_name)
        customer = self._customer_or_raise(customer_id)
        order = Order(
            id=self._new_id("order", (o.id for o in customer.orders)),
            date=date or today_iso(),
            final_user=final_user,
            project_name=project_name,
            offer_name=offer_name,
            amount=float(amount),
            oc_name=oc_name,
            paid=paid,
        )
        customer.orders.insert(0, order)
        return order

    def update_order(self, customer_id: str, order_id: str, **changes: Any) -> Order:
        return self._replace_item(
            customer_id, "orders", order_id, lambda order: _edited(order, changes, ("final_user", "project_name"))
        )

    def delete_order(self, customer_id: str, order_id: str) -> None:
        self._remove_item(customer_id, "orders", order_id)

    # Customer tasks

    def add_customer_task(
        self,
        customer_id: str,
        title: str,
        description: str,
        registration_date: str | None = None,
        expiry_date: str | None = None,
        urgent: bool = False,
        very_urgent: bool = False,
    ) -> Task:
        _require(title=title, description=description)
        customer = self._customer_or_raise(customer_id)
        today = today_iso()
        task = Task(
            id=self._new_id("task", (t.id for t in customer.tasks)),
            title=title,
            description=description,
            registration_date=registration_date or today,
            expiry_date=expiry_date or today,
            created_at=datetime.now().isoformat(),
            urgent=urgent,
            very_urgent=very_urgent,
        )
        customer.tasks.insert(0, task)
        return task

    def update_customer_task(self, customer_id: str, task_id: str, **changes: Any) -> Task:
        return self._replace_item(
            customer_id, "tasks", task_id, lambda task: _edited(task, changes, ("title", "description"))
        )

    def toggle_customer_task(self, customer_id: str, task_id: str) -> Task:
        return self._replace_item(customer_id, "tasks", task_id, lambda task: complete_task(task, not task.completed))

    def delete_customer_task(self, customer_id: str, task_id: str) -> None:
        self._remove_item(customer_id, "tasks", task_id)

    # Contacts and notes

    def add_contact(self, customer_id: str, name: str, email: str = "", phone: str = "", role: str = "") -> Contact:
        _require(name=name)
        customer = self._customer_or_raise(customer_id)
        contact = Contact(
            id=self._new_id("contact", (c.id for c in customer.contacts)),
            name=name,
            email=email,
            phone=phone,
            role=role,
        )
        customer.contacts.append(contact)
        return contact

    def delete_contact(self, customer_id: str, contact_id: str) -> None:
        self._remove_item(customer_id, "contacts", contact_id)

    def add_note(self, customer_id: str, title: str, content: str, date: str | None = None) -> Note:
        _require(title=title, content=content)
        customer = self._customer_or_raise(customer_id)
        note = Note(
            id=self._new_id("note", (n.id for n in customer.notes)),
            title=title,
            content=content,
            date=date or today_iso(),
            created_at=datetime.now().isoformat(),
        )
        customer.notes.insert(0, note)
        return note

    def delete_note(self, customer_id: str, note_id: str) -> None:
        self._remove_item(customer_id, "notes", note_id)

    # Business trips

    def add_trip(
        self,
        start_date: str,
        end_date: str,
        customers_visited: Iterable[str] = (),
        countries_visited: Iterable[str] = (),
        details: str = "",
        todo_items: Iterable[str] = (),
    ) -> BusinessTrip:
        """Record a business trip; the end date may not precede the start date."""

        start = parse_timestamp(start_date)
        end = parse_timestamp(end_date)
        if start is None or end is None:
            raise ValueError("Business trips need a valid start and end date")
        if end < start:
            raise ValueError("A business trip cannot end before it starts")

        todo_list = [
            TodoItem(id=f"todo-{position}", task=item.strip())
            for position, item in enumerate((item for item in todo_items if item.strip()), start=1)
        ]
        trip = BusinessTrip(
            id=self._new_id("trip", (t.id for t in self.business_trips)),
            start_date=start_date,
            end_date=end_date,
            customers_visited=list(customers_visited),
            countries_visited=list(countries_visited),
            details=details,
            todo_list=todo_list,
            created_at=datetime.now().isoformat(),
        )
        self.business_trips.append(trip)
        return trip

    def delete_trip(self, trip_id: str) -> None:
        self.business_trips = [trip for trip in self.business_trips if trip.id != trip_id]

    def toggle_trip_todo(self, trip_id: str, todo_id: str) -> TodoItem:
        for trip in self.business_trips:
            if trip.id != trip_id:
                continue
            for index, item in enumerate(trip.todo_list):
                if item.id == todo_id:
                    trip.todo_list[index] = replace(item, completed=not item.completed)
                    return trip.todo_list[index]
        raise KeyError(f"Unknown todo {todo_id!r} on trip {trip_id!r}")
