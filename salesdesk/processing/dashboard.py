"""Dashboard aggregation over customers' offers, orders, and tasks.

Everything here reads its inputs and returns new objects; the source
collections are never modified.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from salesdesk.core.models import Customer, Offer, Order, Task
from salesdesk.core.utils import month_window, parse_timestamp, to_local_naive

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10
GLOBAL_CUSTOMER_ID = "global"
GLOBAL_CUSTOMER_NAME = "General"

SORT_KEYS = ("date", "amount", "customer")
SORT_DIRECTIONS = ("asc", "desc")
PAYMENT_FILTERS = ("all", "paid", "unpaid")

_EARLIEST = datetime.min
_LATEST = datetime.max


@dataclass(frozen=True)
class DashboardOffer:
    id: str
    date: str
    customer_id: str
    customer_name: str
    offer_name: str
    project_name: str
    final_user: str
    oc_name: str
    amount: float
    paid: bool


@dataclass(frozen=True)
class DashboardOrder:
    """An order row, either entered directly or synthesized from a flagged offer."""

    id: str
    date: str
    customer_id: str
    customer_name: str
    offer_name: str
    project_name: str
    final_user: str
    oc_name: str
    amount: float
    paid: bool
    from_offer: bool = False
    original_offer_id: Optional[str] = None


@dataclass(frozen=True)
class DashboardTask:
    task: Task
    customer_id: str
    customer_name: str

    @property
    def is_global(self) -> bool:
        return self.customer_id == GLOBAL_CUSTOMER_ID


@dataclass
class OrderTable:
    rows: List[DashboardOrder] = field(default_factory=list)
    total_amount: float = 0.0


@dataclass
class DashboardSummary:
    month_start: datetime
    month_end: datetime
    offers_this_month: int
    orders_this_month: int
    order_amount_this_month: float
    active_offers: List[DashboardOffer]
    orders: List[DashboardOrder]
    last_offers: List[DashboardOffer]
    last_orders: List[DashboardOrder]
    upcoming_tasks: List[DashboardTask]


def _offer_view(offer: Offer, customer: Customer) -> DashboardOffer:
    return DashboardOffer(
        id=offer.id,
        date=offer.date,
        customer_id=customer.id,
        customer_name=customer.name,
        offer_name=offer.offer_name,
        project_name=offer.project_name,
        final_user=offer.final_user,
        oc_name=offer.oc_name,
        amount=offer.amount,
        paid=offer.paid,
    )


def _order_view(order: Order, customer: Customer) -> DashboardOrder:
    return DashboardOrder(
        id=order.id,
        date=order.date,
        customer_id=customer.id,
        customer_name=customer.name,
        offer_name=order.offer_name,
        project_name=order.project_name,
        final_user=order.final_user,
        oc_name=order.oc_name,
        amount=order.amount,
        paid=order.paid,
        original_offer_id=order.original_offer_id,
    )


def _order_from_offer(offer: Offer, customer: Customer) -> DashboardOrder:
    # The synthesized order keeps the offer's own paid flag.
    return DashboardOrder(
        id=offer.id,
        date=offer.date,
        customer_id=customer.id,
        customer_name=customer.name,
        offer_name=offer.offer_name,
        project_name=offer.project_name,
        final_user=offer.final_user,
        oc_name=offer.oc_name,
        amount=offer.amount,
        paid=offer.paid,
        from_offer=True,
        original_offer_id=offer.id,
    )


def collect_offers(customers: Iterable[Customer]) -> List[DashboardOffer]:
    """Return every offer not yet marked as ordered, tagged with its customer."""

    return [
        _offer_view(offer, customer)
        for customer in customers
        for offer in (customer.offers or [])
        if not offer.marked_as_ordered
    ]


def collect_orders(customers: Iterable[Customer]) -> List[DashboardOrder]:
    """Return direct orders plus one synthesized order per flagged offer."""

    rows: List[DashboardOrder] = []
    for customer in customers:
        rows.extend(_order_view(order, customer) for order in (customer.orders or []))
        rows.extend(
            _order_from_offer(offer, customer)
            for offer in (customer.offers or [])
            if offer.marked_as_ordered
        )
    return rows


def collect_tasks(customers: Iterable[Customer], global_tasks: Iterable[Task]) -> List[DashboardTask]:
    """Global tasks first, then each customer's tasks, all tagged with an owner."""

    merged = [
        DashboardTask(task=task, customer_id=GLOBAL_CUSTOMER_ID, customer_name=GLOBAL_CUSTOMER_NAME)
        for task in (global_tasks or [])
    ]
    for customer in customers:
        merged.extend(
            DashboardTask(task=task, customer_id=customer.id, customer_name=customer.name)
            for task in (customer.tasks or [])
        )
    return merged


def _date_key(value: str) -> datetime:
    return parse_timestamp(value) or _EARLIEST


def _expiry_key(task: Task) -> datetime:
    return parse_timestamp(task.expiry_date) or _LATEST


def task_priority_key(entry: DashboardTask):
    """Very urgent first, then urgent, then the earliest expiry."""

    task = entry.task
    return (not task.very_urgent, not task.urgent, _expiry_key(task))


def upcoming_tasks(entries: Iterable[DashboardTask], limit: int = DEFAULT_RECENT_LIMIT) -> List[DashboardTask]:
    pending = [entry for entry in entries if not entry.task.completed]
    return sorted(pending, key=task_priority_key)[:limit]


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    """A task is overdue once ``now`` passes its expiry; urgency plays no part."""

    expiry = parse_timestamp(task.expiry_date)
    if expiry is None:
        return False
    moment = to_local_naive(now) if now else datetime.now()
    return moment > expiry


def most_recent(rows: Sequence, limit: int = DEFAULT_RECENT_LIMIT) -> list:
    """Newest first by ``date``; equal dates keep their input order."""

    return sorted(rows, key=lambda row: _date_key(row.date), reverse=True)[:limit]


def in_window(value: str, start: datetime, end: datetime) -> bool:
    moment = parse_timestamp(value)
    return moment is not None and start <= moment <= end


def build_dashboard(
    customers: Iterable[Customer],
    global_tasks: Iterable[Task],
    now: datetime | None = None,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> DashboardSummary:
    """Compute every dashboard view in one pass over the current state."""

    moment = to_local_naive(now) if now else datetime.now()
    customer_list = list(customers or [])
    month_start, month_end = month_window(moment)

    offers = collect_offers(customer_list)
    orders = collect_orders(customer_list)
    tasks = collect_tasks(customer_list, global_tasks)

    orders_in_month = [order for order in orders if in_window(order.date, month_start, month_end)]
    summary = DashboardSummary(
        month_start=month_start,
        month_end=month_end,
        offers_this_month=sum(1 for offer in offers if in_window(offer.date, month_start, month_end)),
        orders_this_month=len(orders_in_month),
        order_amount_this_month=sum(order.amount for order in orders_in_month),
        active_offers=offers,
        orders=orders,
        last_offers=most_recent(offers, limit),
        last_orders=most_recent(orders, limit),
        upcoming_tasks=upcoming_tasks(tasks, limit),
    )
    logger.debug(
        "Dashboard for %s: %d offers, %d orders, %d open tasks",
        month_start.strftime("%Y-%m"),
        len(offers),
        len(orders),
        len(summary.upcoming_tasks),
    )
    return summary


def order_table(
    orders: Iterable[DashboardOrder],
    sort_by: str = "date",
    direction: str = "desc",
    paid_filter: str = "all",
) -> OrderTable:
    """Filter by payment status, then sort; the total covers the filtered rows."""

    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"direction must be one of {SORT_DIRECTIONS}, got {direction!r}")
    if paid_filter not in PAYMENT_FILTERS:
        raise ValueError(f"paid_filter must be one of {PAYMENT_FILTERS}, got {paid_filter!r}")

    rows = list(orders)
    if paid_filter == "paid":
        rows = [row for row in rows if row.paid]
    elif paid_filter == "unpaid":
        rows = [row for row in rows if not row.paid]

    if sort_by == "date":
        key = lambda row: _date_key(row.date)  # noqa: E731
    elif sort_by == "amount":
        key = lambda row: row.amount  # noqa: E731
    else:
        key = lambda row: row.customer_name.casefold()  # noqa: E731

    ordered = sorted(rows, key=key, reverse=direction == "desc")
    return OrderTable(rows=ordered, total_amount=sum(row.amount for row in rows))
