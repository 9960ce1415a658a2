"""Tests for the dashboard aggregation and the orders table."""
import copy
from datetime import datetime, timezone

import pytest

from salesdesk.core.models import Customer, Offer, Order, Task
from salesdesk.processing.dashboard import (
    GLOBAL_CUSTOMER_NAME,
    DashboardOrder,
    build_dashboard,
    is_overdue,
    order_table,
)

NOW = datetime(2024, 1, 15, 12, 0)


def _customer(customer_id="c1", name="Acme", offers=None, orders=None, tasks=None) -> Customer:
    return Customer(
        id=customer_id,
        name=name,
        offers=offers or [],
        orders=orders or [],
        tasks=tasks or [],
    )


def _order_row(order_id, customer_name, amount, paid, date="2024-01-10") -> DashboardOrder:
    return DashboardOrder(
        id=order_id,
        date=date,
        customer_id=f"id-{customer_name}",
        customer_name=customer_name,
        offer_name="",
        project_name="",
        final_user="",
        oc_name="",
        amount=amount,
        paid=paid,
    )


def test_tasks_ordered_by_urgency_then_expiry():
    tasks = [
        Task(id="A", title="A", urgent=True, expiry_date="2024-01-10"),
        Task(id="B", title="B", very_urgent=True, expiry_date="2024-02-01"),
        Task(id="C", title="C", expiry_date="2024-01-05"),
    ]

    summary = build_dashboard([_customer(tasks=tasks)], [], now=NOW)

    assert [entry.task.id for entry in summary.upcoming_tasks] == ["B", "A", "C"]


def test_completed_tasks_are_not_upcoming_and_global_tasks_are_tagged():
    customer_tasks = [Task(id="done", title="Done", completed=True), Task(id="open", title="Open")]
    global_tasks = [Task(id="global-1", title="Call", expiry_date="2024-01-01")]

    summary = build_dashboard([_customer(tasks=customer_tasks)], global_tasks, now=NOW)

    ids = [entry.task.id for entry in summary.upcoming_tasks]
    assert ids == ["global-1", "open"]
    first = summary.upcoming_tasks[0]
    assert first.is_global
    assert first.customer_name == GLOBAL_CUSTOMER_NAME
    assert summary.upcoming_tasks[1].customer_name == "Acme"


def test_tasks_without_expiry_sort_after_dated_ones():
    tasks = [Task(id="undated", title="X"), Task(id="dated", title="Y", expiry_date="2030-01-01")]

    summary = build_dashboard([_customer(tasks=tasks)], [], now=NOW)

    assert [entry.task.id for entry in summary.upcoming_tasks] == ["dated", "undated"]


def test_month_window_includes_last_instant_and_excludes_next_month():
    offers = [
        Offer(id="start", date="2024-01-01"),
        Offer(id="last", date="2024-01-31T23:59:59"),
        Offer(id="next", date="2024-02-01T00:00:00"),
        Offer(id="previous", date="2023-12-31T23:59:59"),
    ]

    summary = build_dashboard([_customer(offers=offers)], [], now=NOW)

    assert summary.offers_this_month == 2
    assert summary.month_start == datetime(2024, 1, 1)
    assert summary.month_end.date() == datetime(2024, 1, 31).date()


def test_flagged_offer_moves_from_offers_to_orders():
    offer = Offer(id="o1", date="2024-01-10", offer_name="Pump", amount=500.0, paid=True)
    customer = _customer(offers=[offer])

    before = build_dashboard([customer], [], now=NOW)
    assert [row.id for row in before.last_offers] == ["o1"]
    assert before.orders_this_month == 0

    offer.marked_as_ordered = True
    after = build_dashboard([customer], [], now=NOW)

    assert after.last_offers == []
    assert after.offers_this_month == 0
    (order,) = after.last_orders
    assert order.id == "o1"
    assert order.amount == 500.0
    assert order.date == "2024-01-10"
    assert order.from_offer is True
    assert order.original_offer_id == "o1"
    assert order.paid is True
    assert after.orders_this_month == 1
    assert after.order_amount_this_month == 500.0


def test_monthly_amount_sums_direct_and_reclassified_orders():
    customer = _customer(
        offers=[Offer(id="o1", date="2024-01-20", amount=100.0, marked_as_ordered=True)],
        orders=[
            Order(id="r1", date="2024-01-02", amount=250.5),
            Order(id="r2", date="2023-12-30", amount=999.0),
        ],
    )

    summary = build_dashboard([customer], [], now=NOW)

    assert summary.orders_this_month == 2
    assert summary.order_amount_this_month == pytest.approx(350.5)
    assert len(summary.orders) == 3


def test_recent_lists_are_newest_first_and_capped():
    offers = [Offer(id=f"o{day}", date=f"2024-01-{day:02d}") for day in range(1, 13)]

    summary = build_dashboard([_customer(offers=offers)], [], now=NOW)

    assert len(summary.last_offers) == 10
    assert summary.last_offers[0].id == "o12"
    assert summary.last_offers[-1].id == "o3"
    assert len(summary.active_offers) == 12


def test_equal_dates_keep_input_order():
    offers = [Offer(id="first", date="2024-01-05"), Offer(id="second", date="2024-01-05")]

    summary = build_dashboard([_customer(offers=offers)], [], now=NOW)

    assert [row.id for row in summary.last_offers] == ["first", "second"]


def test_missing_collections_contribute_nothing():
    sparse = Customer(id="c2", name="Sparse")
    sparse.offers = None
    sparse.orders = None
    sparse.tasks = None

    summary = build_dashboard([sparse, _customer(offers=[Offer(id="o1", date="2024-01-03")])], None, now=NOW)

    assert [row.id for row in summary.last_offers] == ["o1"]
    assert summary.last_orders == []
    assert summary.upcoming_tasks == []


def test_dashboard_does_not_modify_inputs():
    customer = _customer(
        offers=[Offer(id="o1", date="2024-01-03", marked_as_ordered=True)],
        tasks=[Task(id="t1", title="Follow up")],
    )
    global_tasks = [Task(id="g1", title="Plan")]
    snapshot = copy.deepcopy((customer, global_tasks))

    build_dashboard([customer], global_tasks, now=NOW)

    assert (customer, global_tasks) == snapshot


def test_overdue_is_independent_of_urgency():
    late = Task(id="t", title="Late", very_urgent=True, expiry_date="2024-01-10")
    calm = Task(id="u", title="Later", expiry_date="2024-01-20")

    assert is_overdue(late, now=NOW)
    assert not is_overdue(calm, now=NOW)
    assert not is_overdue(Task(id="v", title="Undated"), now=NOW)


def test_order_table_filters_before_totalling():
    rows = [
        _order_row("a", "Beta", 100.0, paid=True),
        _order_row("b", "alpha", 50.0, paid=False),
        _order_row("c", "Gamma", 25.0, paid=True),
    ]

    paid = order_table(rows, sort_by="amount", direction="asc", paid_filter="paid")
    unpaid = order_table(rows, paid_filter="unpaid")

    assert [row.id for row in paid.rows] == ["c", "a"]
    assert paid.total_amount == 125.0
    assert [row.id for row in unpaid.rows] == ["b"]
    assert unpaid.total_amount == 50.0


def test_order_table_sorts_by_customer_ignoring_case():
    rows = [
        _order_row("a", "Beta", 1.0, paid=True),
        _order_row("b", "alpha", 1.0, paid=True),
        _order_row("c", "Gamma", 1.0, paid=False),
    ]

    ascending = order_table(rows, sort_by="customer", direction="asc")
    descending = order_table(rows, sort_by="customer", direction="desc")

    assert [row.customer_name for row in ascending.rows] == ["alpha", "Beta", "Gamma"]
    assert [row.customer_name for row in descending.rows] == ["Gamma", "Beta", "alpha"]
    assert ascending.total_amount == 3.0


def test_order_table_defaults_to_newest_first():
    rows = [
        _order_row("old", "A", 1.0, paid=True, date="2023-05-01"),
        _order_row("new", "A", 1.0, paid=True, date="2024-05-01"),
    ]

    table = order_table(rows)

    assert [row.id for row in table.rows] == ["new", "old"]


@pytest.mark.parametrize(
    "kwargs",
    [{"sort_by": "name"}, {"direction": "up"}, {"paid_filter": "overdue"}],
)
def test_order_table_rejects_unknown_options(kwargs):
    with pytest.raises(ValueError):
        order_table([], **kwargs)


def test_aware_now_is_compared_in_local_time():
    aware_now = NOW.astimezone(timezone.utc)
    task = Task(id="t", title="Late", expiry_date="2024-01-10")

    assert is_overdue(task, now=aware_now)
    assert not is_overdue(Task(id="u", title="Later", expiry_date="2030-01-01"), now=aware_now)


def test_dashboard_accepts_aware_now():
    offers = [Offer(id="o1", date="2024-01-10")]

    summary = build_dashboard([_customer(offers=offers)], [], now=NOW.astimezone(timezone.utc))

    assert summary.month_start == datetime(2024, 1, 1)
    assert summary.month_start.tzinfo is None
    assert summary.offers_this_month == 1
