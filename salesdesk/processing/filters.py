"""Filtering and ordering helpers for the customer, trip, and task lists."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from salesdesk.core.models import BusinessTrip, Customer, Task
from salesdesk.core.utils import parse_timestamp

ALL = "all"


def _matches(choice: str, value: str) -> bool:
    return choice == ALL or value == choice


def filter_customers(
    customers: Iterable[Customer],
    search: str = "",
    customer_type: str = ALL,
    status: str = ALL,
    country: str = ALL,
) -> List[Customer]:
    """Case-insensitive search over name and email combined with exact filters."""

    needle = search.strip().lower()

    def _hit(customer: Customer) -> bool:
        if not needle:
            return True
        return needle in customer.name.lower() or needle in (customer.email or "").lower()

    return [
        customer
        for customer in customers
        if _hit(customer)
        and _matches(customer_type, customer.type.value)
        and _matches(status, customer.status.value)
        and _matches(country, customer.address.country.value)
    ]


def customer_countries(customers: Iterable[Customer]) -> List[str]:
    return sorted({customer.address.country.value for customer in customers if customer.address.country.value})


def trip_countries(trips: Iterable[BusinessTrip]) -> List[str]:
    return sorted({country for trip in trips for country in trip.countries_visited})


def filter_trips(
    trips: Iterable[BusinessTrip],
    search: str = "",
    country: str = ALL,
    customer_id: str = ALL,
    date_from: str = "",
    date_to: str = "",
) -> List[BusinessTrip]:
    """Filter business trips and return them newest first by start date."""

    needle = search.strip().lower()
    lower_bound = parse_timestamp(date_from)
    upper_bound = parse_timestamp(date_to)

    def _keep(trip: BusinessTrip) -> bool:
        if needle and needle not in trip.details.lower() and not any(
            needle in visited.lower() for visited in trip.countries_visited
        ):
            return False
        if country != ALL and country not in trip.countries_visited:
            return False
        if customer_id != ALL and customer_id not in trip.customers_visited:
            return False
        start = parse_timestamp(trip.start_date)
        end = parse_timestamp(trip.end_date)
        if lower_bound and (start is None or start < lower_bound):
            return False
        if upper_bound and (end is None or end > upper_bound):
            return False
        return True

    kept = [trip for trip in trips if _keep(trip)]
    return sorted(kept, key=lambda trip: parse_timestamp(trip.start_date) or datetime.min, reverse=True)


def sort_customer_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Open tasks before completed ones, each group by earliest expiry."""

    return sorted(
        tasks,
        key=lambda task: (task.completed, parse_timestamp(task.expiry_date) or datetime.max),
    )
