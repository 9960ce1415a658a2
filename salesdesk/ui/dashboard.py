"""Streamlit console for the sales CRM: dashboard, customers, prices, trips."""
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, MutableMapping, Optional, Union

import streamlit as st

# Allow running via "streamlit run salesdesk/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from salesdesk.core.logging import configure_logging
from salesdesk.core.models import Address, Country, Customer, CustomerStatus, CustomerType, Offer, Order
from salesdesk.core.state import CrmState
from salesdesk.core.utils import get_config_value, get_int_config, parse_timestamp
from salesdesk.ingestion.workbook import ImportResult, import_workbook
from salesdesk.processing.calculator import certification_price
from salesdesk.processing.catalog import (
    average_price,
    customer_index,
    customer_label,
    customer_pricing,
    find_product,
)
from salesdesk.processing.dashboard import (
    DEFAULT_RECENT_LIMIT,
    DashboardSummary,
    DashboardTask,
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
from salesdesk.reporting.templates import customer_rows, order_rows, price_list_rows


def _session_state() -> CrmState:
    """Create the CRM state once per session, preloading a configured workbook."""

    if "crm" not in st.session_state:
        state = CrmState()
        default_workbook = get_config_value("SALESDESK_DEFAULT_WORKBOOK", "")
        if default_workbook and Path(default_workbook).exists():
            state.apply_import(import_workbook(Path(default_workbook)))
        st.session_state.crm = state
    return st.session_state.crm


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _inject_theme() -> None:
    st.markdown(
        """
        <style>
            :root {--primary-color: #059669; --text-strong: #0f172a;}
            div[data-testid="stMetricValue"] {color: var(--text-strong); font-weight: 600;}
            .overdue {color: #dc2626; font-weight: 600;}
            .section-title {font-size: 1.05rem; font-weight: 700; margin-top: 0.5rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )


def _task_badges(entry: DashboardTask, now: datetime) -> str:
    badges = []
    if entry.task.very_urgent:
        badges.append("🔴 Very urgent")
    elif entry.task.urgent:
        badges.append("🟠 Urgent")
    if is_overdue(entry.task, now):
        badges.append("⏰ Overdue")
    return " ".join(badges)


def _metrics_panel(summary: DashboardSummary) -> None:
    cols = st.columns(2)
    month_label = summary.month_start.strftime("%B %Y")
    cols[0].metric("Offers this month", summary.offers_this_month, help=month_label)
    cols[1].metric(
        "Orders amount this month",
        f"€{summary.order_amount_this_month:,.2f}",
        help=f"{summary.orders_this_month} orders in {month_label}",
    )


def _tasks_panel(state: CrmState, summary: DashboardSummary, now: datetime) -> None:
    st.markdown("### Tasks")
    rows = [
        {
            "Task": entry.task.title,
            "Customer": entry.customer_name,
            "Due": entry.task.expiry_date,
            "Flags": _task_badges(entry, now),
            "Description": entry.task.description,
        }
        for entry in summary.upcoming_tasks
    ]
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info("No open tasks.")

    with st.expander("Add a general task", expanded=False):
        with st.form("add_global_task", clear_on_submit=True):
            title = st.text_input("Task title *")
            description = st.text_area("Description *")
            date_cols = st.columns(2)
            registered = date_cols[0].date_input("Registration date", value=date.today())
            expires = date_cols[1].date_input("Expiry date", value=date.today())
            flag_cols = st.columns(2)
            urgent = flag_cols[0].checkbox("Urgent")
            very_urgent = flag_cols[1].checkbox("Very urgent")
            if st.form_submit_button("Add task", type="primary"):
                try:
                    state.add_global_task(
                        title,
                        description,
                        registration_date=registered.isoformat(),
                        expiry_date=expires.isoformat(),
                        urgent=urgent,
                        very_urgent=very_urgent,
                    )
                except ValueError as exc:
                    st.warning(str(exc))
                else:
                    _rerun_app()

    global_entries = [entry for entry in summary.upcoming_tasks if entry.is_global]
    if global_entries:
        action_cols = st.columns([3, 1, 1])
        labels = {entry.task.id: entry.task.title for entry in global_entries}
        chosen = action_cols[0].selectbox(
            "General task", options=list(labels), format_func=labels.get, key="global_task_choice"
        )
        if action_cols[1].button("Mark done", type="secondary"):
            state.set_global_task_completed(chosen)
            _rerun_app()
        if action_cols[2].button("Delete", type="secondary"):
            state.delete_global_task(chosen)
            _rerun_app()
    if state.global_tasks and st.button("Delete all general tasks", type="secondary"):
        removed = state.clear_global_tasks()
        st.success(f"Deleted {removed} general tasks. Customer tasks remain unchanged.")
        _rerun_app()


def _offers_panel(state: CrmState, summary: DashboardSummary) -> None:
    st.markdown("### Last offers")
    if not summary.last_offers:
        st.info("No open offers.")
        return
    st.dataframe(
        [
            {
                "Date": offer.date,
                "Customer": offer.customer_name,
                "Offer": offer.offer_name,
                "Project": offer.project_name,
                "Amount (€)": f"{offer.amount:,.2f}",
            }
            for offer in summary.last_offers
        ],
        use_container_width=True,
        hide_index=True,
    )
    labels = {(offer.customer_id, offer.id): f"{offer.offer_name or offer.id} ({offer.customer_name})" for offer in summary.last_offers}
    chosen = st.selectbox("Offer", options=list(labels), format_func=labels.get, key="offer_choice")
    if st.button("Mark as ordered", type="primary"):
        state.set_offer_ordered(chosen[0], chosen[1], True)
        _rerun_app()


def _orders_panel(summary: DashboardSummary) -> None:
    st.markdown("### Last orders")
    control_cols = st.columns(3)
    sort_by = control_cols[0].selectbox("Sort by", options=["date", "amount", "customer"])
    direction = control_cols[1].radio("Direction", options=["desc", "asc"], horizontal=True)
    paid_filter = control_cols[2].selectbox("Payment", options=["all", "paid", "unpaid"])

    table = order_table(summary.last_orders, sort_by=sort_by, direction=direction, paid_filter=paid_filter)
    if table.rows:
        st.dataframe(order_rows(table.rows), use_container_width=True, hide_index=True)
    else:
        st.info("No orders match the current filters.")
    st.caption(f"Total: €{table.total_amount:,.2f} across {len(table.rows)} orders")


def _as_date(value: str) -> date:
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else date.today()


def _apply(action: Callable[[], object]) -> None:
    """Run a state edit, showing validation problems instead of raising them."""

    try:
        action()
    except ValueError as exc:
        st.warning(str(exc))
    else:
        _rerun_app()


def _sale_form(key: str, record: Optional[Union[Offer, Order]] = None, with_paid: bool = False) -> Optional[dict]:
    """Render the shared offer/order form and return its values once submitted."""

    with st.form(key, clear_on_submit=record is None):
        cols = st.columns(2)
        final_user = cols[0].text_input("Final user *", value=record.final_user if record else "")
        project_name = cols[1].text_input("Project name *", value=record.project_name if record else "")
        offer_name = cols[0].text_input("Offer name", value=record.offer_name if record else "")
        oc_name = cols[1].text_input("OC name", value=record.oc_name if record else "")
        sale_date = cols[0].date_input("Date", value=_as_date(record.date if record else ""))
        amount = cols[1].number_input(
            "Amount (€)", min_value=0.0, step=0.01, value=float(record.amount if record else 0.0)
        )
        paid = st.checkbox("Paid", value=bool(getattr(record, "paid", False))) if with_paid else False
        submitted = st.form_submit_button("Save changes" if record else "Add", type="primary")
    if not submitted:
        return None
    values = {
        "final_user": final_user,
        "project_name": project_name,
        "offer_name": offer_name,
        "oc_name": oc_name,
        "date": sale_date.isoformat(),
        "amount": amount,
    }
    if with_paid:
        values["paid"] = paid
    return values


def _add_customer_form(state: CrmState) -> None:
    with st.expander("Add customer", expanded=False):
        with st.form("add_customer", clear_on_submit=True):
            cols = st.columns(3)
            name = cols[0].text_input("Name *")
            customer_type = cols[1].selectbox("Type", [member.value for member in CustomerType])
            status = cols[2].selectbox("Status", [CustomerStatus.PROSPECT.value, CustomerStatus.ACTIVE.value])
            email = cols[0].text_input("Email")
            phone = cols[1].text_input("Phone")
            country = cols[2].selectbox("Country", [member.value for member in Country], format_func=lambda v: v or "-")
            city = cols[0].text_input("City")
            payment_terms = cols[1].text_input("Payment terms")
            if st.form_submit_button("Add customer", type="primary"):
                _apply(
                    lambda: state.create_customer(
                        name,
                        customer_type=customer_type,
                        status=status,
                        email=email,
                        phone=phone,
                        address=Address(city=city, country=Country.from_value(country)),
                        payment_terms=payment_terms,
                    )
                )


def _customer_overview(state: CrmState, customer: Customer) -> None:
    with st.form(f"edit_customer_{customer.id}"):
        cols = st.columns(3)
        name = cols[0].text_input("Name", value=customer.name)
        types = [member.value for member in CustomerType]
        customer_type = cols[1].selectbox("Type", types, index=types.index(customer.type.value))
        statuses = [member.value for member in CustomerStatus]
        status = cols[2].selectbox("Status", statuses, index=statuses.index(customer.status.value))
        email = cols[0].text_input("Email", value=customer.email)
        phone = cols[1].text_input("Phone", value=customer.phone)
        countries = [member.value for member in Country]
        country = cols[2].selectbox(
            "Country", countries, index=countries.index(customer.address.country.value), format_func=lambda v: v or "-"
        )
        payment_terms = st.text_input("Payment terms", value=customer.payment_terms)
        if st.form_submit_button("Save customer", type="primary"):
            if not name.strip():
                st.warning("Customer name is required")
            else:
                state.update_customer(
                    replace(
                        customer,
                        name=name.strip(),
                        type=CustomerType.from_value(customer_type),
                        status=CustomerStatus.from_value(status),
                        email=email,
                        phone=phone,
                        address=replace(customer.address, country=Country.from_value(country)),
                        payment_terms=payment_terms,
                        last_contact=date.today().isoformat(),
                    )
                )
                _rerun_app()
    if st.button("Delete customer", key=f"delete_customer_{customer.id}"):
        state.delete_customer(customer.id)
        _rerun_app()


def _customer_pricing(state: CrmState, customer: Customer) -> None:
    pricing = customer_pricing(customer.id, state.product_families)
    if not pricing:
        st.info("No prices recorded for this customer.")
    for family_name, products in pricing.items():
        st.markdown(f"<div class='section-title'>{family_name}</div>", unsafe_allow_html=True)
        st.dataframe(
            [
                {
                    "Product": row.product.name,
                    "SKU": row.product.sku,
                    "Price (€)": f"{row.price:,.2f}",
                    "Discounted (€)": f"{row.discounted_price:,.2f}",
                }
                for row in products
            ],
            use_container_width=True,
            hide_index=True,
        )


def _customer_offers(state: CrmState, customer: Customer) -> None:
    if customer.offers:
        st.dataframe(
            [
                {
                    "Date": offer.date,
                    "Offer": offer.offer_name,
                    "Project": offer.project_name,
                    "Final user": offer.final_user,
                    "OC": offer.oc_name,
                    "Amount (€)": f"{offer.amount:,.2f}",
                    "Ordered": "Yes" if offer.marked_as_ordered else "No",
                }
                for offer in customer.offers
            ],
            use_container_width=True,
            hide_index=True,
        )
    with st.expander("Add offer", expanded=not customer.offers):
        values = _sale_form(f"add_offer_{customer.id}")
        if values is not None:
            _apply(lambda: state.add_offer(customer.id, **values))
    if not customer.offers:
        return

    labels = {offer.id: f"{offer.date} · {offer.offer_name or offer.project_name}" for offer in customer.offers}
    chosen = st.selectbox("Edit offer", options=list(labels), format_func=labels.get, key=f"offer_pick_{customer.id}")
    offer = next(offer for offer in customer.offers if offer.id == chosen)
    values = _sale_form(f"edit_offer_{customer.id}_{offer.id}", record=offer)
    if values is not None:
        _apply(lambda: state.update_offer(customer.id, offer.id, **values))
    cols = st.columns(2)
    toggle_label = "Unmark as ordered" if offer.marked_as_ordered else "Mark as ordered"
    if cols[0].button(toggle_label, key=f"toggle_offer_{offer.id}"):
        state.toggle_offer_ordered(customer.id, offer.id)
        _rerun_app()
    if cols[1].button("Delete offer", key=f"delete_offer_{offer.id}"):
        state.delete_offer(customer.id, offer.id)
        _rerun_app()


def _customer_orders(state: CrmState, customer: Customer) -> None:
    if customer.orders:
        st.dataframe(
            [
                {
                    "Date": order.date,
                    "Offer": order.offer_name,
                    "Project": order.project_name,
                    "Final user": order.final_user,
                    "OC": order.oc_name,
                    "Amount (€)": f"{order.amount:,.2f}",
                    "Paid": "Yes" if order.paid else "No",
                }
                for order in customer.orders
            ],
            use_container_width=True,
            hide_index=True,
        )
    with st.expander("Add order", expanded=not customer.orders):
        values = _sale_form(f"add_order_{customer.id}", with_paid=True)
        if values is not None:
            _apply(lambda: state.add_order(customer.id, **values))
    if not customer.orders:
        return

    labels = {order.id: f"{order.date} · {order.offer_name or order.project_name}" for order in customer.orders}
    chosen = st.selectbox("Edit order", options=list(labels), format_func=labels.get, key=f"order_pick_{customer.id}")
    order = next(order for order in customer.orders if order.id == chosen)
    values = _sale_form(f"edit_order_{customer.id}_{order.id}", record=order, with_paid=True)
    if values is not None:
        _apply(lambda: state.update_order(customer.id, order.id, **values))
    if st.button("Delete order", key=f"delete_order_{order.id}"):
        state.delete_order(customer.id, order.id)
        _rerun_app()


def _customer_tasks(state: CrmState, customer: Customer, now: datetime) -> None:
    tasks = sort_customer_tasks(customer.tasks)
    if tasks:
        st.dataframe(
            [
                {
                    "Task": task.title,
                    "Due": task.expiry_date,
                    "Done": "✅" if task.completed else "",
                    "Overdue": "⏰" if not task.completed and is_overdue(task, now) else "",
                    "Description": task.description,
                }
                for task in tasks
            ],
            use_container_width=True,
            hide_index=True,
        )
    with st.expander("Add task", expanded=False):
        with st.form(f"add_task_{customer.id}", clear_on_submit=True):
            title = st.text_input("Task title *")
            description = st.text_area("Description *")
            date_cols = st.columns(2)
            registered = date_cols[0].date_input("Registration date", value=date.today())
            expires = date_cols[1].date_input("Expiry date", value=date.today())
            flag_cols = st.columns(2)
            urgent = flag_cols[0].checkbox("Urgent")
            very_urgent = flag_cols[1].checkbox("Very urgent")
            if st.form_submit_button("Add task", type="primary"):
                _apply(
                    lambda: state.add_customer_task(
                        customer.id,
                        title,
                        description,
                        registration_date=registered.isoformat(),
                        expiry_date=expires.isoformat(),
                        urgent=urgent,
                        very_urgent=very_urgent,
                    )
                )
    if not tasks:
        return

    labels = {task.id: task.title for task in tasks}
    action_cols = st.columns([3, 1, 1])
    chosen = action_cols[0].selectbox("Task", options=list(labels), format_func=labels.get, key=f"task_pick_{customer.id}")
    if action_cols[1].button("Toggle done", key=f"toggle_task_{customer.id}"):
        state.toggle_customer_task(customer.id, chosen)
        _rerun_app()
    if action_cols[2].button("Delete", key=f"delete_task_{customer.id}"):
        state.delete_customer_task(customer.id, chosen)
        _rerun_app()


def _customer_contacts(state: CrmState, customer: Customer) -> None:
    if customer.contacts:
        st.dataframe(
            [
                {"Name": c.name, "Role": c.role, "Email": c.email, "Phone": c.phone}
                for c in customer.contacts
            ],
            use_container_width=True,
            hide_index=True,
        )
    with st.form(f"add_contact_{customer.id}", clear_on_submit=True):
        cols = st.columns(4)
        name = cols[0].text_input("Name *")
        role = cols[1].text_input("Role")
        email = cols[2].text_input("Email")
        phone = cols[3].text_input("Phone")
        if st.form_submit_button("Add contact"):
            _apply(lambda: state.add_contact(customer.id, name, email=email, phone=phone, role=role))
    if customer.contacts:
        labels = {c.id: c.name for c in customer.contacts}
        chosen = st.selectbox("Contact", options=list(labels), format_func=labels.get, key=f"contact_pick_{customer.id}")
        if st.button("Delete contact", key=f"delete_contact_{customer.id}"):
            state.delete_contact(customer.id, chosen)
            _rerun_app()


def _customer_notes(state: CrmState, customer: Customer) -> None:
    with st.form(f"add_note_{customer.id}", clear_on_submit=True):
        title = st.text_input("Title *")
        content = st.text_area("Note *")
        note_date = st.date_input("Date", value=date.today())
        if st.form_submit_button("Add note"):
            _apply(lambda: state.add_note(customer.id, title, content, date=note_date.isoformat()))
    notes = sorted(customer.notes, key=lambda note: parse_timestamp(note.date) or datetime.min, reverse=True)
    for note in notes:
        with st.expander(f"{note.date}: {note.title}"):
            st.markdown(note.content)
            if st.button("Delete note", key=f"delete_note_{note.id}"):
                state.delete_note(customer.id, note.id)
                _rerun_app()


def _customers_tab(state: CrmState, now: datetime) -> None:
    filter_cols = st.columns([2, 1, 1, 1])
    search = filter_cols[0].text_input("Search name or email")
    customer_type = filter_cols[1].selectbox("Type", ["all"] + [member.value for member in CustomerType])
    status = filter_cols[2].selectbox("Status", ["all"] + [member.value for member in CustomerStatus])
    country = filter_cols[3].selectbox("Country", ["all"] + customer_countries(state.customers))

    matches = filter_customers(state.customers, search, customer_type, status, country)
    st.caption(f"{len(matches)} of {len(state.customers)} customers")
    if matches:
        st.dataframe(customer_rows(matches), use_container_width=True, hide_index=True)
    _add_customer_form(state)

    if not matches:
        return
    labels = {customer.id: customer.name for customer in matches}
    chosen = st.selectbox("Customer details", options=list(labels), format_func=labels.get)
    customer = state.customer_by_id(chosen)
    sections = st.tabs(["Overview", "Pricing", "Offers", "Orders", "Tasks", "Contacts", "Notes"])
    with sections[0]:
        _customer_overview(state, customer)
    with sections[1]:
        _customer_pricing(state, customer)
    with sections[2]:
        _customer_offers(state, customer)
    with sections[3]:
        _customer_orders(state, customer)
    with sections[4]:
        _customer_tasks(state, customer, now)
    with sections[5]:
        _customer_contacts(state, customer)
    with sections[6]:
        _customer_notes(state, customer)


def _products_tab(state: CrmState) -> None:
    if not state.product_families:
        st.info("No product families loaded. Import a workbook first.")
        return
    labels = {family.id: f"{family.name} ({len(family.products)} products)" for family in state.product_families}
    chosen = st.selectbox("Product family", options=list(labels), format_func=labels.get)
    family = next(family for family in state.product_families if family.id == chosen)
    st.dataframe(
        [
            {
                "Product": product.name,
                "SKU": product.sku,
                "Base price (€)": f"{product.base_price:,.2f}",
                "Customers priced": len(product.customer_prices),
                "Average price (€)": f"{average_price(product):,.2f}",
            }
            for product in family.products
        ],
        use_container_width=True,
        hide_index=True,
    )

    product_labels = {product.id: product.name for product in family.products}
    product_id = st.selectbox("Customer prices for", options=list(product_labels), format_func=product_labels.get)
    product = find_product(state.product_families, product_id)
    if product is not None:
        st.dataframe(
            price_list_rows([replace(family, products=[product])], state.customers),
            use_container_width=True,
            hide_index=True,
        )


def _add_trip_form(state: CrmState) -> None:
    with st.expander("Add business trip", expanded=False):
        with st.form("add_trip", clear_on_submit=True):
            date_cols = st.columns(2)
            start = date_cols[0].date_input("Start date", value=date.today())
            end = date_cols[1].date_input("End date", value=date.today())
            labels = {customer.id: customer.name for customer in state.customers}
            visited = st.multiselect("Customers visited", options=list(labels), format_func=labels.get)
            countries = st.multiselect("Countries visited", [member.value for member in Country if member.value])
            details = st.text_area("Details")
            todo_text = st.text_area("To-do list (one item per line)")
            if st.form_submit_button("Add trip", type="primary"):
                _apply(
                    lambda: state.add_trip(
                        start.isoformat(),
                        end.isoformat(),
                        customers_visited=visited,
                        countries_visited=countries,
                        details=details,
                        todo_items=todo_text.splitlines(),
                    )
                )


def _trips_tab(state: CrmState) -> None:
    index = customer_index(state.customers)
    _add_trip_form(state)
    filter_cols = st.columns(3)
    search = filter_cols[0].text_input("Search details or country")
    country = filter_cols[1].selectbox("Country visited", ["all"] + trip_countries(state.business_trips))
    customer_options = ["all"] + sorted({cid for trip in state.business_trips for cid in trip.customers_visited})
    customer_id = filter_cols[2].selectbox(
        "Customer visited",
        customer_options,
        format_func=lambda value: "all" if value == "all" else customer_label(value, index),
    )
    date_cols = st.columns(2)
    date_from = date_cols[0].text_input("From (YYYY-MM-DD)")
    date_to = date_cols[1].text_input("To (YYYY-MM-DD)")

    trips = filter_trips(state.business_trips, search, country, customer_id, date_from, date_to)
    if not trips:
        st.info("No business trips match the current filters.")
        return
    for trip in trips:
        with st.expander(f"{trip.start_date} → {trip.end_date}: {', '.join(trip.countries_visited)}"):
            visited = [customer_label(cid, index) for cid in trip.customers_visited]
            st.markdown(f"**Customers:** {', '.join(visited) or 'none'}")
            st.markdown(trip.details or "_No details recorded._")
            for item in trip.todo_list:
                checked = st.checkbox(item.task, value=item.completed, key=f"todo_{trip.id}_{item.id}")
                if checked != item.completed:
                    state.toggle_trip_todo(trip.id, item.id)
            if st.button("Delete trip", key=f"delete_trip_{trip.id}"):
                state.delete_trip(trip.id)
                _rerun_app()


def stage_upload(session: MutableMapping[str, Any], upload: Any) -> None:
    """Parse a newly uploaded workbook once per file.

    Reruns that still see the same upload keep whatever is staged, so an
    applied import does not come back as a fresh preview.
    """

    signature = (upload.name, upload.size)
    if session.get("upload_signature") == signature:
        return
    session["upload_signature"] = signature
    session["pending_import"] = import_workbook(upload, filename=upload.name)


def _import_tab(state: CrmState) -> None:
    st.markdown(
        "Customers go in **D2:L2** (regular) and **N2:T2** (OEM); families in column A, "
        "products in column B, part numbers in column C, prices in **D3:T39**."
    )
    upload = st.file_uploader("Price-list workbook", type=["xlsx", "xlsm"])
    if upload is not None:
        stage_upload(st.session_state, upload)

    pending: ImportResult | None = st.session_state.get("pending_import")
    if pending is None:
        return
    cols = st.columns(2)
    cols[0].metric("Customers found", len(pending.customers))
    cols[0].caption(
        f"Regular: {len(pending.customers_of_type(CustomerType.CUSTOMER))} | "
        f"OEM: {len(pending.customers_of_type(CustomerType.OEM))}"
    )
    cols[1].metric("Product families", len(pending.product_families))
    cols[1].caption(f"{pending.product_count} total products")
    for message in pending.errors:
        st.warning(message)

    if st.button("Import data", type="primary", disabled=not pending.can_apply):
        state.apply_import(pending)
        st.session_state.pop("pending_import", None)
        st.success(
            f"Successfully imported {len(state.customers)} customers and "
            f"{len(state.product_families)} product families!"
        )


def _calculator_tab() -> None:
    value = st.number_input("Value of the invoice (€)", min_value=0.0, step=0.01, value=0.0)
    st.metric("Certification price", f"€{certification_price(value):,.2f}")
    st.caption("((Value × 1.06 × 0.18%) + 100 + 30) / 0.94")


def main() -> None:
    """Launch the CRM console."""

    configure_logging()
    st.set_page_config(page_title="Sales CRM", layout="wide")
    _inject_theme()
    st.title("Sales CRM")

    state = _session_state()
    now = datetime.now()
    limit = get_int_config("SALESDESK_RECENT_LIMIT", DEFAULT_RECENT_LIMIT)
    summary = build_dashboard(state.customers, state.global_tasks, now=now, limit=limit)

    tabs = st.tabs(["Dashboard", "Customers", "Products", "Trips", "Import", "Certification"])
    with tabs[0]:
        _metrics_panel(summary)
        _tasks_panel(state, summary, now)
        left, right = st.columns(2)
        with left:
            _offers_panel(state, summary)
        with right:
            _orders_panel(summary)
    with tabs[1]:
        _customers_tab(state, now)
    with tabs[2]:
        _products_tab(state)
    with tabs[3]:
        _trips_tab(state)
    with tabs[4]:
        _import_tab(state)
    with tabs[5]:
        _calculator_tab()


if __name__ == "__main__":
    main()
