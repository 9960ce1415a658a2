from dataclasses import replace

from salesdesk.core.models import Address, Country, Customer, CustomerPrice, CustomerType, Product, ProductFamily
from salesdesk.processing.dashboard import DashboardOrder
from salesdesk.reporting.templates import (
    CUSTOMER_HEADERS,
    ORDER_HEADERS,
    PRICE_LIST_HEADERS,
    customer_rows,
    order_rows,
    price_list_rows,
)


def test_price_list_rows_resolve_customer_names():
    families = [
        ProductFamily(
            id="family-1",
            name="Pumps ",
            products=[
                Product(
                    id="product-0-3",
                    name="P1",
                    sku="X-1",
                    base_price=12.0,
                    customer_prices=[
                        CustomerPrice(customer_id="oem-1", price=12.0),
                        CustomerPrice(customer_id="customer-7", price=9.5, discounted_price=9.0),
                    ],
                ),
                Product(id="product-0-4", name="Unpriced"),
            ],
        )
    ]
    customers = [Customer(id="oem-1", name="GlobalOEM", type=CustomerType.OEM)]

    rows = price_list_rows(families, customers)

    assert all(list(row) == PRICE_LIST_HEADERS for row in rows)
    assert rows[0] == {
        "Family": "Pumps",
        "Product": "P1",
        "SKU": "X-1",
        "Base_Price": "12.00",
        "Customer_ID": "oem-1",
        "Customer": "GlobalOEM",
        "Customer_Type": "OEM",
        "Price": "12.00",
        "Discounted_Price": "",
    }
    assert rows[1]["Customer"] == "Unknown"
    assert rows[1]["Discounted_Price"] == "9.00"
    assert rows[2]["Product"] == "Unpriced"
    assert rows[2]["Customer_ID"] == "" and rows[2]["Base_Price"] == "0.00"


def test_customer_rows_flatten_enums():
    customer = Customer(
        id="customer-1",
        name="Acme   Trading",
        address=Address(country=Country.QATAR),
        created_at="2024-03-01",
    )

    (row,) = customer_rows([customer])

    assert list(row) == CUSTOMER_HEADERS
    assert row["Name"] == "Acme Trading"
    assert row["Type"] == "Customer"
    assert row["Status"] == "Active"
    assert row["Country"] == "Qatar"
    assert row["Created"] == "2024-03-01"


def test_order_rows_mark_the_source():
    direct = DashboardOrder(
        id="r1",
        date="2024-01-02",
        customer_id="c1",
        customer_name="Acme",
        offer_name="Spare parts",
        project_name="Line 2",
        final_user="Refinery",
        oc_name="OC-7",
        amount=1200.5,
        paid=False,
    )
    promoted = replace(direct, id="o1", paid=True, from_offer=True, original_offer_id="o1")

    rows = order_rows([direct, promoted])

    assert list(rows[0]) == ORDER_HEADERS
    assert rows[0]["Amount"] == "1200.50"
    assert (rows[0]["Paid"], rows[0]["Source"]) == ("No", "order")
    assert (rows[1]["Paid"], rows[1]["Source"]) == ("Yes", "offer")
