"""Importer for the price-list workbook with its fixed cell layout.

Layout of the first worksheet (1-based rows and columns):

* row 2, columns D..L: regular customer names
* row 2, columns N..T: OEM customer names
* column A: product family name, once per family block
* column B: product name, column C: part number
* from row 3 on, the customer columns hold each customer's price
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import IO, Any, List, Optional, Tuple, Union

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter

from salesdesk.core.models import (
    Address,
    Customer,
    CustomerPrice,
    CustomerStatus,
    CustomerType,
    Product,
    ProductFamily,
)
from salesdesk.ingestion.common import clean_amount, format_value, has_value

logger = logging.getLogger(__name__)

NAME_ROW = 2
REGULAR_COLUMNS = (4, 12)  # D..L
OEM_COLUMNS = (14, 20)  # N..T
FAMILY_COLUMN = 1
PRODUCT_COLUMN = 2
SKU_COLUMN = 3

FAMILY_BLOCKS: Tuple[Tuple[int, int], ...] = (
    (3, 8),
    (9, 18),
    (19, 20),
    (21, 23),
    (24, 26),
    (27, 28),
    (29, 38),
    (39, 39),
)

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm"}

NO_CUSTOMERS_MESSAGE = (
    "No customers found. Please check that customer names are in cells "
    f"{get_column_letter(REGULAR_COLUMNS[0])}{NAME_ROW}:{get_column_letter(REGULAR_COLUMNS[1])}{NAME_ROW} and "
    f"{get_column_letter(OEM_COLUMNS[0])}{NAME_ROW}:{get_column_letter(OEM_COLUMNS[1])}{NAME_ROW}."
)
NO_FAMILIES_MESSAGE = "No product families found. Please check the Excel structure."
LOAD_FAILED_MESSAGE = "Failed to process the Excel file. Please check the file format."

WorkbookSource = Union[str, Path, IO[bytes]]


@dataclass
class ImportResult:
    """Customers and product families recovered from a workbook, plus warnings."""

    customers: List[Customer] = field(default_factory=list)
    product_families: List[ProductFamily] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def can_apply(self) -> bool:
        return bool(self.customers) and bool(self.product_families)

    @property
    def product_count(self) -> int:
        return sum(len(family.products) for family in self.product_families)

    def customers_of_type(self, customer_type: CustomerType) -> List[Customer]:
        return [customer for customer in self.customers if customer.type == customer_type]


def _cell(worksheet: Any, row: int, column: int) -> Any:
    return worksheet.cell(row=row, column=column).value


def _read_names(worksheet: Any, first_column: int, last_column: int) -> List[str]:
    """Collect non-empty names left to right; blanks do not take a position."""

    names: List[str] = []
    for column in range(first_column, last_column + 1):
        raw = _cell(worksheet, NAME_ROW, column)
        if not has_value(raw):
            continue
        name = format_value(raw)
        if name:
            names.append(name)
    return names


def _new_customer(customer_id: str, name: str, customer_type: CustomerType, today: str) -> Customer:
    return Customer(
        id=customer_id,
        name=name,
        type=customer_type,
        status=CustomerStatus.ACTIVE,
        email="",
        phone="",
        address=Address(),
        payment_terms="",
        created_at=today,
        last_contact=today,
    )


def _row_prices(
    worksheet: Any, row: int, regular_count: int, oem_count: int
) -> List[CustomerPrice]:
    """Read one product row's prices in customer discovery order."""

    prices: List[CustomerPrice] = []
    groups = (
        ("customer", REGULAR_COLUMNS[0], regular_count),
        ("oem", OEM_COLUMNS[0], oem_count),
    )
    for prefix, first_column, count in groups:
        for position in range(count):
            price = clean_amount(_cell(worksheet, row, first_column + position))
            if price is None:
                continue
            prices.append(CustomerPrice(customer_id=f"{prefix}-{position + 1}", price=price))
    return prices


def _read_family(
    worksheet: Any, family_index: int, start: int, end: int, regular_count: int, oem_count: int
) -> Optional[ProductFamily]:
    family_name = ""
    products: List[Product] = []

    for row in range(start, end + 1):
        family_cell = _cell(worksheet, row, FAMILY_COLUMN)
        if not family_name and has_value(family_cell):
            family_name = format_value(family_cell)

        product_cell = _cell(worksheet, row, PRODUCT_COLUMN)
        if not has_value(product_cell):
            continue

        name = format_value(product_cell)
        sku = format_value(_cell(worksheet, row, SKU_COLUMN))
        prices = _row_prices(worksheet, row, regular_count, oem_count)
        products.append(
            Product(
                id=f"product-{family_index}-{row}",
                name=name,
                sku=sku,
                description=f"{name} - {sku}" if sku else name,
                base_price=max((price.price for price in prices), default=0.0),
                customer_prices=prices,
            )
        )

    if not family_name or not products:
        if products:
            logger.debug("Dropping %d products in rows %d-%d without a family name", len(products), start, end)
        return None

    return ProductFamily(
        id=f"family-{family_index + 1}",
        name=family_name,
        description=f"Product family: {family_name}",
        products=products,
    )


def parse_worksheet(worksheet: Any, today: date | None = None) -> ImportResult:
    """Map the fixed worksheet layout onto customers and product families.

    Never raises: whatever was read before a failure is returned together
    with an advisory message in ``errors``.
    """

    result = ImportResult()
    created = (today or date.today()).isoformat()

    try:
        regular_names = _read_names(worksheet, *REGULAR_COLUMNS)
        oem_names = _read_names(worksheet, *OEM_COLUMNS)

        for position, name in enumerate(regular_names, start=1):
            result.customers.append(_new_customer(f"customer-{position}", name, CustomerType.CUSTOMER, created))
        for position, name in enumerate(oem_names, start=1):
            result.customers.append(_new_customer(f"oem-{position}", name, CustomerType.OEM, created))

        for family_index, (start, end) in enumerate(FAMILY_BLOCKS):
            family = _read_family(worksheet, family_index, start, end, len(regular_names), len(oem_names))
            if family is not None:
                result.product_families.append(family)

        if not result.customers:
            result.errors.append(NO_CUSTOMERS_MESSAGE)
        if not result.product_families:
            result.errors.append(NO_FAMILIES_MESSAGE)
    except Exception as exc:
        logger.exception("Failed while scanning worksheet cells")
        result.errors.append(f"Error parsing workbook data: {exc}")

    logger.info(
        "Parsed %d customers and %d product families (%d products)",
        len(result.customers),
        len(result.product_families),
        result.product_count,
    )
    for message in result.errors:
        logger.warning("Import warning: %s", message)
    return result


def import_workbook(
    source: WorkbookSource, filename: str | None = None, today: date | None = None
) -> ImportResult:
    """Load the first worksheet of an Excel file and parse it.

    ``source`` may be a path or an open binary file (for example a browser
    upload); ``filename`` supplies the name used for the extension check when
    the source has none. Unreadable files yield a single error and no records.
    """

    name = filename or (str(source) if isinstance(source, (str, Path)) else getattr(source, "name", ""))
    suffix = Path(name).suffix.lower() if name else ""
    if suffix and suffix not in SUPPORTED_SUFFIXES:
        logger.error("Rejected workbook %s with unsupported extension %s", name, suffix)
        return ImportResult(errors=[f"Please upload an Excel file ({', '.join(sorted(SUPPORTED_SUFFIXES))})."])

    try:
        workbook = load_workbook(source, data_only=True)
    except Exception:
        logger.exception("Failed to open workbook %s", name or "<upload>")
        return ImportResult(errors=[LOAD_FAILED_MESSAGE])

    try:
        worksheet = workbook.worksheets[0]
        logger.info("Importing worksheet %r from %s", worksheet.title, name or "<upload>")
    except Exception:
        logger.exception("Workbook %s has no readable worksheet", name or "<upload>")
        workbook.close()
        return ImportResult(errors=[LOAD_FAILED_MESSAGE])

    try:
        return parse_worksheet(worksheet, today=today)
    finally:
        workbook.close()
