"""Import pipeline: workbook in, price list and customer tables out."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from salesdesk.core.utils import load_env_file
from salesdesk.ingestion.workbook import import_workbook
from salesdesk.reporting.sinks import push_to_google_sheets, write_csv, write_excel
from salesdesk.reporting.templates import (
    CUSTOMER_HEADERS,
    PRICE_LIST_HEADERS,
    customer_rows,
    price_list_rows,
)

DEFAULT_SERVICE_ACCOUNT_PATHS = [
    Path("secrets/service_account.json"),
    Path("credentials/service_account.json"),
]
DEFAULT_SHEETS_ENV_FILE = Path("secrets/sheets.env")
_SHEETS_ENV_LOADED = False


logger = logging.getLogger(__name__)


def _ensure_sheets_env() -> None:
    """Populate Google Sheets env vars from secrets/sheets.env."""

    global _SHEETS_ENV_LOADED
    if _SHEETS_ENV_LOADED:
        return
    _SHEETS_ENV_LOADED = True

    env_path = Path(os.getenv("GOOGLE_SHEETS_ENV_FILE", DEFAULT_SHEETS_ENV_FILE))
    load_env_file(env_path)


def _default_service_account_path() -> Optional[Path]:
    for candidate in DEFAULT_SERVICE_ACCOUNT_PATHS:
        if candidate.exists():
            return candidate
    return None


def _resolve_sheets_target(
    spreadsheet_id: Optional[str],
    worksheet_title: str,
    explicit_account_path: Optional[Path],
) -> Dict[str, Any]:
    _ensure_sheets_env()
    if not spreadsheet_id:
        raise ValueError("spreadsheet_id is required when sink='sheets'")

    account_path = explicit_account_path or _default_service_account_path()
    if not account_path:
        raise ValueError(
            "Provide --service-account pointing to your Google credentials or place a file at "
            f"{DEFAULT_SERVICE_ACCOUNT_PATHS[0]}"
        )

    return {
        "spreadsheet_id": spreadsheet_id,
        "worksheet_title": worksheet_title,
        "service_account_path": account_path,
    }


def auto_sheets_target() -> Optional[Dict[str, Any]]:
    _ensure_sheets_env()
    if os.getenv("GOOGLE_SHEETS_AUTO_SYNC", "0") != "1":
        return None

    spreadsheet_id = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID")
    if not spreadsheet_id:
        logger.warning("Auto Sheets sync is enabled but GOOGLE_SHEETS_SPREADSHEET_ID is missing.")
        return None

    worksheet = os.getenv("GOOGLE_SHEETS_WORKSHEET", "Sheet1")
    account_env = os.getenv("GOOGLE_SHEETS_SERVICE_ACCOUNT")
    account_path = Path(account_env) if account_env else _default_service_account_path()
    if not account_path:
        logger.warning("Auto Sheets sync is enabled but no service account JSON was found.")
        return None

    return {
        "spreadsheet_id": spreadsheet_id,
        "worksheet_title": worksheet,
        "service_account_path": account_path,
    }


def customers_output_path(output_path: Path) -> Path:
    """Sibling file that receives the customer table next to the price list."""

    return output_path.with_name(f"{output_path.stem}_customers{output_path.suffix or '.csv'}")


def run_import(
    workbook_path: Path,
    output_path: Path,
    sink: str = "csv",
    spreadsheet_id: str | None = None,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
    excel_path: Path | None = None,
) -> Path:
    """Import a price-list workbook and write the price list and customer CSVs."""

    logger.info("Import starting for workbook %s", workbook_path)
    result = import_workbook(workbook_path)
    for message in result.errors:
        logger.warning("Alert: %s", message)

    if not result.can_apply:
        message = (
            f"Nothing to import from {workbook_path}: found {len(result.customers)} customers and "
            f"{len(result.product_families)} product families. "
            "Verify the file follows the price-list layout."
        )
        logger.error(message)
        raise ValueError(message)
    logger.info(
        "Imported %d customers and %d product families (%d products)",
        len(result.customers),
        len(result.product_families),
        result.product_count,
    )

    rows = price_list_rows(result.product_families, result.customers)
    write_csv(rows, output_path, PRICE_LIST_HEADERS)
    logger.info("Wrote CSV output to %s", output_path)
    customers_path = customers_output_path(output_path)
    write_csv(customer_rows(result.customers), customers_path, CUSTOMER_HEADERS)
    logger.info("Wrote customer list to %s", customers_path)

    if sink == "excel":
        excel_target = excel_path or output_path.with_suffix(".xlsx")
        write_excel(rows, excel_target)
        logger.info("Wrote Excel output to %s", excel_target)
    elif sink == "sheets":
        sheets_target = _resolve_sheets_target(
            spreadsheet_id=spreadsheet_id,
            worksheet_title=worksheet_title,
            explicit_account_path=service_account_path,
        )
        _push_rows_to_sheets(rows, sheets_target)
    else:
        _maybe_auto_sync(rows)
    return output_path


def _push_rows_to_sheets(rows: Iterable[Dict[str, Any]], target: Dict[str, Any]) -> None:
    push_to_google_sheets(
        rows,
        spreadsheet_id=target["spreadsheet_id"],
        worksheet_title=target["worksheet_title"],
        service_account_path=target["service_account_path"],
    )


def _maybe_auto_sync(rows: Iterable[Dict[str, Any]]) -> None:
    target = auto_sheets_target()
    if not target:
        return
    rows = list(rows)
    _push_rows_to_sheets(rows, target)
    logger.info(
        "Pushed %d rows to Google Sheets document %s (worksheet %s)",
        len(rows),
        target["spreadsheet_id"],
        target["worksheet_title"],
    )
