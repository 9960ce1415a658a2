"""Sales CRM toolkit: workbook import, dashboard aggregation, and exports."""
from salesdesk.core import CrmState, configure_logging
from salesdesk.ingestion import ImportResult, import_workbook, parse_worksheet
from salesdesk.processing import build_dashboard, certification_price, order_table
from salesdesk.processing.pipeline import run_import

__all__ = [
    "CrmState",
    "ImportResult",
    "build_dashboard",
    "certification_price",
    "configure_logging",
    "import_workbook",
    "order_table",
    "parse_worksheet",
    "run_import",
]
