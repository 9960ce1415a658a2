"""Data ingestion package for importing the price-list workbook."""
from salesdesk.ingestion.workbook import ImportResult, import_workbook, parse_worksheet

__all__ = [
    "ImportResult",
    "import_workbook",
    "parse_worksheet",
]
