"""Command line entry point for importing price-list workbooks."""
import argparse
from pathlib import Path

from salesdesk.core.logging import configure_logging
from salesdesk.processing.calculator import certification_price
from salesdesk.processing.pipeline import run_import


def build_parser() -> argparse.ArgumentParser:
    """Create a small argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Import a price-list workbook into CRM tables")
    parser.add_argument(
        "--workbook",
        type=Path,
        help="Excel workbook (.xlsx) with customers in row 2 and prices below",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/price_list.csv"),
        help="CSV file to write the price list to (customers go next to it)",
    )
    parser.add_argument(
        "--sink",
        choices=["csv", "sheets", "excel"],
        default="csv",
        help="Where to forward price list rows after writing the CSV",
    )
    parser.add_argument(
        "--spreadsheet-id",
        help="Google Sheets spreadsheet ID for the sheets sink",
    )
    parser.add_argument(
        "--worksheet",
        default="Sheet1",
        help="Worksheet title inside the Google Sheets document",
    )
    parser.add_argument(
        "--service-account",
        type=Path,
        help="Path to a Google service account JSON key used for Sheets pushes",
    )
    parser.add_argument(
        "--excel-output",
        type=Path,
        default=Path("output/price_list.xlsx"),
        help="Excel file to write when --sink=excel",
    )
    parser.add_argument(
        "--certification-value",
        type=float,
        help="Print the certification-of-origin price for this invoice value and exit",
    )
    return parser


def main() -> None:
    """Entrypoint for running the import from the command line."""

    configure_logging()
    parser = build_parser()
    args = parser.parse_args()

    if args.certification_value is not None:
        try:
            price = certification_price(args.certification_value)
        except ValueError as exc:
            parser.error(str(exc))
        print(f"Certification price: €{price:.2f}")
        return

    if args.workbook is None:
        parser.error("--workbook is required unless --certification-value is given")

    output_path = run_import(
        args.workbook,
        args.output,
        sink=args.sink,
        spreadsheet_id=args.spreadsheet_id,
        worksheet_title=args.worksheet,
        service_account_path=args.service_account,
        excel_path=args.excel_output,
    )
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
