"""Tests for running the import pipeline end-to-end into CSV outputs."""
import csv
from pathlib import Path

import pytest
from openpyxl import load_workbook

from salesdesk.processing import pipeline
from salesdesk.processing.pipeline import customers_output_path, run_import
from salesdesk.reporting.templates import CUSTOMER_HEADERS, PRICE_LIST_HEADERS


def _read_rows(path: Path) -> list[dict[str, str]]:
    return list(csv.DictReader(path.read_text(encoding="utf-8").splitlines()))


def test_run_import_writes_price_list_and_customers(tmp_path: Path, sample_workbook: Path):
    output_path = tmp_path / "out" / "price_list.csv"

    returned = run_import(sample_workbook, output_path)

    assert returned == output_path
    rows = _read_rows(output_path)
    assert list(rows[0].keys()) == PRICE_LIST_HEADERS
    assert [(row["Customer"], row["Price"]) for row in rows] == [("Acme", "10.00"), ("GlobalOEM", "15.00")]
    assert {row["Base_Price"] for row in rows} == {"15.00"}

    customers_path = tmp_path / "out" / "price_list_customers.csv"
    assert customers_output_path(output_path) == customers_path
    customers = _read_rows(customers_path)
    assert list(customers[0].keys()) == CUSTOMER_HEADERS
    assert [(row["ID"], row["Type"]) for row in customers] == [("customer-1", "Customer"), ("oem-1", "OEM")]


def test_run_import_errors_when_nothing_can_be_applied(tmp_path: Path, save_workbook) -> None:
    workbook = save_workbook({"D2": "Acme"}, name="customers_only.xlsx")
    output_path = tmp_path / "price_list.csv"

    with pytest.raises(ValueError, match="Nothing to import"):
        run_import(workbook, output_path)

    assert not output_path.exists()


def test_run_import_rejects_unreadable_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.xlsx"
    broken.write_bytes(b"not a workbook")

    with pytest.raises(ValueError, match="0 customers and 0 product families"):
        run_import(broken, tmp_path / "price_list.csv")


def test_excel_sink_mirrors_price_list(tmp_path: Path, sample_workbook: Path):
    excel_output = tmp_path / "price_list.xlsx"

    run_import(sample_workbook, tmp_path / "price_list.csv", sink="excel", excel_path=excel_output)

    sheet = load_workbook(excel_output).active
    assert sheet.title == "price_list"
    assert [cell.value for cell in sheet[1]] == PRICE_LIST_HEADERS
    assert sheet.max_row - 1 == 2


def test_sheets_sink_requires_spreadsheet_id(tmp_path: Path, sample_workbook: Path, fake_service_account_file: Path):
    with pytest.raises(ValueError, match="spreadsheet_id"):
        run_import(
            sample_workbook,
            tmp_path / "price_list.csv",
            sink="sheets",
            service_account_path=fake_service_account_file,
        )


def test_sheets_sink_pushes_price_rows(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_workbook: Path, fake_service_account_file: Path
):
    captured: dict = {}

    def fake_push(rows, **kwargs):
        captured["rows"] = list(rows)
        captured.update(kwargs)

    monkeypatch.setattr(pipeline, "push_to_google_sheets", fake_push)

    run_import(
        sample_workbook,
        tmp_path / "price_list.csv",
        sink="sheets",
        spreadsheet_id="sheet-123",
        worksheet_title="Prices",
        service_account_path=fake_service_account_file,
    )

    assert len(captured["rows"]) == 2
    assert captured["spreadsheet_id"] == "sheet-123"
    assert captured["worksheet_title"] == "Prices"
    assert captured["service_account_path"] == fake_service_account_file


def test_auto_sync_pushes_when_enabled(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_workbook: Path, fake_service_account_file: Path
):
    pushed: list = []
    monkeypatch.setenv("GOOGLE_SHEETS_AUTO_SYNC", "1")
    monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "auto-sheet")
    monkeypatch.setenv("GOOGLE_SHEETS_SERVICE_ACCOUNT", str(fake_service_account_file))
    monkeypatch.setattr(pipeline, "push_to_google_sheets", lambda rows, **kwargs: pushed.append((list(rows), kwargs)))

    run_import(sample_workbook, tmp_path / "price_list.csv")

    (rows, kwargs) = pushed[0]
    assert len(rows) == 2
    assert kwargs["spreadsheet_id"] == "auto-sheet"
    assert kwargs["worksheet_title"] == "Sheet1"


def test_auto_sync_skips_without_spreadsheet(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_workbook: Path):
    pushed: list = []
    monkeypatch.setenv("GOOGLE_SHEETS_AUTO_SYNC", "1")
    monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
    monkeypatch.setattr(pipeline, "push_to_google_sheets", lambda rows, **kwargs: pushed.append(rows))

    run_import(sample_workbook, tmp_path / "price_list.csv")

    assert pushed == []
