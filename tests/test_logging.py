"""Logging coverage to ensure import problems are surfaced."""
from pathlib import Path

import pytest

import salesdesk.ingestion.workbook as workbook
import salesdesk.processing.pipeline as pipeline
from salesdesk.core.utils import get_int_config


def test_pipeline_logs_summary(tmp_path: Path, sample_workbook: Path, caplog):
    """Running the import should emit a helpful summary message."""

    output_path = tmp_path / "output.csv"
    caplog.set_level("INFO")

    pipeline.run_import(sample_workbook, output_path)

    assert any("Wrote CSV output" in message for message in caplog.messages)
    assert any("Imported 2 customers and 1 product families" in message for message in caplog.messages)


def test_import_warnings_are_logged_as_alerts(tmp_path: Path, save_workbook, caplog):
    source = save_workbook({"D2": "Acme"}, name="no_families.xlsx")
    caplog.set_level("WARNING")

    with pytest.raises(ValueError):
        pipeline.run_import(source, tmp_path / "output.csv")

    assert f"Alert: {workbook.NO_FAMILIES_MESSAGE}" in caplog.messages


def test_unreadable_workbook_is_logged(tmp_path: Path, caplog):
    broken = tmp_path / "broken.xlsx"
    broken.write_bytes(b"garbage")
    caplog.set_level("ERROR")

    result = workbook.import_workbook(broken)

    assert result.errors == [workbook.LOAD_FAILED_MESSAGE]
    assert "broken.xlsx" in caplog.text


def test_bad_integer_setting_falls_back_with_warning(monkeypatch, caplog):
    monkeypatch.setenv("SALESDESK_RECENT_LIMIT", "ten")
    caplog.set_level("WARNING")

    assert get_int_config("SALESDESK_RECENT_LIMIT", 10) == 10
    assert "SALESDESK_RECENT_LIMIT" in caplog.text
