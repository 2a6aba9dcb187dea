"""Unit tests for upload source readers."""

from __future__ import annotations

import pytest
from openpyxl import Workbook

from core.config import SalesboardConfig
from core.errors import SalesboardIngestError
from ingest.input_reader import parse_spreadsheet, read_upload_rows
from tests.fixture_paths import sales_upload_source


def _config(tmp_path) -> SalesboardConfig:
    return SalesboardConfig(data_root=tmp_path)


def test_read_upload_rows_parses_csv_and_drops_blank_rows(tmp_path) -> None:
    """CSV upload should keep header-keyed rows and skip empty lines."""
    rows = read_upload_rows(sales_upload_source(), _config(tmp_path))

    assert len(rows) == 6 and rows[0]["Sold Price"] == "$200,000"


def test_read_upload_rows_omits_blank_cells(tmp_path) -> None:
    """Blank cells should be absent from the parsed row."""
    rows = read_upload_rows(sales_upload_source(), _config(tmp_path))

    assert "Subdivision" not in rows[3]


def test_read_upload_rows_parses_first_worksheet(tmp_path) -> None:
    """Workbook upload should read the first sheet with its header row."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Address", "Closed Date", "Sold Price", "City"])
    sheet.append(["12 Oak St", "2022-03-15", 200000, "Austin"])
    sheet.append([None, None, None, None])
    sheet.append(["40 Elm Ave", "2023-06-01", 450000, None])
    workbook_path = tmp_path / "sales.xlsx"
    workbook.save(workbook_path)

    rows = read_upload_rows(str(workbook_path), _config(tmp_path))

    assert rows == [
        {
            "Address": "12 Oak St",
            "Closed Date": "2022-03-15",
            "Sold Price": 200000,
            "City": "Austin",
        },
        {"Address": "40 Elm Ave", "Closed Date": "2023-06-01", "Sold Price": 450000},
    ]


def test_read_upload_rows_missing_file_raises_error(tmp_path) -> None:
    """A missing local source should raise an ingest error."""
    with pytest.raises(SalesboardIngestError):
        read_upload_rows(str(tmp_path / "absent.xlsx"), _config(tmp_path))


def test_parse_spreadsheet_rejects_unsupported_extension() -> None:
    """Only spreadsheet extensions should be accepted."""
    with pytest.raises(SalesboardIngestError):
        parse_spreadsheet(b"{}", "sales.json")


def test_parse_spreadsheet_rejects_corrupt_workbook() -> None:
    """Bytes that are not a workbook should raise an ingest error."""
    with pytest.raises(SalesboardIngestError):
        parse_spreadsheet(b"not a zip archive", "sales.xlsx")
