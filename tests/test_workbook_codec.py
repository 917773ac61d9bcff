"""Tests for the spreadsheet codec."""

import io

import openpyxl
import pytest

from paytrack.domain.errors import WorkbookFormatError
from paytrack.utils.workbook_codec import Sheet, read_workbook, write_workbook


def _workbook_bytes(build) -> bytes:
    """Build a workbook with openpyxl directly and return its bytes."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    build(wb)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def test_write_then_read_keeps_sheets_and_order():
    """Sheets come back in file order with header-keyed rows."""
    data = write_workbook(
        [
            ("TCS", ["Month Year", "Basic Salary"], [["JAN 2025", 80000]]),
            ("RBS", ["Month Year", "Basic Pay"], [["FEB 2025", 90000], ["MAR 2025", 91000]]),
        ]
    )

    workbook = read_workbook(data)

    assert workbook.sheet_names == ("TCS", "RBS")
    assert [s.name for s in workbook] == ["TCS", "RBS"]
    assert workbook.sheets["TCS"].headers == ("Month Year", "Basic Salary")
    assert workbook.sheets["TCS"].rows == ({"Month Year": "JAN 2025", "Basic Salary": 80000},)
    assert len(workbook.sheets["RBS"].rows) == 2


def test_blank_rows_skipped_but_row_numbers_kept():
    """Row numbers are the visible spreadsheet rows."""

    def build(wb):
        ws = wb.create_sheet("TCS")
        ws.append(["Month Year", "Basic Salary"])
        ws.append(["JAN 2025", 100])
        ws.append([None, None])
        ws.append(["MAR 2025", 300])

    sheet = read_workbook(_workbook_bytes(build)).sheets["TCS"]

    assert [n for n, _ in sheet.numbered_rows()] == [2, 4]


def test_header_row_is_first_non_empty_row():
    def build(wb):
        ws = wb.create_sheet("TCS")
        ws.append([None, None])
        ws.append(["Month Year", "HRA"])
        ws.append(["JAN 2025", 32000])

    sheet = read_workbook(_workbook_bytes(build)).sheets["TCS"]

    assert sheet.headers == ("Month Year", "HRA")
    assert list(sheet.numbered_rows()) == [(3, {"Month Year": "JAN 2025", "HRA": 32000})]


def test_empty_and_duplicate_headers_are_named():
    def build(wb):
        ws = wb.create_sheet("TCS")
        ws.append(["Month Year", None, "Bonus", "Bonus", None])
        ws.append(["JAN 2025", 1, 2, 3, 4])

    sheet = read_workbook(_workbook_bytes(build)).sheets["TCS"]

    assert sheet.headers == ("Month Year", "__EMPTY", "Bonus", "Bonus_1", "__EMPTY_1")
    assert sheet.rows[0]["Bonus_1"] == 3
    assert sheet.repeated_headers() == {"Bonus_1": "Bonus"}


def test_repeated_headers_without_source_headers():
    sheet = Sheet(name="TCS", headers=("Bonus", "Bonus_1"), rows=())
    assert sheet.repeated_headers() == {}


def test_empty_cells_are_omitted():
    def build(wb):
        ws = wb.create_sheet("TCS")
        ws.append(["Month Year", "HRA", "Bonus"])
        ws.append(["JAN 2025", None, 5])

    sheet = read_workbook(_workbook_bytes(build)).sheets["TCS"]

    assert sheet.rows[0] == {"Month Year": "JAN 2025", "Bonus": 5}


def test_empty_sheet():
    def build(wb):
        wb.create_sheet("Cover")

    sheet = read_workbook(_workbook_bytes(build)).sheets["Cover"]

    assert sheet.headers == ()
    assert sheet.rows == ()


def test_default_row_numbers_start_at_two():
    sheet = Sheet(name="TCS", headers=("A",), rows=({"A": 1}, {"A": 2}))
    assert [n for n, _ in sheet.numbered_rows()] == [2, 3]


@pytest.mark.parametrize("data", [b"", b"not a workbook", b"PK\x03\x04garbage"])
def test_unreadable_bytes(data):
    """Test that non-workbook bytes raise WorkbookFormatError."""
    with pytest.raises(WorkbookFormatError):
        read_workbook(data)
