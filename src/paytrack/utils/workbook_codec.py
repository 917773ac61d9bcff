"""Spreadsheet codec: workbook bytes <-> header-keyed rows.

Reading mirrors the usual "sheet to JSON" convention: the first non-empty
row is the header row, every later non-blank row becomes a dict keyed by
header. Empty header cells are named ``__EMPTY``, ``__EMPTY_1`` and so on,
and repeated headers get ``_1``, ``_2`` suffixes.
"""

import io
import zipfile
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from paytrack.domain.errors import WorkbookFormatError

EMPTY_HEADER = "__EMPTY"


@dataclass(frozen=True)
class Sheet:
    """One worksheet as header-keyed rows.

    ``row_numbers`` holds the visible spreadsheet row of each entry in
    ``rows``. When omitted, rows are numbered from 2 (row 1 is the header).
    ``source_headers`` holds the header cells as written, before blank and
    repeated headers were renamed.
    """

    name: str
    headers: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]
    row_numbers: tuple[int, ...] = ()
    source_headers: tuple[str, ...] = ()

    def numbered_rows(self) -> Iterator[tuple[int, dict[str, Any]]]:
        """Yield (spreadsheet row number, row) pairs."""
        numbers: Sequence[int] = self.row_numbers or range(2, len(self.rows) + 2)
        return zip(numbers, self.rows)

    def repeated_headers(self) -> dict[str, str]:
        """Map each suffixed duplicate header to the header text it repeats."""
        if not self.source_headers:
            return {}
        return {
            header: source
            for header, source in zip(self.headers, self.source_headers)
            if header != source and source != EMPTY_HEADER
        }


@dataclass(frozen=True)
class Workbook:
    """Decoded workbook: sheet names in file order plus their contents."""

    sheet_names: tuple[str, ...]
    sheets: dict[str, Sheet]

    def __iter__(self) -> Iterator[Sheet]:
        for name in self.sheet_names:
            yield self.sheets[name]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _header_text(cell: Any) -> str:
    return EMPTY_HEADER if _is_blank(cell) else str(cell).strip()


def _build_headers(cells: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for cell in cells:
        base = _header_text(cell)
        count = seen.get(base, 0)
        seen[base] = count + 1
        headers.append(base if count == 0 else f"{base}_{count}")
    return headers


def _read_sheet(worksheet) -> Sheet:
    headers: Optional[list[str]] = None
    source_headers: list[str] = []
    rows: list[dict[str, Any]] = []
    row_numbers: list[int] = []

    for row_number, values in enumerate(worksheet.iter_rows(values_only=True), start=1):
        if all(_is_blank(v) for v in values):
            continue

        if headers is None:
            headers = _build_headers(values)
            source_headers = [_header_text(v) for v in values]
            continue

        row: dict[str, Any] = {}
        for header, value in zip(headers, values):
            if value is not None:
                row[header] = value
        rows.append(row)
        row_numbers.append(row_number)

    return Sheet(
        name=worksheet.title,
        headers=tuple(headers or ()),
        rows=tuple(rows),
        row_numbers=tuple(row_numbers),
        source_headers=tuple(source_headers),
    )


def read_workbook(data: bytes) -> Workbook:
    """Decode workbook bytes into sheets of header-keyed rows.

    Args:
        data: Raw .xlsx bytes

    Returns:
        Workbook with one Sheet per worksheet, in file order

    Raises:
        WorkbookFormatError: If the bytes are not a readable workbook
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError) as e:
        raise WorkbookFormatError(f"Could not read workbook: {e}") from e

    sheets = {ws.title: _read_sheet(ws) for ws in wb.worksheets}
    names = tuple(ws.title for ws in wb.worksheets)
    wb.close()
    return Workbook(sheet_names=names, sheets=sheets)


def write_workbook(sheets: Sequence[tuple[str, Sequence[Any], Sequence[Sequence[Any]]]]) -> bytes:
    """Encode sheets to .xlsx bytes.

    Args:
        sheets: (sheet name, header row, data rows) per worksheet, in order

    Returns:
        Workbook bytes
    """
    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    for name, header, rows in sheets:
        ws = wb.create_sheet(title=name)
        ws.append(list(header))
        for row in rows:
            ws.append(list(row))
        ws.freeze_panes = "A2"

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
