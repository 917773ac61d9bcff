"""Dry-run planning for bulk payslip imports.

Everything here is a pure function of the decoded workbook and a category
registry. Nothing reads from or writes to the database; the resulting
ImportPlan is what the user confirms before ImportExecutor touches storage.
"""

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from paytrack.domain.classifier import DEFAULT_REGISTRY, CategoryRegistry, classify
from paytrack.domain.entities import (
    ColumnKind,
    ImportPlan,
    InvalidRow,
    LineItem,
    ParsedRecord,
    SheetPlan,
)
from paytrack.utils.amount_parser import coerce_cell_amount
from paytrack.utils.month_parser import parse_month_year
from paytrack.utils.workbook_codec import Sheet, Workbook

logger = logging.getLogger(__name__)

TOTAL_EARNINGS_HEADER = "Total Earnings"
TOTAL_DEDUCTIONS_HEADER = "Total Deductions"
NET_SALARY_HEADERS = ("Net Salary", "Net Pay")

MAX_AMOUNT = Decimal(100_000_000)
MIN_YEAR = 2000
MAX_YEAR = 2100

MISSING_MONTH_YEAR = "Missing Month/Year value"


def find_month_year_header(headers: Iterable[str]) -> Optional[str]:
    """Return the first header mentioning both "month" and "year", else the first header."""
    headers = list(headers)
    for header in headers:
        lowered = header.lower()
        if "month" in lowered and "year" in lowered:
            return header
    return headers[0] if headers else None


def reserved_headers_for(month_year_header: Optional[str]) -> frozenset[str]:
    """Build the reserved header set for a sheet."""
    reserved = {TOTAL_EARNINGS_HEADER, TOTAL_DEDUCTIONS_HEADER, *NET_SALARY_HEADERS}
    if month_year_header is not None:
        reserved.add(month_year_header)
    return frozenset(reserved)


def parse_row(
    row: dict[str, Any],
    row_number: int,
    organization: str,
    month_year_header: Optional[str],
    reserved_headers: frozenset[str],
    org_earnings: tuple[str, ...] = (),
    org_deductions: tuple[str, ...] = (),
    repeated_headers: Optional[Mapping[str, str]] = None,
) -> Union[ParsedRecord, InvalidRow]:
    """Convert one spreadsheet row into a ParsedRecord or an InvalidRow.

    Args:
        row: Header-keyed cell values, in column order
        row_number: Visible spreadsheet row (header is row 1)
        organization: Organization name (the sheet name)
        month_year_header: Header of the Month/Year column
        reserved_headers: Headers never treated as categories
        org_earnings: Organization's known earning categories
        org_deductions: Organization's known deduction categories
        repeated_headers: Suffixed duplicate headers mapped to the header
            they repeat. A repeat names the same category; it is a
            deduction when the organization lists that category as one,
            since exported sheets put earning columns first.

    Returns:
        ParsedRecord for a usable row, InvalidRow when Month/Year is missing
        or unparsable
    """
    raw_period = row.get(month_year_header) if month_year_header is not None else None
    # Blank text and numeric 0 count as an empty cell
    if not raw_period or (isinstance(raw_period, str) and not raw_period.strip()):
        return InvalidRow(organization, row_number, MISSING_MONTH_YEAR)

    period = parse_month_year(raw_period)
    if period is None:
        return InvalidRow(organization, row_number, f"Invalid Month/Year format: {raw_period}")
    month, year = period

    earnings: list[LineItem] = []
    deductions: list[LineItem] = []
    total_earnings = Decimal(0)
    total_deductions = Decimal(0)
    net_salary = Decimal(0)

    for header, value in row.items():
        amount = coerce_cell_amount(value)

        if amount is not None:
            if header == TOTAL_EARNINGS_HEADER:
                total_earnings = amount
                continue
            if header == TOTAL_DEDUCTIONS_HEADER:
                total_deductions = amount
                continue
            if header in NET_SALARY_HEADERS:
                net_salary = amount
                continue

        # Absent or zero cells never become line items
        if amount is None or amount == 0:
            continue

        category = header
        if repeated_headers and header in repeated_headers:
            category = repeated_headers[header]
            if category in org_deductions and category not in reserved_headers:
                deductions.append(LineItem(category=category, amount=amount))
                continue

        kind = classify(category, reserved_headers, org_earnings, org_deductions)
        if kind is ColumnKind.EARNING:
            earnings.append(LineItem(category=category, amount=amount))
        elif kind is ColumnKind.DEDUCTION:
            deductions.append(LineItem(category=category, amount=amount))

    return ParsedRecord(
        organization=organization,
        month=month,
        year=year,
        earnings=tuple(earnings),
        deductions=tuple(deductions),
        total_earnings=total_earnings,
        total_deductions=total_deductions,
        net_salary=net_salary,
        row_number=row_number,
    )


def check_record_bounds(record: ParsedRecord) -> Optional[str]:
    """Return why a record falls outside the storable range, or None if it fits.

    Month must be 1-12, year 2000-2100, declared earning and deduction
    totals and every line item amount within 0-100,000,000.
    """
    if not 1 <= record.month <= 12 or not MIN_YEAR <= record.year <= MAX_YEAR:
        return f"Month/Year out of range: {record.month:02d}/{record.year}"

    if not record.net_salary.is_finite():
        return "Net Salary is not a finite number"

    for label, total in (
        (TOTAL_EARNINGS_HEADER, record.total_earnings),
        (TOTAL_DEDUCTIONS_HEADER, record.total_deductions),
    ):
        if not total.is_finite() or total < 0 or total > MAX_AMOUNT:
            return f"{label} out of range: {total}"

    for item in (*record.earnings, *record.deductions):
        if not item.amount.is_finite() or item.amount < 0 or item.amount > MAX_AMOUNT:
            return f"Amount for '{item.category}' out of range: {item.amount}"

    return None


def plan_sheet(
    sheet: Sheet, registry: CategoryRegistry = DEFAULT_REGISTRY
) -> tuple[SheetPlan, list[InvalidRow]]:
    """Run the row parser over every data row of one sheet.

    Args:
        sheet: Decoded worksheet; its name is the organization
        registry: Known category lists per organization

    Returns:
        Tuple of (SheetPlan, invalid rows of this sheet)
    """
    organization = sheet.name
    records: list[ParsedRecord] = []
    invalid_rows: list[InvalidRow] = []

    if not sheet.rows:
        return SheetPlan(sheet_name=organization, records=(), skipped_rows=0), invalid_rows

    month_year_header = find_month_year_header(sheet.headers)
    reserved = reserved_headers_for(month_year_header)
    known = registry.get(organization)
    repeated = sheet.repeated_headers()

    for row_number, row in sheet.numbered_rows():
        result = parse_row(
            row,
            row_number,
            organization,
            month_year_header,
            reserved,
            known.earnings,
            known.deductions,
            repeated,
        )
        if isinstance(result, InvalidRow):
            logger.debug(f"Sheet '{organization}' row {row_number}: {result.reason}")
            invalid_rows.append(result)
        else:
            records.append(result)

    plan = SheetPlan(
        sheet_name=organization,
        records=tuple(records),
        skipped_rows=len(invalid_rows),
    )
    return plan, invalid_rows


def build_import_plan(
    workbook: Workbook, registry: CategoryRegistry = DEFAULT_REGISTRY
) -> ImportPlan:
    """Build the dry-run plan for every sheet of a workbook.

    Sheets yielding neither records nor invalid rows (cover pages, empty
    sheets) are left out of the plan.

    Args:
        workbook: Decoded workbook
        registry: Known category lists per organization

    Returns:
        Immutable ImportPlan
    """
    sheets: list[SheetPlan] = []
    invalid_rows: list[InvalidRow] = []
    bound_violations: list[InvalidRow] = []

    for sheet in workbook:
        plan, sheet_invalid = plan_sheet(sheet, registry)
        if not plan.records and not sheet_invalid:
            logger.debug(f"Skipping sheet '{sheet.name}': no salary rows")
            continue

        sheets.append(plan)
        invalid_rows.extend(sheet_invalid)
        for record in plan.records:
            reason = check_record_bounds(record)
            if reason is not None:
                bound_violations.append(InvalidRow(plan.sheet_name, record.row_number, reason))

    plan = ImportPlan(
        sheets=tuple(sheets),
        total_records_to_import=sum(len(s.records) for s in sheets),
        total_skipped_rows=sum(s.skipped_rows for s in sheets),
        invalid_rows=tuple(invalid_rows),
        bound_violations=tuple(bound_violations),
    )
    logger.info(
        f"Planned import: {plan.total_records_to_import} records from {len(sheets)} sheets, "
        f"{plan.total_skipped_rows} rows skipped"
    )
    return plan
