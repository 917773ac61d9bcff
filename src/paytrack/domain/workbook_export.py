"""Workbook export domain service."""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from paytrack.database.base import Database
from paytrack.domain.classifier import normalize_organization_name
from paytrack.domain.entities import SalaryRecord
from paytrack.domain.errors import NotFoundError
from paytrack.domain.import_plan import TOTAL_DEDUCTIONS_HEADER, TOTAL_EARNINGS_HEADER
from paytrack.utils.month_parser import format_month_year
from paytrack.utils.workbook_codec import write_workbook

logger = logging.getLogger(__name__)

MONTH_YEAR_HEADER = "Month Year"
NET_PAY_HEADER = "Net Pay"
RARE_CATEGORY_THRESHOLD = 3
MAX_SHEET_TITLE = 31

_INVALID_TITLE_CHARS = re.compile(r"[\\/?*\[\]:]")

SAMPLE_SHEET_NAME = "SalaryTemplate"
SAMPLE_HEADERS = (
    MONTH_YEAR_HEADER,
    "Basic Salary",
    "HRA",
    "Bonus",
    "Income Tax",
    "Provident Fund",
    TOTAL_EARNINGS_HEADER,
    TOTAL_DEDUCTIONS_HEADER,
    NET_PAY_HEADER,
)
SAMPLE_ROW = ("JAN 2025", 80000, 32000, 10000, 18000, 9600, 122000, 27600, 94400)


def sheet_title(organization: str) -> str:
    """Make a valid worksheet title from an organization name."""
    title = _INVALID_TITLE_CHARS.sub("-", organization)[:MAX_SHEET_TITLE]
    return title or "Organisation"


@dataclass
class _OrganizationRows:
    records: list[SalaryRecord] = field(default_factory=list)
    earning_counts: dict[str, int] = field(default_factory=dict)
    deduction_counts: dict[str, int] = field(default_factory=dict)

    def add(self, record: SalaryRecord) -> None:
        self.records.append(record)
        for item in record.earnings:
            self.earning_counts[item.category] = self.earning_counts.get(item.category, 0) + 1
        for item in record.deductions:
            self.deduction_counts[item.category] = self.deduction_counts.get(item.category, 0) + 1


def _select_categories(counts: dict[str, int], include_rare: bool) -> list[str]:
    categories = sorted(counts)
    if include_rare:
        return categories
    return [c for c in categories if counts[c] >= RARE_CATEGORY_THRESHOLD]


def _amounts(items, categories: list[str]) -> list[Decimal]:
    by_category = {item.category: item.amount for item in items}
    return [by_category.get(c, Decimal(0)) for c in categories]


class WorkbookExportService:
    """Service for exporting salary records as a re-importable workbook."""

    def __init__(self, db: Database):
        """Initialize workbook export service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_workbook(
        self,
        user_id: str,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
        include_rare_earnings: bool = True,
        include_rare_deductions: bool = True,
    ) -> bytes:
        """Export a user's salary records, one worksheet per organization.

        Each sheet has the columns Month Year, the sorted earning
        categories, the sorted deduction categories, Total Earnings, Total
        Deductions and Net Pay, with one row per month in date order.

        Args:
            user_id: Owner of the records
            year_from: Optional first year to include
            year_to: Optional last year to include
            include_rare_earnings: If False, drop earning categories used in
                fewer than RARE_CATEGORY_THRESHOLD records of the organization
            include_rare_deductions: Same, for deduction categories

        Returns:
            Workbook bytes

        Raises:
            NotFoundError: If no records match
        """
        records = self.db.list_salary_records(user_id, year_from=year_from, year_to=year_to)
        if not records:
            if year_from is not None or year_to is not None:
                raise NotFoundError("No salary records found for the selected year range")
            raise NotFoundError("No salary records available to export")

        organizations: dict[str, _OrganizationRows] = {}
        for record in records:
            name = normalize_organization_name(record.organization)
            organizations.setdefault(name, _OrganizationRows()).add(record)

        sheets: list[tuple[str, list[str], list[list[Any]]]] = []
        for name, data in organizations.items():
            earning_categories = _select_categories(data.earning_counts, include_rare_earnings)
            deduction_categories = _select_categories(data.deduction_counts, include_rare_deductions)

            header = [
                MONTH_YEAR_HEADER,
                *earning_categories,
                *deduction_categories,
                TOTAL_EARNINGS_HEADER,
                TOTAL_DEDUCTIONS_HEADER,
                NET_PAY_HEADER,
            ]
            rows = [
                [
                    format_month_year(r.month, r.year),
                    *_amounts(r.earnings, earning_categories),
                    *_amounts(r.deductions, deduction_categories),
                    r.total_earnings,
                    r.total_deductions,
                    r.net_salary,
                ]
                for r in sorted(data.records, key=lambda r: (r.year, r.month))
            ]
            sheets.append((sheet_title(name), header, rows))

        logger.info(f"Exporting {len(records)} records in {len(sheets)} sheets")
        return write_workbook(sheets)

    def sample_workbook(self) -> bytes:
        """Return a one-row starter workbook showing the expected layout."""
        return write_workbook([(SAMPLE_SHEET_NAME, SAMPLE_HEADERS, [SAMPLE_ROW])])
