"""Domain model entities for paytrack.

These are pure data classes representing business concepts, independent of
database schema. Import planning values (ParsedRecord, SheetPlan,
ImportPlan) are frozen so a plan shown to the user cannot change between
preview and execution.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class ColumnKind(Enum):
    """How a spreadsheet column is treated during import."""

    RESERVED = "reserved"
    EARNING = "earning"
    DEDUCTION = "deduction"


class SummaryGroupBy(Enum):
    """Grouping modes for salary summaries."""

    ORGANIZATION = "organization"
    FINANCIAL_YEAR = "financial-year"
    CATEGORY = "category"


@dataclass(frozen=True)
class LineItem:
    """One earning or deduction amount on a payslip."""

    category: str
    amount: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class SalaryRecord:
    """Salary record domain entity, unique per (user_id, month, year)."""

    id: int
    user_id: str
    month: int
    year: int
    organization: Optional[str]
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    gross_salary: Decimal
    notes: Optional[str]
    payslip_url: Optional[str]
    created_at: datetime
    updated_at: datetime
    earnings: tuple[LineItem, ...] = ()
    deductions: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class OrganizationTemplate:
    """Saved earning/deduction category lists for one employer."""

    id: int
    user_id: str
    name: str
    earning_categories: tuple[str, ...]
    deduction_categories: tuple[str, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class EmploymentRecord:
    """Employment history entry."""

    id: int
    user_id: str
    organization: str
    employee_id: Optional[str]
    joining_date: date
    leaving_date: Optional[date]
    notes: Optional[str]


@dataclass(frozen=True)
class BudgetSnapshot:
    """Saved monthly budget plan."""

    id: int
    user_id: str
    month: int
    year: int
    net_income: Decimal
    total_allocated: Decimal
    remaining: Decimal
    categories: list[Any]
    saved_at: datetime


@dataclass(frozen=True)
class Profile:
    """User profile details."""

    user_id: str
    full_name: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class ParsedRecord:
    """One organization-month-year payslip derived from one spreadsheet row."""

    organization: str
    month: int
    year: int
    earnings: tuple[LineItem, ...]
    deductions: tuple[LineItem, ...]
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    row_number: int = 0


@dataclass(frozen=True)
class InvalidRow:
    """A spreadsheet row that could not be imported, with its visible row number."""

    sheet_name: str
    excel_row_number: int
    reason: str


@dataclass(frozen=True)
class SheetPlan:
    """Parsed records and skip count for one worksheet."""

    sheet_name: str
    records: tuple[ParsedRecord, ...]
    skipped_rows: int


@dataclass(frozen=True)
class ImportPlan:
    """Side-effect-free preview of a workbook import.

    ``bound_violations`` lists records that parsed but will be skipped by the
    executor because a month, year, or amount is outside the allowed range.
    They are still counted in ``total_records_to_import``.
    """

    sheets: tuple[SheetPlan, ...]
    total_records_to_import: int
    total_skipped_rows: int
    invalid_rows: tuple[InvalidRow, ...]
    bound_violations: tuple[InvalidRow, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.sheets) == 0

    @property
    def records_to_write(self) -> int:
        """Records the executor will actually write (bound violations excluded)."""
        return self.total_records_to_import - len(self.bound_violations)


@dataclass(frozen=True)
class ImportSummarySheet:
    """Per-sheet outcome of an executed import."""

    sheet_name: str
    records_imported: int
    skipped_rows: int


@dataclass(frozen=True)
class ImportSummary:
    """Outcome of an executed import."""

    total_templates: int
    total_records: int
    total_skipped_rows: int
    sheets: tuple[ImportSummarySheet, ...]
    skipped_records: tuple[InvalidRow, ...] = ()


@dataclass(frozen=True)
class BackupCounts:
    """Number of entities of each kind in a backup document."""

    templates: int = 0
    salary_records: int = 0
    employment_history: int = 0
    profile_entries: int = 0
    budget_history: int = 0

    @property
    def total(self) -> int:
        return (
            self.templates
            + self.salary_records
            + self.employment_history
            + self.profile_entries
            + self.budget_history
        )


@dataclass(frozen=True)
class OrganizationSummary:
    """Aggregated totals for one organization."""

    organization: str
    gross: Decimal
    deductions: Decimal
    net: Decimal
    months: int


@dataclass(frozen=True)
class FinancialYearSummary:
    """Aggregated totals for one April-March financial year."""

    financial_year: str
    gross: Decimal
    deductions: Decimal
    net: Decimal
    income_tax: Decimal
    months: int


@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount for one earning or deduction category."""

    kind: ColumnKind
    category: str
    amount: Decimal
    occurrences: int


@dataclass(frozen=True)
class SalarySummary:
    """Summary report rows for one grouping mode."""

    group_by: SummaryGroupBy
    organization: Optional[str]
    financial_year: Optional[str]
    rows: tuple[Any, ...] = field(default_factory=tuple)
