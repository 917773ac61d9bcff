"""Salary summary domain service."""

from decimal import Decimal
from typing import Optional, Sequence

from paytrack.database.base import Database
from paytrack.domain.classifier import normalize_organization_name
from paytrack.domain.entities import (
    CategoryTotal,
    ColumnKind,
    FinancialYearSummary,
    OrganizationSummary,
    SalaryRecord,
    SalarySummary,
    SummaryGroupBy,
)
from paytrack.utils.month_parser import financial_year_label, financial_year_start

INCOME_TAX_KEYWORD = "income tax"


def income_tax(record: SalaryRecord) -> Decimal:
    """Sum the record's deductions whose category mentions income tax."""
    return sum(
        (d.amount for d in record.deductions if INCOME_TAX_KEYWORD in d.category.lower()),
        Decimal(0),
    )


class SummaryService:
    """Service for building salary summaries."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_filtered_records(
        self,
        user_id: str,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
    ) -> list[SalaryRecord]:
        """Get records matching summary criteria.

        Organizations are compared after normalization, so "TCS" also
        matches "Tata Consultancy Services".
        """
        records = self.db.list_salary_records(user_id)
        if organization is not None:
            wanted = normalize_organization_name(organization)
            records = [r for r in records if normalize_organization_name(r.organization) == wanted]
        if financial_year is not None:
            records = [r for r in records if financial_year_label(r.month, r.year) == financial_year]
        return records

    def by_organization(
        self,
        user_id: str,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
    ) -> list[OrganizationSummary]:
        """Total gross, deductions and net per organization, by name."""
        records = self.get_filtered_records(user_id, organization, financial_year)
        groups: dict[str, list[SalaryRecord]] = {}
        for record in records:
            groups.setdefault(normalize_organization_name(record.organization), []).append(record)

        return [
            OrganizationSummary(
                organization=name,
                gross=_total(r.gross_salary for r in group),
                deductions=_total(r.total_deductions for r in group),
                net=_total(r.net_salary for r in group),
                months=len(group),
            )
            for name, group in sorted(groups.items())
        ]

    def by_financial_year(
        self,
        user_id: str,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
    ) -> list[FinancialYearSummary]:
        """Total gross, deductions, net and income tax per April-March year, oldest first."""
        records = self.get_filtered_records(user_id, organization, financial_year)
        groups: dict[str, list[SalaryRecord]] = {}
        for record in records:
            groups.setdefault(financial_year_label(record.month, record.year), []).append(record)

        return [
            FinancialYearSummary(
                financial_year=label,
                gross=_total(r.gross_salary for r in group),
                deductions=_total(r.total_deductions for r in group),
                net=_total(r.net_salary for r in group),
                income_tax=_total(income_tax(r) for r in group),
                months=len(group),
            )
            for label, group in sorted(groups.items(), key=lambda item: financial_year_start(item[0]))
        ]

    def by_category(
        self,
        user_id: str,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
    ) -> list[CategoryTotal]:
        """Total per category: earnings first, then deductions, each largest first."""
        records = self.get_filtered_records(user_id, organization, financial_year)
        return _category_totals(records, ColumnKind.EARNING) + _category_totals(
            records, ColumnKind.DEDUCTION
        )

    def build_summary(
        self,
        user_id: str,
        group_by: SummaryGroupBy = SummaryGroupBy.ORGANIZATION,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
    ) -> SalarySummary:
        """Build a summary report for formatting."""
        if group_by == SummaryGroupBy.FINANCIAL_YEAR:
            rows: Sequence = self.by_financial_year(user_id, organization, financial_year)
        elif group_by == SummaryGroupBy.CATEGORY:
            rows = self.by_category(user_id, organization, financial_year)
        else:
            rows = self.by_organization(user_id, organization, financial_year)

        return SalarySummary(
            group_by=group_by,
            organization=organization,
            financial_year=financial_year,
            rows=tuple(rows),
        )


def _total(amounts) -> Decimal:
    return sum(amounts, Decimal(0))


def _category_totals(records: Sequence[SalaryRecord], kind: ColumnKind) -> list[CategoryTotal]:
    amounts: dict[str, Decimal] = {}
    occurrences: dict[str, int] = {}
    for record in records:
        items = record.earnings if kind is ColumnKind.EARNING else record.deductions
        for item in items:
            amounts[item.category] = amounts.get(item.category, Decimal(0)) + item.amount
            occurrences[item.category] = occurrences.get(item.category, 0) + 1

    totals = [
        CategoryTotal(kind=kind, category=c, amount=amounts[c], occurrences=occurrences[c])
        for c in amounts
    ]
    return sorted(totals, key=lambda t: (-t.amount, t.category))
