"""Column classification for payslip spreadsheets.

Payslip column names differ between employers. A column is matched
exactly against the organization's known earning and deduction lists
first, then against a deduction keyword list, and anything left over is
treated as an earning.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from paytrack.domain.entities import ColumnKind, OrganizationTemplate, SalaryRecord

DEDUCTION_KEYWORDS = (
    "tax",
    "pf",
    "provident",
    "esi",
    "insurance",
    "professional",
    "labour",
    "welfare",
    "recovery",
    "loan",
    "tcs",
    "earlier payout",
    "principal",
)


def is_deduction_header(header: str, keywords: Sequence[str] = DEDUCTION_KEYWORDS) -> bool:
    """Return True if the lower-cased header contains any deduction keyword."""
    h = header.lower()
    return any(kw in h for kw in keywords)


def classify(
    header: str,
    reserved_headers: Iterable[str],
    org_earning_categories: Sequence[str],
    org_deduction_categories: Sequence[str],
    keywords: Sequence[str] = DEDUCTION_KEYWORDS,
) -> ColumnKind:
    """Decide whether a column holds an earning, a deduction, or is reserved.

    First match wins: reserved header, exact earning category, exact
    deduction category, deduction keyword, otherwise earning.

    Args:
        header: Column header
        reserved_headers: Headers with a fixed structural meaning
        org_earning_categories: Organization's known earning categories
        org_deduction_categories: Organization's known deduction categories
        keywords: Deduction keywords for the fallback heuristic

    Returns:
        ColumnKind for the column
    """
    if header in reserved_headers:
        return ColumnKind.RESERVED
    if header in org_earning_categories:
        return ColumnKind.EARNING
    if header in org_deduction_categories:
        return ColumnKind.DEDUCTION
    if is_deduction_header(header, keywords):
        return ColumnKind.DEDUCTION
    return ColumnKind.EARNING


@dataclass(frozen=True)
class OrganizationCategories:
    """Known earning and deduction categories for one organization."""

    earnings: tuple[str, ...] = ()
    deductions: tuple[str, ...] = ()


@dataclass(frozen=True)
class CategoryRegistry:
    """Lookup table from organization name to its known category lists.

    Organizations are matched by exact name. Unknown organizations have
    empty lists, which leaves classification to the keyword heuristic.
    """

    organizations: dict[str, OrganizationCategories] = field(default_factory=dict)

    def get(self, organization: str) -> OrganizationCategories:
        return self.organizations.get(organization, OrganizationCategories())

    def names(self) -> list[str]:
        return list(self.organizations)

    def overlay(self, templates: Iterable[OrganizationTemplate]) -> "CategoryRegistry":
        """Return a registry extended with persisted template categories.

        Template categories are appended after the built-in ones for the
        same organization, skipping duplicates.
        """
        return self._merged(
            (t.name, t.earning_categories, t.deduction_categories) for t in templates
        )

    def with_records(self, records: Iterable[SalaryRecord]) -> "CategoryRegistry":
        """Return a registry extended with the categories of stored salary records.

        Records are keyed by their normalized organization name, which is
        also the sheet name the workbook export gives them. A category the
        user filed as a deduction is therefore read back as one even when
        no deduction keyword matches it.
        """
        return self._merged(
            (
                normalize_organization_name(r.organization),
                [i.category for i in r.earnings],
                [i.category for i in r.deductions],
            )
            for r in records
        )

    def _merged(
        self, entries: Iterable[tuple[str, Iterable[str], Iterable[str]]]
    ) -> "CategoryRegistry":
        merged = dict(self.organizations)
        for name, earnings, deductions in entries:
            base = merged.get(name, OrganizationCategories())
            merged[name] = OrganizationCategories(
                earnings=_extend(base.earnings, earnings),
                deductions=_extend(base.deductions, deductions),
            )
        return CategoryRegistry(organizations=merged)


def _extend(existing: tuple[str, ...], extra: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys([*existing, *extra]))


def normalize_organization_name(raw: Optional[str]) -> str:
    """Map common employer spellings onto their registry name.

    Blank names become "Not specified"; unknown names are returned trimmed.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        return "Not specified"

    upper = trimmed.upper()
    if "TATA CONSULTANCY" in upper or upper == "TCS":
        return "TCS"
    if "NATWEST" in upper or "NATIONAL WESTMINSTER" in upper:
        return "NATWEST"
    if "RBS" in upper or "ROYAL BANK OF SCOTLAND" in upper:
        return "RBS"
    if "CITI" in upper or "CITIBANK" in upper:
        return "CITI"
    return trimmed


DEFAULT_REGISTRY = CategoryRegistry(
    organizations={
        "TCS": OrganizationCategories(
            earnings=(
                "Basic Salary",
                "BoB Kitty Allowance",
                "Conveyance Taxable",
                "Conveyance Non Taxable",
                "HRA",
                "Sundry Medical",
                "LTA",
                "Personal Allowance",
                "Miscellaneous",
                "City Allowance",
                "Performance Pay",
                "Leave Encashment",
            ),
            deductions=(
                "Provident Fund",
                "Income Tax",
                "Health Insurance Scheme Premium",
                "Professional Tax",
                "Labour Welfare",
                "Transport Recovery",
                "TCS Welfar Trust",
                "Earlier Payout",
                "Principal Loan Amount",
            ),
        ),
        "RBS": OrganizationCategories(
            earnings=(
                "Basic Pay",
                "Supplementary Allowance",
                "HRA",
                "Statutory Bonus",
                "Oncall Allowance",
                "National Holiday Pay",
                "Ovation Award",
                "Leave Encashment",
                "Vaccine Payout",
                "Shift Allowance",
            ),
            deductions=(
                "Income Tax",
                "Provident Fund",
                "Professional Tax",
                "Hospitalisation Insurance",
                "VPCP Father",
                "VPCP Mother",
                "Life Insurance Topup",
                "VPCP Topup Father",
                "Voluntary PF",
                "Labour Welfare Fund",
            ),
        ),
        "CITI": OrganizationCategories(
            earnings=(
                "Basic",
                "HRA",
                "Special Allowance",
                "Location Premium Alllownace",
                "Holiday Pay",
                "Citi Gratitude Bonus",
                "Award",
            ),
            deductions=(
                "Income Tax",
                "Provident Fund",
                "Mediclaim Premium",
                "Mediclaim Insurance Dependent",
                "Professional Tax",
                "Citi Gratitude Deductions",
                "Insurance OPD Recovery",
            ),
        ),
        "NATWEST": OrganizationCategories(
            earnings=(
                "Base Salary",
                "Supplementary Allowance",
                "HRA",
                "Shift Allowance",
                "Oncall Allowance",
                "Bonus",
                "Telephone Unclaimed",
                "Compulsory Holiday Pay",
                "Share SIS Award",
            ),
            deductions=(
                "Income Tax",
                "Provident Fund",
                "Professional Tax",
                "Hospitalisation Insurance",
                "VPC Father",
                "VPC Mother",
                "VPC Topup Father",
                "VPC Topup Mother",
                "Labour Welfare Fund",
                "Share SIS Award",
            ),
        ),
    }
)
