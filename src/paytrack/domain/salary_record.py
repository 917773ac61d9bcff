"""Salary record domain service."""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from paytrack.database.base import Database
from paytrack.domain.entities import LineItem, SalaryRecord
from paytrack.domain.errors import NotFoundError, ValidationError, salary_record_not_found
from paytrack.domain.import_plan import MAX_AMOUNT, MAX_YEAR, MIN_YEAR
from paytrack.utils.month_parser import financial_year_label

logger = logging.getLogger(__name__)


class SalaryRecordService:
    """Service for entering and querying monthly salary records."""

    def __init__(self, db: Database):
        """Initialize salary record service.

        Args:
            db: Database instance
        """
        self.db = db

    def save_record(
        self,
        user_id: str,
        month: int,
        year: int,
        organization: Optional[str],
        earnings: Sequence[LineItem],
        deductions: Sequence[LineItem],
        notes: Optional[str] = None,
    ) -> int:
        """Create or overwrite the record for a month.

        Totals are computed from the line items: gross and total earnings
        are the sum of earnings, net is earnings minus deductions. An
        existing record for the same month and year is replaced, including
        all of its line items.

        Args:
            user_id: Owner of the record
            month: Month (1-12)
            year: Year
            organization: Employer name
            earnings: Earning line items
            deductions: Deduction line items
            notes: Optional notes

        Returns:
            Salary record ID

        Raises:
            ValidationError: If the period or an amount is out of range
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")

        for item in (*earnings, *deductions):
            if not item.category.strip():
                raise ValidationError("Category name cannot be empty")
            if not item.amount.is_finite() or item.amount < 0 or item.amount > MAX_AMOUNT:
                raise ValidationError(
                    f"Amount for '{item.category}' must be between 0 and {MAX_AMOUNT:,}"
                )

        total_earnings = sum((e.amount for e in earnings), Decimal(0))
        total_deductions = sum((d.amount for d in deductions), Decimal(0))
        if total_earnings > MAX_AMOUNT or total_deductions > MAX_AMOUNT:
            raise ValidationError(f"Totals must not exceed {MAX_AMOUNT:,}")

        record_id = self.db.upsert_salary_record(
            user_id=user_id,
            month=month,
            year=year,
            organization=organization.strip() if organization else None,
            total_earnings=total_earnings,
            total_deductions=total_deductions,
            net_salary=total_earnings - total_deductions,
            gross_salary=total_earnings,
            notes=notes,
        )
        self.db.replace_line_items(record_id, list(earnings), list(deductions))
        logger.info(f"Saved salary record {month:02d}/{year} for user '{user_id}'")
        return record_id

    def get_record(self, user_id: str, record_id: int) -> Optional[SalaryRecord]:
        """Get one of the user's salary records by ID.

        Returns:
            SalaryRecord or None if not found or owned by another user
        """
        record = self.db.get_salary_record(record_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    def find_record(self, user_id: str, month: int, year: int) -> Optional[SalaryRecord]:
        """Get the user's salary record for a month, or None."""
        return self.db.find_salary_record(user_id, month, year)

    def list_records(
        self,
        user_id: str,
        organization: Optional[str] = None,
        financial_year: Optional[str] = None,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
    ) -> list[SalaryRecord]:
        """List the user's salary records, newest first.

        Args:
            user_id: Owner of the records
            organization: Optional exact organization filter
            financial_year: Optional label filter, e.g. "FY 2024-25"
            year_from: Optional first calendar year
            year_to: Optional last calendar year

        Returns:
            List of salary records
        """
        records = self.db.list_salary_records(
            user_id, organization=organization, year_from=year_from, year_to=year_to
        )
        if financial_year is not None:
            records = [
                r for r in records if financial_year_label(r.month, r.year) == financial_year
            ]
        return records

    def delete_record(self, user_id: str, record_id: int) -> None:
        """Delete one of the user's salary records.

        Raises:
            NotFoundError: If the record doesn't exist for this user
        """
        if self.get_record(user_id, record_id) is None:
            raise NotFoundError(salary_record_not_found(record_id))
        self.db.delete_salary_record(record_id)
        logger.info(f"Deleted salary record {record_id}")
