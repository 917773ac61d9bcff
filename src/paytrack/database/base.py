"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from paytrack.domain.entities import (
    BudgetSnapshot,
    EmploymentRecord,
    LineItem,
    OrganizationTemplate,
    Profile,
    SalaryRecord,
)


class Database(ABC):
    """Abstract database interface for paytrack.

    Every write method commits its own unit of work. Storage failures are
    raised as paytrack.domain.errors.StorageError.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Salary record operations
    @abstractmethod
    def get_salary_record(self, record_id: int) -> Optional[SalaryRecord]:
        """Get salary record (with line items) by ID."""
        pass

    @abstractmethod
    def find_salary_record(self, user_id: str, month: int, year: int) -> Optional[SalaryRecord]:
        """Get a user's salary record for a month and year."""
        pass

    @abstractmethod
    def list_salary_records(
        self,
        user_id: str,
        organization: Optional[str] = None,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
    ) -> list[SalaryRecord]:
        """List a user's salary records, newest first, with optional filters."""
        pass

    @abstractmethod
    def upsert_salary_record(
        self,
        user_id: str,
        month: int,
        year: int,
        organization: Optional[str],
        total_earnings: Decimal,
        total_deductions: Decimal,
        net_salary: Decimal,
        gross_salary: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Insert or overwrite the record keyed by (user_id, month, year). Returns record ID.

        On conflict the organization and all total fields are replaced; notes
        are replaced only when given.
        """
        pass

    @abstractmethod
    def create_salary_record(
        self,
        user_id: str,
        month: int,
        year: int,
        organization: Optional[str],
        total_earnings: Decimal,
        total_deductions: Decimal,
        net_salary: Decimal,
        gross_salary: Decimal,
        notes: Optional[str] = None,
        payslip_url: Optional[str] = None,
    ) -> int:
        """Insert a new salary record. Returns record ID."""
        pass

    @abstractmethod
    def replace_line_items(
        self,
        record_id: int,
        earnings: Sequence[LineItem],
        deductions: Sequence[LineItem],
    ) -> None:
        """Delete a record's earnings and deductions and insert the given ones."""
        pass

    @abstractmethod
    def delete_salary_record(self, record_id: int) -> None:
        """Delete a salary record and its line items."""
        pass

    @abstractmethod
    def move_line_items(
        self, user_id: str, organization: str, category: str, to_deductions: bool
    ) -> int:
        """Move line items of a category between earnings and deductions.

        Applies to every record of the user with the given organization.
        Returns the number of line items moved.
        """
        pass

    @abstractmethod
    def rename_line_items(
        self, user_id: str, organization: str, old_category: str, new_category: str, deductions: bool
    ) -> int:
        """Rename a category on a user's line items for one organization. Returns rows changed."""
        pass

    # Organization template operations
    @abstractmethod
    def get_template(self, template_id: int) -> Optional[OrganizationTemplate]:
        """Get organization template by ID."""
        pass

    @abstractmethod
    def get_template_by_name(self, user_id: str, name: str) -> Optional[OrganizationTemplate]:
        """Get a user's organization template by exact name."""
        pass

    @abstractmethod
    def list_templates(self, user_id: str) -> list[OrganizationTemplate]:
        """List a user's organization templates."""
        pass

    @abstractmethod
    def create_template(self, user_id: str, name: str) -> int:
        """Create an empty organization template. Returns template ID."""
        pass

    @abstractmethod
    def replace_template_categories(
        self, template_id: int, earnings: Sequence[str], deductions: Sequence[str]
    ) -> None:
        """Delete a template's category lists and insert the given ones, in order."""
        pass

    @abstractmethod
    def delete_template(self, template_id: int) -> None:
        """Delete an organization template and its categories."""
        pass

    @abstractmethod
    def wipe_salary_data(self, user_id: str) -> None:
        """Delete all of a user's salary records, line items, and templates."""
        pass

    # Employment history operations
    @abstractmethod
    def create_employment_record(
        self,
        user_id: str,
        organization: str,
        joining_date: date,
        leaving_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an employment history entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_employment_history(self, user_id: str) -> list[EmploymentRecord]:
        """List a user's employment history, oldest first."""
        pass

    @abstractmethod
    def get_employment_record(self, entry_id: int) -> Optional[EmploymentRecord]:
        """Get an employment history entry by ID."""
        pass

    @abstractmethod
    def update_employment_record(
        self,
        entry_id: int,
        organization: str,
        joining_date: date,
        leaving_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Overwrite every field of an employment history entry."""
        pass

    @abstractmethod
    def delete_employment_record(self, entry_id: int) -> None:
        """Delete an employment history entry."""
        pass

    # Budget history operations
    @abstractmethod
    def create_budget_snapshot(
        self,
        user_id: str,
        month: int,
        year: int,
        net_income: Decimal,
        total_allocated: Decimal,
        remaining: Decimal,
        categories: list[Any],
        saved_at: Optional[datetime] = None,
    ) -> int:
        """Create a budget history entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_budget_history(self, user_id: str) -> list[BudgetSnapshot]:
        """List a user's budget history, oldest first."""
        pass

    @abstractmethod
    def get_budget_snapshot(self, entry_id: int) -> Optional[BudgetSnapshot]:
        """Get a budget history entry by ID."""
        pass

    @abstractmethod
    def upsert_budget_snapshot(
        self,
        user_id: str,
        month: int,
        year: int,
        net_income: Decimal,
        total_allocated: Decimal,
        remaining: Decimal,
        categories: list[Any],
        saved_at: Optional[datetime] = None,
    ) -> int:
        """Insert or overwrite the budget keyed by (user_id, month, year). Returns entry ID."""
        pass

    @abstractmethod
    def update_budget_snapshot(
        self,
        entry_id: int,
        net_income: Decimal,
        total_allocated: Decimal,
        remaining: Decimal,
        categories: list[Any],
    ) -> None:
        """Overwrite the amounts and categories of a budget history entry."""
        pass

    @abstractmethod
    def delete_budget_snapshot(self, entry_id: int) -> None:
        """Delete one budget history entry."""
        pass

    @abstractmethod
    def delete_budget_history(self, user_id: str) -> None:
        """Delete all of a user's budget history."""
        pass

    # Profile operations
    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """Get a user's profile."""
        pass

    @abstractmethod
    def upsert_profile(self, profile: Profile) -> None:
        """Create or replace a user's profile."""
        pass
