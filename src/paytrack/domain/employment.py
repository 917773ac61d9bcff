"""Employment history domain service."""

import logging
from datetime import date
from typing import Optional

from paytrack.database.base import Database
from paytrack.domain.entities import EmploymentRecord
from paytrack.domain.errors import NotFoundError, ValidationError, employment_entry_not_found

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _validate(organization: str, joining_date: Optional[date], leaving_date: Optional[date]) -> str:
    if not organization or not organization.strip():
        raise ValidationError("Organization and joining date are required")
    if joining_date is None:
        raise ValidationError("Organization and joining date are required")
    if leaving_date is not None and leaving_date < joining_date:
        raise ValidationError("Leaving date cannot be before joining date")
    return organization.strip()


class EmploymentService:
    """Service for the user's list of past and current employers."""

    def __init__(self, db: Database):
        """Initialize employment service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_entry(
        self,
        user_id: str,
        organization: str,
        joining_date: date,
        leaving_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Add an employment history entry.

        Blank employee IDs and notes are stored as empty.

        Returns:
            Entry ID

        Raises:
            ValidationError: If organization or joining date is missing, or
                the leaving date is before the joining date
        """
        organization = _validate(organization, joining_date, leaving_date)
        entry_id = self.db.create_employment_record(
            user_id=user_id,
            organization=organization,
            joining_date=joining_date,
            leaving_date=leaving_date,
            employee_id=_blank_to_none(employee_id),
            notes=_blank_to_none(notes),
        )
        logger.info(f"Added employment at '{organization}' for user '{user_id}'")
        return entry_id

    def list_entries(self, user_id: str) -> list[EmploymentRecord]:
        """List the user's employment history by joining date."""
        return self.db.list_employment_history(user_id)

    def get_entry(self, user_id: str, entry_id: int) -> Optional[EmploymentRecord]:
        entry = self.db.get_employment_record(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def update_entry(
        self,
        user_id: str,
        entry_id: int,
        organization: Optional[str] = None,
        joining_date: Optional[date] = None,
        leaving_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        notes: Optional[str] = None,
        clear_leaving_date: bool = False,
    ) -> EmploymentRecord:
        """Edit an employment history entry; fields left as None keep their value.

        Raises:
            NotFoundError: If the entry doesn't exist for this user
            ValidationError: If the edited entry would be invalid
        """
        entry = self.get_entry(user_id, entry_id)
        if entry is None:
            raise NotFoundError(employment_entry_not_found(entry_id))

        new_joining = joining_date or entry.joining_date
        new_leaving = None if clear_leaving_date else (leaving_date or entry.leaving_date)
        new_organization = _validate(organization or entry.organization, new_joining, new_leaving)

        self.db.update_employment_record(
            entry_id,
            organization=new_organization,
            joining_date=new_joining,
            leaving_date=new_leaving,
            employee_id=entry.employee_id if employee_id is None else _blank_to_none(employee_id),
            notes=entry.notes if notes is None else _blank_to_none(notes),
        )
        logger.info(f"Updated employment entry {entry_id}")
        return self.db.get_employment_record(entry_id)

    def delete_entry(self, user_id: str, entry_id: int) -> None:
        """Delete one of the user's employment history entries.

        Raises:
            NotFoundError: If the entry doesn't exist for this user
        """
        if self.get_entry(user_id, entry_id) is None:
            raise NotFoundError(employment_entry_not_found(entry_id))
        self.db.delete_employment_record(entry_id)
        logger.info(f"Deleted employment entry {entry_id}")
