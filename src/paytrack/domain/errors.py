"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StorageError(DomainError):
    """A read or write against the database failed."""


class ImportAbortedError(StorageError):
    """A storage failure stopped a bulk import part-way through.

    Records written before the failure stay written; ``processed`` tells
    how many made it.
    """

    def __init__(self, message: str, processed: int, sheet_name: Optional[str] = None):
        super().__init__(message)
        self.processed = processed
        self.sheet_name = sheet_name


class BackupFormatError(ValidationError):
    """Backup file is unreadable, too large, or has the wrong version."""


class WorkbookFormatError(ValidationError):
    """Spreadsheet bytes could not be decoded as a workbook."""


def salary_record_not_found(record_id: int) -> str:
    """Return message for missing salary record by ID."""
    return f"Salary record {record_id} not found"


def template_not_found(name: str) -> str:
    """Return message for missing organization template."""
    return f"Organization template '{name}' not found"


def duplicate_template(name: str) -> str:
    """Return message for duplicate organization template name."""
    return f"Organization template '{name}' already exists"


def category_not_in_template(category: str, kind: str, name: str) -> str:
    """Return message when a category is not part of a template list."""
    return f"'{category}' is not a {kind} category of template '{name}'"


def employment_entry_not_found(entry_id: int) -> str:
    """Return message for missing employment history entry."""
    return f"Employment entry {entry_id} not found"


def budget_entry_not_found(entry_id: int) -> str:
    """Return message for missing budget history entry."""
    return f"Budget entry {entry_id} not found"
