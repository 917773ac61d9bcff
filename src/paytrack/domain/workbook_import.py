"""Workbook import domain service."""

from pathlib import Path
from typing import Optional, Union

from paytrack.database.base import Database
from paytrack.domain.classifier import DEFAULT_REGISTRY, CategoryRegistry
from paytrack.domain.entities import ImportPlan, ImportSummary
from paytrack.domain.import_executor import ImportExecutor, ProgressCallback
from paytrack.domain.import_plan import build_import_plan
from paytrack.utils.workbook_codec import read_workbook


class WorkbookImportService:
    """Service for previewing and importing payslip workbooks."""

    def __init__(self, db: Database):
        """Initialize workbook import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.executor = ImportExecutor(db)

    def category_registry(self, user_id: str) -> CategoryRegistry:
        """Return the built-in registry extended with the user's templates and records."""
        return DEFAULT_REGISTRY.overlay(self.db.list_templates(user_id)).with_records(
            self.db.list_salary_records(user_id)
        )

    def plan_import(self, source: Union[str, Path, bytes], user_id: str) -> ImportPlan:
        """Build the dry-run plan for a workbook.

        Args:
            source: Path to an .xlsx file, or its bytes
            user_id: User whose templates inform classification

        Returns:
            ImportPlan to show before executing

        Raises:
            FileNotFoundError: If the workbook path doesn't exist
            WorkbookFormatError: If the file is not a readable workbook
        """
        if isinstance(source, bytes):
            data = source
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Workbook not found: {source}")
            data = path.read_bytes()

        workbook = read_workbook(data)
        return build_import_plan(workbook, self.category_registry(user_id))

    def execute(
        self,
        plan: ImportPlan,
        user_id: str,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportSummary:
        """Write a confirmed plan. See ImportExecutor.execute."""
        return self.executor.execute(plan, user_id, progress)
