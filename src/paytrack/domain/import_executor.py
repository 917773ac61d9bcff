"""Write a confirmed import plan to the database."""

import logging
from typing import Callable, Optional

from paytrack.database.base import Database
from paytrack.domain.entities import (
    ImportPlan,
    ImportSummary,
    ImportSummarySheet,
    InvalidRow,
    ParsedRecord,
    SheetPlan,
)
from paytrack.domain.errors import ImportAbortedError, StorageError
from paytrack.domain.import_plan import check_record_bounds

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def collect_categories(records: tuple[ParsedRecord, ...]) -> tuple[list[str], list[str]]:
    """Return the earning and deduction categories used by records, in first-seen order."""
    earnings: dict[str, None] = {}
    deductions: dict[str, None] = {}
    for record in records:
        for item in record.earnings:
            earnings.setdefault(item.category)
        for item in record.deductions:
            deductions.setdefault(item.category)
    return list(earnings), list(deductions)


class ImportExecutor:
    """Applies an ImportPlan to one user's salary data.

    Records are written one at a time, each in its own commit. A record
    outside the storable range is skipped and logged; any storage failure
    stops the whole import, leaving earlier writes in place.
    """

    def __init__(self, db: Database):
        """Initialize import executor.

        Args:
            db: Database instance
        """
        self.db = db

    def execute(
        self,
        plan: ImportPlan,
        user_id: str,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportSummary:
        """Execute an import plan.

        Args:
            plan: Plan produced by build_import_plan
            user_id: Owner of the imported records
            progress: Optional callback receiving (processed, total) after
                each record is written; total is plan.records_to_write

        Returns:
            ImportSummary with counts of templates and records written

        Raises:
            ImportAbortedError: If a database write fails
        """
        processed = 0
        total_templates = 0
        sheet_summaries: list[ImportSummarySheet] = []
        skipped_records: list[InvalidRow] = []

        logger.info(f"Importing {plan.total_records_to_import} records for user '{user_id}'")

        for sheet in plan.sheets:
            imported = 0
            if sheet.records:
                try:
                    self._replace_template(sheet, user_id)
                    total_templates += 1

                    for record in sheet.records:
                        reason = check_record_bounds(record)
                        if reason is not None:
                            logger.warning(
                                f"Skipping sheet '{sheet.sheet_name}' row {record.row_number}: {reason}"
                            )
                            skipped_records.append(
                                InvalidRow(sheet.sheet_name, record.row_number, reason)
                            )
                            continue

                        self._write_record(record, user_id)
                        imported += 1
                        processed += 1
                        if progress is not None:
                            progress(processed, plan.records_to_write)
                except StorageError as e:
                    logger.error(
                        f"Import aborted on sheet '{sheet.sheet_name}' after {processed} records: {e}"
                    )
                    raise ImportAbortedError(
                        f"Import aborted on sheet '{sheet.sheet_name}' after {processed} "
                        f"records: {e}",
                        processed=processed,
                        sheet_name=sheet.sheet_name,
                    ) from e

            sheet_summaries.append(
                ImportSummarySheet(
                    sheet_name=sheet.sheet_name,
                    records_imported=imported,
                    skipped_rows=sheet.skipped_rows,
                )
            )

        summary = ImportSummary(
            total_templates=total_templates,
            total_records=processed,
            total_skipped_rows=plan.total_skipped_rows,
            sheets=tuple(sheet_summaries),
            skipped_records=tuple(skipped_records),
        )
        logger.info(
            f"Imported {summary.total_records} records and {summary.total_templates} templates"
        )
        return summary

    def _replace_template(self, sheet: SheetPlan, user_id: str) -> None:
        """Find or create the sheet's template and reset its categories to this import."""
        earnings, deductions = collect_categories(sheet.records)

        template = self.db.get_template_by_name(user_id, sheet.sheet_name)
        if template is None:
            template_id = self.db.create_template(user_id, sheet.sheet_name)
        else:
            template_id = template.id

        self.db.replace_template_categories(template_id, earnings, deductions)
        logger.debug(
            f"Template '{sheet.sheet_name}': {len(earnings)} earnings, {len(deductions)} deductions"
        )

    def _write_record(self, record: ParsedRecord, user_id: str) -> None:
        record_id = self.db.upsert_salary_record(
            user_id=user_id,
            month=record.month,
            year=record.year,
            organization=record.organization,
            total_earnings=record.total_earnings,
            total_deductions=record.total_deductions,
            net_salary=record.net_salary,
            gross_salary=record.total_earnings,
        )
        self.db.replace_line_items(record_id, record.earnings, record.deductions)
