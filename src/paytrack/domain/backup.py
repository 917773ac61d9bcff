"""JSON backup and restore domain service.

A backup is one JSON object:

    {"version": 1, "exportedAt": ..., "userId": ..., "salaryRecords": [...],
     "organizationTemplates": [...], "employmentHistory": [...],
     "profile": {...} | null, "budgetHistory": [...]}

Entity objects use the column names of their tables. Restoring wipes the
user's salary records, templates and budget history first, then recreates
every entity one write at a time. There is no rollback; a failure part-way
leaves a partial restore.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Optional, Union

from dateutil.parser import isoparse

from paytrack.database.base import Database
from paytrack.domain.entities import BackupCounts, LineItem, Profile
from paytrack.domain.errors import BackupFormatError

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
MAX_BACKUP_SIZE = 10 * 1024 * 1024
DEFAULT_BACKUP_FILENAME = "salary-tracker-backup.json"

INVALID_FORMAT = "Invalid backup file format"
TOO_LARGE = "Backup file is too large (max 10MB)"

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class BackupTemplate:
    name: str
    earning_categories: tuple[str, ...] = ()
    deduction_categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class BackupSalaryRecord:
    month: int
    year: int
    organization: Optional[str]
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    gross_salary: Decimal
    notes: Optional[str] = None
    payslip_url: Optional[str] = None
    earnings: tuple[LineItem, ...] = ()
    deductions: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class BackupEmployment:
    organization: str
    joining_date: date
    leaving_date: Optional[date] = None
    employee_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class BackupBudget:
    month: int
    year: int
    net_income: Decimal
    total_allocated: Decimal
    remaining: Decimal
    categories: list[Any] = field(default_factory=list)
    saved_at: Optional[datetime] = None


@dataclass(frozen=True)
class BackupProfile:
    full_name: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None


@dataclass(frozen=True)
class BackupDocument:
    """A validated backup, ready to restore."""

    version: int
    exported_at: Optional[datetime]
    user_id: Optional[str]
    templates: tuple[BackupTemplate, ...] = ()
    salary_records: tuple[BackupSalaryRecord, ...] = ()
    employment_history: tuple[BackupEmployment, ...] = ()
    budget_history: tuple[BackupBudget, ...] = ()
    profile: Optional[BackupProfile] = None

    @property
    def counts(self) -> BackupCounts:
        return BackupCounts(
            templates=len(self.templates),
            salary_records=len(self.salary_records),
            employment_history=len(self.employment_history),
            profile_entries=1 if self.profile is not None else 0,
            budget_history=len(self.budget_history),
        )


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decimal(value: Any, name: str) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not a number")
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not a number") from e
    if not result.is_finite():
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not a number")
    return result


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not an integer")
    # is_integer() is also False for Infinity and NaN, which json.loads accepts
    if isinstance(value, float) and not value.is_integer():
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not an integer")
    try:
        return int(value)
    except (ValueError, OverflowError) as e:
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not an integer") from e


def _timestamp(value: Any, name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return isoparse(str(value))
    except ValueError as e:
        raise BackupFormatError(f"{INVALID_FORMAT}: {name} is not an ISO date") from e


def _date(value: Any, name: str) -> Optional[date]:
    parsed = _timestamp(value, name)
    return parsed.date() if parsed is not None else None


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _items(entries: Any, name: str) -> tuple[LineItem, ...]:
    if not isinstance(entries, list):
        return ()
    return tuple(
        LineItem(
            category=str(e["category"]),
            amount=_decimal(e.get("amount"), f"{name} amount"),
            description=e.get("description"),
        )
        for e in entries
    )


def _categories(entries: Any) -> tuple[str, ...]:
    if not isinstance(entries, list):
        return ()
    return tuple(str(e["category"]) for e in entries)


def _parse_template(raw: dict[str, Any]) -> BackupTemplate:
    return BackupTemplate(
        name=str(raw["name"]),
        earning_categories=_categories(raw.get("template_earnings")),
        deduction_categories=_categories(raw.get("template_deductions")),
    )


def _parse_salary_record(raw: dict[str, Any]) -> BackupSalaryRecord:
    total_earnings = _decimal(raw.get("total_earnings"), "total_earnings")
    return BackupSalaryRecord(
        month=_int(raw["month"], "month"),
        year=_int(raw["year"], "year"),
        organization=raw.get("organization"),
        total_earnings=total_earnings,
        total_deductions=_decimal(raw.get("total_deductions"), "total_deductions"),
        net_salary=_decimal(raw.get("net_salary"), "net_salary"),
        gross_salary=_decimal(raw.get("gross_salary", total_earnings), "gross_salary"),
        notes=raw.get("notes"),
        payslip_url=raw.get("payslip_url"),
        earnings=_items(raw.get("earnings"), "earning"),
        deductions=_items(raw.get("deductions"), "deduction"),
    )


def _parse_employment(raw: dict[str, Any]) -> BackupEmployment:
    joining = _date(raw.get("joining_date"), "joining_date")
    if joining is None:
        raise BackupFormatError(f"{INVALID_FORMAT}: employment entry has no joining_date")
    return BackupEmployment(
        organization=str(raw["organization"]),
        joining_date=joining,
        leaving_date=_date(raw.get("leaving_date"), "leaving_date"),
        employee_id=raw.get("employee_id"),
        notes=raw.get("notes"),
    )


def _parse_budget(raw: dict[str, Any]) -> BackupBudget:
    categories = raw.get("categories")
    return BackupBudget(
        month=_int(raw["month"], "month"),
        year=_int(raw["year"], "year"),
        net_income=_decimal(raw.get("net_income"), "net_income"),
        total_allocated=_decimal(raw.get("total_allocated"), "total_allocated"),
        remaining=_decimal(raw.get("remaining"), "remaining"),
        categories=categories if isinstance(categories, list) else [],
        saved_at=_timestamp(raw.get("saved_at"), "saved_at"),
    )


def parse_backup(data: Any) -> BackupDocument:
    """Validate a decoded backup object and convert it to a BackupDocument.

    Raises:
        BackupFormatError: If the object is not a version 1 backup or an
            entity is malformed
    """
    if not isinstance(data, dict) or data.get("version") != BACKUP_VERSION:
        raise BackupFormatError(INVALID_FORMAT)

    raw_profile = data.get("profile")
    profile = None
    if isinstance(raw_profile, dict):
        profile = BackupProfile(
            full_name=raw_profile.get("full_name"),
            job_title=raw_profile.get("job_title"),
            location=raw_profile.get("location"),
            bio=raw_profile.get("bio"),
        )

    try:
        return BackupDocument(
            version=BACKUP_VERSION,
            exported_at=_timestamp(data.get("exportedAt"), "exportedAt"),
            user_id=data.get("userId"),
            templates=tuple(_parse_template(t) for t in _list(data, "organizationTemplates")),
            salary_records=tuple(_parse_salary_record(r) for r in _list(data, "salaryRecords")),
            employment_history=tuple(
                _parse_employment(e) for e in _list(data, "employmentHistory")
            ),
            budget_history=tuple(_parse_budget(b) for b in _list(data, "budgetHistory")),
            profile=profile,
        )
    except (KeyError, TypeError, AttributeError, OverflowError) as e:
        raise BackupFormatError(f"{INVALID_FORMAT}: missing or malformed field {e}") from e


class BackupService:
    """Service for exporting and restoring complete JSON backups."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_backup(self, user_id: str) -> dict[str, Any]:
        """Collect all of a user's data into a version 1 backup object.

        Args:
            user_id: User to back up

        Returns:
            JSON-serializable dict (amounts as Decimal, dates as date/datetime;
            write_backup serializes them)
        """
        records = self.db.list_salary_records(user_id)
        templates = self.db.list_templates(user_id)
        employment = self.db.list_employment_history(user_id)
        budgets = self.db.list_budget_history(user_id)
        profile = self.db.get_profile(user_id)

        def line_items(items: tuple[LineItem, ...]) -> list[dict[str, Any]]:
            return [
                {"category": i.category, "amount": i.amount, "description": i.description}
                for i in items
            ]

        return {
            "version": BACKUP_VERSION,
            "exportedAt": datetime.now(UTC).isoformat(),
            "userId": user_id,
            "salaryRecords": [
                {
                    "id": r.id,
                    "month": r.month,
                    "year": r.year,
                    "organization": r.organization,
                    "total_earnings": r.total_earnings,
                    "total_deductions": r.total_deductions,
                    "net_salary": r.net_salary,
                    "gross_salary": r.gross_salary,
                    "notes": r.notes,
                    "payslip_url": r.payslip_url,
                    "earnings": line_items(r.earnings),
                    "deductions": line_items(r.deductions),
                }
                for r in records
            ],
            "organizationTemplates": [
                {
                    "id": t.id,
                    "name": t.name,
                    "created_at": t.created_at,
                    "updated_at": t.updated_at,
                    "template_earnings": [{"category": c} for c in t.earning_categories],
                    "template_deductions": [{"category": c} for c in t.deduction_categories],
                }
                for t in templates
            ],
            "employmentHistory": [
                {
                    "id": e.id,
                    "organization": e.organization,
                    "employee_id": e.employee_id,
                    "joining_date": e.joining_date,
                    "leaving_date": e.leaving_date,
                    "notes": e.notes,
                }
                for e in employment
            ],
            "profile": (
                {
                    "id": profile.user_id,
                    "full_name": profile.full_name,
                    "job_title": profile.job_title,
                    "location": profile.location,
                    "bio": profile.bio,
                    "username": profile.username,
                    "email": profile.email,
                }
                if profile is not None
                else None
            ),
            "budgetHistory": [
                {
                    "id": b.id,
                    "month": b.month,
                    "year": b.year,
                    "net_income": b.net_income,
                    "total_allocated": b.total_allocated,
                    "remaining": b.remaining,
                    "categories": b.categories,
                    "saved_at": b.saved_at,
                }
                for b in budgets
            ],
        }

    def write_backup(self, user_id: str, path: Union[str, Path]) -> BackupCounts:
        """Write a user's backup as indented JSON.

        Args:
            user_id: User to back up
            path: Output file path

        Returns:
            Counts of the entities written
        """
        data = self.export_backup(user_id)
        text = json.dumps(data, indent=2, default=_json_default)
        Path(path).write_text(text, encoding="utf-8")

        counts = parse_backup(json.loads(text)).counts
        logger.info(f"Wrote backup with {counts.total} entities to {path}")
        return counts

    def load_backup(self, path: Union[str, Path]) -> BackupDocument:
        """Read and validate a backup file without touching the database.

        Args:
            path: Backup file path

        Returns:
            Validated BackupDocument

        Raises:
            FileNotFoundError: If the file doesn't exist
            BackupFormatError: If the file is too large, not JSON, or not a
                version 1 backup
        """
        backup_path = Path(path)
        if not backup_path.exists():
            raise FileNotFoundError(f"Backup file not found: {path}")
        if backup_path.stat().st_size > MAX_BACKUP_SIZE:
            raise BackupFormatError(TOO_LARGE)

        try:
            data = json.loads(backup_path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BackupFormatError(INVALID_FORMAT) from e

        return parse_backup(data)

    def restore_backup(
        self,
        document: BackupDocument,
        user_id: str,
        progress: Optional[ProgressCallback] = None,
    ) -> BackupCounts:
        """Replace a user's data with the contents of a backup.

        Wipes salary records, line items, templates and budget history,
        then restores templates, salary records with line items, employment
        history, budget history and the profile, in that order.

        Args:
            document: Backup from load_backup
            user_id: User whose data is replaced
            progress: Optional callback receiving (processed, total) after
                each top-level entity is written

        Returns:
            Counts of the restored entities

        Raises:
            StorageError: If a database write fails; entities written
                before the failure remain
        """
        counts = document.counts
        total = counts.total
        processed = 0

        def tick() -> None:
            nonlocal processed
            processed += 1
            if progress is not None:
                progress(processed, total)

        logger.info(f"Restoring {total} entities for user '{user_id}'")
        self.db.wipe_salary_data(user_id)
        self.db.delete_budget_history(user_id)

        for template in document.templates:
            template_id = self.db.create_template(user_id, template.name)
            self.db.replace_template_categories(
                template_id, template.earning_categories, template.deduction_categories
            )
            tick()

        for record in document.salary_records:
            record_id = self.db.create_salary_record(
                user_id=user_id,
                month=record.month,
                year=record.year,
                organization=record.organization,
                total_earnings=record.total_earnings,
                total_deductions=record.total_deductions,
                net_salary=record.net_salary,
                gross_salary=record.gross_salary,
                notes=record.notes,
                payslip_url=record.payslip_url,
            )
            self.db.replace_line_items(record_id, record.earnings, record.deductions)
            tick()

        for entry in document.employment_history:
            self.db.create_employment_record(
                user_id=user_id,
                organization=entry.organization,
                joining_date=entry.joining_date,
                leaving_date=entry.leaving_date,
                employee_id=entry.employee_id,
                notes=entry.notes,
            )
            tick()

        for budget in document.budget_history:
            self.db.create_budget_snapshot(
                user_id=user_id,
                month=budget.month,
                year=budget.year,
                net_income=budget.net_income,
                total_allocated=budget.total_allocated,
                remaining=budget.remaining,
                categories=budget.categories,
                saved_at=budget.saved_at,
            )
            tick()

        if document.profile is not None:
            existing = self.db.get_profile(user_id)
            self.db.upsert_profile(
                Profile(
                    user_id=user_id,
                    full_name=document.profile.full_name,
                    job_title=document.profile.job_title,
                    location=document.profile.location,
                    bio=document.profile.bio,
                    username=existing.username if existing else None,
                    email=existing.email if existing else None,
                )
            )
            tick()

        logger.info(f"Restored {processed} entities for user '{user_id}'")
        return counts
