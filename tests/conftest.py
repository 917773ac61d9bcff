"""Shared pytest fixtures for paytrack tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from paytrack.database.factories import create_sqlite_database
from paytrack.domain.backup import BackupService
from paytrack.domain.budget import BudgetService
from paytrack.domain.employment import EmploymentService
from paytrack.domain.entities import LineItem
from paytrack.domain.salary_record import SalaryRecordService
from paytrack.domain.summary import SummaryService
from paytrack.domain.template import TemplateService
from paytrack.domain.workbook_export import WorkbookExportService
from paytrack.domain.workbook_import import WorkbookImportService
from paytrack.utils.workbook_codec import write_workbook

USER = "local"

TCS_HEADER = [
    "Month Year",
    "Basic Salary",
    "HRA",
    "Income Tax",
    "Provident Fund",
    "Total Earnings",
    "Total Deductions",
    "Net Salary",
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    """Default acting user, the same one the CLI uses."""
    return USER


@pytest.fixture
def import_service(temp_db):
    """Create a WorkbookImportService with a temporary database."""
    return WorkbookImportService(temp_db)


@pytest.fixture
def export_service(temp_db):
    """Create a WorkbookExportService with a temporary database."""
    return WorkbookExportService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def template_service(temp_db):
    """Create a TemplateService with a temporary database."""
    return TemplateService(temp_db)


@pytest.fixture
def record_service(temp_db):
    """Create a SalaryRecordService with a temporary database."""
    return SalaryRecordService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def employment_service(temp_db):
    """Create an EmploymentService with a temporary database."""
    return EmploymentService(temp_db)


@pytest.fixture
def tcs_workbook():
    """Two-month TCS workbook with one row missing its Month/Year."""
    return write_workbook(
        [
            (
                "TCS",
                TCS_HEADER,
                [
                    ["JAN 2025", 80000, 32000, 18000, 9600, 112000, 27600, 84400],
                    ["FEB 2025", 80000, 32000, 17000, 9600, 112000, 26600, 85400],
                    ["", 1, 2, 3, 4, 5, 6, 7],
                ],
            )
        ]
    )


@pytest.fixture
def workbook_file(tmp_path, tcs_workbook):
    """Write the TCS workbook to disk and return its path."""
    path = tmp_path / "salary.xlsx"
    path.write_bytes(tcs_workbook)
    return path


@pytest.fixture
def sample_records(record_service, user_id):
    """Save three months across two organizations and financial years."""
    ids = []
    ids.append(
        record_service.save_record(
            user_id,
            3,
            2024,
            "TCS",
            [LineItem("Basic Salary", Decimal("70000")), LineItem("HRA", Decimal("28000"))],
            [LineItem("Income Tax", Decimal("15000")), LineItem("Provident Fund", Decimal("8400"))],
        )
    )
    ids.append(
        record_service.save_record(
            user_id,
            4,
            2024,
            "TCS",
            [LineItem("Basic Salary", Decimal("80000")), LineItem("HRA", Decimal("32000"))],
            [LineItem("Income Tax", Decimal("18000")), LineItem("Provident Fund", Decimal("9600"))],
        )
    )
    ids.append(
        record_service.save_record(
            user_id,
            5,
            2024,
            "RBS",
            [LineItem("Basic Pay", Decimal("90000"))],
            [LineItem("Income Tax", Decimal("20000"))],
            notes="joined RBS",
        )
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
