"""End-to-end tests for the paytrack CLI."""

import json

from paytrack.cli.main import cli
from paytrack.database.sqlalchemy_db import SQLAlchemyDatabase
from paytrack.domain.budget import BudgetService
from paytrack.domain.employment import EmploymentService
from paytrack.domain.errors import StorageError
from paytrack.utils.workbook_codec import write_workbook


def _run(cli_runner, temp_db, *args, user=None):
    base = ["--db-path", temp_db.database_path]
    if user is not None:
        base += ["--user", user]
    return cli_runner.invoke(cli, [*base, *args])


class TestImportCommand:
    """Tests for the import command."""

    def test_import_with_yes(self, cli_runner, temp_db, workbook_file):
        result = _run(cli_runner, temp_db, "import", str(workbook_file), "--yes")

        assert result.exit_code == 0, result.output
        assert "Import preview:" in result.output
        assert "Total records to import: 2" in result.output
        assert "TCS row 4" in result.output
        assert "Import complete:" in result.output
        assert "Records imported: 2" in result.output

        listing = _run(cli_runner, temp_db, "record", "list")
        assert "JAN 2025" in listing.output
        assert "FEB 2025" in listing.output

    def test_import_with_out_of_range_record(self, cli_runner, temp_db, tmp_path):
        header = ["Month Year", "Basic Salary", "Total Earnings", "Total Deductions", "Net Salary"]
        rows = [
            ["JAN 2025", 80000, 80000, 0, 80000],
            ["FEB 2025", 150_000_000, 150_000_000, 0, 150_000_000],
        ]
        path = tmp_path / "big.xlsx"
        path.write_bytes(write_workbook([("TCS", header, rows)]))

        result = _run(cli_runner, temp_db, "import", str(path), "--yes")

        assert result.exit_code == 0, result.output
        assert "Records imported: 1" in result.output

    def test_import_cancelled(self, cli_runner, temp_db, workbook_file):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "import", str(workbook_file)], input="n\n"
        )

        assert result.exit_code == 0
        assert "Import cancelled." in result.output
        assert "No salary records found." in _run(cli_runner, temp_db, "record", "list").output

    def test_import_not_a_workbook(self, cli_runner, temp_db, tmp_path):
        bad = tmp_path / "bad.xlsx"
        bad.write_bytes(b"not a workbook")

        result = _run(cli_runner, temp_db, "import", str(bad), "--yes")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_import_aborted_by_storage_error(self, cli_runner, temp_db, workbook_file, monkeypatch):
        def failing_upsert(self, **kwargs):
            raise StorageError("Database write failed: disk I/O error")

        monkeypatch.setattr(SQLAlchemyDatabase, "upsert_salary_record", failing_upsert)

        result = _run(cli_runner, temp_db, "import", str(workbook_file), "--yes")

        assert result.exit_code == 1
        assert "Import aborted on sheet 'TCS'" in result.output
        assert "0 records were imported before the failure." in result.output

    def test_import_missing_file(self, cli_runner, temp_db, tmp_path):
        result = _run(cli_runner, temp_db, "import", str(tmp_path / "missing.xlsx"))

        assert result.exit_code == 2


class TestExportCommands:
    """Tests for workbook export commands."""

    def test_export(self, cli_runner, temp_db, sample_records, tmp_path):
        output = tmp_path / "export.xlsx"

        result = _run(cli_runner, temp_db, "export", str(output), "--year-from", "2024")

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "Exported salary data" in result.output

    def test_export_round_trips_through_import(self, cli_runner, temp_db, sample_records, tmp_path):
        output = tmp_path / "export.xlsx"
        _run(cli_runner, temp_db, "export", str(output))

        result = _run(cli_runner, temp_db, "import", str(output), "--yes", user="copy")

        assert result.exit_code == 0, result.output
        assert "Records imported: 3" in result.output

    def test_export_without_records(self, cli_runner, temp_db, tmp_path):
        result = _run(cli_runner, temp_db, "export", str(tmp_path / "export.xlsx"))

        assert result.exit_code == 1
        assert "No salary records available to export" in result.output

    def test_sample_workbook(self, cli_runner, temp_db, tmp_path):
        output = tmp_path / "SalaryTemplate.xlsx"

        result = _run(cli_runner, temp_db, "sample-workbook", str(output))

        assert result.exit_code == 0
        assert output.exists()


class TestBackupCommands:
    """Tests for backup export and restore."""

    def test_export_and_restore(self, cli_runner, temp_db, sample_records, tmp_path):
        output = tmp_path / "backup.json"

        result = _run(cli_runner, temp_db, "backup", "export", str(output))
        assert result.exit_code == 0, result.output
        assert "Salary records:         3" in result.output
        assert json.loads(output.read_text())["version"] == 1

        result = _run(cli_runner, temp_db, "backup", "restore", str(output), "--yes", user="other")
        assert result.exit_code == 0, result.output
        assert "permanently deletes" in result.output
        assert "Restored 3 items" in result.output

        listing = _run(cli_runner, temp_db, "record", "list", user="other")
        assert "MAY 2024" in listing.output
        assert "RBS" in listing.output

    def test_restore_cancelled(self, cli_runner, temp_db, sample_records, tmp_path):
        output = tmp_path / "backup.json"
        output.write_text(json.dumps({"version": 1}))

        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "backup", "restore", str(output)],
            input="n\n",
        )

        assert "Restore cancelled." in result.output
        assert "MAR 2024" in _run(cli_runner, temp_db, "record", "list").output

    def test_restore_invalid_version(self, cli_runner, temp_db, tmp_path):
        output = tmp_path / "backup.json"
        output.write_text(json.dumps({"version": 2}))

        result = _run(cli_runner, temp_db, "backup", "restore", str(output), "--yes")

        assert result.exit_code == 1
        assert "Invalid backup file format" in result.output


class TestTemplateCommands:
    """Tests for template commands."""

    def test_init_and_list(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "template", "init")
        assert result.exit_code == 0
        assert "Created 4 templates" in result.output

        result = _run(cli_runner, temp_db, "template", "list")
        assert "NATWEST" in result.output
        assert "TCS" in result.output

        result = _run(cli_runner, temp_db, "template", "init")
        assert "already exist" in result.output

    def test_create_show_move(self, cli_runner, temp_db):
        result = _run(
            cli_runner, temp_db, "template", "create", "Acme", "--earnings", "Basic, HRA", "--deductions", "Tax"
        )
        assert result.exit_code == 0
        assert "Created template 'Acme'" in result.output

        result = _run(cli_runner, temp_db, "template", "move", "Acme", "HRA", "--from", "earning")
        assert result.exit_code == 0, result.output
        assert "Moved 'HRA' to deductions" in result.output

        result = _run(cli_runner, temp_db, "template", "show", "Acme")
        deductions = result.output.split("Deductions:")[1]
        assert "HRA" in deductions

    def test_create_duplicate(self, cli_runner, temp_db):
        _run(cli_runner, temp_db, "template", "create", "Acme")

        result = _run(cli_runner, temp_db, "template", "create", "Acme")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_rename_and_reorder(self, cli_runner, temp_db):
        _run(cli_runner, temp_db, "template", "create", "Acme", "--earnings", "Basic,HRA")

        result = _run(
            cli_runner, temp_db, "template", "rename", "Acme", "HRA", "House Rent", "--kind", "earning"
        )
        assert result.exit_code == 0, result.output

        result = _run(
            cli_runner, temp_db, "template", "reorder", "Acme", "House Rent", "--kind", "earning", "--direction", "up"
        )
        assert result.exit_code == 0, result.output

        shown = _run(cli_runner, temp_db, "template", "show", "Acme").output
        assert shown.index("House Rent") < shown.index("Basic")

    def test_show_missing(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "template", "show", "Nope")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete(self, cli_runner, temp_db):
        _run(cli_runner, temp_db, "template", "create", "Acme")

        result = _run(cli_runner, temp_db, "template", "delete", "Acme", "--yes")

        assert result.exit_code == 0
        assert "No templates found" in _run(cli_runner, temp_db, "template", "list").output


class TestRecordCommands:
    """Tests for salary record commands."""

    def test_add_list_show_delete(self, cli_runner, temp_db):
        result = _run(
            cli_runner,
            temp_db,
            "record",
            "add",
            "01/2025",
            "-o",
            "Acme",
            "-e",
            "Basic=50,000",
            "-e",
            "HRA=20000",
            "-d",
            "Income Tax=7000",
        )
        assert result.exit_code == 0, result.output
        assert "Saved salary record for JAN 2025 (ID: 1)" in result.output

        result = _run(cli_runner, temp_db, "record", "list")
        assert "FY 2024-25" in result.output
        assert "63,000.00" in result.output

        result = _run(cli_runner, temp_db, "record", "show", "1")
        assert "Income Tax" in result.output
        assert "70,000.00" in result.output

        result = _run(cli_runner, temp_db, "record", "delete", "1", "--yes")
        assert result.exit_code == 0
        assert "No salary records found." in _run(cli_runner, temp_db, "record", "list").output

    def test_add_with_month_name(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "record", "add", "MAR 2024", "-e", "Basic=1")

        assert result.exit_code == 0, result.output
        assert "MAR 2024" in result.output

    def test_add_invalid_month(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "record", "add", "13/2025", "-e", "Basic=1")

        assert result.exit_code == 1
        assert "Month must be between 1 and 12" in result.output

    def test_add_bad_period(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "record", "add", "someday")

        assert result.exit_code == 2

    def test_add_bad_line_item(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "record", "add", "01/2025", "-e", "Basic")

        assert result.exit_code == 2

    def test_show_other_users_record(self, cli_runner, temp_db, sample_records):
        result = _run(cli_runner, temp_db, "record", "show", str(sample_records[0]), user="other")

        assert result.exit_code == 1


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_by_organization(self, cli_runner, temp_db, sample_records):
        result = _run(cli_runner, temp_db, "summary")

        assert result.exit_code == 0
        assert "210,000.00" in result.output
        assert "RBS" in result.output

    def test_by_financial_year(self, cli_runner, temp_db, sample_records):
        result = _run(cli_runner, temp_db, "summary", "--by", "financial-year")

        assert result.exit_code == 0
        assert result.output.index("FY 2023-24") < result.output.index("FY 2024-25")
        assert "38,000.00" in result.output

    def test_by_category(self, cli_runner, temp_db, sample_records):
        result = _run(cli_runner, temp_db, "summary", "--by", "category", "-o", "TCS")

        assert result.exit_code == 0
        assert "Basic Salary" in result.output
        assert "Basic Pay" not in result.output
        assert "Deductions" in result.output

    def test_empty(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "summary")

        assert "No salary records found." in result.output


class TestBudgetCommands:
    """Tests for budget commands."""

    def test_save_list_show(self, cli_runner, temp_db):
        result = _run(
            cli_runner, temp_db, "budget", "save", "03/2025", "-n", "50000",
            "-a", "Housing/Rent=25000", "-a", "Food/Groceries=8000",
        )
        assert result.exit_code == 0, result.output
        assert "Saved budget for MAR 2025" in result.output

        result = _run(cli_runner, temp_db, "budget", "list")
        assert "MAR 2025" in result.output
        assert "33,000.00" in result.output
        assert "17,000.00" in result.output

        entry_id = BudgetService(temp_db).list_budgets("local")[0].id
        result = _run(cli_runner, temp_db, "budget", "show", str(entry_id))
        assert result.exit_code == 0
        assert "Housing:" in result.output
        assert "Rent" in result.output

    def test_edit_and_delete(self, cli_runner, temp_db):
        _run(cli_runner, temp_db, "budget", "save", "03/2025", "-n", "50000", "-a", "Housing/Rent=25000")
        entry_id = BudgetService(temp_db).list_budgets("local")[0].id

        result = _run(cli_runner, temp_db, "budget", "edit", str(entry_id), "-n", "30000")
        assert result.exit_code == 0, result.output
        assert "5,000.00 remaining" in result.output

        result = _run(cli_runner, temp_db, "budget", "delete", str(entry_id), "--yes")
        assert result.exit_code == 0
        assert "No budgets saved." in _run(cli_runner, temp_db, "budget", "list").output

    def test_bad_allocation(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "budget", "save", "03/2025", "-n", "50000", "-a", "Rent")

        assert result.exit_code == 2

    def test_delete_missing(self, cli_runner, temp_db):
        result = _run(cli_runner, temp_db, "budget", "delete", "99", "--yes")

        assert result.exit_code == 1
        assert "Budget entry 99 not found" in result.output


class TestEmploymentCommands:
    """Tests for employment history commands."""

    def test_add_list_edit_delete(self, cli_runner, temp_db):
        result = _run(
            cli_runner, temp_db, "employment", "add", "RBS", "--joined", "2022-01-10", "--employee-id", "R42"
        )
        assert result.exit_code == 0, result.output
        assert "Added employment at 'RBS'" in result.output

        result = _run(cli_runner, temp_db, "employment", "list")
        assert "RBS" in result.output
        assert "2022-01-10" in result.output
        assert "present" in result.output

        entry_id = EmploymentService(temp_db).list_entries("local")[0].id
        result = _run(cli_runner, temp_db, "employment", "edit", str(entry_id), "--left", "2024-03-31")
        assert result.exit_code == 0, result.output
        assert "2024-03-31" in _run(cli_runner, temp_db, "employment", "list").output

        result = _run(cli_runner, temp_db, "employment", "delete", str(entry_id), "--yes")
        assert result.exit_code == 0
        assert "No employment history found." in _run(cli_runner, temp_db, "employment", "list").output

    def test_leaving_before_joining(self, cli_runner, temp_db):
        result = _run(
            cli_runner, temp_db, "employment", "add", "RBS", "--joined", "2022-01-10", "--left", "2021-01-01"
        )

        assert result.exit_code == 1
        assert "Leaving date cannot be before joining date" in result.output

    def test_backup_includes_employment(self, cli_runner, temp_db, tmp_path):
        _run(cli_runner, temp_db, "employment", "add", "RBS", "--joined", "2022-01-10")
        output = tmp_path / "backup.json"

        _run(cli_runner, temp_db, "backup", "export", str(output))

        assert json.loads(output.read_text())["employmentHistory"][0]["organization"] == "RBS"
