"""Tests for workbook export."""

import pytest
from decimal import Decimal

from paytrack.domain.entities import LineItem
from paytrack.domain.errors import NotFoundError
from paytrack.domain.workbook_export import sheet_title
from paytrack.utils.workbook_codec import read_workbook


def _snapshot(records):
    """Comparable view of records: period, organization, totals and line items."""
    return {
        (r.month, r.year): (
            r.organization,
            r.total_earnings,
            r.total_deductions,
            r.net_salary,
            {e.category: e.amount for e in r.earnings},
            {d.category: d.amount for d in r.deductions},
        )
        for r in records
    }


def test_export_layout(export_service, user_id, sample_records):
    """One sheet per organization with sorted categories and dated rows."""
    workbook = read_workbook(export_service.export_workbook(user_id))

    assert set(workbook.sheet_names) == {"TCS", "RBS"}
    tcs = workbook.sheets["TCS"]
    assert tcs.headers == (
        "Month Year",
        "Basic Salary",
        "HRA",
        "Income Tax",
        "Provident Fund",
        "Total Earnings",
        "Total Deductions",
        "Net Pay",
    )
    assert [row["Month Year"] for row in tcs.rows] == ["MAR 2024", "APR 2024"]
    assert tcs.rows[1]["Basic Salary"] == 80000
    assert tcs.rows[1]["Net Pay"] == 112000 - 27600


def test_missing_categories_written_as_zero(export_service, record_service, user_id):
    record_service.save_record(user_id, 1, 2025, "Acme", [LineItem("Basic", Decimal(100))], [])
    record_service.save_record(user_id, 2, 2025, "Acme", [LineItem("Bonus", Decimal(50))], [])

    sheet = read_workbook(export_service.export_workbook(user_id)).sheets["Acme"]

    assert sheet.rows[0]["Bonus"] == 0
    assert sheet.rows[1]["Basic"] == 0


def test_round_trip_reproduces_records(export_service, import_service, temp_db, user_id, sample_records):
    """Exporting and re-importing gives back the same records and line items."""
    before = _snapshot(temp_db.list_salary_records(user_id))
    data = export_service.export_workbook(user_id)

    plan = import_service.plan_import(data, "copy")
    import_service.execute(plan, "copy")

    assert plan.total_skipped_rows == 0
    assert _snapshot(temp_db.list_salary_records("copy")) == before


def test_reimporting_own_export_changes_nothing(export_service, import_service, temp_db, user_id, sample_records):
    before = _snapshot(temp_db.list_salary_records(user_id))

    data = export_service.export_workbook(user_id)
    import_service.execute(import_service.plan_import(data, user_id), user_id)

    assert _snapshot(temp_db.list_salary_records(user_id)) == before


def test_unrecognized_deduction_survives_reimport(export_service, import_service, temp_db, user_id, record_service):
    """A deduction no keyword matches is read back as a deduction from the user's own records."""
    record_service.save_record(
        user_id, 1, 2025, "Acme", [LineItem("Basic", Decimal(50000))], [LineItem("Canteen", Decimal(1200))]
    )

    data = export_service.export_workbook(user_id)
    import_service.execute(import_service.plan_import(data, user_id), user_id)

    record = temp_db.find_salary_record(user_id, 1, 2025)
    assert [e.category for e in record.earnings] == ["Basic"]
    assert [d.category for d in record.deductions] == ["Canteen"]
    template = temp_db.get_template_by_name(user_id, "Acme")
    assert "Canteen" not in template.earning_categories
    assert "Canteen" in template.deduction_categories


def test_category_on_both_sides_round_trips(export_service, import_service, temp_db, user_id, record_service):
    """An exported sheet with a repeated column header imports the repeat as the deduction."""
    record_service.save_record(
        user_id,
        3,
        2025,
        "NATWEST",
        [LineItem("Base Salary", Decimal(100000)), LineItem("Share SIS Award", Decimal(3000))],
        [LineItem("Share SIS Award", Decimal(3000))],
    )
    before = _snapshot(temp_db.list_salary_records(user_id))

    data = export_service.export_workbook(user_id)
    headers = read_workbook(data).sheets["NATWEST"].headers
    assert headers.count("Share SIS Award") == 1
    assert "Share SIS Award_1" in headers

    plan = import_service.plan_import(data, "copy")
    import_service.execute(plan, "copy")

    assert _snapshot(temp_db.list_salary_records("copy")) == before


def test_year_filter(export_service, record_service, user_id, sample_records):
    record_service.save_record(user_id, 6, 2023, "TCS", [LineItem("Basic Salary", Decimal(60000))], [])

    sheet = read_workbook(export_service.export_workbook(user_id, year_from=2024)).sheets["TCS"]

    assert [row["Month Year"] for row in sheet.rows] == ["MAR 2024", "APR 2024"]


def test_year_filter_without_matches(export_service, user_id, sample_records):
    with pytest.raises(NotFoundError, match="year range"):
        export_service.export_workbook(user_id, year_from=2030)


def test_no_records(export_service, user_id):
    with pytest.raises(NotFoundError):
        export_service.export_workbook(user_id)


def test_rare_categories_can_be_excluded(export_service, record_service, user_id):
    for month in (1, 2, 3):
        earnings = [LineItem("Basic", Decimal(100))]
        if month == 2:
            earnings.append(LineItem("Bonus", Decimal(10)))
        record_service.save_record(user_id, month, 2025, "Acme", earnings, [LineItem("Tax", Decimal(5))])

    kept = read_workbook(export_service.export_workbook(user_id)).sheets["Acme"]
    trimmed = read_workbook(
        export_service.export_workbook(user_id, include_rare_earnings=False)
    ).sheets["Acme"]

    assert "Bonus" in kept.headers
    assert "Bonus" not in trimmed.headers
    assert "Basic" in trimmed.headers
    assert "Tax" in trimmed.headers


def test_organization_names_are_normalized(export_service, record_service, user_id):
    record_service.save_record(
        user_id, 1, 2025, "Tata Consultancy Services", [LineItem("Basic Salary", Decimal(1))], []
    )
    record_service.save_record(user_id, 2, 2025, None, [LineItem("Basic", Decimal(1))], [])

    workbook = read_workbook(export_service.export_workbook(user_id))

    assert set(workbook.sheet_names) == {"TCS", "Not specified"}


@pytest.mark.parametrize(
    "name,expected",
    [
        ("TCS", "TCS"),
        ("A/B Corp: India", "A-B Corp- India"),
        ("X" * 40, "X" * 31),
        ("", "Organisation"),
    ],
)
def test_sheet_title(name, expected):
    """Test worksheet title clean-up."""
    assert sheet_title(name) == expected


def test_sample_workbook_imports_cleanly(export_service, import_service, user_id):
    """The sample workbook parses into one record with no skipped rows."""
    plan = import_service.plan_import(export_service.sample_workbook(), user_id)

    assert plan.total_records_to_import == 1
    assert plan.total_skipped_rows == 0
    record = plan.sheets[0].records[0]
    assert (record.month, record.year) == (1, 2025)
    assert record.net_salary == Decimal(94400)
    assert {e.category for e in record.earnings} == {"Basic Salary", "HRA", "Bonus"}
    assert {d.category for d in record.deductions} == {"Income Tax", "Provident Fund"}
