"""Tests for SalaryRecordService."""

from decimal import Decimal

import pytest

from paytrack.domain.entities import LineItem
from paytrack.domain.errors import NotFoundError, ValidationError


def test_save_computes_totals(record_service, user_id):
    record_id = record_service.save_record(
        user_id,
        1,
        2025,
        "Acme",
        [LineItem("Basic", Decimal("50000")), LineItem("HRA", Decimal("20000"))],
        [LineItem("Income Tax", Decimal("7000"))],
    )

    record = record_service.get_record(user_id, record_id)
    assert record.total_earnings == Decimal("70000")
    assert record.gross_salary == Decimal("70000")
    assert record.total_deductions == Decimal("7000")
    assert record.net_salary == Decimal("63000")
    assert [e.category for e in record.earnings] == ["Basic", "HRA"]


def test_save_same_month_overwrites(record_service, user_id):
    first = record_service.save_record(
        user_id, 1, 2025, "Acme", [LineItem("Basic", Decimal("100")), LineItem("Bonus", Decimal("5"))], []
    )

    second = record_service.save_record(
        user_id, 1, 2025, "Acme Ltd", [LineItem("Basic", Decimal("200"))], [], notes="revised"
    )

    assert second == first
    records = record_service.list_records(user_id)
    assert len(records) == 1
    record = records[0]
    assert record.organization == "Acme Ltd"
    assert record.earnings == (LineItem("Basic", Decimal("200")),)
    assert record.total_earnings == Decimal("200")
    assert record.notes == "revised"


def test_overwrite_keeps_notes_when_not_given(record_service, user_id):
    record_service.save_record(user_id, 1, 2025, "Acme", [], [], notes="keep me")

    record_service.save_record(user_id, 1, 2025, "Acme", [LineItem("Basic", Decimal("1"))], [])

    assert record_service.find_record(user_id, 1, 2025).notes == "keep me"


@pytest.mark.parametrize(
    "month,year,earnings",
    [
        (0, 2025, []),
        (13, 2025, []),
        (1, 1899, []),
        (1, 2101, []),
        (1, 2025, [LineItem("Basic", Decimal("-1"))]),
        (1, 2025, [LineItem("Basic", Decimal("100000000000"))]),
        (1, 2025, [LineItem(" ", Decimal("1"))]),
    ],
)
def test_save_rejects_invalid_input(record_service, user_id, month, year, earnings):
    with pytest.raises(ValidationError):
        record_service.save_record(user_id, month, year, "Acme", earnings, [])

    assert record_service.list_records(user_id) == []


class TestListRecords:
    """Tests for listing and filtering records."""

    def test_newest_first(self, record_service, user_id, sample_records):
        records = record_service.list_records(user_id)

        assert [(r.month, r.year) for r in records] == [(5, 2024), (4, 2024), (3, 2024)]

    def test_filter_by_organization(self, record_service, user_id, sample_records):
        records = record_service.list_records(user_id, organization="RBS")

        assert [r.notes for r in records] == ["joined RBS"]

    def test_filter_by_financial_year(self, record_service, user_id, sample_records):
        records = record_service.list_records(user_id, financial_year="FY 2023-24")

        assert [(r.month, r.year) for r in records] == [(3, 2024)]

    def test_filter_by_years(self, record_service, user_id, sample_records):
        record_service.save_record(user_id, 12, 2022, "TCS", [], [])

        assert len(record_service.list_records(user_id, year_to=2023)) == 1
        assert len(record_service.list_records(user_id, year_from=2024)) == 3

    def test_other_users_records_hidden(self, record_service, sample_records):
        assert record_service.list_records("someone-else") == []


def test_get_record_of_other_user(record_service, sample_records):
    assert record_service.get_record("someone-else", sample_records[0]) is None


def test_delete_record(record_service, user_id, sample_records):
    record_service.delete_record(user_id, sample_records[0])

    assert record_service.get_record(user_id, sample_records[0]) is None
    assert len(record_service.list_records(user_id)) == 2


def test_delete_record_of_other_user(record_service, user_id, sample_records):
    with pytest.raises(NotFoundError):
        record_service.delete_record("someone-else", sample_records[0])

    assert record_service.get_record(user_id, sample_records[0]) is not None
