"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay the
same when table layouts change.
"""

from paytrack.domain import entities as domain
from paytrack.database.models import (
    SalaryRecord as ORMSalaryRecord,
    Earning as ORMEarning,
    Deduction as ORMDeduction,
    OrganizationTemplate as ORMOrganizationTemplate,
    EmploymentHistory as ORMEmploymentHistory,
    BudgetHistory as ORMBudgetHistory,
    Profile as ORMProfile,
)


def line_item_to_domain(orm_item: ORMEarning | ORMDeduction) -> domain.LineItem:
    """Convert an earning or deduction row to a domain LineItem."""
    return domain.LineItem(
        category=orm_item.category,
        amount=orm_item.amount,
        description=orm_item.description,
    )


def salary_record_to_domain(orm_record: ORMSalaryRecord) -> domain.SalaryRecord:
    """Convert SQLAlchemy SalaryRecord model (with line items) to a domain entity."""
    return domain.SalaryRecord(
        id=orm_record.id,
        user_id=orm_record.user_id,
        month=orm_record.month,
        year=orm_record.year,
        organization=orm_record.organization,
        total_earnings=orm_record.total_earnings,
        total_deductions=orm_record.total_deductions,
        net_salary=orm_record.net_salary,
        gross_salary=orm_record.gross_salary,
        notes=orm_record.notes,
        payslip_url=orm_record.payslip_url,
        created_at=orm_record.created_at,
        updated_at=orm_record.updated_at,
        earnings=tuple(line_item_to_domain(e) for e in orm_record.earnings),
        deductions=tuple(line_item_to_domain(d) for d in orm_record.deductions),
    )


def template_to_domain(orm_template: ORMOrganizationTemplate) -> domain.OrganizationTemplate:
    """Convert SQLAlchemy OrganizationTemplate model to a domain entity."""
    return domain.OrganizationTemplate(
        id=orm_template.id,
        user_id=orm_template.user_id,
        name=orm_template.name,
        earning_categories=tuple(e.category for e in orm_template.earnings),
        deduction_categories=tuple(d.category for d in orm_template.deductions),
        created_at=orm_template.created_at,
        updated_at=orm_template.updated_at,
    )


def employment_to_domain(orm_item: ORMEmploymentHistory) -> domain.EmploymentRecord:
    """Convert SQLAlchemy EmploymentHistory model to a domain entity."""
    return domain.EmploymentRecord(
        id=orm_item.id,
        user_id=orm_item.user_id,
        organization=orm_item.organization,
        employee_id=orm_item.employee_id,
        joining_date=orm_item.joining_date,
        leaving_date=orm_item.leaving_date,
        notes=orm_item.notes,
    )


def budget_to_domain(orm_budget: ORMBudgetHistory) -> domain.BudgetSnapshot:
    """Convert SQLAlchemy BudgetHistory model to a domain entity."""
    return domain.BudgetSnapshot(
        id=orm_budget.id,
        user_id=orm_budget.user_id,
        month=orm_budget.month,
        year=orm_budget.year,
        net_income=orm_budget.net_income,
        total_allocated=orm_budget.total_allocated,
        remaining=orm_budget.remaining,
        categories=list(orm_budget.categories or []),
        saved_at=orm_budget.saved_at,
    )


def profile_to_domain(orm_profile: ORMProfile) -> domain.Profile:
    """Convert SQLAlchemy Profile model to a domain entity."""
    return domain.Profile(
        user_id=orm_profile.user_id,
        full_name=orm_profile.full_name,
        job_title=orm_profile.job_title,
        location=orm_profile.location,
        bio=orm_profile.bio,
        username=orm_profile.username,
        email=orm_profile.email,
    )
