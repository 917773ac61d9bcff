"""SQLAlchemy models for paytrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class SalaryRecord(Base):
    """Monthly salary record model."""

    __tablename__ = "salary_records"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    organization = Column(String, nullable=True)
    payslip_url = Column(String, nullable=True)
    gross_salary = Column(Numeric(12, 2), default=0, nullable=False)
    net_salary = Column(Numeric(12, 2), default=0, nullable=False)
    total_earnings = Column(Numeric(12, 2), default=0, nullable=False)
    total_deductions = Column(Numeric(12, 2), default=0, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "month", "year", name="uq_salary_user_month_year"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_salary_month"),
        CheckConstraint("year >= 2000 AND year <= 2100", name="ck_salary_year"),
    )

    # Relationships
    earnings = relationship(
        "Earning", back_populates="salary_record", cascade="all, delete-orphan", order_by="Earning.id"
    )
    deductions = relationship(
        "Deduction", back_populates="salary_record", cascade="all, delete-orphan", order_by="Deduction.id"
    )


class Earning(Base):
    """Earning line item model."""

    __tablename__ = "earnings"

    id = Column(Integer, primary_key=True)
    salary_record_id = Column(Integer, ForeignKey("salary_records.id"), nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), default=0, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    salary_record = relationship("SalaryRecord", back_populates="earnings")


class Deduction(Base):
    """Deduction line item model."""

    __tablename__ = "deductions"

    id = Column(Integer, primary_key=True)
    salary_record_id = Column(Integer, ForeignKey("salary_records.id"), nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), default=0, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    salary_record = relationship("SalaryRecord", back_populates="deductions")


class OrganizationTemplate(Base):
    """Organization template model."""

    __tablename__ = "organization_templates"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_template_user_name"),)

    # Relationships
    earnings = relationship(
        "TemplateEarning",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateEarning.id",
    )
    deductions = relationship(
        "TemplateDeduction",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateDeduction.id",
    )


class TemplateEarning(Base):
    """Earning category of an organization template."""

    __tablename__ = "template_earnings"

    id = Column(Integer, primary_key=True)
    template_id = Column(Integer, ForeignKey("organization_templates.id"), nullable=False)
    category = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    template = relationship("OrganizationTemplate", back_populates="earnings")


class TemplateDeduction(Base):
    """Deduction category of an organization template."""

    __tablename__ = "template_deductions"

    id = Column(Integer, primary_key=True)
    template_id = Column(Integer, ForeignKey("organization_templates.id"), nullable=False)
    category = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    template = relationship("OrganizationTemplate", back_populates="deductions")


class EmploymentHistory(Base):
    """Employment history model."""

    __tablename__ = "employment_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    organization = Column(String, nullable=False)
    employee_id = Column(String, nullable=True)
    joining_date = Column(Date, nullable=False)
    leaving_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class BudgetHistory(Base):
    """Saved monthly budget model."""

    __tablename__ = "budget_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    net_income = Column(Numeric(12, 2), default=0, nullable=False)
    total_allocated = Column(Numeric(12, 2), default=0, nullable=False)
    remaining = Column(Numeric(12, 2), default=0, nullable=False)
    categories = Column(JSON, default=list, nullable=False)
    saved_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "month", "year", name="uq_budget_user_month_year"),)


class Profile(Base):
    """User profile model."""

    __tablename__ = "profiles"

    user_id = Column(String, primary_key=True)
    full_name = Column(String, nullable=True)
    job_title = Column(String, nullable=True)
    location = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    username = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
