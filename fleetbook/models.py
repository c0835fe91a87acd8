"""SQLAlchemy models for the Fleetbook backend."""
from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base

RATE = Numeric(12, 2)
HOURS = Numeric(10, 2)
# Four fractional digits hold hours x rate exactly.
AMOUNT = Numeric(16, 4)


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class AuditMixin:
    created_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Driver(AuditMixin, Base):
    __tablename__ = "drivers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    driver_name: Mapped[str] = mapped_column(String(255), nullable=False)
    driver_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    hourly_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    overtime_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="IQD")
    assigned_months: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    expenses: Mapped[List["Expense"]] = relationship(back_populates="driver")


class Expense(AuditMixin, Base):
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    driver_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True, index=True
    )
    driver_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    driver_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    expense_type: Mapped[str] = mapped_column(String(100), nullable=False)
    hours: Mapped[Optional[Decimal]] = mapped_column(HOURS, nullable=True)
    hourly_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    is_overtime: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="IQD")
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    driver: Mapped[Optional[Driver]] = relationship(back_populates="expenses")


class Employee(AuditMixin, Base):
    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    employee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    employee_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    salary: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="IQD")
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_months: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)


class ExpenseType(AuditMixin, Base):
    __tablename__ = "expense_types"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    type_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False, default="blue")


class AppSetting(AuditMixin, Base):
    __tablename__ = "app_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    setting_key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    setting_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    setting_category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PrintTemplate(AuditMixin, Base):
    __tablename__ = "print_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    template_name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    html_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    css_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="user")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
