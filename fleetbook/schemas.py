"""Pydantic schemas for the Fleetbook API.

Field names are ``snake_case``. Request models accept the legacy
``camelCase`` spelling through :mod:`fleetbook.compat`.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .compat import normalize_payload

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
MonthToken = Annotated[str, Field(pattern=MONTH_PATTERN)]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RequestModel(BaseModel):
    """Base for request bodies: rewrites legacy keys before validation."""

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_payload(data)
        return data


class Message(BaseModel):
    message: str


# drivers


class DriverCreate(RequestModel):
    driver_name: str = Field(..., min_length=1, max_length=255)
    driver_number: str = Field(..., min_length=1, max_length=64)
    phone: str = ""
    hourly_rate: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    overtime_rate: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    currency: Optional[str] = Field(None, max_length=8)
    assigned_months: List[MonthToken] = Field(default_factory=list)


class DriverUpdate(RequestModel):
    driver_name: Optional[str] = Field(None, min_length=1, max_length=255)
    driver_number: Optional[str] = Field(None, min_length=1, max_length=64)
    phone: Optional[str] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    overtime_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    currency: Optional[str] = Field(None, max_length=8)
    assigned_months: Optional[List[MonthToken]] = None


class DriverRead(ORMModel):
    id: str
    driver_name: str
    driver_number: str
    phone: str
    hourly_rate: Decimal
    overtime_rate: Decimal
    currency: str
    assigned_months: List[str]
    created_date: datetime
    created_by: Optional[str] = None


class BulkRateUpdate(RequestModel):
    """Body of ``POST /api/drivers/bulk-update-rates``.

    A rate left out (or sent as ``null``) is not changed.
    """

    driver_ids: List[str] = Field(default_factory=list)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    overtime_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


# expenses


class ExpenseCreate(RequestModel):
    expense_date: date
    driver_id: Optional[str] = None
    driver_name: Optional[str] = None
    driver_number: Optional[str] = None
    expense_type: str = Field(..., min_length=1, max_length=100)
    hours: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    is_overtime: bool = False
    amount: Optional[Decimal] = None
    currency: Optional[str] = Field(None, max_length=8)
    is_paid: bool = False
    description: str = ""


class ExpenseUpdate(RequestModel):
    expense_date: Optional[date] = None
    driver_id: Optional[str] = None
    driver_name: Optional[str] = None
    driver_number: Optional[str] = None
    expense_type: Optional[str] = Field(None, min_length=1, max_length=100)
    hours: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    is_overtime: Optional[bool] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = Field(None, max_length=8)
    is_paid: Optional[bool] = None
    is_deleted: Optional[bool] = None
    description: Optional[str] = None


class ExpenseRead(ORMModel):
    id: str
    expense_date: date
    driver_id: Optional[str] = None
    driver_name: Optional[str] = None
    driver_number: Optional[str] = None
    expense_type: str
    hours: Optional[Decimal] = None
    hourly_rate: Decimal
    is_overtime: bool
    amount: Decimal
    currency: str
    is_paid: bool
    is_deleted: bool
    description: str
    created_date: datetime
    created_by: Optional[str] = None


class ExpenseFilters(BaseModel):
    month: Optional[MonthToken] = None
    driver_id: Optional[str] = None
    expense_type: Optional[str] = None
    currency: Optional[str] = None
    is_paid: Optional[bool] = None
    is_deleted: Optional[bool] = None
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=1000)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ExpensePage(BaseModel):
    data: List[ExpenseRead]
    pagination: Pagination


class IdList(RequestModel):
    ids: List[str] = Field(default_factory=list)


# employees


class EmployeeCreate(RequestModel):
    employee_name: str = Field(..., min_length=1, max_length=255)
    employee_number: Optional[str] = Field(None, max_length=64)
    salary: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    currency: Optional[str] = Field(None, max_length=8)
    payment_date: Optional[date] = None
    is_paid: bool = False
    assigned_months: List[MonthToken] = Field(default_factory=list)


class EmployeeUpdate(RequestModel):
    employee_name: Optional[str] = Field(None, min_length=1, max_length=255)
    employee_number: Optional[str] = Field(None, max_length=64)
    salary: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    currency: Optional[str] = Field(None, max_length=8)
    payment_date: Optional[date] = None
    is_paid: Optional[bool] = None
    assigned_months: Optional[List[MonthToken]] = None


class EmployeeRead(ORMModel):
    id: str
    employee_name: str
    employee_number: Optional[str] = None
    salary: Decimal
    currency: str
    payment_date: Optional[date] = None
    is_paid: bool
    assigned_months: List[str]
    created_date: datetime
    created_by: Optional[str] = None


# expense types


class ExpenseTypeCreate(RequestModel):
    type_name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("blue", max_length=32)


class ExpenseTypeUpdate(RequestModel):
    type_name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=32)


class ExpenseTypeRead(ORMModel):
    id: str
    type_name: str
    color: str
    created_date: datetime
    created_by: Optional[str] = None


# app settings


class AppSettingUpsert(RequestModel):
    setting_key: str = Field(..., min_length=1, max_length=100)
    setting_value: Optional[str] = None
    setting_category: Optional[str] = Field(None, max_length=64)
    description: Optional[str] = None


class AppSettingRead(ORMModel):
    id: str
    setting_key: str
    setting_value: Optional[str] = None
    setting_category: str
    description: Optional[str] = None
    created_date: datetime
    created_by: Optional[str] = None


# print templates


class PrintTemplateCreate(RequestModel):
    template_name: str = Field(..., min_length=1, max_length=255)
    template_type: str = Field(..., min_length=1, max_length=64)
    html_content: Optional[str] = None
    css_content: Optional[str] = None
    is_default: bool = False
    description: Optional[str] = None


class PrintTemplateUpdate(RequestModel):
    template_name: Optional[str] = Field(None, min_length=1, max_length=255)
    template_type: Optional[str] = Field(None, min_length=1, max_length=64)
    html_content: Optional[str] = None
    css_content: Optional[str] = None
    is_default: Optional[bool] = None
    description: Optional[str] = None


class PrintTemplateRead(ORMModel):
    id: str
    template_name: str
    template_type: str
    html_content: Optional[str] = None
    css_content: Optional[str] = None
    is_default: bool
    description: Optional[str] = None
    created_date: datetime
    created_by: Optional[str] = None


# users


class UserUpdate(RequestModel):
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    full_name: Optional[str] = Field(None, max_length=255)
    role: Optional[Literal["admin", "user"]] = None
    password: Optional[str] = Field(None, min_length=6)


class UserRead(ORMModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    created_date: datetime


# backup


BackupFormat = Literal["json", "sql"]


class BackupEmailRequest(RequestModel):
    email: Optional[str] = None
    format: BackupFormat = "json"
    month: Optional[MonthToken] = None


class BackupDocument(BaseModel):
    drivers: List[DriverRead]
    expenses: List[ExpenseRead]
    employees: List[EmployeeRead]
    expense_types: List[ExpenseTypeRead]
    app_settings: List[AppSettingRead]
    print_templates: List[PrintTemplateRead]
    exported_at: datetime
    month: str
