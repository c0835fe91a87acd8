"""CRUD helper functions for the Fleetbook backend.

Every function takes the request's :class:`~sqlalchemy.orm.Session` first,
flushes its changes and leaves committing to the session scope.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .config import get_settings
from .errors import EntityConflictError, EntityNotFoundError, InvalidInputError, ValidationMissingError
from .periods import month_range

ModelT = TypeVar("ModelT", bound=models.Base)


def _get(session: Session, model: Type[ModelT], entity_id: str, label: str) -> ModelT:
    entity = session.get(model, entity_id)
    if entity is None:
        raise EntityNotFoundError(f"{label} {entity_id} not found")
    return entity


def _flush(session: Session, conflict_message: str) -> None:
    try:
        session.flush()
    except IntegrityError as exc:  # pragma: no cover - simple mapping
        raise EntityConflictError(conflict_message) from exc


def _apply(entity: models.Base, update_in: schemas.RequestModel) -> None:
    """Copy the fields the client sent; ``null`` only clears nullable columns."""
    columns = entity.__table__.c
    for field, value in update_in.model_dump(exclude_unset=True).items():
        if value is None and not columns[field].nullable:
            continue
        setattr(entity, field, value)


def _currency(value: Optional[str]) -> str:
    return value or get_settings().default_currency


# drivers


def list_drivers(session: Session) -> List[models.Driver]:
    stmt = select(models.Driver).order_by(models.Driver.created_date.desc())
    return list(session.scalars(stmt))


def get_driver(session: Session, driver_id: str) -> models.Driver:
    return _get(session, models.Driver, driver_id, "Driver")


def create_driver(session: Session, driver_in: schemas.DriverCreate, actor: Optional[str] = None) -> models.Driver:
    data = driver_in.model_dump()
    data["currency"] = _currency(data["currency"])
    driver = models.Driver(**data, created_by=actor)
    session.add(driver)
    _flush(session, "Driver number must be unique")
    session.refresh(driver)
    return driver


def update_driver(session: Session, driver_id: str, update_in: schemas.DriverUpdate) -> models.Driver:
    driver = get_driver(session, driver_id)
    _apply(driver, update_in)
    _flush(session, "Driver number must be unique")
    session.refresh(driver)
    return driver


def delete_driver(session: Session, driver_id: str) -> None:
    driver = get_driver(session, driver_id)
    session.delete(driver)
    session.flush()


# expenses


def _expense_conditions(filters: schemas.ExpenseFilters) -> list:
    conditions = []
    if filters.month:
        first_day, last_day = month_range(filters.month)
        conditions.append(models.Expense.expense_date.between(first_day, last_day))
    if filters.driver_id:
        conditions.append(models.Expense.driver_id == filters.driver_id)
    if filters.expense_type:
        conditions.append(models.Expense.expense_type == filters.expense_type)
    if filters.currency:
        conditions.append(models.Expense.currency == filters.currency)
    if filters.is_paid is not None:
        conditions.append(models.Expense.is_paid == filters.is_paid)
    if filters.is_deleted is not None:
        conditions.append(models.Expense.is_deleted == filters.is_deleted)
    if filters.search:
        pattern = f"%{filters.search.lower()}%"
        conditions.append(
            or_(
                func.lower(models.Expense.driver_name).like(pattern),
                func.lower(models.Expense.driver_number).like(pattern),
                func.lower(models.Expense.description).like(pattern),
            )
        )
    return conditions


def list_expenses(session: Session, filters: Optional[schemas.ExpenseFilters] = None) -> schemas.ExpensePage:
    filters = filters or schemas.ExpenseFilters()
    conditions = _expense_conditions(filters)

    total = session.scalar(select(func.count()).select_from(models.Expense).where(*conditions)) or 0
    stmt = (
        select(models.Expense)
        .where(*conditions)
        .order_by(models.Expense.expense_date.desc(), models.Expense.created_date.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    expenses = [schemas.ExpenseRead.model_validate(expense) for expense in session.scalars(stmt)]
    return schemas.ExpensePage(
        data=expenses,
        pagination=schemas.Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            pages=math.ceil(total / filters.limit),
        ),
    )


def expenses_between(session: Session, period: Optional[Tuple]) -> List[models.Expense]:
    """All expenses, restricted to the inclusive ``(first, last)`` date range when given."""
    stmt = select(models.Expense).order_by(models.Expense.expense_date, models.Expense.created_date)
    if period is not None:
        first_day, last_day = period
        stmt = stmt.where(models.Expense.expense_date.between(first_day, last_day))
    return list(session.scalars(stmt))


def hourly_expenses_for_driver(session: Session, driver_id: str) -> List[models.Expense]:
    stmt = select(models.Expense).where(
        models.Expense.driver_id == driver_id,
        models.Expense.hours.is_not(None),
    )
    return list(session.scalars(stmt))


def get_expense(session: Session, expense_id: str) -> models.Expense:
    return _get(session, models.Expense, expense_id, "Expense")


def create_expense(session: Session, expense_in: schemas.ExpenseCreate, actor: Optional[str] = None) -> models.Expense:
    data = expense_in.model_dump()
    data["currency"] = _currency(data["currency"])
    driver = get_driver(session, data["driver_id"]) if data["driver_id"] else None
    if driver is not None:
        data["driver_name"] = data["driver_name"] or driver.driver_name
        data["driver_number"] = data["driver_number"] or driver.driver_number
    if data["hourly_rate"] is None:
        # An omitted rate snapshots the driver's current hourly rate.
        data["hourly_rate"] = driver.hourly_rate if driver is not None else Decimal("0")
    if data["amount"] is None:
        if data["hours"] is None:
            raise ValidationMissingError("Amount is required when hours are not given")
        data["amount"] = Decimal(data["hours"]) * Decimal(data["hourly_rate"])
    expense = models.Expense(**data, created_by=actor)
    session.add(expense)
    session.flush()
    session.refresh(expense)
    return expense


def update_expense(session: Session, expense_id: str, update_in: schemas.ExpenseUpdate) -> models.Expense:
    expense = get_expense(session, expense_id)
    if update_in.driver_id:
        get_driver(session, update_in.driver_id)
    _apply(expense, update_in)
    session.flush()
    session.refresh(expense)
    return expense


def set_expense_deleted(session: Session, expense_id: str, deleted: bool) -> models.Expense:
    expense = get_expense(session, expense_id)
    expense.is_deleted = deleted
    session.flush()
    session.refresh(expense)
    return expense


def delete_expense(session: Session, expense_id: str) -> None:
    expense = get_expense(session, expense_id)
    session.delete(expense)
    session.flush()


def bulk_set_expenses_deleted(session: Session, ids: Iterable[str], deleted: bool) -> int:
    ids = list(ids)
    if not ids:
        return 0
    stmt = (
        update(models.Expense)
        .where(models.Expense.id.in_(ids))
        .values(is_deleted=deleted)
        .execution_options(synchronize_session="fetch")
    )
    return session.execute(stmt).rowcount


def bulk_delete_expenses(session: Session, ids: Iterable[str]) -> int:
    ids = list(ids)
    if not ids:
        return 0
    stmt = delete(models.Expense).where(models.Expense.id.in_(ids)).execution_options(synchronize_session="fetch")
    return session.execute(stmt).rowcount


# employees


def list_employees(session: Session) -> List[models.Employee]:
    stmt = select(models.Employee).order_by(models.Employee.created_date.desc())
    return list(session.scalars(stmt))


def get_employee(session: Session, employee_id: str) -> models.Employee:
    return _get(session, models.Employee, employee_id, "Employee")


def create_employee(
    session: Session, employee_in: schemas.EmployeeCreate, actor: Optional[str] = None
) -> models.Employee:
    data = employee_in.model_dump()
    data["currency"] = _currency(data["currency"])
    employee = models.Employee(**data, created_by=actor)
    session.add(employee)
    session.flush()
    session.refresh(employee)
    return employee


def update_employee(session: Session, employee_id: str, update_in: schemas.EmployeeUpdate) -> models.Employee:
    employee = get_employee(session, employee_id)
    _apply(employee, update_in)
    session.flush()
    session.refresh(employee)
    return employee


def delete_employee(session: Session, employee_id: str) -> None:
    employee = get_employee(session, employee_id)
    session.delete(employee)
    session.flush()


# expense types


def list_expense_types(session: Session) -> List[models.ExpenseType]:
    stmt = select(models.ExpenseType).order_by(models.ExpenseType.created_date.desc())
    return list(session.scalars(stmt))


def get_expense_type(session: Session, type_id: str) -> models.ExpenseType:
    return _get(session, models.ExpenseType, type_id, "Expense type")


def create_expense_type(
    session: Session, type_in: schemas.ExpenseTypeCreate, actor: Optional[str] = None
) -> models.ExpenseType:
    expense_type = models.ExpenseType(**type_in.model_dump(), created_by=actor)
    session.add(expense_type)
    _flush(session, "Expense type name must be unique")
    session.refresh(expense_type)
    return expense_type


def update_expense_type(session: Session, type_id: str, update_in: schemas.ExpenseTypeUpdate) -> models.ExpenseType:
    expense_type = get_expense_type(session, type_id)
    _apply(expense_type, update_in)
    _flush(session, "Expense type name must be unique")
    session.refresh(expense_type)
    return expense_type


def delete_expense_type(session: Session, type_id: str) -> None:
    expense_type = get_expense_type(session, type_id)
    session.delete(expense_type)
    session.flush()


# app settings


def list_settings(session: Session) -> List[models.AppSetting]:
    stmt = select(models.AppSetting).order_by(models.AppSetting.setting_category, models.AppSetting.setting_key)
    return list(session.scalars(stmt))


def get_setting(session: Session, key: str) -> models.AppSetting:
    setting = session.scalar(select(models.AppSetting).where(models.AppSetting.setting_key == key))
    if setting is None:
        raise EntityNotFoundError(f"Setting {key} not found")
    return setting


def upsert_setting(session: Session, setting_in: schemas.AppSettingUpsert, actor: Optional[str] = None) -> models.AppSetting:
    """Create the setting, or update its value (and category/description when given)."""
    try:
        setting = get_setting(session, setting_in.setting_key)
    except EntityNotFoundError:
        setting = models.AppSetting(
            setting_key=setting_in.setting_key,
            setting_value=setting_in.setting_value,
            setting_category=setting_in.setting_category or "general",
            description=setting_in.description,
            created_by=actor,
        )
        session.add(setting)
    else:
        setting.setting_value = setting_in.setting_value
        if setting_in.setting_category:
            setting.setting_category = setting_in.setting_category
        if setting_in.description:
            setting.description = setting_in.description
    _flush(session, "Setting key must be unique")
    session.refresh(setting)
    return setting


def delete_setting(session: Session, key: str) -> None:
    setting = get_setting(session, key)
    session.delete(setting)
    session.flush()


# print templates


def list_templates(session: Session) -> List[models.PrintTemplate]:
    stmt = select(models.PrintTemplate).order_by(models.PrintTemplate.created_date.desc())
    return list(session.scalars(stmt))


def get_template(session: Session, template_id: str) -> models.PrintTemplate:
    return _get(session, models.PrintTemplate, template_id, "Template")


def _clear_default(session: Session, template_type: str, keep_id: Optional[str] = None) -> None:
    stmt = (
        update(models.PrintTemplate)
        .where(models.PrintTemplate.template_type == template_type, models.PrintTemplate.is_default.is_(True))
        .values(is_default=False)
        .execution_options(synchronize_session="fetch")
    )
    if keep_id is not None:
        stmt = stmt.where(models.PrintTemplate.id != keep_id)
    session.execute(stmt)


def create_template(
    session: Session, template_in: schemas.PrintTemplateCreate, actor: Optional[str] = None
) -> models.PrintTemplate:
    if template_in.is_default:
        _clear_default(session, template_in.template_type)
    template = models.PrintTemplate(**template_in.model_dump(), created_by=actor)
    session.add(template)
    session.flush()
    session.refresh(template)
    return template


def update_template(
    session: Session, template_id: str, update_in: schemas.PrintTemplateUpdate
) -> models.PrintTemplate:
    template = get_template(session, template_id)
    _apply(template, update_in)
    session.flush()
    if template.is_default:
        _clear_default(session, template.template_type, keep_id=template.id)
    session.refresh(template)
    return template


def set_default_template(session: Session, template_id: str) -> models.PrintTemplate:
    template = get_template(session, template_id)
    _clear_default(session, template.template_type, keep_id=template.id)
    template.is_default = True
    session.flush()
    session.refresh(template)
    return template


def delete_template(session: Session, template_id: str) -> None:
    template = get_template(session, template_id)
    session.delete(template)
    session.flush()


# users


def list_users(session: Session) -> List[models.User]:
    stmt = select(models.User).order_by(models.User.created_date.desc())
    return list(session.scalars(stmt))


def get_user(session: Session, user_id: str) -> models.User:
    return _get(session, models.User, user_id, "User")


def get_user_by_email(session: Session, email: str) -> Optional[models.User]:
    return session.scalar(select(models.User).where(models.User.email == email))


def create_user(
    session: Session, email: str, password_hash: str, full_name: Optional[str] = None, role: str = "user"
) -> models.User:
    user = models.User(email=email, password_hash=password_hash, full_name=full_name, role=role)
    session.add(user)
    _flush(session, "Email already registered")
    session.refresh(user)
    return user


def update_user(session: Session, user_id: str, update_in: schemas.UserUpdate, password_hash: Optional[str] = None) -> models.User:
    user = get_user(session, user_id)
    for field, value in update_in.model_dump(exclude_unset=True, exclude={"password"}).items():
        if value is not None:
            setattr(user, field, value)
    if password_hash is not None:
        user.password_hash = password_hash
    _flush(session, "Email already registered")
    session.refresh(user)
    return user


def delete_user(session: Session, user_id: str, acting_user_id: str) -> None:
    if user_id == acting_user_id:
        raise InvalidInputError("Cannot delete your own account")
    user = get_user(session, user_id)
    session.delete(user)
    session.flush()
