from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from fleetbook import crud, schemas


def test_create_and_list_drivers(db_session, make_driver):
    created = make_driver("A1", hourly_rate="12.5")
    assert created.id is not None
    assert created.currency == "IQD"
    assert created.created_by == "admin@example.com"

    drivers = crud.list_drivers(db_session)
    assert [d.driver_number for d in drivers] == ["A1"]
    assert drivers[0].hourly_rate == Decimal("12.50")


def test_duplicate_driver_number_is_a_conflict(db_session, make_driver):
    make_driver("A2")
    with pytest.raises(crud.EntityConflictError):
        make_driver("A2")


def test_create_expense_without_driver(db_session):
    expense_in = schemas.ExpenseCreate(expense_date=date(2024, 5, 2), expense_type="Fuel", amount=Decimal("3.50"))
    expense = crud.create_expense(db_session, expense_in)
    assert expense.driver_id is None
    assert expense.driver_name is None
    assert expense.amount == Decimal("3.50")


def test_create_expense_computes_amount_from_hours(db_session, make_driver, make_expense):
    driver = make_driver("A3", hourly_rate="7.25")
    expense = make_expense(driver, hours="3.5")
    assert expense.amount == Decimal("25.375")
    assert expense.hourly_rate == Decimal("7.25")


def test_create_expense_defaults_rate_to_driver_rate(db_session, make_driver):
    driver = make_driver("A7", hourly_rate="10")
    expense_in = schemas.ExpenseCreate(
        expense_date=date(2024, 2, 10), driver_id=driver.id, expense_type="Work hours", hours=Decimal("4")
    )

    expense = crud.create_expense(db_session, expense_in)

    assert expense.hourly_rate == Decimal("10")
    assert expense.amount == Decimal("40")


def test_create_expense_keeps_explicit_zero_rate(db_session, make_driver):
    driver = make_driver("A8", hourly_rate="10")
    expense_in = schemas.ExpenseCreate(
        expense_date=date(2024, 2, 10),
        driver_id=driver.id,
        expense_type="Volunteer hours",
        hours=Decimal("4"),
        hourly_rate=Decimal("0"),
    )

    expense = crud.create_expense(db_session, expense_in)

    assert expense.hourly_rate == Decimal("0")
    assert expense.amount == Decimal("0")


def test_create_expense_needs_amount_or_hours(db_session):
    with pytest.raises(crud.ValidationMissingError):
        crud.create_expense(db_session, schemas.ExpenseCreate(expense_date=date(2024, 5, 2), expense_type="Fuel"))


def test_deleting_driver_keeps_expense_snapshot(db_session, make_driver, make_expense):
    driver = make_driver("A4", driver_name="Karim")
    expense = make_expense(driver, amount=10)

    crud.delete_driver(db_session, driver.id)
    db_session.expire_all()

    with pytest.raises(crud.EntityNotFoundError):
        crud.get_driver(db_session, driver.id)
    kept = crud.get_expense(db_session, expense.id)
    assert kept.driver_name == "Karim"
    assert kept.driver_number == "A4"


def test_list_expenses_filters_combine(db_session, make_driver, make_expense):
    driver = make_driver("A5")
    make_expense(driver, amount=5, expense_date=date(2024, 1, 5), is_paid=True)
    make_expense(driver, amount=6, expense_date=date(2024, 1, 6), currency="USD")
    make_expense(driver, amount=7, expense_date=date(2024, 2, 1), expense_type="Tolls")

    january_unpaid = crud.list_expenses(db_session, schemas.ExpenseFilters(month="2024-01", is_paid=False))
    assert [e.amount for e in january_unpaid.data] == [Decimal("6")]

    usd = crud.list_expenses(db_session, schemas.ExpenseFilters(currency="USD"))
    assert usd.pagination.total == 1

    tolls = crud.list_expenses(db_session, schemas.ExpenseFilters(expense_type="Tolls"))
    assert tolls.data[0].expense_date == date(2024, 2, 1)


def test_empty_expense_page(db_session):
    page = crud.list_expenses(db_session)
    assert page.data == []
    assert page.pagination == schemas.Pagination(page=1, limit=20, total=0, pages=0)


def test_expenses_between_is_inclusive(db_session, make_expense):
    make_expense(amount=1, expense_date=date(2024, 1, 31))
    make_expense(amount=2, expense_date=date(2024, 2, 1))
    make_expense(amount=3, expense_date=date(2024, 2, 29))
    make_expense(amount=4, expense_date=date(2024, 3, 1))

    rows = crud.expenses_between(db_session, (date(2024, 2, 1), date(2024, 2, 29)))
    assert [e.amount for e in rows] == [Decimal("2"), Decimal("3")]
    assert len(crud.expenses_between(db_session, None)) == 4


def test_hourly_expenses_for_driver(db_session, make_driver, make_expense):
    driver = make_driver("A6")
    hourly = make_expense(driver, hours=2)
    make_expense(driver, amount=9)

    assert [e.id for e in crud.hourly_expenses_for_driver(db_session, driver.id)] == [hourly.id]


def test_bulk_soft_delete_and_purge(db_session, make_expense):
    first = make_expense(amount=1)
    second = make_expense(amount=2)

    assert crud.bulk_set_expenses_deleted(db_session, [first.id, second.id, "unknown"], deleted=True) == 2
    assert crud.get_expense(db_session, first.id).is_deleted is True
    assert crud.bulk_set_expenses_deleted(db_session, [], deleted=True) == 0

    assert crud.bulk_delete_expenses(db_session, [first.id]) == 1
    with pytest.raises(crud.EntityNotFoundError):
        crud.get_expense(db_session, first.id)
    assert crud.get_expense(db_session, second.id).is_deleted is True


def test_update_expense_rejects_unknown_driver(db_session, make_expense):
    expense = make_expense(amount=1)
    with pytest.raises(crud.EntityNotFoundError):
        crud.update_expense(db_session, expense.id, schemas.ExpenseUpdate(driver_id="ghost"))


def test_expense_type_names_are_unique(db_session):
    crud.create_expense_type(db_session, schemas.ExpenseTypeCreate(type_name="Fuel"))
    with pytest.raises(crud.EntityConflictError):
        crud.create_expense_type(db_session, schemas.ExpenseTypeCreate(type_name="Fuel", color="red"))


def test_upsert_setting_keeps_category_when_omitted(db_session):
    crud.upsert_setting(
        db_session,
        schemas.AppSettingUpsert(setting_key="currency", setting_value="IQD", setting_category="money"),
    )
    updated = crud.upsert_setting(db_session, schemas.AppSettingUpsert(setting_key="currency", setting_value="USD"))

    assert updated.setting_value == "USD"
    assert updated.setting_category == "money"
    assert len(crud.list_settings(db_session)) == 1


def test_update_template_to_default_clears_sibling(db_session):
    first = crud.create_template(
        db_session, schemas.PrintTemplateCreate(template_name="A", template_type="invoice", is_default=True)
    )
    second = crud.create_template(db_session, schemas.PrintTemplateCreate(template_name="B", template_type="invoice"))

    crud.update_template(db_session, second.id, schemas.PrintTemplateUpdate(is_default=True))

    db_session.refresh(first)
    assert first.is_default is False
    assert crud.get_template(db_session, second.id).is_default is True


def test_users_self_delete_and_unique_email(db_session, admin_user):
    with pytest.raises(crud.InvalidInputError):
        crud.delete_user(db_session, admin_user.id, acting_user_id=admin_user.id)
    assert crud.get_user_by_email(db_session, "admin@example.com").id == admin_user.id
    assert crud.get_user_by_email(db_session, "nobody@example.com") is None

    with pytest.raises(crud.EntityConflictError):
        crud.create_user(db_session, email="admin@example.com", password_hash="x")
