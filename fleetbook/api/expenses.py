"""Expense endpoints: filtered listing, soft delete and bulk operations."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import get_current_user
from .errors import translate_errors

router = APIRouter(prefix="/expenses", tags=["expenses"], dependencies=[Depends(get_current_user)])


def expense_filters(
    month: Optional[str] = Query(None, pattern=schemas.MONTH_PATTERN),
    driver_id: Optional[str] = None,
    expense_type: Optional[str] = None,
    currency: Optional[str] = None,
    is_paid: Optional[bool] = None,
    is_deleted: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=1000),
) -> schemas.ExpenseFilters:
    return schemas.ExpenseFilters(
        month=month,
        driver_id=driver_id,
        expense_type=expense_type,
        currency=currency,
        is_paid=is_paid,
        is_deleted=is_deleted,
        search=search,
        page=page,
        limit=limit,
    )


@router.get("", response_model=schemas.ExpensePage)
def list_expenses(
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(database.get_db),
) -> schemas.ExpensePage:
    with translate_errors():
        return crud.list_expenses(db, filters)


@router.post("", response_model=schemas.ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.ExpenseRead:
    with translate_errors():
        return crud.create_expense(db, expense_in, actor=user.email)


@router.post("/bulk-delete", response_model=schemas.Message)
def bulk_delete(ids_in: schemas.IdList, db: Session = Depends(database.get_db)) -> schemas.Message:
    crud.bulk_set_expenses_deleted(db, ids_in.ids, deleted=True)
    return schemas.Message(message="Expenses deleted successfully")


@router.post("/bulk-restore", response_model=schemas.Message)
def bulk_restore(ids_in: schemas.IdList, db: Session = Depends(database.get_db)) -> schemas.Message:
    crud.bulk_set_expenses_deleted(db, ids_in.ids, deleted=False)
    return schemas.Message(message="Expenses restored successfully")


@router.post("/bulk-permanent-delete", response_model=schemas.Message)
def bulk_permanent_delete(ids_in: schemas.IdList, db: Session = Depends(database.get_db)) -> schemas.Message:
    crud.bulk_delete_expenses(db, ids_in.ids)
    return schemas.Message(message="Expenses permanently deleted")


@router.get("/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    with translate_errors():
        return crud.get_expense(db, expense_id)


@router.put("/{expense_id}", response_model=schemas.ExpenseRead)
def update_expense(
    expense_id: str,
    update_in: schemas.ExpenseUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.ExpenseRead:
    with translate_errors():
        return crud.update_expense(db, expense_id, update_in)


@router.post("/{expense_id}/soft-delete", response_model=schemas.ExpenseRead)
def soft_delete_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    with translate_errors():
        return crud.set_expense_deleted(db, expense_id, deleted=True)


@router.post("/{expense_id}/restore", response_model=schemas.ExpenseRead)
def restore_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    with translate_errors():
        return crud.set_expense_deleted(db, expense_id, deleted=False)


@router.delete("/{expense_id}", response_model=schemas.Message)
def delete_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_expense(db, expense_id)
    return schemas.Message(message="Expense permanently deleted")
