"""Expense type endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import get_current_user
from .errors import translate_errors

router = APIRouter(prefix="/expense-types", tags=["expense types"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[schemas.ExpenseTypeRead])
def list_expense_types(db: Session = Depends(database.get_db)) -> List[schemas.ExpenseTypeRead]:
    return crud.list_expense_types(db)


@router.post("", response_model=schemas.ExpenseTypeRead, status_code=status.HTTP_201_CREATED)
def create_expense_type(
    type_in: schemas.ExpenseTypeCreate,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.ExpenseTypeRead:
    with translate_errors():
        return crud.create_expense_type(db, type_in, actor=user.email)


@router.get("/{type_id}", response_model=schemas.ExpenseTypeRead)
def get_expense_type(type_id: str, db: Session = Depends(database.get_db)) -> schemas.ExpenseTypeRead:
    with translate_errors():
        return crud.get_expense_type(db, type_id)


@router.put("/{type_id}", response_model=schemas.ExpenseTypeRead)
def update_expense_type(
    type_id: str,
    update_in: schemas.ExpenseTypeUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.ExpenseTypeRead:
    with translate_errors():
        return crud.update_expense_type(db, type_id, update_in)


@router.delete("/{type_id}", response_model=schemas.Message)
def delete_expense_type(type_id: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_expense_type(db, type_id)
    return schemas.Message(message="Expense type deleted successfully")
