"""Employee endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import get_current_user
from .errors import translate_errors

router = APIRouter(prefix="/employees", tags=["employees"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[schemas.EmployeeRead])
def list_employees(db: Session = Depends(database.get_db)) -> List[schemas.EmployeeRead]:
    return crud.list_employees(db)


@router.post("", response_model=schemas.EmployeeRead, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: schemas.EmployeeCreate,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.EmployeeRead:
    return crud.create_employee(db, employee_in, actor=user.email)


@router.get("/{employee_id}", response_model=schemas.EmployeeRead)
def get_employee(employee_id: str, db: Session = Depends(database.get_db)) -> schemas.EmployeeRead:
    with translate_errors():
        return crud.get_employee(db, employee_id)


@router.put("/{employee_id}", response_model=schemas.EmployeeRead)
def update_employee(
    employee_id: str,
    update_in: schemas.EmployeeUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.EmployeeRead:
    with translate_errors():
        return crud.update_employee(db, employee_id, update_in)


@router.delete("/{employee_id}", response_model=schemas.Message)
def delete_employee(employee_id: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_employee(db, employee_id)
    return schemas.Message(message="Employee deleted successfully")
