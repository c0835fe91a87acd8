"""Driver endpoints, including the bulk rate update."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, database, models, rates, schemas
from ..auth import get_current_user
from ..config import Settings, get_settings
from .errors import translate_errors

router = APIRouter(prefix="/drivers", tags=["drivers"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[schemas.DriverRead])
def list_drivers(db: Session = Depends(database.get_db)) -> List[schemas.DriverRead]:
    return crud.list_drivers(db)


@router.post("", response_model=schemas.DriverRead, status_code=status.HTTP_201_CREATED)
def create_driver(
    driver_in: schemas.DriverCreate,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.DriverRead:
    with translate_errors():
        return crud.create_driver(db, driver_in, actor=user.email)


@router.post("/bulk-update-rates", response_model=schemas.Message)
def bulk_update_rates(
    request: schemas.BulkRateUpdate,
    db: Session = Depends(database.get_db),
    settings: Settings = Depends(get_settings),
) -> schemas.Message:
    with translate_errors():
        rates.bulk_update_rates(db, request, policy=settings.overtime_policy)
    return schemas.Message(message="Rates updated successfully")


@router.get("/{driver_id}", response_model=schemas.DriverRead)
def get_driver(driver_id: str, db: Session = Depends(database.get_db)) -> schemas.DriverRead:
    with translate_errors():
        return crud.get_driver(db, driver_id)


@router.put("/{driver_id}", response_model=schemas.DriverRead)
def update_driver(
    driver_id: str,
    update_in: schemas.DriverUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.DriverRead:
    with translate_errors():
        return crud.update_driver(db, driver_id, update_in)


@router.delete("/{driver_id}", response_model=schemas.Message)
def delete_driver(driver_id: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_driver(db, driver_id)
    return schemas.Message(message="Driver deleted successfully")
