"""Application setting endpoints, keyed by ``setting_key``."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import get_current_user
from .errors import translate_errors

router = APIRouter(prefix="/settings", tags=["settings"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[schemas.AppSettingRead])
def list_settings(db: Session = Depends(database.get_db)) -> List[schemas.AppSettingRead]:
    return crud.list_settings(db)


@router.post("", response_model=schemas.AppSettingRead)
def save_setting(
    setting_in: schemas.AppSettingUpsert,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.AppSettingRead:
    with translate_errors():
        return crud.upsert_setting(db, setting_in, actor=user.email)


@router.get("/{key}", response_model=schemas.AppSettingRead)
def get_setting(key: str, db: Session = Depends(database.get_db)) -> schemas.AppSettingRead:
    with translate_errors():
        return crud.get_setting(db, key)


@router.delete("/{key}", response_model=schemas.Message)
def delete_setting(key: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_setting(db, key)
    return schemas.Message(message="Setting deleted successfully")
