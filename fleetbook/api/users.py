"""User administration endpoints (admin only)."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import hash_password, require_admin
from .errors import translate_errors

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[schemas.UserRead])
def list_users(db: Session = Depends(database.get_db)) -> List[schemas.UserRead]:
    return crud.list_users(db)


@router.get("/{user_id}", response_model=schemas.UserRead)
def get_user(user_id: str, db: Session = Depends(database.get_db)) -> schemas.UserRead:
    with translate_errors():
        return crud.get_user(db, user_id)


@router.put("/{user_id}", response_model=schemas.UserRead)
def update_user(
    user_id: str,
    update_in: schemas.UserUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.UserRead:
    password_hash = hash_password(update_in.password) if update_in.password else None
    with translate_errors():
        return crud.update_user(db, user_id, update_in, password_hash=password_hash)


@router.delete("/{user_id}", response_model=schemas.Message)
def delete_user(
    user_id: str,
    db: Session = Depends(database.get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Message:
    with translate_errors():
        crud.delete_user(db, user_id, acting_user_id=admin.id)
    return schemas.Message(message="User deleted successfully")
