"""Print template endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import get_current_user
from .errors import translate_errors

router = APIRouter(prefix="/print-templates", tags=["print templates"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[schemas.PrintTemplateRead])
def list_templates(db: Session = Depends(database.get_db)) -> List[schemas.PrintTemplateRead]:
    return crud.list_templates(db)


@router.post("", response_model=schemas.PrintTemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    template_in: schemas.PrintTemplateCreate,
    db: Session = Depends(database.get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.PrintTemplateRead:
    return crud.create_template(db, template_in, actor=user.email)


@router.get("/{template_id}", response_model=schemas.PrintTemplateRead)
def get_template(template_id: str, db: Session = Depends(database.get_db)) -> schemas.PrintTemplateRead:
    with translate_errors():
        return crud.get_template(db, template_id)


@router.put("/{template_id}", response_model=schemas.PrintTemplateRead)
def update_template(
    template_id: str,
    update_in: schemas.PrintTemplateUpdate,
    db: Session = Depends(database.get_db),
) -> schemas.PrintTemplateRead:
    with translate_errors():
        return crud.update_template(db, template_id, update_in)


@router.post("/{template_id}/set-default", response_model=schemas.PrintTemplateRead)
def set_default_template(template_id: str, db: Session = Depends(database.get_db)) -> schemas.PrintTemplateRead:
    with translate_errors():
        return crud.set_default_template(db, template_id)


@router.delete("/{template_id}", response_model=schemas.Message)
def delete_template(template_id: str, db: Session = Depends(database.get_db)) -> schemas.Message:
    with translate_errors():
        crud.delete_template(db, template_id)
    return schemas.Message(message="Template deleted successfully")
