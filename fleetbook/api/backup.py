"""Backup download and e-mail endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from .. import backup, database, schemas
from ..auth import get_current_user
from ..mailer import Mailer, get_mailer
from .errors import translate_errors

router = APIRouter(prefix="/backup", tags=["backup"], dependencies=[Depends(get_current_user)])


@router.get("/export")
def export_backup(
    fmt: schemas.BackupFormat = Query("json", alias="format"),
    month: Optional[str] = Query(None, pattern=schemas.MONTH_PATTERN),
    db: Session = Depends(database.get_db),
) -> Response:
    with translate_errors():
        backup_file = backup.export_backup(db, fmt, month)
    return Response(
        content=backup_file.content,
        media_type=backup_file.media_type,
        headers={"Content-Disposition": f"attachment; filename={backup_file.filename}"},
    )


@router.post("/email", response_model=schemas.Message)
def email_backup(
    request: schemas.BackupEmailRequest,
    db: Session = Depends(database.get_db),
    mailer: Mailer = Depends(get_mailer),
) -> schemas.Message:
    with translate_errors():
        backup.email_backup(db, mailer, request.email, request.format, request.month)
    return schemas.Message(message="Backup sent to email successfully")
