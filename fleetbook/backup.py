"""Backup export: gather every domain collection and serialize it.

Two formats are produced from the same :class:`~fleetbook.schemas.BackupDocument`:

``json``
    The document itself, pretty printed. Parsing it back with
    ``BackupDocument.model_validate_json`` yields the same collections.
``sql``
    One ``INSERT`` statement per record, grouped by table in a fixed
    order. Empty tables produce no output at all.

A month token (``YYYY-MM``) restricts the expenses to that calendar month;
the other collections are always exported in full.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import MalformedValueError, ValidationMissingError
from .mailer import Attachment, Mailer
from .periods import month_range, optional_month_range

LOG = logging.getLogger(__name__)

TABLE_ORDER = ("drivers", "expenses", "employees", "expense_types", "app_settings", "print_templates")
MEDIA_TYPES = {"json": "application/json", "sql": "application/sql"}


@dataclass(frozen=True)
class BackupFile:
    filename: str
    media_type: str
    content: str

    def as_attachment(self) -> Attachment:
        return Attachment(filename=self.filename, content=self.content.encode("utf-8"), media_type=self.media_type)


def _all(session: Session, model: type) -> List[Any]:
    return list(session.scalars(select(model).order_by(model.created_date)))


def gather(session: Session, month: Optional[str] = None, now: Optional[datetime] = None) -> schemas.BackupDocument:
    """Read the six collections into a single consistent document."""

    period = optional_month_range(month)
    document = schemas.BackupDocument(
        drivers=[schemas.DriverRead.model_validate(row) for row in _all(session, models.Driver)],
        expenses=[schemas.ExpenseRead.model_validate(row) for row in crud.expenses_between(session, period)],
        employees=[schemas.EmployeeRead.model_validate(row) for row in _all(session, models.Employee)],
        expense_types=[schemas.ExpenseTypeRead.model_validate(row) for row in _all(session, models.ExpenseType)],
        app_settings=[schemas.AppSettingRead.model_validate(row) for row in _all(session, models.AppSetting)],
        print_templates=[schemas.PrintTemplateRead.model_validate(row) for row in _all(session, models.PrintTemplate)],
        exported_at=now or datetime.now(UTC),
        month=month or "all",
    )
    LOG.info(
        "Gathered backup for month=%s: %d drivers, %d expenses",
        document.month,
        len(document.drivers),
        len(document.expenses),
        extra={"records": sum(len(getattr(document, name)) for name in TABLE_ORDER)},
    )
    return document


def to_json(document: schemas.BackupDocument) -> str:
    return document.model_dump_json(indent=2)


def sql_literal(value: Any) -> str:
    """Encode a Python value as a SQL literal."""

    if value is None:
        return "NULL"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (datetime, date)):
        return f"'{value.isoformat()}'"
    if isinstance(value, (list, tuple)):
        return "'{" + ",".join(str(item) for item in value) + "}'"
    return str(value)


def insert_statements(table: str, rows: Iterable[Mapping[str, Any]]) -> str:
    """Return the ``INSERT`` block for ``table``, or ``""`` when ``rows`` is empty."""

    lines = []
    for row in rows:
        columns = ", ".join(row.keys())
        values = ", ".join(sql_literal(value) for value in row.values())
        lines.append(f"INSERT INTO {table} ({columns}) VALUES ({values});")
    if not lines:
        return ""
    return f"-- {table} Table\n" + "\n".join(lines) + "\n\n"


def to_sql(document: schemas.BackupDocument) -> str:
    data = document.model_dump()
    parts = [
        "-- Expense Tracking System Database Backup\n",
        f"-- Generated: {document.exported_at.isoformat()}\n",
        f"-- Month: {document.month if document.month != 'all' else 'All'}\n\n",
    ]
    for table in TABLE_ORDER:
        parts.append(insert_statements(table, data[table]))
    return "".join(parts)


def render(document: schemas.BackupDocument, fmt: str = "json") -> BackupFile:
    """Serialize ``document`` into a named file body."""

    if fmt not in MEDIA_TYPES:
        raise MalformedValueError(f"Unsupported backup format {fmt!r}; expected json or sql")
    content = to_json(document) if fmt == "json" else to_sql(document)
    stamp = int(document.exported_at.timestamp() * 1000)
    return BackupFile(filename=f"backup_{stamp}.{fmt}", media_type=MEDIA_TYPES[fmt], content=content)


def export_backup(session: Session, fmt: str = "json", month: Optional[str] = None) -> BackupFile:
    return render(gather(session, month), fmt)


def summary_body(document: schemas.BackupDocument) -> str:
    return (
        "Your database backup is attached.\n\n"
        "Total Records:\n"
        f"- Drivers: {len(document.drivers)}\n"
        f"- Expenses: {len(document.expenses)}\n"
        f"- Employees: {len(document.employees)}\n"
        f"- Expense Types: {len(document.expense_types)}"
    )


def email_backup(
    session: Session,
    mailer: Mailer,
    recipient: Optional[str],
    fmt: str = "json",
    month: Optional[str] = None,
) -> BackupFile:
    """Build a backup and mail it to ``recipient`` as an attachment.

    The recipient, format and month are checked before anything is read
    from the database.
    """

    recipient = (recipient or "").strip()
    if not recipient:
        raise ValidationMissingError("Email address required")
    if fmt not in MEDIA_TYPES:
        raise MalformedValueError(f"Unsupported backup format {fmt!r}; expected json or sql")
    if month:
        month_range(month)

    document = gather(session, month)
    backup_file = render(document, fmt)
    subject = f"Database Backup - {document.exported_at.date().isoformat()}"
    mailer.send(recipient, subject, summary_body(document), backup_file.as_attachment())
    LOG.info("Backup %s sent to %s", backup_file.filename, recipient)
    return backup_file


__all__ = [
    "BackupFile",
    "email_backup",
    "export_backup",
    "gather",
    "insert_statements",
    "month_range",
    "render",
    "sql_literal",
    "summary_body",
    "to_json",
    "to_sql",
]
