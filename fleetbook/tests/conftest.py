from __future__ import annotations

import os
import pathlib
import sys
from datetime import date
from decimal import Decimal
from typing import List, Optional

import pytest

os.environ.setdefault("FLEETBOOK_DATABASE_URL", "sqlite://")

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import fleetbook.models  # noqa: E402,F401  # Ensure models are registered with metadata
from fleetbook import auth, crud, database, schemas  # noqa: E402
from fleetbook.database import Base  # noqa: E402
from fleetbook.mailer import Attachment, get_mailer  # noqa: E402
from fleetbook.server import app  # noqa: E402


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: List[dict] = []

    def send(self, recipient: str, subject: str, body: str, attachment: Optional[Attachment] = None) -> None:
        self.sent.append({"recipient": recipient, "subject": subject, "body": body, "attachment": attachment})


@pytest.fixture(scope="session")
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    TestingSessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def admin_user(db_session):
    return crud.create_user(
        db_session,
        email="admin@example.com",
        password_hash=auth.hash_password("secret123"),
        full_name="Admin",
        role="admin",
    )


@pytest.fixture()
def regular_user(db_session):
    return crud.create_user(
        db_session,
        email="clerk@example.com",
        password_hash=auth.hash_password("secret123"),
        full_name="Clerk",
        role="user",
    )


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def anonymous_client(db_session, mailer):
    def override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def client(anonymous_client, admin_user):
    anonymous_client.headers["Authorization"] = f"Bearer {auth.create_access_token(admin_user)}"
    return anonymous_client


@pytest.fixture()
def make_driver(db_session):
    def factory(number: str = "D1", hourly_rate: str = "10", overtime_rate: str = "15", **extra):
        payload = {
            "driver_name": extra.pop("driver_name", f"Driver {number}"),
            "driver_number": number,
            "hourly_rate": Decimal(hourly_rate),
            "overtime_rate": Decimal(overtime_rate),
            **extra,
        }
        return crud.create_driver(db_session, schemas.DriverCreate(**payload), actor="admin@example.com")

    return factory


@pytest.fixture()
def make_expense(db_session):
    def factory(driver=None, *, hours=None, amount=None, expense_date=date(2024, 2, 10), **extra):
        payload = {
            "expense_date": expense_date,
            "driver_id": driver.id if driver is not None else None,
            "expense_type": extra.pop("expense_type", "Work hours" if hours is not None else "Fuel"),
            "hours": Decimal(str(hours)) if hours is not None else None,
            "hourly_rate": driver.hourly_rate if driver is not None else Decimal("0"),
            "amount": Decimal(str(amount)) if amount is not None else None,
            **extra,
        }
        return crud.create_expense(db_session, schemas.ExpenseCreate(**payload), actor="admin@example.com")

    return factory
