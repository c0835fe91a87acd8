from __future__ import annotations

from decimal import Decimal
from unittest import mock

import pytest

from fleetbook import auth
from fleetbook.client import FleetbookClient


@pytest.fixture()
def api(anonymous_client, admin_user):
    return FleetbookClient(base_url="", token=auth.create_access_token(admin_user), session=anonymous_client)


def test_driver_round_trip_through_client(api):
    driver = api.create_driver({"driver_name": "Ali", "driver_number": "C1", "hourly_rate": "10"})
    expense = api.create_expense(
        {"expense_date": "2024-02-10", "driver_id": driver["id"], "expense_type": "Work hours", "hours": "5", "hourly_rate": "10"}
    )

    assert api.bulk_update_rates([driver["id"]], hourly_rate="12") == {"message": "Rates updated successfully"}
    assert Decimal(api.get_expense(expense["id"])["amount"]) == Decimal("60")
    assert [d["driver_number"] for d in api.list_drivers()] == ["C1"]


def test_expense_listing_drops_empty_filters(api):
    api.create_expense({"expense_date": "2024-02-10", "expense_type": "Fuel", "amount": "5"})
    page = api.list_expenses(month="2024-02", driver_id=None)
    assert page["pagination"]["total"] == 1


def test_export_backup_returns_body_and_filename(api):
    body, filename = api.export_backup("sql", month="2024-02")
    assert filename.startswith("backup_")
    assert filename.endswith(".sql")
    assert body.startswith(b"-- Expense Tracking System Database Backup")


def test_email_backup(api, mailer):
    assert api.email_backup("owner@example.com") == {"message": "Backup sent to email successfully"}
    assert mailer.sent[0]["recipient"] == "owner@example.com"


def test_client_sends_bearer_token_and_prefix():
    session = mock.Mock()
    session.request.return_value.json.return_value = []
    client = FleetbookClient(base_url="http://fleet.example/", token="abc", session=session, timeout=3)

    assert client.list_drivers() == []

    session.request.assert_called_once_with(
        "GET",
        "http://fleet.example/api/drivers",
        headers={"Authorization": "Bearer abc"},
        timeout=3,
    )
    session.request.return_value.raise_for_status.assert_called_once_with()


def test_client_without_token_sends_no_auth_header():
    session = mock.Mock()
    client = FleetbookClient(session=session)
    client.delete_driver("x")
    assert session.request.call_args.kwargs["headers"] == {}
