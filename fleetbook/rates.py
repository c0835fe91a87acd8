"""Bulk driver rate updates and the expense amount recomputation they trigger.

When a batch of drivers receives a new hourly rate, every expense of those
drivers that records ``hours`` is recomputed as ``hours x hourly_rate``.
Expenses without hours (fuel, repairs, flat fees) are left alone.

The overtime flag is ignored by default: an overtime expense is recomputed
with the plain hourly rate, exactly like a regular one. Deployments that
want overtime hours billed at the driver's overtime rate select the
``overtime_rate`` policy (``FLEETBOOK_OVERTIME_POLICY``).
"""
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from . import crud, models, schemas

LOG = logging.getLogger(__name__)


class OvertimePolicy(str, enum.Enum):
    FLAT = "flat"
    OVERTIME_RATE = "overtime_rate"


@dataclass(frozen=True)
class RateCascadeResult:
    drivers_updated: int
    expenses_recomputed: int


def _rate_for(
    expense: models.Expense,
    driver: models.Driver,
    hourly_rate: Decimal,
    policy: OvertimePolicy,
) -> Decimal:
    if policy is OvertimePolicy.OVERTIME_RATE and expense.is_overtime:
        return Decimal(driver.overtime_rate)
    return hourly_rate


def recompute_driver_expenses(
    session: Session,
    driver: models.Driver,
    hourly_rate: Decimal,
    policy: OvertimePolicy = OvertimePolicy.FLAT,
) -> int:
    """Set ``amount = hours x rate`` on every hour-based expense of ``driver``."""

    expenses = crud.hourly_expenses_for_driver(session, driver.id)
    for expense in expenses:
        expense.amount = Decimal(expense.hours) * _rate_for(expense, driver, hourly_rate, policy)
    return len(expenses)


def bulk_update_rates(
    session: Session,
    request: schemas.BulkRateUpdate,
    policy: OvertimePolicy | str = OvertimePolicy.FLAT,
) -> RateCascadeResult:
    """Apply new rates to a batch of drivers and cascade to their expenses.

    Every identifier is resolved before anything is written, so an unknown
    driver fails the whole batch with :class:`~fleetbook.errors.EntityNotFoundError`
    and leaves every record untouched. Rates absent from ``request`` keep
    their current value; expenses are only rescanned when ``hourly_rate``
    is given.
    """

    policy = OvertimePolicy(policy)
    started = time.perf_counter()
    driver_ids: List[str] = list(dict.fromkeys(request.driver_ids))
    drivers = [crud.get_driver(session, driver_id) for driver_id in driver_ids]

    hourly_rate: Optional[Decimal] = request.hourly_rate
    overtime_rate: Optional[Decimal] = request.overtime_rate
    if hourly_rate is None and overtime_rate is None:
        return RateCascadeResult(drivers_updated=0, expenses_recomputed=0)

    for driver in drivers:
        if hourly_rate is not None:
            driver.hourly_rate = hourly_rate
        if overtime_rate is not None:
            driver.overtime_rate = overtime_rate
    session.flush()

    recomputed = 0
    if hourly_rate is not None:
        for driver in drivers:
            recomputed += recompute_driver_expenses(session, driver, hourly_rate, policy)
        session.flush()

    LOG.info(
        "Updated rates for %d driver(s), recomputed %d expense(s)",
        len(drivers),
        recomputed,
        extra={"duration_ms": (time.perf_counter() - started) * 1000, "records": recomputed},
    )
    return RateCascadeResult(drivers_updated=len(drivers), expenses_recomputed=recomputed)


__all__ = ["OvertimePolicy", "RateCascadeResult", "bulk_update_rates", "recompute_driver_expenses"]
