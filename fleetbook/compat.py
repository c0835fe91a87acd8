"""Versioned mapping from legacy camelCase request keys to canonical names.

Request schemas use ``snake_case`` field names. Older clients post
``camelCase`` bodies (``driverName``, ``hourlyRate`` ...); this module is
the single place where those keys are rewritten. Each alias table is
frozen once published; a change to accepted keys gets a new version.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from .errors import MalformedValueError

_V1: Final[Mapping[str, str]] = MappingProxyType(
    {
        # drivers
        "driverName": "driver_name",
        "driverNumber": "driver_number",
        "hourlyRate": "hourly_rate",
        "overtimeRate": "overtime_rate",
        "assignedMonths": "assigned_months",
        "driverIds": "driver_ids",
        # expenses
        "expenseDate": "expense_date",
        "driverId": "driver_id",
        "expenseType": "expense_type",
        "isOvertime": "is_overtime",
        "isPaid": "is_paid",
        "isDeleted": "is_deleted",
        # employees
        "employeeName": "employee_name",
        "employeeNumber": "employee_number",
        "paymentDate": "payment_date",
        # expense types
        "typeName": "type_name",
        # settings
        "settingKey": "setting_key",
        "settingValue": "setting_value",
        "settingCategory": "setting_category",
        # print templates
        "templateName": "template_name",
        "templateType": "template_type",
        "htmlContent": "html_content",
        "cssContent": "css_content",
        "isDefault": "is_default",
        # users
        "fullName": "full_name",
    }
)

LEGACY_ALIASES: Final[Mapping[int, Mapping[str, str]]] = MappingProxyType({1: _V1})
CURRENT_VERSION: Final[int] = max(LEGACY_ALIASES)


def aliases_for(version: int | None = None) -> Mapping[str, str]:
    """Return the alias table for ``version`` (the current one by default)."""

    resolved = CURRENT_VERSION if version is None else version
    try:
        return LEGACY_ALIASES[resolved]
    except KeyError as exc:
        known = ", ".join(str(v) for v in sorted(LEGACY_ALIASES))
        raise MalformedValueError(f"Unknown compatibility version {resolved}; known: {known}") from exc


def normalize_payload(payload: Mapping[str, Any], version: int | None = None) -> dict[str, Any]:
    """Rewrite legacy keys of ``payload`` to their canonical names.

    The canonical key wins when a body carries both spellings. Keys that
    are not in the alias table are passed through unchanged.
    """

    table = aliases_for(version)
    normalized: dict[str, Any] = {}
    for key, value in payload.items():
        if key in table:
            continue
        normalized[key] = value
    for key, value in payload.items():
        canonical = table.get(key)
        if canonical is not None and canonical not in normalized:
            normalized[canonical] = value
    return normalized


__all__ = [
    "CURRENT_VERSION",
    "LEGACY_ALIASES",
    "aliases_for",
    "normalize_payload",
]
