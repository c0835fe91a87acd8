"""Calendar helpers for ``YYYY-MM`` month tokens."""
from __future__ import annotations

import calendar
import re
from datetime import date
from typing import Optional, Tuple

from .errors import MalformedValueError

_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def month_range(token: str) -> Tuple[date, date]:
    """Return the first and last calendar day of ``token`` (inclusive)."""
    match = _MONTH_RE.match(token or "")
    if match is None or match.group(1) == "0000":
        raise MalformedValueError(f"Invalid month {token!r}; expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def optional_month_range(token: Optional[str]) -> Optional[Tuple[date, date]]:
    if not token:
        return None
    return month_range(token)
