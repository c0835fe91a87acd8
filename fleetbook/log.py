"""Logging setup for the Fleetbook backend.

Every module logs through ``logging.getLogger(__name__)``; the server calls
:func:`configure_logging` once at startup. Records always reach the
console. With ``FLEETBOOK_JSON_LOGS`` set (or ``json_format=True``) they
are also appended to ``logs/fleetbook.log`` as one JSON object per line,
carrying the numeric ``duration_ms`` and ``records`` extras when present.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

ROOT_LOGGER: Final[str] = "fleetbook"
CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL: Final[str] = "INFO"
LOG_DIR: Final[Path] = Path("logs")
LOG_PATH: Final[Path] = LOG_DIR / f"{ROOT_LOGGER}.log"
JSON_ENV_FLAG: Final[str] = "FLEETBOOK_JSON_LOGS"
LEVEL_ENV_FLAG: Final[str] = "FLEETBOOK_LOG_LEVEL"
NUMERIC_EXTRAS: Final[tuple[str, ...]] = ("duration_ms", "records")


class JsonLineFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        for key in NUMERIC_EXTRAS:
            entry[key] = _as_float(getattr(record, key, None))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _as_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _level_from(level: str | int | None) -> int:
    """The environment wins over ``level``; unknown names fall back to INFO."""

    requested: str | int = os.environ.get(LEVEL_ENV_FLAG) or level or DEFAULT_LEVEL
    if isinstance(requested, int):
        return requested
    return logging.getLevelNamesMapping().get(requested.strip().upper(), logging.INFO)


def _json_requested(explicit: bool) -> bool:
    flag = os.environ.get(JSON_ENV_FLAG, "")
    return explicit or flag.strip().lower() in {"1", "true", "yes", "on"}


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _json_file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    handler.setFormatter(JsonLineFormatter())
    return handler


def _install(logger: logging.Logger, tag: str, build: Callable[[], logging.Handler], level: int) -> None:
    """Add the handler tagged ``tag`` once; later calls only move its level."""

    for handler in logger.handlers:
        if getattr(handler, "fleetbook_tag", None) == tag:
            handler.setLevel(level)
            return
    handler = build()
    handler.fleetbook_tag = tag  # type: ignore[attr-defined]
    handler.setLevel(level)
    logger.addHandler(handler)


def configure_logging(
    json_format: bool = False,
    level: str | int | None = None,
    name: str = ROOT_LOGGER,
) -> logging.Logger:
    """Configure the ``name`` logger and return it.

    Safe to call repeatedly. The logger keeps propagating so that
    pytest's ``caplog`` captures package records.
    """

    resolved = _level_from(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved)
    logger.propagate = True
    _install(logger, "console", _console_handler, resolved)
    if _json_requested(json_format):
        _install(logger, "json", _json_file_handler, resolved)
    return logger


__all__ = ["JsonLineFormatter", "configure_logging"]
