from __future__ import annotations

import json
import logging
from decimal import Decimal

from fleetbook import log, rates, schemas


def test_json_formatter_includes_extras():
    record = logging.LogRecord("fleetbook.rates", logging.INFO, __file__, 1, "updated %d", (3,), None)
    record.duration_ms = "12.5"
    record.records = 3

    payload = json.loads(log.JsonLineFormatter().format(record))

    assert payload["message"] == "updated 3"
    assert payload["source"] == "fleetbook.rates"
    assert payload["duration_ms"] == 12.5
    assert payload["records"] == 3.0


def test_configure_logging_is_idempotent(monkeypatch):
    monkeypatch.delenv(log.LEVEL_ENV_FLAG, raising=False)
    monkeypatch.delenv(log.JSON_ENV_FLAG, raising=False)
    name = "fleetbook.test_configure"

    logger = log.configure_logging(level="warning", name=name)
    log.configure_logging(level="debug", name=name)

    console = [h for h in logger.handlers if getattr(h, "fleetbook_tag", None) == "console"]
    assert len(console) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is True
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_environment_level_wins(monkeypatch):
    monkeypatch.setenv(log.LEVEL_ENV_FLAG, "error")
    name = "fleetbook.test_env_level"

    logger = log.configure_logging(level="debug", name=name)

    assert logger.level == logging.ERROR
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_rate_cascade_logs_summary(caplog, db_session, make_driver, make_expense):
    driver = make_driver("L1")
    make_expense(driver, hours=1)

    with caplog.at_level(logging.INFO, logger="fleetbook.rates"):
        rates.bulk_update_rates(db_session, schemas.BulkRateUpdate(driver_ids=[driver.id], hourly_rate=Decimal("3")))

    records = [r for r in caplog.records if r.name == "fleetbook.rates"]
    assert records[-1].records == 1
    assert "recomputed 1 expense" in records[-1].getMessage()
