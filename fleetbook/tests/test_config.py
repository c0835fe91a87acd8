from __future__ import annotations

import pytest

from fleetbook.config import DEFAULT_CORS_ORIGINS, Settings, load_settings
from fleetbook.errors import ConfigurationError


def test_defaults_without_environment():
    settings = load_settings({})
    assert settings.default_currency == "IQD"
    assert settings.overtime_policy == "flat"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.database_url.startswith("sqlite:///")
    assert settings.mail.configured is False


def test_environment_overrides():
    settings = load_settings(
        {
            "FLEETBOOK_DATABASE_URL": "postgresql://db/fleet",
            "FLEETBOOK_TOKEN_TTL_MINUTES": "15",
            "FLEETBOOK_CORS_ORIGINS": "https://a.example, https://b.example,",
            "FLEETBOOK_OVERTIME_POLICY": "Overtime_Rate",
            "FLEETBOOK_LOG_LEVEL": "debug",
            "FLEETBOOK_JSON_LOGS": "yes",
            "FLEETBOOK_MAIL_HOST": "smtp.example",
            "FLEETBOOK_MAIL_PORT": "2525",
            "FLEETBOOK_MAIL_USE_TLS": "false",
        }
    )
    assert settings.database_url == "postgresql://db/fleet"
    assert settings.token_ttl_minutes == 15
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.overtime_policy == "overtime_rate"
    assert settings.log_level == "DEBUG"
    assert settings.json_logs is True
    assert settings.mail.configured is True
    assert settings.mail.port == 2525
    assert settings.mail.use_tls is False


def test_bad_integer_is_reported_with_variable_name():
    with pytest.raises(ConfigurationError, match="FLEETBOOK_MAIL_PORT"):
        load_settings({"FLEETBOOK_MAIL_PORT": "smtp"})


def test_unknown_overtime_policy_is_rejected():
    with pytest.raises(ConfigurationError):
        load_settings({"FLEETBOOK_OVERTIME_POLICY": "double"})
    with pytest.raises(ConfigurationError):
        Settings().with_overrides(overtime_policy="double")


def test_with_overrides_returns_copy():
    base = Settings()
    changed = base.with_overrides(default_currency="USD")
    assert changed.default_currency == "USD"
    assert base.default_currency == "IQD"
