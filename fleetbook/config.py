"""Environment-driven configuration for the Fleetbook backend."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

ENV_PREFIX: Final[str] = "FLEETBOOK_"
DEFAULT_SQLITE_PATH: Final[Path] = Path(__file__).with_name("fleetbook.db")
DEFAULT_CORS_ORIGINS: Final[tuple[str, ...]] = (
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:5175",
)
OVERTIME_POLICIES: Final[frozenset[str]] = frozenset({"flat", "overtime_rate"})
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class MailSettings:
    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = "backup@localhost"
    use_tls: bool = True

    @property
    def configured(self) -> bool:
        return bool(self.host)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings resolved from ``FLEETBOOK_*`` variables."""

    database_url: str = f"sqlite:///{DEFAULT_SQLITE_PATH}"
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = 60 * 24
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    default_currency: str = "IQD"
    overtime_policy: str = "flat"
    log_level: str = "INFO"
    json_logs: bool = False
    mail: MailSettings = field(default_factory=MailSettings)

    def with_overrides(self, **changes: object) -> "Settings":
        """Return a copy with ``changes`` applied, re-validating the policy."""

        updated = replace(self, **changes)
        _check_policy(updated.overtime_policy)
        return updated


def _check_policy(policy: str) -> str:
    if policy not in OVERTIME_POLICIES:
        allowed = ", ".join(sorted(OVERTIME_POLICIES))
        raise ConfigurationError(f"Unknown overtime policy {policy!r}; expected one of: {allowed}")
    return policy


def _as_int(name: str, raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _as_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _as_list(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ

    def get(name: str) -> str | None:
        return env.get(f"{ENV_PREFIX}{name}")

    defaults = Settings()
    mail = MailSettings(
        host=get("MAIL_HOST") or "",
        port=_as_int("MAIL_PORT", get("MAIL_PORT"), MailSettings.port),
        user=get("MAIL_USER") or "",
        password=get("MAIL_PASSWORD") or "",
        sender=get("MAIL_FROM") or MailSettings.sender,
        use_tls=_as_bool(get("MAIL_USE_TLS"), True),
    )
    return Settings(
        database_url=get("DATABASE_URL") or defaults.database_url,
        jwt_secret=get("JWT_SECRET") or defaults.jwt_secret,
        jwt_algorithm=get("JWT_ALGORITHM") or defaults.jwt_algorithm,
        token_ttl_minutes=_as_int("TOKEN_TTL_MINUTES", get("TOKEN_TTL_MINUTES"), defaults.token_ttl_minutes),
        cors_origins=_as_list(get("CORS_ORIGINS"), defaults.cors_origins),
        default_currency=get("DEFAULT_CURRENCY") or defaults.default_currency,
        overtime_policy=_check_policy((get("OVERTIME_POLICY") or defaults.overtime_policy).strip().lower()),
        log_level=(get("LOG_LEVEL") or defaults.log_level).strip().upper(),
        json_logs=_as_bool(get("JSON_LOGS"), False),
        mail=mail,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""

    return load_settings()


__all__ = ["MailSettings", "Settings", "get_settings", "load_settings"]
