"""Fleetbook: REST backend for fleet expense tracking."""

__all__ = [
    "api",
    "auth",
    "backup",
    "client",
    "compat",
    "config",
    "crud",
    "database",
    "errors",
    "log",
    "mailer",
    "models",
    "periods",
    "rates",
    "schemas",
    "server",
]
