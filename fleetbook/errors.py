"""Exception hierarchy shared by the service layers."""
from __future__ import annotations


class FleetbookError(RuntimeError):
    """Base class for every error raised by the backend."""


class EntityNotFoundError(FleetbookError):
    """Raised when an entity cannot be located in the database."""


class EntityConflictError(FleetbookError):
    """Raised when a unique constraint is violated."""


class InvalidInputError(FleetbookError):
    """Raised when a request input cannot be accepted (HTTP 400)."""


class ValidationMissingError(InvalidInputError):
    """Raised when a required input is absent."""


class MalformedValueError(InvalidInputError):
    """Raised when an input is present but not in an accepted form."""


class UpstreamFailureError(FleetbookError):
    """Raised when the datastore or the mail transport fails."""


class ConfigurationError(FleetbookError):
    """Raised when the environment holds an invalid setting."""


__all__ = [
    "ConfigurationError",
    "EntityConflictError",
    "EntityNotFoundError",
    "FleetbookError",
    "InvalidInputError",
    "MalformedValueError",
    "UpstreamFailureError",
    "ValidationMissingError",
]
