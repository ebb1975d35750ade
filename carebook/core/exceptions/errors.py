"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from carebook.core.exceptions.base import CarebookError


class ConfigurationError(CarebookError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(CarebookError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class NotFoundError(CarebookError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class ConflictError(CarebookError):
    """Resource state conflict (e.g. series already generated for an order)."""

    default_code = "CONFLICT"
    default_http_status = 409


class ExternalServiceError(CarebookError):
    """Database or another backing service failed."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    default_http_status = 502


# ── Scheduling ────────────────────────────────────────────────────────────────


class ExpansionError(CarebookError):
    """Expanding a series into events failed; no events were produced."""

    default_code = "EXPANSION_ERROR"
    default_http_status = 422


class OrderNotFoundError(NotFoundError, ExpansionError):
    """The order referenced by a series does not exist."""

    default_code = "ORDER_NOT_FOUND"
    default_http_status = 404


class CaregiverNotFoundError(NotFoundError, ExpansionError):
    """The caregiver referenced by an order does not exist."""

    default_code = "CAREGIVER_NOT_FOUND"
    default_http_status = 404


class InvalidRecurrencyError(ValidationError, ExpansionError):
    """Recurrency code is not one of 0, 1, 2 or 4."""

    default_code = "INVALID_RECURRENCY"
    default_http_status = 422


class InvalidEventDraftError(ValidationError, ExpansionError):
    """A generated event failed validation; the whole batch is rejected."""

    default_code = "INVALID_EVENT_DRAFT"
    default_http_status = 422


class UnsupportedEndConditionError(ValidationError, ExpansionError):
    """End condition kind the engine does not expand ("after N occurrences")."""

    default_code = "UNSUPPORTED_END_CONDITION"
    default_http_status = 422


# ── Service layer ─────────────────────────────────────────────────────────────


class SeriesNotFoundError(NotFoundError):
    """Event series not found."""

    default_code = "SERIES_NOT_FOUND"


class OwnerNotFoundError(NotFoundError):
    """Health unit or collaborator owning a series not found."""

    default_code = "OWNER_NOT_FOUND"
