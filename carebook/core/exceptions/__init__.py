"""
Carebook exception system.

Usage:
    from carebook.core.exceptions import CarebookError, OrderNotFoundError, exception_factory

    raise OrderNotFoundError("Order not found", details={"order_id": str(order_id)})

    # Add new type on demand
    PaymentPendingError = exception_factory("PaymentPendingError", http_status=409)
"""
from carebook.core.exceptions.base import CarebookError, exception_factory
from carebook.core.exceptions.errors import (
    CaregiverNotFoundError,
    ConfigurationError,
    ConflictError,
    ExpansionError,
    ExternalServiceError,
    InvalidEventDraftError,
    InvalidRecurrencyError,
    NotFoundError,
    OrderNotFoundError,
    OwnerNotFoundError,
    SeriesNotFoundError,
    UnsupportedEndConditionError,
    ValidationError,
)

__all__ = [
    "CarebookError",
    "exception_factory",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ExternalServiceError",
    "ExpansionError",
    "OrderNotFoundError",
    "CaregiverNotFoundError",
    "InvalidRecurrencyError",
    "InvalidEventDraftError",
    "UnsupportedEndConditionError",
    "SeriesNotFoundError",
    "OwnerNotFoundError",
]
