"""
Base exception types for Carebook.

Every error raised by the scheduling engine, the service layer or the
repositories derives from CarebookError. Each carries a machine-readable code
and the HTTP status the API layer should answer with.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional, Type


class CarebookError(Exception):
    """
    Base exception for all Carebook errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable slug (defaults to the class default_code).
        http_status: Suggested HTTP status for API responses (default 500).
        details: Extra context, e.g. the offending series id or draft index.
        cause: Optional chained exception.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.http_status = (
            http_status if http_status is not None else self.default_http_status
        )
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, code={self.code!r}, "
            f"http_status={self.http_status})"
        )

    def __str__(self) -> str:
        return self.message

    def to_dict(self, *, include_traceback: bool = True) -> dict[str, Any]:
        """Serialize for logging (with cause traceback) or API responses (without)."""
        out: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
        }
        if self.details:
            out["details"] = self.details
        if self.cause is not None:
            out["cause"] = str(self.cause)
            if include_traceback:
                out["cause_traceback"] = traceback.format_exception(
                    type(self.cause), self.cause, self.cause.__traceback__
                )
        return out


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[CarebookError] = CarebookError,
) -> Type[CarebookError]:
    """
    Create a new exception class on demand.

    Example:
        PaymentPendingError = exception_factory("PaymentPendingError", http_status=409)
        raise PaymentPendingError("Order has an unpaid invoice", details={"order_id": oid})
    """
    code = code or name.upper().replace(" ", "_")
    return type(
        name,
        (base,),
        {
            "default_code": code,
            "default_http_status": http_status,
        },
    )
