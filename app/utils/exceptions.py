"""
Exception types.

Every error the application reports to a user is an AppError subclass. Each
carries the HTTP status used by the web layer and the single corrective
action shown next to the message.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError


class AppError(Exception):
    """Base class for user-facing errors."""

    http_status = 500
    action = "Retry"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        payload: dict[str, Any] = {"message": self.message, "action": self.action}
        if self.context.get("errors"):
            payload["errors"] = self.context["errors"]
        return payload


class ValidationError(AppError):
    """Bad input shape or length."""

    http_status = 400
    action = "Fix the highlighted fields"


class NotFoundError(AppError):
    """Unknown token name."""

    http_status = 404
    action = "Go back and create a token page"


class WalletError(AppError):
    """Wallet not connected or provider unavailable."""

    http_status = 409
    action = "Reconnect wallet"


class TransactionFailedError(WalletError):
    """Signing or submission failed for a reason other than cancellation."""

    action = "Retry"


class InsufficientFundsError(WalletError):
    """Balance below fee plus buffer, before or after submission."""

    action = "Top up balance"

    def __init__(
        self,
        message: str,
        required: Decimal | None = None,
        current: Decimal | None = None,
    ) -> None:
        super().__init__(message, required=required, current=current)
        self.required = required
        self.current = current


class UserCancelledError(WalletError):
    """Signing rejected in the wallet."""

    action = "Retry"


class PaymentInProgressError(AppError):
    """A payment is already running or has completed."""

    http_status = 409
    action = "Wait for the current payment"


class PersistenceUnavailableError(AppError):
    """Backing store unreachable or timed out."""

    http_status = 503
    action = "Retry"


class UploadError(AppError):
    """Bad logo file type or size."""

    http_status = 400
    action = "Choose a JPEG, PNG or GIF under 5MB"


# Driver-level failures that mean the database cannot be reached
PERSISTENCE_FAILURES = (
    OperationalError,
    InterfaceError,
    TimeoutError,
    ConnectionError,
    OSError,
)


def is_persistence_failure(exc: BaseException) -> bool:
    """
    Check if exception means the database is unreachable.

    Args:
        exc: Exception to check

    Returns:
        True for connection errors, timeouts and invalidated connections
    """
    if isinstance(exc, PERSISTENCE_FAILURES):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)
