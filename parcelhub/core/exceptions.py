"""Application exceptions that are not plain HTTP errors.

Validation, lookup and permission failures are raised as
``fastapi.HTTPException`` where they happen. The classes here cover
failures of collaborators outside the process, which the app maps to a
status code in one place (see ``parcelhub.main``).
"""

from typing import Any


class ParcelHubError(Exception):
    """Base exception for application errors.

    Attributes:
        message: Client-safe description.
        context: Extra debug information, logged but never returned.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class WebpayError(ParcelHubError):
    """Raised when the Webpay gateway rejects a call or cannot be reached."""

    def __init__(
        self,
        message: str = "Payment gateway is unavailable",
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
