"""
Exception hierarchy shared by the BufPay helpers.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "BufPayError",
    "GatewayError",
    "ValidationError",
]


class BufPayError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(BufPayError, ValueError):
    """Raised when local input is incomplete, before any request is sent."""


class GatewayError(BufPayError):
    """
    Raised when the gateway cannot be reached or answers with a failure.

    The original exception, if any, is available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
