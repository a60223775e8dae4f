"""Error type for bmlt_query.

Every failure raised by the library is a BmltQueryError. The kind of
failure is carried by ``error_type`` rather than by subclasses, together
with a ``retryable`` hint and a message suitable for end users.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    GEOCODING_ERROR = "GEOCODING_ERROR"
    RESPONSE_ERROR = "RESPONSE_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"


class BmltQueryError(Exception):
    """Base exception for all bmlt_query errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.NETWORK_ERROR,
        retryable: bool = False,
        user_message: Optional[str] = None,
        status_code: int = 0,
        cause: Optional[BaseException] = None,
    ):
        self.error_type = error_type
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause
        self._user_message = user_message
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)

    @property
    def user_message(self) -> str:
        """Human-readable summary, falling back to the technical message."""
        return self._user_message or str(self)

    def is_type(self, error_type: ErrorType | str) -> bool:
        return self.error_type == ErrorType(error_type)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({str(self)!r}, "
            f"error_type={self.error_type.value}, retryable={self.retryable})"
        )

    # ── Factories ─────────────────────────────────────────────────

    @classmethod
    def network_error(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> BmltQueryError:
        return cls(
            message,
            error_type=ErrorType.NETWORK_ERROR,
            retryable=True,
            user_message=(
                "Network connection failed. Please check your internet "
                "connection and try again."
            ),
            cause=cause,
        )

    @classmethod
    def timeout_error(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> BmltQueryError:
        return cls(
            message,
            error_type=ErrorType.TIMEOUT_ERROR,
            retryable=True,
            user_message="Request timed out. Please try again.",
            cause=cause,
        )

    @classmethod
    def validation_error(cls, message: str) -> BmltQueryError:
        return cls(
            message,
            error_type=ErrorType.VALIDATION_ERROR,
            retryable=False,
            user_message=message,
        )

    @classmethod
    def geocoding_error(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> BmltQueryError:
        return cls(
            message,
            error_type=ErrorType.GEOCODING_ERROR,
            retryable=True,
            user_message=(
                "Unable to find the specified address. Please check the "
                "address and try again."
            ),
            cause=cause,
        )

    @classmethod
    def response_error(
        cls,
        message: str,
        status_code: int = 0,
        cause: Optional[BaseException] = None,
    ) -> BmltQueryError:
        server_side = status_code >= 500
        return cls(
            message,
            error_type=ErrorType.RESPONSE_ERROR,
            retryable=server_side,
            user_message=(
                "Server error occurred. Please try again later."
                if server_side
                else "Invalid request. Please check your parameters."
            ),
            status_code=status_code,
            cause=cause,
        )

    @classmethod
    def rate_limit_error(cls, message: str) -> BmltQueryError:
        return cls(
            message,
            error_type=ErrorType.RATE_LIMIT_ERROR,
            retryable=True,
            user_message="Too many requests. Please wait a moment and try again.",
        )
