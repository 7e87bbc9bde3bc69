"""Error taxonomy for retry sessions.

Operation failures are never wrapped: once the retry budget is spent the
operation's own exception is re-raised unchanged. The types here cover the
outcomes the engine itself produces.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable classification of engine-produced failures."""
    CANCELLED = "CANCELLED"
    TIMED_OUT = "TIMED_OUT"


DEFAULT_CANCEL_REASON = "operation was cancelled"
TIMEOUT_MESSAGE = "operation timed out"


class RetryError(Exception):
    """Base class for failures raised by the retry engine itself."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RetryCancelled(RetryError):
    """Raised when a cancellation token is (or becomes) active.

    Attributes:
        reason: The token's stated cancellation reason, preserved as given
    """

    code = ErrorCode.CANCELLED

    def __init__(self, reason: object = DEFAULT_CANCEL_REASON) -> None:
        self.reason = reason
        super().__init__(str(reason))
        if isinstance(reason, BaseException):
            self.__cause__ = reason

    def __repr__(self) -> str:
        return f"RetryCancelled(reason={self.reason!r})"


class RetryTimeout(RetryError, TimeoutError):
    """Raised when the session's timeout watchdog fires before the loop settles.

    Independent of the loop's last rejection; carries only the configured
    timeout (milliseconds).
    """

    code = ErrorCode.TIMED_OUT

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        super().__init__(TIMEOUT_MESSAGE)

    def __repr__(self) -> str:
        return f"RetryTimeout(timeout={self.timeout!r})"
