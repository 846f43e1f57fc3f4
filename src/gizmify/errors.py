"""Full error hierarchy for the gizmify client.

Every public error class inherits from GizmifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.

Any URL stored in ``context`` has already been passed through
:func:`gizmify.utils.redact.redact_url`; credentials never appear there.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the client can raise."""

    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    API_ERROR = "API_ERROR"
    DESERIALIZATION_ERROR = "DESERIALIZATION_ERROR"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class GizmifyError(Exception):
    """Base exception for all gizmify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.

    Attributes
    ----------
    partial_results:
        Records that a multi-page call had already aggregated when the
        error was raised.  Empty for single-shot calls.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        self.partial_results: list[Any] = []
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------

class GizmifyTransportError(GizmifyError):
    """The remote endpoint could not be reached, or answered with a
    non-2xx HTTP status.  Retryable under the bounded budget.

    Context keys: ``url``, ``status_code`` (``None`` for network-level
    failures such as timeouts or refused connections).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

    @property
    def status_code(self) -> int | None:
        """HTTP status of a protocol-level failure, else ``None``."""
        return self.context.get("status_code")


class GizmifyApiError(GizmifyError):
    """The API answered at the transport level but declared
    ``result_ok = false`` or returned no payload where one was expected.

    Context keys: ``url``, ``page``, ``pages_fetched``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.API_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class GizmifyDeserializationError(GizmifyError):
    """The response body is not valid JSON or does not match the expected
    envelope / record shape.  Never retried.

    Context keys: ``url``, ``kind``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DESERIALIZATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class GizmifyRetryExhaustedError(GizmifyError):
    """All attempts allowed for one page fetch have failed.

    Context keys: ``attempts``, ``last_status_code``, ``url``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RETRY_EXHAUSTED,
            message=message,
            context=context,
            cause=cause,
        )
