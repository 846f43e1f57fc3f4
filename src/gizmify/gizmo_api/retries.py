"""Bounded retry around a single page fetch.

A unit of work (one fetch attempt) returns a :class:`FetchOutcome`: either a
value or a classified :class:`GizmifyError`.  :class:`RetryPolicy` inspects
the error's code to decide what happens next:

* retryable (by default only ``TRANSPORT_ERROR``): record diagnostics,
  optionally back off, and try again;
* anything else: raise the error unchanged, immediately.

After ``max_attempts`` failed attempts the policy raises
:class:`GizmifyRetryExhaustedError` wrapping the last failure.  The unit of
work is never invoked more than ``max_attempts`` times.
"""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from gizmify.config import DEFAULT_MAX_ATTEMPTS, GizmifyConfig
from gizmify.errors import ErrorCode, GizmifyError, GizmifyRetryExhaustedError
from gizmify.observability import NoopMetricsHook, get_logger
from gizmify.utils.redact import redact_url

T = TypeVar("T")

log = get_logger("gizmify.retries")

Classifier = Callable[[GizmifyError], bool]


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Success-or-classified-error result of one fetch attempt."""

    value: T | None = None
    error: GizmifyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> FetchOutcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: GizmifyError) -> FetchOutcome[T]:
        return cls(error=error)

    @classmethod
    def capture(cls, fn: Callable[[], T]) -> FetchOutcome[T]:
        """Run *fn*, turning a raised :class:`GizmifyError` into a failure."""
        try:
            return cls.success(fn())
        except GizmifyError as exc:
            return cls.failure(exc)

    @classmethod
    async def capture_async(cls, fn: Callable[[], Awaitable[T]]) -> FetchOutcome[T]:
        try:
            return cls.success(await fn())
        except GizmifyError as exc:
            return cls.failure(exc)


def is_transport_failure(error: GizmifyError) -> bool:
    """Default classification: only transport failures are retried."""
    return error.code == ErrorCode.TRANSPORT_ERROR


def is_transport_or_api_failure(error: GizmifyError) -> bool:
    return error.code in (ErrorCode.TRANSPORT_ERROR, ErrorCode.API_ERROR)


def should_retry(
    error: GizmifyError,
    attempt: int,
    max_attempts: int,
    classify: Classifier = is_transport_failure,
) -> bool:
    """Decide whether another attempt should follow a failed one.

    Parameters
    ----------
    error:
        The failure of the attempt that just finished.
    attempt:
        The attempt that just finished (0-indexed).
    max_attempts:
        Total attempts allowed, including the first.
    classify:
        Returns ``True`` for errors that are worth retrying.
    """
    if attempt + 1 >= max_attempts:
        return False
    return classify(error)


def compute_backoff(
    attempt: int,
    base: float = 0.0,
    maximum: float = 30.0,
    jitter: bool = True,
) -> float:
    """Delay before the next attempt: ``base * 2^attempt`` capped at
    *maximum*, scaled to 50-100 % when *jitter* is on.  ``base=0`` means
    retry immediately.
    """
    delay = min(base * (2 ** attempt), maximum)
    if jitter:
        delay *= 0.5 + random.random() * 0.5
    return delay


class RetryPolicy:
    """Bounded retry budget for one page fetch.

    Parameters
    ----------
    max_attempts:
        Attempts allowed, including the first one.
    classify:
        Decides which errors are retried.
    base_delay, max_delay, jitter:
        Backoff parameters; see :func:`compute_backoff`.
    metrics:
        Optional metrics hook.
    secrets:
        Credential values scrubbed from every recorded URL.

    Attributes
    ----------
    last_diagnostics:
        ``{"api_url": ..., "http_status_code": ...}`` for the most recent
        failed attempt, with the URL redacted.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        classify: Classifier = is_transport_failure,
        *,
        base_delay: float = 0.0,
        max_delay: float = 30.0,
        jitter: bool = True,
        metrics: Any | None = None,
        secrets: tuple[str, ...] = (),
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.classify = classify
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._secrets = secrets
        self.last_diagnostics: dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: GizmifyConfig) -> RetryPolicy:
        return cls(
            max_attempts=config.retry_max_attempts,
            classify=(
                is_transport_or_api_failure if config.retry_api_errors else is_transport_failure
            ),
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
            metrics=config.metrics,
            secrets=config.secrets,
        )

    # -- bookkeeping -------------------------------------------------------

    def _record_failure(self, error: GizmifyError, attempt: int, safe_url: str) -> None:
        status = error.context.get("status_code") if error.code == ErrorCode.TRANSPORT_ERROR else None
        self.last_diagnostics = {"api_url": safe_url, "http_status_code": status}
        log.error(
            error.message,
            extra={
                "extra_fields": {
                    "op": "fetch_page",
                    "attempt": attempt + 1,
                    "max_attempts": self.max_attempts,
                    "error_code": str(getattr(error.code, "value", error.code)),
                    **self.last_diagnostics,
                }
            },
        )

    def _next_delay(self, error: GizmifyError, attempt: int) -> float | None:
        """Backoff before the next attempt, or ``None`` to stop."""
        if not should_retry(error, attempt, self.max_attempts, self.classify):
            return None
        self._metrics.increment(
            "gizmify.retries_total",
            tags={"reason": str(getattr(error.code, "value", error.code)).lower()},
        )
        return compute_backoff(
            attempt,
            base=self.base_delay,
            maximum=self.max_delay,
            jitter=self.jitter,
        )

    def _exhausted(self, error: GizmifyError, safe_url: str) -> GizmifyRetryExhaustedError:
        return GizmifyRetryExhaustedError(
            message=(
                f"All {self.max_attempts} attempts exhausted for GET {safe_url} "
                f"(last error: {error.message})"
            ),
            context={
                "attempts": self.max_attempts,
                "last_status_code": self.last_diagnostics.get("http_status_code"),
                "url": safe_url,
            },
            cause=error,
        )

    # -- execution ---------------------------------------------------------

    def execute(self, work: Callable[[], FetchOutcome[T]], url: str = "") -> T:
        """Run *work* until it succeeds, fails terminally, or the budget is
        spent.

        Parameters
        ----------
        work:
            Zero-argument fetch attempt.
        url:
            The URL being fetched, recorded (redacted) in diagnostics.

        Raises
        ------
        GizmifyError
            The attempt's own error when it is not classified retryable.
        GizmifyRetryExhaustedError
            After ``max_attempts`` retryable failures.
        """
        safe_url = redact_url(url, self._secrets)
        for attempt in range(self.max_attempts):
            outcome = work()
            if outcome.error is None:
                return outcome.value  # type: ignore[return-value]
            error = outcome.error
            if not self.classify(error):
                raise error
            self._record_failure(error, attempt, safe_url)
            delay = self._next_delay(error, attempt)
            if delay is None:
                break
            if delay > 0:
                time.sleep(delay)
        raise self._exhausted(error, safe_url)

    async def execute_async(
        self,
        work: Callable[[], Awaitable[FetchOutcome[T]]],
        url: str = "",
    ) -> T:
        """Async equivalent of :meth:`execute`."""
        safe_url = redact_url(url, self._secrets)
        for attempt in range(self.max_attempts):
            outcome = await work()
            if outcome.error is None:
                return outcome.value  # type: ignore[return-value]
            error = outcome.error
            if not self.classify(error):
                raise error
            self._record_failure(error, attempt, safe_url)
            delay = self._next_delay(error, attempt)
            if delay is None:
                break
            if delay > 0:
                await asyncio.sleep(delay)
        raise self._exhausted(error, safe_url)
