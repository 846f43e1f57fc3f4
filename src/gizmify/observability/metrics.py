"""Metrics hook protocol and no-op default implementation.

gizmify emits counters and timings around every HTTP round trip, every
retry, and every multi-page call.  By default a :class:`NoopMetricsHook` is
used.  Supply any object satisfying :class:`MetricsHook` via
``GizmifyConfig(metrics=...)`` to route the data points elsewhere.

Emitted metric names:

* ``gizmify.requests_total``          -- counter
* ``gizmify.request_duration_ms``     -- timing
* ``gizmify.rate_limit_wait_ms``      -- timing
* ``gizmify.retries_total``           -- counter
* ``gizmify.pages_fetched_total``     -- counter
* ``gizmify.partial_results_total``   -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
