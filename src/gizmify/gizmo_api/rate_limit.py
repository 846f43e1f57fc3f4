"""Token-bucket pacing for outgoing SurveyGizmo requests.

SurveyGizmo throttles per account, so every transport takes one token before
each HTTP round trip.  Tokens refill at ``rate`` per second up to ``burst``.
When the bucket is empty the caller waits for the deficit: the sync
:class:`TokenBucket` sleeps the thread, :class:`AsyncTokenBucket` awaits.

The waiting is the only suspension point in a logical call besides network
I/O itself.
"""

from __future__ import annotations

import asyncio
import threading
import time


class _Bucket:
    """Refill arithmetic shared by the sync and async buckets."""

    __slots__ = ("burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        self.last_refill: float = time.monotonic()

    def _take(self, tokens: int) -> float:
        """Refill, then take *tokens*.  Returns the required wait."""
        now = time.monotonic()
        self.tokens = min(self.burst, self.tokens + (now - self.last_refill) * self.rate)
        self.last_refill = now

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        wait = (tokens - self.tokens) / self.rate
        self.tokens = 0.0
        return wait


class TokenBucket(_Bucket):
    """Thread-safe token bucket.

    Parameters
    ----------
    rate_rps:
        Sustained refill rate in tokens per second.
    burst:
        Maximum number of tokens the bucket can hold.
    """

    __slots__ = ("_lock",)

    def __init__(self, rate_rps: float, burst: int = 5) -> None:
        super().__init__(rate_rps, burst)
        self._lock = threading.Lock()

    def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, sleeping if necessary.  Returns seconds waited."""
        with self._lock:
            wait = self._take(tokens)
        # Sleep outside the lock so other threads can refill-check.
        if wait > 0:
            time.sleep(wait)
        return wait


class AsyncTokenBucket(_Bucket):
    """Coroutine-safe token bucket; see :class:`TokenBucket`."""

    __slots__ = ("_lock",)

    def __init__(self, rate_rps: float, burst: int = 5) -> None:
        super().__init__(rate_rps, burst)
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, awaiting if necessary.  Returns seconds waited."""
        async with self._lock:
            wait = self._take(tokens)
        if wait > 0:
            await asyncio.sleep(wait)
        return wait
