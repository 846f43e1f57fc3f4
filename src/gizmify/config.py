"""Client configuration for gizmify.

:class:`GizmifyConfig` is a plain dataclass that captures every tuneable
knob exposed by the client.  Instances are passed to both
:class:`GizmifyClient` and :class:`AsyncGizmifyClient`.

The configuration is process-wide and read-only for the duration of a call;
nothing in the client mutates it and no synchronisation is provided.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

DEFAULT_BASE_URL = "https://restapi.surveygizmo.com/v4/"
"""Root of the SurveyGizmo v4 REST API."""

DEFAULT_MAX_ATTEMPTS = 10
"""Attempts allowed for one page fetch before failing permanently."""

_SECRET_FIELDS = frozenset({"api_token", "api_token_secret"})


def _mask(value: str) -> str:
    return f"...{value[-4:]}" if len(value) >= 8 else "****"


@dataclass
class GizmifyConfig:
    """Complete configuration for a gizmify client.

    Parameters
    ----------
    api_token:
        SurveyGizmo API token.  Appended to every request.  Never logged.
    api_token_secret:
        SurveyGizmo API token secret.  Appended to every request.  Never
        logged.
    base_url:
        API root URL.  Override for proxy or testing environments.
    batch_size:
        Value of the ``resultsperpage`` parameter sent with paged calls.
        ``None`` (or ``0``) leaves the server default in place.
    max_pages:
        Upper bound on the number of pages a single multi-page call may
        fetch.  ``None`` means no bound.  A call that stops at the bound
        returns what it fetched and logs a partial-result warning.
    retry_max_attempts:
        Attempts allowed per page fetch (including the first one).
    retry_base_delay:
        Base delay (seconds) for exponential backoff between attempts.
        ``0`` retries immediately.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Randomly scale backoff delays to 50-100 % of their value.
    retry_api_errors:
        Also retry API-level ``result_ok = false`` failures.  By default
        only transport failures are retried.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    rate_limit_burst:
        Token bucket burst ceiling.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~gizmify.observability.MetricsHook` backend.
    debug_dump_payload:
        Write a redacted dump of every request/response to *stderr*.
    """

    # ── Credentials ─────────────────────────────────────────────────────
    api_token: str = ""

    api_token_secret: str = ""

    base_url: str = DEFAULT_BASE_URL

    # ── Paging ──────────────────────────────────────────────────────────
    batch_size: int | None = None

    max_pages: int | None = None

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = DEFAULT_MAX_ATTEMPTS

    retry_base_delay: float = 0.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    retry_api_errors: bool = False

    rate_limit_rps: float = 2.0

    rate_limit_burst: int = 5

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API credentials, or target localhost for testing."
            )
        if not self.base_url.endswith("/"):
            self.base_url += "/"

        if self.batch_size is not None and self.batch_size < 0:
            raise ValueError(f"batch_size must be >= 0, got {self.batch_size}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {self.max_pages}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.rate_limit_burst < 1:
            raise ValueError(f"rate_limit_burst must be >= 1, got {self.rate_limit_burst}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def secrets(self) -> tuple[str, ...]:
        """The non-empty credential values, for redaction."""
        return tuple(s for s in (self.api_token, self.api_token_secret) if s)

    def __repr__(self) -> str:
        """Mask both credentials to prevent accidental leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name in _SECRET_FIELDS:
                parts.append(f"{f.name}='{_mask(val)}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"GizmifyConfig({', '.join(parts)})"
