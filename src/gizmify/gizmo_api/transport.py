"""Sync and async HTTP transports for the SurveyGizmo API.

A transport performs exactly **one** rate-limited ``GET`` per call and
returns the decoded JSON body.  It does not retry; that is the job of
:class:`~gizmify.gizmo_api.retries.RetryPolicy`.  Each call:

1. Acquires a token-bucket slot (waits if needed).
2. Sends ``GET <base_url><url>``.
3. On a network failure raises :class:`GizmifyTransportError` with
   ``status_code=None``.
4. On a non-``2xx`` status raises :class:`GizmifyTransportError` carrying
   the status code.
5. On a body that is not JSON raises :class:`GizmifyDeserializationError`.

Anything satisfying :class:`TransportPort` / :class:`AsyncTransportPort`
can stand in for the concrete transports (tests use in-memory fakes).
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any, Protocol

import httpx

from gizmify.config import GizmifyConfig
from gizmify.errors import GizmifyDeserializationError, GizmifyTransportError
from gizmify.observability import NoopMetricsHook, get_logger
from gizmify.utils.redact import redact, redact_url

from .rate_limit import AsyncTokenBucket, TokenBucket

log = get_logger("gizmify.transport")


class TransportPort(Protocol):
    """One rate-limited JSON ``GET``."""

    def get_json(self, url: str) -> Any: ...


class AsyncTransportPort(Protocol):
    """Async counterpart of :class:`TransportPort`."""

    async def get_json(self, url: str) -> Any: ...


# ---------------------------------------------------------------------------
# Helpers shared by both transports
# ---------------------------------------------------------------------------

def _network_failure(exc: httpx.HTTPError, safe_url: str, secrets: tuple[str, ...]) -> GizmifyTransportError:
    detail = redact_url(str(exc), secrets) or type(exc).__name__
    return GizmifyTransportError(
        message=f"Network error on GET {safe_url}: {detail}",
        context={"url": safe_url, "status_code": None},
        cause=exc,
    )


def _dump_payload(
    url: str,
    response_status: int | None,
    response_body: Any | None,
    secrets: tuple[str, ...],
) -> None:
    """Write a redacted debug dump of the round trip to stderr."""
    dump: dict[str, Any] = {"method": "GET", "url": url}
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, secrets), indent=2, default=str),
        file=sys.stderr,
    )


def _decode_response(
    config: GizmifyConfig,
    response: httpx.Response,
    safe_url: str,
) -> Any:
    """Turn an HTTP response into decoded JSON or a typed error."""
    status = response.status_code

    if config.debug_dump_payload:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text[:1000]
        _dump_payload(safe_url, status, body, config.secrets)

    if not 200 <= status < 300:
        raise GizmifyTransportError(
            message=f"HTTP {status} on GET {safe_url}",
            context={"url": safe_url, "status_code": status},
        )

    try:
        return response.json()
    except ValueError as exc:
        raise GizmifyDeserializationError(
            message=f"Response from GET {safe_url} is not valid JSON",
            context={"url": safe_url, "reason": str(exc)},
            cause=exc,
        ) from exc


def _build_client_kwargs(config: GizmifyConfig) -> dict[str, Any]:
    return {
        "base_url": config.base_url,
        "headers": {"Accept": "application/json"},
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class GizmoTransport:
    """Synchronous rate-limited JSON transport.

    Parameters
    ----------
    config:
        A :class:`GizmifyConfig` controlling base URL, pacing, timeout and
        proxy.
    """

    def __init__(self, config: GizmifyConfig) -> None:
        self._config = config
        self._bucket = TokenBucket(
            rate_rps=config.rate_limit_rps,
            burst=config.rate_limit_burst,
        )
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(**_build_client_kwargs(config))

    def get_json(self, url: str) -> Any:
        """Fetch *url* (relative to ``base_url``) and decode the JSON body.

        Raises
        ------
        GizmifyTransportError
            On network failures and non-``2xx`` responses.
        GizmifyDeserializationError
            When the body is not valid JSON.
        """
        safe_url = redact_url(url, self._config.secrets)

        wait = self._bucket.acquire()
        if wait > 0:
            self._metrics.timing("gizmify.rate_limit_wait_ms", wait * 1000)

        t0 = time.monotonic()
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            self._metrics.increment("gizmify.requests_total", tags={"status": "error"})
            raise _network_failure(exc, safe_url, self._config.secrets) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        status = str(response.status_code)
        self._metrics.increment("gizmify.requests_total", tags={"status": status})
        self._metrics.timing("gizmify.request_duration_ms", elapsed_ms, tags={"status": status})
        log.debug(
            "GET complete",
            extra={
                "extra_fields": {
                    "op": "get_json",
                    "url": safe_url,
                    "status_code": response.status_code,
                    "elapsed_ms": round(elapsed_ms, 1),
                }
            },
        )
        return _decode_response(self._config, response, safe_url)

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> GizmoTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncGizmoTransport:
    """Asynchronous rate-limited JSON transport.

    Mirrors :class:`GizmoTransport` on top of ``httpx.AsyncClient``.
    """

    def __init__(self, config: GizmifyConfig) -> None:
        self._config = config
        self._bucket = AsyncTokenBucket(
            rate_rps=config.rate_limit_rps,
            burst=config.rate_limit_burst,
        )
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(**_build_client_kwargs(config))

    async def get_json(self, url: str) -> Any:
        """Async equivalent of :meth:`GizmoTransport.get_json`."""
        safe_url = redact_url(url, self._config.secrets)

        wait = await self._bucket.acquire()
        if wait > 0:
            self._metrics.timing("gizmify.rate_limit_wait_ms", wait * 1000)

        t0 = time.monotonic()
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            self._metrics.increment("gizmify.requests_total", tags={"status": "error"})
            raise _network_failure(exc, safe_url, self._config.secrets) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        status = str(response.status_code)
        self._metrics.increment("gizmify.requests_total", tags={"status": status})
        self._metrics.timing("gizmify.request_duration_ms", elapsed_ms, tags={"status": status})
        return _decode_response(self._config, response, safe_url)

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncGizmoTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
