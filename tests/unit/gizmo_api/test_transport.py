"""Unit tests for gizmify/gizmo_api/transport.py.

Covers:
- _decode_response (2xx, non-2xx, invalid JSON, debug dump)
- _dump_payload redaction
- GizmoTransport.get_json (success, network failure, metrics, URL joining)
- GizmoTransport.close / context manager
- AsyncGizmoTransport equivalents
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from gizmify.config import GizmifyConfig
from gizmify.errors import GizmifyDeserializationError, GizmifyTransportError
from gizmify.gizmo_api.transport import (
    AsyncGizmoTransport,
    GizmoTransport,
    _decode_response,
    _dump_payload,
)

TOKEN = "TOK123"
SECRET = "SEC456"
CRED_URL = f"survey?api_token={TOKEN}&api_token_secret={SECRET}&page=1"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_response(
    status_code: int = 200,
    body: dict | None = None,
    content: bytes | None = None,
) -> httpx.Response:
    """Build a minimal httpx.Response with a request attached."""
    if content is None:
        content = json.dumps(body).encode() if body is not None else b""
    resp = httpx.Response(status_code, content=content)
    resp.request = httpx.Request("GET", "https://restapi.surveygizmo.com/v4/survey")
    return resp


def make_config(**overrides) -> GizmifyConfig:
    defaults = dict(
        api_token=TOKEN,
        api_token_secret=SECRET,
        retry_jitter=False,
        rate_limit_rps=10_000.0,
    )
    defaults.update(overrides)
    return GizmifyConfig(**defaults)


class _MockBucket:
    def __init__(self, wait: float = 0.0):
        self._wait = wait

    def acquire(self, tokens: int = 1) -> float:
        return self._wait


class _MockAsyncBucket:
    def __init__(self, wait: float = 0.0):
        self._wait = wait

    async def acquire(self, tokens: int = 1) -> float:
        return self._wait


# ---------------------------------------------------------------------------
# _decode_response
# ---------------------------------------------------------------------------

class TestDecodeResponse:
    def test_returns_json_body(self):
        body = {"result_ok": True, "data": []}
        assert _decode_response(make_config(), make_response(200, body), "survey") == body

    @pytest.mark.parametrize("status", [400, 401, 404, 429, 500, 503])
    def test_non_2xx_is_transport_error(self, status):
        with pytest.raises(GizmifyTransportError) as exc_info:
            _decode_response(make_config(), make_response(status, {"x": 1}), "survey")
        assert exc_info.value.status_code == status
        assert exc_info.value.context["url"] == "survey"

    def test_invalid_json_is_deserialization_error(self):
        with pytest.raises(GizmifyDeserializationError):
            _decode_response(make_config(), make_response(200, content=b"<html>"), "survey")

    def test_debug_dump_written_to_stderr(self, capsys):
        cfg = make_config(debug_dump_payload=True)
        _decode_response(cfg, make_response(200, {"api_token": TOKEN, "ok": 1}), "survey")
        err = capsys.readouterr().err
        assert '"response_status": 200' in err
        assert TOKEN not in err

    def test_debug_dump_of_non_json_body(self, capsys):
        cfg = make_config(debug_dump_payload=True)
        with pytest.raises(GizmifyDeserializationError):
            _decode_response(cfg, make_response(200, content=b"not json"), "survey")
        assert "not json" in capsys.readouterr().err


class TestDumpPayload:
    def test_scrubs_secrets_from_url_and_body(self, capsys):
        _dump_payload(CRED_URL, 500, {"echo": f"bad token {TOKEN}"}, (TOKEN, SECRET))
        err = capsys.readouterr().err
        assert TOKEN not in err
        assert SECRET not in err
        assert "<redacted>" in err

    def test_omits_missing_fields(self, capsys):
        _dump_payload("survey", None, None, ())
        dumped = json.loads(capsys.readouterr().err)
        assert dumped == {"method": "GET", "url": "survey"}


# ---------------------------------------------------------------------------
# GizmoTransport
# ---------------------------------------------------------------------------

class TestGizmoTransport:
    def _transport(self, **overrides) -> GizmoTransport:
        transport = GizmoTransport(make_config(**overrides))
        transport._client.close()
        transport._client = MagicMock()
        transport._bucket = _MockBucket()
        return transport

    def test_success_returns_json(self):
        t = self._transport()
        t._client.get.return_value = make_response(200, {"result_ok": True})
        assert t.get_json("survey") == {"result_ok": True}
        t._client.get.assert_called_once_with("survey")

    def test_network_error_has_no_status(self):
        t = self._transport()
        t._client.get.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(GizmifyTransportError) as exc_info:
            t.get_json(CRED_URL)
        err = exc_info.value
        assert err.status_code is None
        assert isinstance(err.cause, httpx.ConnectError)
        assert TOKEN not in err.message
        assert SECRET not in err.context["url"]

    def test_timeout_is_transport_error(self):
        t = self._transport()
        t._client.get.side_effect = httpx.ReadTimeout("timed out")
        with pytest.raises(GizmifyTransportError):
            t.get_json("survey")

    def test_http_error_redacts_url(self):
        t = self._transport()
        t._client.get.return_value = make_response(503, {})
        with pytest.raises(GizmifyTransportError) as exc_info:
            t.get_json(CRED_URL)
        assert exc_info.value.status_code == 503
        assert TOKEN not in str(exc_info.value)
        assert "api_token=<redacted>" in exc_info.value.context["url"]

    def test_metrics_recorded(self):
        metrics = MagicMock()
        t = self._transport(metrics=metrics)
        t._bucket = _MockBucket(wait=0.25)
        t._client.get.return_value = make_response(200, {})
        t.get_json("survey")
        metrics.increment.assert_called_once_with("gizmify.requests_total", tags={"status": "200"})
        timing_names = [c.args[0] for c in metrics.timing.call_args_list]
        assert timing_names == ["gizmify.rate_limit_wait_ms", "gizmify.request_duration_ms"]

    def test_network_error_metric(self):
        metrics = MagicMock()
        t = self._transport(metrics=metrics)
        t._client.get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(GizmifyTransportError):
            t.get_json("survey")
        metrics.increment.assert_called_once_with("gizmify.requests_total", tags={"status": "error"})

    def test_close_and_context_manager(self):
        t = self._transport()
        with t as entered:
            assert entered is t
        t._client.close.assert_called_once()

    def test_requests_resolve_against_base_url(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"result_ok": True, "data": []})

        cfg = make_config(base_url="https://example.test/v4")
        t = GizmoTransport(cfg)
        t._client.close()
        t._client = httpx.Client(base_url=cfg.base_url, transport=httpx.MockTransport(handler))
        t.get_json("survey/12/surveyquestion?page=1")
        t.close()
        assert seen == ["https://example.test/v4/survey/12/surveyquestion?page=1"]


# ---------------------------------------------------------------------------
# AsyncGizmoTransport
# ---------------------------------------------------------------------------

class TestAsyncGizmoTransport:
    async def _transport(self, **overrides) -> AsyncGizmoTransport:
        transport = AsyncGizmoTransport(make_config(**overrides))
        await transport._client.aclose()
        transport._client = MagicMock()
        transport._client.get = AsyncMock()
        transport._client.aclose = AsyncMock()
        transport._bucket = _MockAsyncBucket()
        return transport

    async def test_success_returns_json(self):
        t = await self._transport()
        t._client.get.return_value = make_response(200, {"result_ok": True})
        assert await t.get_json("survey") == {"result_ok": True}

    async def test_network_error(self):
        t = await self._transport()
        t._client.get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(GizmifyTransportError) as exc_info:
            await t.get_json(CRED_URL)
        assert exc_info.value.status_code is None
        assert SECRET not in exc_info.value.message

    async def test_http_error(self):
        t = await self._transport()
        t._client.get.return_value = make_response(500, {})
        with pytest.raises(GizmifyTransportError) as exc_info:
            await t.get_json("survey")
        assert exc_info.value.status_code == 500

    async def test_invalid_json(self):
        t = await self._transport()
        t._client.get.return_value = make_response(200, content=b"{")
        with pytest.raises(GizmifyDeserializationError):
            await t.get_json("survey")

    async def test_async_context_manager_closes(self):
        t = await self._transport()
        async with t as entered:
            assert entered is t
        t._client.aclose.assert_awaited_once()
