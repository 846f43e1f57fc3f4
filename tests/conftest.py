"""Shared test fixtures for the gizmify test suite."""

from __future__ import annotations

from typing import Any

import pytest

from gizmify.config import GizmifyConfig

TOKEN = "TOK123"
SECRET = "SEC456"


class ScriptedTransport:
    """In-memory :class:`TransportPort` replaying a fixed script.

    Each step is either a JSON payload to return or an exception to raise.
    Every requested URL is recorded in :attr:`urls`.
    """

    def __init__(self, *steps: Any) -> None:
        self.steps = list(steps)
        self.urls: list[str] = []

    def get_json(self, url: str) -> Any:
        self.urls.append(url)
        if not self.steps:
            raise AssertionError(f"unexpected request: {url}")
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


class AsyncScriptedTransport(ScriptedTransport):
    """Async flavour of :class:`ScriptedTransport`."""

    async def get_json(self, url: str) -> Any:  # type: ignore[override]
        return ScriptedTransport.get_json(self, url)


def paged(records: list[Any], total_pages: int = 1, ok: bool = True) -> dict[str, Any]:
    return {"result_ok": ok, "total_pages": total_pages, "data": records}


def wrapped(record: Any, ok: bool = True) -> dict[str, Any]:
    return {"result_ok": ok, "data": record}


@pytest.fixture
def config() -> GizmifyConfig:
    """Fast, deterministic configuration with recognisable credentials."""
    return GizmifyConfig(
        api_token=TOKEN,
        api_token_secret=SECRET,
        retry_jitter=False,
        rate_limit_rps=10_000.0,
    )


@pytest.fixture
def scripted():
    """Factory for :class:`ScriptedTransport` instances."""
    return ScriptedTransport


@pytest.fixture
def async_scripted():
    return AsyncScriptedTransport


@pytest.fixture
def make_paged():
    return paged


@pytest.fixture
def make_wrapped():
    return wrapped
