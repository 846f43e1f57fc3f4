"""Credential redaction for URLs, log records and debug dumps.

Every SurveyGizmo request carries its credentials in the query string, so
any URL that leaves the transport (log line, error context, debug dump) must
go through :func:`redact_url` first.  The rules:

* The values of the ``api_token`` and ``api_token_secret`` query parameters
  are replaced with ``<redacted>``.
* Any literal occurrence of a known secret of at least
  ``MIN_SCRUB_LENGTH`` characters anywhere in the string is
  replaced with ``<redacted>`` too (covers percent-encoded copies and
  secrets pasted into other parameters).
* :func:`redact` applies the same scrubbing to every string in a nested
  dict / list structure and masks values under sensitive-looking keys.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

REDACTED = "<redacted>"

# Literal scrubbing skips shorter secrets. The credential parameters are
# masked by name at any length.
MIN_SCRUB_LENGTH = 4

_CREDENTIAL_PARAM_RE = re.compile(
    r"(?P<key>(?:^|[?&])api_token(?:_secret)?=)[^&#]*"
)

# If any of these appear in a key name (case-insensitive) the value is
# redacted wholesale.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
})


def _scrub(value: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if len(secret) < MIN_SCRUB_LENGTH:
            continue
        for form in {secret, quote(secret, safe="")}:
            if form in value:
                value = value.replace(form, REDACTED)
    return value


def redact_url(url: str, secrets: Iterable[str] = ()) -> str:
    """Return *url* with credential parameters and known secrets masked.

    Parameters
    ----------
    url:
        A relative or absolute request URL.
    secrets:
        Credential values to scrub wherever they appear.

    Examples
    --------
    >>> redact_url("survey?api_token=abc&api_token_secret=def&page=2")
    'survey?api_token=<redacted>&api_token_secret=<redacted>&page=2'
    """
    masked = _CREDENTIAL_PARAM_RE.sub(
        lambda m: f"{m.group('key')}{REDACTED}", url
    )
    return _scrub(masked, tuple(secrets))


def _redact_value(value: Any, secrets: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, secrets)
    if isinstance(value, list):
        return [_redact_value(item, secrets) for item in value]
    if isinstance(value, str):
        return redact_url(value, secrets)
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    return value


def _redact_dict(d: dict, secrets: tuple[str, ...]) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = REDACTED
        else:
            result[key] = _redact_value(value, secrets)
    return result


def redact(payload: dict, secrets: Iterable[str] = ()) -> dict:
    """Return a deep copy of *payload* with credentials removed.

    The original *payload* is never mutated.

    Examples
    --------
    >>> redact({"api_token": "abc", "url": "x?api_token=abc"})
    {'api_token': '<redacted>', 'url': 'x?api_token=<redacted>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, tuple(secrets))
