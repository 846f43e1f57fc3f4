"""Response envelope unwrapping.

SurveyGizmo answers in one of three shapes:

``SINGLE_OBJECT``
    The record itself, e.g. ``{"result_ok": true, "id": 42}`` from a
    create / update / delete call.
``SINGLE_WRAPPED``
    ``{"result_ok": bool, "data": {...}}``.
``PAGED_LIST``
    ``{"result_ok": bool, "data": [{...} | null, ...], "total_pages": int}``.

:func:`unwrap` turns the decoded JSON into a typed value using a *decode*
callable (normally a model's ``from_dict``).  Any shape mismatch surfaces as
:class:`GizmifyDeserializationError`, which is never retried.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from gizmify.errors import GizmifyDeserializationError

T = TypeVar("T")

_DECODE_ERRORS: tuple[type[Exception], ...] = (KeyError, TypeError, ValueError, AttributeError)


class EnvelopeKind(str, Enum):
    """How a response body should be interpreted."""

    SINGLE_OBJECT = "single_object"
    SINGLE_WRAPPED = "single_wrapped"
    PAGED_LIST = "paged_list"

    @property
    def paged(self) -> bool:
        return self is EnvelopeKind.PAGED_LIST


@dataclass
class SingleEnvelope(Generic[T]):
    """``{"result_ok": ..., "data": {...}}``."""

    result_ok: bool
    data: T | None = None


@dataclass
class PagedEnvelope(Generic[T]):
    """``{"result_ok": ..., "data": [...], "total_pages": ...}``."""

    result_ok: bool
    data: list[T | None] | None = field(default_factory=list)
    total_pages: int = 0


def _fail(kind: EnvelopeKind, reason: str, cause: Exception | None = None) -> GizmifyDeserializationError:
    return GizmifyDeserializationError(
        message=f"Cannot read {kind.value} envelope: {reason}",
        context={"kind": kind.value, "reason": reason},
        cause=cause,
    )


def _decode(decode: Callable[[Any], T], raw: Any, kind: EnvelopeKind) -> T:
    if not isinstance(raw, dict):
        raise _fail(kind, f"expected an object, got {type(raw).__name__}")
    try:
        return decode(raw)
    except _DECODE_ERRORS as exc:
        raise _fail(kind, f"{type(exc).__name__}: {exc}", exc) from exc


def _result_ok(payload: dict[str, Any], kind: EnvelopeKind) -> bool:
    if "result_ok" not in payload:
        raise _fail(kind, "missing 'result_ok'")
    ok = payload["result_ok"]
    if isinstance(ok, str):
        # Some endpoints serialise the flag as a string.
        return ok.strip().lower() in ("true", "1")
    return bool(ok)


def unwrap(
    payload: Any,
    kind: EnvelopeKind,
    decode: Callable[[Any], T],
) -> T | SingleEnvelope[T] | PagedEnvelope[T]:
    """Interpret a decoded JSON *payload* according to *kind*.

    Parameters
    ----------
    payload:
        The decoded JSON body.
    kind:
        Which envelope shape to expect.
    decode:
        Maps one JSON object to a typed record.  ``KeyError``,
        ``TypeError``, ``ValueError`` and ``AttributeError`` raised from it
        are reported as deserialization failures.

    Returns
    -------
    T | SingleEnvelope[T] | PagedEnvelope[T]
        The record itself for ``SINGLE_OBJECT``; an envelope otherwise.
        ``null`` entries of a paged ``data`` list are kept as ``None`` so
        the caller can filter them without disturbing order.

    Raises
    ------
    GizmifyDeserializationError
        When the payload does not match the expected shape.
    """
    if kind is EnvelopeKind.SINGLE_OBJECT:
        return _decode(decode, payload, kind)

    if not isinstance(payload, dict):
        raise _fail(kind, f"expected an object, got {type(payload).__name__}")

    ok = _result_ok(payload, kind)
    raw = payload.get("data")

    if kind is EnvelopeKind.SINGLE_WRAPPED:
        data = None if raw is None else _decode(decode, raw, kind)
        return SingleEnvelope(result_ok=ok, data=data)

    if raw is None:
        items: list[T | None] | None = None
    elif isinstance(raw, list):
        items = [None if entry is None else _decode(decode, entry, kind) for entry in raw]
    else:
        raise _fail(kind, f"'data' must be a list, got {type(raw).__name__}")

    try:
        total_pages = int(payload.get("total_pages") or 0)
    except (TypeError, ValueError) as exc:
        raise _fail(kind, f"'total_pages' is not an integer: {payload.get('total_pages')!r}", exc) from exc

    return PagedEnvelope(result_ok=ok, data=items, total_pages=total_pages)
