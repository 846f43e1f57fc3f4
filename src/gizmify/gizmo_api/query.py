"""Sparse query-string builder.

SurveyGizmo encodes every argument, including the emulated HTTP verb, in the
query string of a ``GET`` request.  An :class:`Endpoint` is an immutable
description of one such request: a path, an ordered tuple of
:class:`QueryParam` values, and an optional ``_method`` verb.  It is consumed
once by :func:`build_url`; nothing appends to a URL string after the fact.

Emission rules
--------------
* Parameters are emitted in the order they were supplied.
* A parameter whose value is ``None`` or ``""`` is skipped, unless it is
  flagged ``required`` in which case ``name=`` is still emitted.
* A parameter with an empty or ``None`` name is skipped.
* Values are percent-encoded leaving only the RFC 3986 unreserved set
  (``A-Z a-z 0-9 - _ . ~``) intact.  Names keep ``[`` and ``]`` so nested
  addressing such as ``from[name]`` reaches the server verbatim.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NamedTuple
from urllib.parse import quote

#: Verbs that may be emulated through the ``_method`` parameter.
EMULATED_METHODS: frozenset[str] = frozenset({"PUT", "POST", "DELETE"})


class QueryParam(NamedTuple):
    """One ``name=value`` pair of a request query string."""

    name: str | None
    value: str | None
    required: bool = False


def _encode_value(value: str) -> str:
    return quote(value, safe="")


def _encode_name(name: str) -> str:
    return quote(name, safe="[]")


def build_query(params: Iterable[QueryParam]) -> str:
    """Render *params* as a query string (without the leading ``?``).

    >>> build_query([QueryParam("title", "Q&A"), QueryParam("note", None)])
    'title=Q%26A'
    """
    parts: list[str] = []
    for name, value, required in params:
        if not name:
            continue
        if value is None or value == "":
            if not required:
                continue
            value = ""
        parts.append(f"{_encode_name(name)}={_encode_value(value)}")
    return "&".join(parts)


def build_url(path: str, params: Iterable[QueryParam]) -> str:
    """Append the rendered *params* to *path*.

    ``?`` separates path and query unless *path* already carries a query
    string, in which case ``&`` is used.  An empty parameter list returns
    *path* unchanged.
    """
    query = build_query(params)
    if not query:
        return path
    sep = "&" if "?" in path else "?"
    return f"{path}{sep}{query}"


@dataclass(frozen=True)
class Endpoint:
    """An immutable request description.

    Parameters
    ----------
    path:
        Path relative to the API root, e.g. ``"survey/123/surveyresponse"``.
    params:
        Ordered query parameters.
    method:
        Emulated verb (``"PUT"``, ``"POST"``, ``"DELETE"``) or ``None`` for
        a plain ``GET``.
    """

    path: str
    params: tuple[QueryParam, ...] = field(default_factory=tuple)
    method: str | None = None

    def __post_init__(self) -> None:
        if self.method is not None and self.method not in EMULATED_METHODS:
            raise ValueError(
                f"method must be one of {sorted(EMULATED_METHODS)} or None, "
                f"got {self.method!r}"
            )
        # Accept any iterable but store a tuple so the endpoint stays hashable.
        object.__setattr__(self, "params", tuple(QueryParam(*p) for p in self.params))

    def query_params(self) -> tuple[QueryParam, ...]:
        """All parameters in emission order, ``_method`` first."""
        if self.method is None:
            return self.params
        return (QueryParam("_method", self.method, True), *self.params)

    def url(self, *trailing: QueryParam) -> str:
        """Render the endpoint, appending *trailing* params last."""
        return build_url(self.path, (*self.query_params(), *trailing))
