"""gizmify.gizmo_api -- SurveyGizmo request engine and endpoint wrappers.

This sub-package provides:

* :mod:`.query` -- Sparse query-string builder and :class:`Endpoint`.
* :mod:`.rate_limit` -- Token bucket pacing (sync and async).
* :mod:`.transport` -- One rate-limited JSON ``GET`` per call.
* :mod:`.retries` -- :class:`FetchOutcome` and the bounded :class:`RetryPolicy`.
* :mod:`.envelope` -- Single / wrapped / paged envelope unwrapping.
* :mod:`.pagination` -- The multi-page aggregation engine.
* :mod:`.surveys`, :mod:`.campaigns`, :mod:`.contacts` -- Entity wrappers.
"""

from __future__ import annotations

from .campaigns import AsyncCampaignAPI, CampaignAPI
from .contacts import AsyncContactAPI, ContactAPI, contact_params
from .envelope import EnvelopeKind, PagedEnvelope, SingleEnvelope, unwrap
from .pagination import AsyncPaginator, PageCursor, Paginator
from .query import Endpoint, QueryParam, build_query, build_url
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import FetchOutcome, RetryPolicy, compute_backoff, should_retry
from .surveys import AsyncSurveyAPI, SurveyAPI
from .transport import AsyncGizmoTransport, AsyncTransportPort, GizmoTransport, TransportPort

__all__ = [
    "AsyncCampaignAPI",
    "AsyncContactAPI",
    "AsyncGizmoTransport",
    "AsyncPaginator",
    "AsyncSurveyAPI",
    "AsyncTokenBucket",
    "AsyncTransportPort",
    "CampaignAPI",
    "ContactAPI",
    "Endpoint",
    "EnvelopeKind",
    "FetchOutcome",
    "GizmoTransport",
    "PageCursor",
    "PagedEnvelope",
    "Paginator",
    "QueryParam",
    "RetryPolicy",
    "SingleEnvelope",
    "SurveyAPI",
    "TokenBucket",
    "TransportPort",
    "build_query",
    "build_url",
    "compute_backoff",
    "contact_params",
    "should_retry",
    "unwrap",
]
