"""Multi-page aggregation engine.

One logical call walks the states::

    Init -> FetchingPage -> Aggregating -> (FetchingPage | Done | Failed)

* **Init** renders the endpoint followed by the credentials and, for paged
  calls with a configured batch size, ``resultsperpage``.
* **FetchingPage** runs one retry-wrapped fetch of ``<base>&page=N``.
  Non-paged calls fetch once and go straight to Done.
* **Aggregating** rejects ``result_ok = false`` or a missing ``data`` list
  with :class:`GizmifyApiError`, otherwise appends the non-null records in
  server order.  When all pages were requested, the total page count is
  taken from the first page that reports a positive one.
* The loop continues while ``page <= total_pages`` and ``total_pages != 0``.
* **Done** returns the records.  Fewer pages fetched than discovered (the
  ``max_pages`` cap) is logged as a partial-result warning, not an error.
* **Failed** raises.  Records aggregated before the failure are attached to
  the error as ``partial_results``; this holds for every call shape.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Generic, TypeVar

from gizmify.config import GizmifyConfig
from gizmify.errors import GizmifyApiError, GizmifyError
from gizmify.observability import NoopMetricsHook, get_logger
from gizmify.utils.redact import redact_url

from .envelope import EnvelopeKind, PagedEnvelope, unwrap
from .query import Endpoint, QueryParam, build_url
from .retries import FetchOutcome, RetryPolicy
from .transport import AsyncTransportPort, TransportPort

T = TypeVar("T")

log = get_logger("gizmify.pagination")


@dataclass
class PageCursor(Generic[T]):
    """Per-call paging state.  Created for one call and then discarded."""

    page: int = 1
    total_pages: int = 1
    pages_fetched: int = 0
    records: list[T] = field(default_factory=list)

    def has_next(self) -> bool:
        return self.page <= self.total_pages and self.total_pages != 0


def credential_params(config: GizmifyConfig) -> tuple[QueryParam, ...]:
    return (
        QueryParam("api_token", config.api_token, True),
        QueryParam("api_token_secret", config.api_token_secret, True),
    )


def base_url(config: GizmifyConfig, endpoint: Endpoint, kind: EnvelopeKind) -> str:
    """Render *endpoint* with credentials and (for paged calls) page size."""
    trailing = list(credential_params(config))
    if kind.paged and config.batch_size:
        trailing.append(QueryParam("resultsperpage", str(config.batch_size)))
    return endpoint.url(*trailing)


def page_url(base: str, page: int) -> str:
    return build_url(base, [QueryParam("page", str(page), True)])


class _PaginatorBase:
    """State handling shared by :class:`Paginator` and
    :class:`AsyncPaginator`; subclasses only add the I/O."""

    def __init__(self, config: GizmifyConfig, policy: RetryPolicy | None = None) -> None:
        self._config = config
        self._policy = policy if policy is not None else RetryPolicy.from_config(config)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def _safe(self, url: str) -> str:
        return redact_url(url, self._config.secrets)

    def _check(
        self,
        envelope: Any,
        kind: EnvelopeKind,
        url: str,
        page: int | None,
    ) -> Any:
        """Raise :class:`GizmifyApiError` for a declared failure."""
        if kind is EnvelopeKind.SINGLE_OBJECT:
            return envelope
        if envelope.result_ok and envelope.data is not None:
            return envelope

        ctx: dict[str, Any] = {"url": self._safe(url), "result_ok": envelope.result_ok}
        if page is not None:
            ctx["page"] = page
        reason = "result_ok is false" if not envelope.result_ok else "no data returned"
        raise GizmifyApiError(
            message=f"API call failed for GET {ctx['url']}: {reason}",
            context=ctx,
        )

    def _absorb(self, cursor: PageCursor[T], envelope: PagedEnvelope[T], get_all_pages: bool) -> None:
        cursor.records.extend(r for r in envelope.data or () if r is not None)
        cursor.pages_fetched += 1
        if get_all_pages and cursor.pages_fetched == 1 and envelope.total_pages > 0:
            cursor.total_pages = envelope.total_pages
        cursor.page += 1
        self._metrics.increment("gizmify.pages_fetched_total")

    def _page_limit(self, max_pages: int | None) -> int | None:
        return max_pages if max_pages is not None else self._config.max_pages

    def _finish(self, cursor: PageCursor[T], base: str) -> list[T]:
        if cursor.pages_fetched < cursor.total_pages:
            self._metrics.increment("gizmify.partial_results_total")
            log.warning(
                "Partial result: fewer pages fetched than the server reported",
                extra={
                    "extra_fields": {
                        "op": "collect",
                        "url": self._safe(base),
                        "pages_fetched": cursor.pages_fetched,
                        "total_pages": cursor.total_pages,
                        "records": len(cursor.records),
                    }
                },
            )
        return cursor.records

    @staticmethod
    def _attach_partial(exc: GizmifyError, cursor: PageCursor[T]) -> None:
        exc.partial_results = list(cursor.records)
        exc.context.setdefault("pages_fetched", cursor.pages_fetched)


class Paginator(_PaginatorBase):
    """Synchronous pagination engine.

    Parameters
    ----------
    transport:
        Anything satisfying :class:`TransportPort`.
    config:
        Supplies credentials, batch size, page cap and retry settings.
    policy:
        Optional pre-built :class:`RetryPolicy`; built from *config* when
        omitted.
    """

    def __init__(
        self,
        transport: TransportPort,
        config: GizmifyConfig,
        policy: RetryPolicy | None = None,
    ) -> None:
        super().__init__(config, policy)
        self._transport = transport

    def _read(
        self,
        url: str,
        kind: EnvelopeKind,
        decode: Callable[[Any], T],
        page: int | None = None,
    ) -> Any:
        payload = self._transport.get_json(url)
        try:
            envelope = unwrap(payload, kind, decode)
        except GizmifyError as exc:
            exc.context.setdefault("url", self._safe(url))
            raise
        return self._check(envelope, kind, url, page)

    def _fetch(self, url: str, kind: EnvelopeKind, decode: Callable[[Any], T], page: int | None = None) -> Any:
        work = partial(FetchOutcome.capture, partial(self._read, url, kind, decode, page))
        return self._policy.execute(work, url)

    def collect(
        self,
        endpoint: Endpoint,
        decode: Callable[[Any], T],
        kind: EnvelopeKind = EnvelopeKind.SINGLE_WRAPPED,
        *,
        get_all_pages: bool = False,
        max_pages: int | None = None,
    ) -> list[T]:
        """Run one logical call and return its records in server order.

        Parameters
        ----------
        endpoint:
            What to request.
        decode:
            Maps one JSON object to a record, e.g. ``Survey.from_dict``.
        kind:
            Envelope shape.  Only ``PAGED_LIST`` walks pages.
        get_all_pages:
            Follow ``total_pages`` from the first page.  When ``False`` a
            paged call fetches exactly one page.
        max_pages:
            Stop after this many pages (overrides ``config.max_pages``).

        Raises
        ------
        GizmifyApiError
            ``result_ok`` was false or ``data`` was missing.
        GizmifyDeserializationError
            The body did not match the expected shape.
        GizmifyRetryExhaustedError
            A page kept failing at the transport level.
        """
        base = base_url(self._config, endpoint, kind)
        cursor: PageCursor[T] = PageCursor()

        try:
            if not kind.paged:
                result = self._fetch(base, kind, decode)
                record = result if kind is EnvelopeKind.SINGLE_OBJECT else result.data
                cursor.records.append(record)
                cursor.pages_fetched = 1
                return cursor.records

            limit = self._page_limit(max_pages)
            while cursor.has_next():
                if limit is not None and cursor.pages_fetched >= limit:
                    break
                envelope = self._fetch(page_url(base, cursor.page), kind, decode, cursor.page)
                self._absorb(cursor, envelope, get_all_pages)
        except GizmifyError as exc:
            self._attach_partial(exc, cursor)
            raise

        return self._finish(cursor, base)


class AsyncPaginator(_PaginatorBase):
    """Asynchronous pagination engine.

    Pages are still fetched one after another; see :class:`Paginator`.
    """

    def __init__(
        self,
        transport: AsyncTransportPort,
        config: GizmifyConfig,
        policy: RetryPolicy | None = None,
    ) -> None:
        super().__init__(config, policy)
        self._transport = transport

    async def _read(
        self,
        url: str,
        kind: EnvelopeKind,
        decode: Callable[[Any], T],
        page: int | None = None,
    ) -> Any:
        payload = await self._transport.get_json(url)
        try:
            envelope = unwrap(payload, kind, decode)
        except GizmifyError as exc:
            exc.context.setdefault("url", self._safe(url))
            raise
        return self._check(envelope, kind, url, page)

    async def _fetch(
        self,
        url: str,
        kind: EnvelopeKind,
        decode: Callable[[Any], T],
        page: int | None = None,
    ) -> Any:
        work = partial(FetchOutcome.capture_async, partial(self._read, url, kind, decode, page))
        return await self._policy.execute_async(work, url)

    async def collect(
        self,
        endpoint: Endpoint,
        decode: Callable[[Any], T],
        kind: EnvelopeKind = EnvelopeKind.SINGLE_WRAPPED,
        *,
        get_all_pages: bool = False,
        max_pages: int | None = None,
    ) -> list[T]:
        """Async equivalent of :meth:`Paginator.collect`."""
        base = base_url(self._config, endpoint, kind)
        cursor: PageCursor[T] = PageCursor()

        try:
            if not kind.paged:
                result = await self._fetch(base, kind, decode)
                record = result if kind is EnvelopeKind.SINGLE_OBJECT else result.data
                cursor.records.append(record)
                cursor.pages_fetched = 1
                return cursor.records

            limit = self._page_limit(max_pages)
            while cursor.has_next():
                if limit is not None and cursor.pages_fetched >= limit:
                    break
                envelope = await self._fetch(page_url(base, cursor.page), kind, decode, cursor.page)
                self._absorb(cursor, envelope, get_all_pages)
        except GizmifyError as exc:
            self._attach_partial(exc, cursor)
            raise

        return self._finish(cursor, base)
