"""Generic list page: fetch, degrade, filter, paginate.

Every tabular admin page follows the same lifecycle::

    IDLE -> LOADING -> LOADED | FAILED

A load is identified by a generation number. When loads overlap on one view,
only the most recently started one may update the view; a slower, superseded
response is discarded.
"""

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.formatting import lookup, to_number
from roomspa_admin.schemas.common import Envelope, Pagination

logger = structlog.get_logger()

Record = dict[str, Any]
Predicate = Callable[[Record], bool]


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ListQuery:
    """Inputs that drive a list page."""

    page: int = 1
    search: str = ""
    filter: str = "all"


@dataclass(frozen=True)
class ListSpec:
    """
    Projection config for one list page.

    Attributes:
        collection: Key of the record list inside the envelope data
        search_fields: Dotted paths matched by the search box
        filters: Local predicates keyed by filter value; ``all`` keeps everything
        page_size: Rows requested per page
        page_size_param: Query parameter name the endpoint expects
        search_remote: Also forward the search term to the backend
        params: Extra backend parameters derived from the query
    """

    collection: str
    search_fields: tuple[str, ...] = ()
    filters: dict[str, Predicate] = field(default_factory=dict)
    page_size: int = 20
    page_size_param: str = "per_page"
    search_remote: bool = False
    params: Callable[[ListQuery], dict[str, Any]] | None = None

    def backend_params(self, query: ListQuery) -> dict[str, Any]:
        params: dict[str, Any] = {"page": query.page, self.page_size_param: self.page_size}
        if self.search_remote and query.search:
            params["search"] = query.search
        if self.params is not None:
            params.update(self.params(query))
        return params

    def predicate(self, filter_value: str) -> Predicate | None:
        return self.filters.get(filter_value)


def matches(record: Record, search: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match across the given fields."""
    needle = search.strip().lower()
    if not needle:
        return True
    for path in fields:
        value = lookup(record, path)
        if value is not None and needle in str(value).lower():
            return True
    return False


def filter_records(
    records: Iterable[Record],
    search: str,
    fields: Sequence[str],
    predicate: Predicate | None = None,
) -> list[Record]:
    """
    Derive the filtered view of a record list.

    The input is never modified; the same input and query always produce the
    same output.
    """
    return [
        record
        for record in records
        if isinstance(record, dict)
        and matches(record, search, fields)
        and (predicate is None or predicate(record))
    ]


def sum_field(records: Iterable[Record], path: str) -> float:
    """Total one numeric field over already-loaded records."""
    return sum(to_number(lookup(record, path)) for record in records)


@dataclass
class ListPage:
    """What a list page renders."""

    state: LoadState = LoadState.IDLE
    query: ListQuery = field(default_factory=ListQuery)
    records: tuple[Record, ...] = ()
    visible: list[Record] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)
    error: str | None = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def failed(self) -> bool:
        return self.state is LoadState.FAILED

    @property
    def is_empty(self) -> bool:
        return not self.visible

    @property
    def current_page(self) -> int:
        return self.query.page

    @property
    def total_pages(self) -> int:
        return max(self.pagination.total_pages, 1)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def previous_page(self) -> int:
        return max(1, self.current_page - 1)

    @property
    def next_page(self) -> int:
        return min(self.total_pages, self.current_page + 1)


Fetch = Callable[[dict[str, Any]], Awaitable[Envelope]]


class ListView:
    """Run the list lifecycle for one page."""

    def __init__(self, fetch: Fetch, spec: ListSpec):
        """
        Args:
            fetch: Backend call taking query parameters
            spec: Projection config
        """
        self.fetch = fetch
        self.spec = spec
        self.page = ListPage()
        self._generation = 0

    def _settle(self, page: ListPage) -> ListPage:
        if page.generation != self._generation:
            logger.debug(
                "list_response_discarded",
                collection=self.spec.collection,
                generation=page.generation,
                current=self._generation,
            )
            return self.page
        self.page = page
        return page

    async def load(self, query: ListQuery) -> ListPage:
        """
        Fetch one page of records and derive the filtered view.

        Failures of any kind end in ``FAILED`` with no records.

        Returns:
            The page the view shows once this load settles
        """
        self._generation += 1
        generation = self._generation
        self.page = ListPage(state=LoadState.LOADING, query=query, generation=generation)

        try:
            envelope = await self.fetch(self.spec.backend_params(query))
        except AppException as e:
            logger.error("list_fetch_failed", collection=self.spec.collection, error=e.message)
            return self._settle(self._failed(query, generation, e.message))

        if not envelope.success:
            message = envelope.message or "Request failed"
            logger.error("list_fetch_failed", collection=self.spec.collection, error=message)
            return self._settle(self._failed(query, generation, message))

        payload = envelope.data_dict()
        raw = payload.get(self.spec.collection)
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning(
                    "list_payload_malformed",
                    collection=self.spec.collection,
                    type=type(raw).__name__,
                )
            raw = []

        records = tuple(record for record in raw if isinstance(record, dict))
        page = ListPage(
            state=LoadState.LOADED,
            query=query,
            records=records,
            visible=filter_records(
                records,
                query.search,
                self.spec.search_fields,
                self.spec.predicate(query.filter),
            ),
            pagination=Pagination.from_payload(payload),
            generation=generation,
        )
        return self._settle(page)

    @staticmethod
    def _failed(query: ListQuery, generation: int, message: str) -> ListPage:
        return ListPage(
            state=LoadState.FAILED,
            query=query,
            error=message,
            generation=generation,
        )
