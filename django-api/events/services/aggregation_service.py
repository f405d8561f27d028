"""Merge platform and provider events into one filtered, sorted, paginated list.

Pipeline order matters and is fixed:

1. fetch the requested legs (the provider leg asks for twice the page size)
2. concatenate, platform events first
3. drop platform events that have already ended
4. search over name, description, venue name and venue city
5. category filter, applied to platform events only
6. city filter, applied to everything
7. stable sort by start date
8. slice the requested page; totals come from the filtered set
"""

import hashlib
import logging
import math
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import assert_never

from django.core.cache.backends.base import BaseCache
from django.db import DatabaseError

from events.domain.errors import UpstreamUnavailableError
from events.domain.models import (
    EventFilters,
    EventPage,
    ExternalEvent,
    ExternalQuery,
    Pagination,
    PlatformEvent,
    UnifiedEvent,
)
from events.domain.timestamps import parse_timestamp, utcnow
from events.domain.value_objects import EventSource, SourceFilter
from events.providers.interfaces import EventProvider
from events.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

PLATFORM_LEG_CACHE_KEY = "events:platform:public"
EXTERNAL_LEG_CACHE_PREFIX = "events:external"

_LATEST = datetime.max.replace(tzinfo=UTC)


def external_leg_cache_key(query: ExternalQuery) -> str:
    raw = "|".join(
        str(part) for part in (query.page, query.size, query.city, query.keyword, query.category)
    )
    return f"{EXTERNAL_LEG_CACHE_PREFIX}:{hashlib.sha1(raw.encode()).hexdigest()}"


def _contains(haystack: str | None, needle: str) -> bool:
    return needle in (haystack or "").lower()


def _has_ended(event: UnifiedEvent, now: datetime) -> bool:
    match event.source:
        case EventSource.PLATFORM:
            ends_at = parse_timestamp(event.end_date)
            return ends_at is not None and ends_at <= now
        case EventSource.TICKETMASTER:
            return False
        case _:
            assert_never(event.source)


def _matches_search(event: UnifiedEvent, term: str) -> bool:
    return any(
        _contains(value, term)
        for value in (event.name, event.description, event.venue.name, event.venue.city)
    )


def _matches_category(event: UnifiedEvent, category: str) -> bool:
    match event.source:
        case EventSource.PLATFORM:
            return _contains(event.category, category)
        case EventSource.TICKETMASTER:
            # Already constrained by the provider query.
            return True
        case _:
            assert_never(event.source)


def _start_key(event: UnifiedEvent) -> datetime:
    return parse_timestamp(event.start_date) or _LATEST


def apply_filters(
    events: Iterable[UnifiedEvent], filters: EventFilters, now: datetime
) -> list[UnifiedEvent]:
    """Run the exclusion, filter and sort stages over a merged working set."""
    working = [event for event in events if not _has_ended(event, now)]

    if filters.search:
        term = filters.search.lower()
        working = [event for event in working if _matches_search(event, term)]

    if filters.category:
        category = filters.category.lower()
        working = [event for event in working if _matches_category(event, category)]

    if filters.city:
        city = filters.city.lower()
        working = [event for event in working if _contains(event.venue.city, city)]

    # sorted() is stable: equal start dates keep merge order.
    return sorted(working, key=_start_key)


def paginate(events: list[UnifiedEvent], page: int, size: int) -> tuple[list[UnifiedEvent], Pagination]:
    start = page * size
    pagination = Pagination(
        page=page,
        size=size,
        total_elements=len(events),
        total_pages=math.ceil(len(events) / size),
    )
    return events[start : start + size], pagination


class EventAggregationService:
    """Unified event listing across the platform store and the provider."""

    def __init__(
        self,
        store: EventStore,
        provider: EventProvider,
        cache: BaseCache | None = None,
        platform_ttl: int = 300,
        external_ttl: int = 600,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._provider = provider
        self._cache = cache
        self._platform_ttl = platform_ttl
        self._external_ttl = external_ttl
        self._clock = clock

    def list_events(self, filters: EventFilters, page: int, size: int) -> EventPage:
        """Return one page of the merged, filtered and sorted event set."""
        working: list[UnifiedEvent] = []
        if filters.source in (SourceFilter.ALL, SourceFilter.PLATFORM):
            working.extend(self._platform_leg())
        if filters.source in (SourceFilter.ALL, SourceFilter.TICKETMASTER):
            working.extend(self._external_leg(filters, page, size))

        filtered = apply_filters(working, filters, self._clock())
        events, pagination = paginate(filtered, page, size)
        return EventPage(events=tuple(events), pagination=pagination, filters=filters)

    def _platform_leg(self) -> list[PlatformEvent]:
        try:
            return self._cached(
                PLATFORM_LEG_CACHE_KEY,
                lambda: self._store.list_platform_events(public_only=True),
                self._platform_ttl,
            )
        except DatabaseError:
            logger.exception("Platform leg failed; continuing without platform events")
            return []

    def _external_leg(self, filters: EventFilters, page: int, size: int) -> list[ExternalEvent]:
        query = ExternalQuery(
            page=page,
            size=size * 2,
            city=filters.city,
            keyword=filters.search,
            category=filters.category,
        )
        try:
            result = self._cached(
                external_leg_cache_key(query),
                lambda: self._provider.search_events(query),
                self._external_ttl,
            )
        except UpstreamUnavailableError as exc:
            logger.warning("External leg failed (%s); continuing without provider events", exc)
            return []
        return list(result.events)

    def _cached(self, key: str, fetch: Callable, timeout: int):
        if self._cache is None:
            return fetch()
        return self._cache.get_or_set(key, fetch, timeout)
