"""Domain models representing persisted and fetched state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).

A unified event is one of two variants keyed on ``source``. Consumers
dispatch with ``match event.source`` rather than on the Python type.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from events.domain.timestamps import end_of_day, parse_timestamp
from events.domain.value_objects import (
    EXTERNAL_ID_PREFIX,
    Capacity,
    EventSource,
    EventStatus,
    Price,
    RegistrationStatus,
    SourceFilter,
)


@dataclass(frozen=True)
class Venue:
    name: str
    address: str = ""
    city: str = ""
    country: str = ""
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class PriceRange:
    type: str
    currency: str
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class Classification:
    segment: str
    genre: str
    sub_genre: str | None = None


@dataclass(frozen=True)
class PublicSale:
    start_date_time: str | None = None
    end_date_time: str | None = None


@dataclass(frozen=True)
class TicketmasterData:
    """Provider-specific details carried alongside an external event."""

    original_id: str
    url: str
    ticket_url: str | None = None
    price_ranges: tuple[PriceRange, ...] = ()
    public_sale: PublicSale = field(default_factory=PublicSale)
    classifications: tuple[Classification, ...] = ()


@dataclass(frozen=True)
class PlatformEvent:
    """Event created by staff and kept in the platform store."""

    id: str
    name: str
    description: str
    start_date: str
    venue: Venue
    category: str
    status: EventStatus
    created_by: str
    created_at: str
    updated_at: str
    capacity: Capacity
    available_tickets: int
    end_date: str | None = None
    images: tuple[str, ...] = ()
    price: Price | None = None
    is_public: bool = True
    tags: tuple[str, ...] = ()
    source: Literal[EventSource.PLATFORM] = EventSource.PLATFORM

    def __post_init__(self) -> None:
        if self.id.startswith(EXTERNAL_ID_PREFIX):
            raise ValueError("Platform event ids cannot use the external namespace")
        if not 0 <= self.available_tickets <= self.capacity.value:
            raise ValueError("Available tickets must be between 0 and capacity")


@dataclass(frozen=True)
class ExternalEvent:
    """Event fetched from the ticketing provider. Never persisted."""

    id: str
    name: str
    description: str
    start_date: str
    venue: Venue
    category: str
    status: EventStatus
    ticketmaster_data: TicketmasterData
    last_synced: str
    end_date: str | None = None
    images: tuple[str, ...] = ()
    price: Price | None = None
    source: Literal[EventSource.TICKETMASTER] = EventSource.TICKETMASTER

    def __post_init__(self) -> None:
        if not self.id.startswith(EXTERNAL_ID_PREFIX):
            raise ValueError("External event ids must carry the namespace prefix")


UnifiedEvent = PlatformEvent | ExternalEvent


@dataclass(frozen=True)
class Pagination:
    page: int
    size: int
    total_elements: int
    total_pages: int


@dataclass(frozen=True)
class ExternalQuery:
    """Query forwarded to the provider."""

    page: int = 0
    size: int = 20
    city: str | None = None
    keyword: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class ExternalEventPage:
    events: tuple[ExternalEvent, ...]
    pagination: Pagination


@dataclass(frozen=True)
class EventFilters:
    search: str | None = None
    category: str | None = None
    city: str | None = None
    source: SourceFilter = SourceFilter.ALL


@dataclass(frozen=True)
class EventPage:
    events: tuple[UnifiedEvent, ...]
    pagination: Pagination
    filters: EventFilters


@dataclass(frozen=True)
class Registration:
    """A user's registration, with a snapshot of the event taken at creation."""

    id: str
    user_id: str
    user_email: str
    user_name: str
    event_id: str
    event_name: str
    event_date: str
    event_venue: str
    event_source: EventSource
    registered_at: str
    status: RegistrationStatus
    ticket_count: int = 1
    event_end_date: str | None = None
    ticket_url: str | None = None
    cancelled_at: str | None = None

    def ends_at(self) -> datetime | None:
        end = parse_timestamp(self.event_end_date)
        if end is not None:
            return end
        start = parse_timestamp(self.event_date)
        if start is None:
            return None
        return end_of_day(start)


@dataclass(frozen=True)
class NewRegistration:
    """Registration fields gathered before the record exists."""

    user_id: str
    user_email: str
    user_name: str
    event_id: str
    event_name: str
    event_date: str
    event_venue: str
    event_source: EventSource
    event_end_date: str | None = None
    ticket_url: str | None = None
    ticket_count: int = 1


@dataclass(frozen=True)
class EventRegistrations:
    """A staff-owned event with the registrations made against it."""

    id: str
    name: str
    start_date: str
    registrations: tuple[Registration, ...] = ()


@dataclass(frozen=True)
class EventStats:
    total_events: int
    upcoming_events: int
    past_events: int


@dataclass(frozen=True)
class RegistrationStats:
    total_registrations: int
    today_registrations: int
    pending_registrations: int
