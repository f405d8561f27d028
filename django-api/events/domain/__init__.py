from events.domain.categories import Category
from events.domain.models import (
    EventFilters,
    EventPage,
    ExternalEvent,
    ExternalEventPage,
    ExternalQuery,
    Pagination,
    PlatformEvent,
    Registration,
    UnifiedEvent,
    Venue,
)
from events.domain.value_objects import (
    Capacity,
    EventId,
    EventSource,
    EventStatus,
    Price,
    Principal,
    RegistrationStatus,
    Role,
    SourceFilter,
)

__all__ = [
    "Category",
    "PlatformEvent",
    "ExternalEvent",
    "UnifiedEvent",
    "Venue",
    "Registration",
    "EventFilters",
    "EventPage",
    "ExternalQuery",
    "ExternalEventPage",
    "Pagination",
    "EventId",
    "EventSource",
    "EventStatus",
    "RegistrationStatus",
    "SourceFilter",
    "Role",
    "Principal",
    "Price",
    "Capacity",
]
