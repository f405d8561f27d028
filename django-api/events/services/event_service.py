"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores, providers)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any, assert_never

from events.domain.errors import (
    EventNotFoundError,
    RegistrationsExistError,
    ValidationError,
)
from events.domain.models import ExternalEventPage, ExternalQuery, PlatformEvent, UnifiedEvent
from events.domain.timestamps import parse_timestamp
from events.domain.value_objects import EventId, EventSource, Principal
from events.providers.interfaces import EventProvider
from events.services.access import require_owner, require_staff
from events.stores.interfaces import EventStore, RegistrationStore

logger = logging.getLogger(__name__)

# Derived or ownership fields a caller may never write directly.
_READ_ONLY_FIELDS = {"available_tickets", "created_by", "created_at", "updated_at"}


class EventService:
    """Service for event catalog operations across both sources."""

    def __init__(
        self,
        store: EventStore,
        registrations: RegistrationStore,
        provider: EventProvider,
    ) -> None:
        self._store = store
        self._registrations = registrations
        self._provider = provider

    def get_event(self, event_id: str) -> UnifiedEvent:
        """Return an event by unified ID, dispatching on its namespace.

        Raises:
            EventNotFoundError: If the id is malformed or the event does not exist.
            UpstreamUnavailableError: If the provider cannot be reached.
        """
        try:
            parsed = EventId.from_string(event_id)
        except ValueError as exc:
            raise EventNotFoundError(event_id) from exc

        match parsed.source:
            case EventSource.PLATFORM:
                event = self._store.get_platform_event(parsed.value)
                if event is None:
                    raise EventNotFoundError(event_id)
                return event
            case EventSource.TICKETMASTER:
                return self._provider.get_event(parsed.original_id)
            case _:
                assert_never(parsed.source)

    def list_external_events(self, query: ExternalQuery) -> ExternalEventPage:
        """Return one provider page. Provider failures propagate."""
        return self._provider.search_events(query)

    def list_platform_events(
        self,
        principal: Principal | None,
        created_by: str | None = None,
        public_only: bool = False,
    ) -> list[PlatformEvent]:
        require_staff(principal)
        return self._store.list_platform_events(created_by=created_by, public_only=public_only)

    def get_platform_event(self, event_id: str, principal: Principal | None) -> PlatformEvent:
        require_staff(principal)
        return self._load(event_id)

    def create_event(self, data: Mapping[str, Any], principal: Principal | None) -> PlatformEvent:
        principal = require_staff(principal)
        self._check_dates(data.get("start_date"), data.get("end_date"))
        event = self._store.create_event(data, owner_id=principal.user_id)
        logger.info("Platform event %s created by %s", event.id, principal.user_id)
        return event

    def update_event(
        self, event_id: str, patch: Mapping[str, Any], principal: Principal | None
    ) -> PlatformEvent:
        """Apply a partial update.

        Raises:
            ForbiddenError: If the caller is not staff or does not own the event.
            EventNotFoundError: If the event does not exist.
        """
        principal = require_staff(principal)
        event = self._load(event_id)
        require_owner(principal, event.created_by, "Unauthorized to update this event")

        fields = {key: value for key, value in patch.items() if key not in _READ_ONLY_FIELDS}
        self._check_dates(
            fields.get("start_date", event.start_date),
            fields.get("end_date", event.end_date),
        )
        if "venue" in fields:
            fields["venue"] = {**asdict(event.venue), **fields["venue"]}
        if "capacity" in fields:
            _, fields["available_tickets"] = event.capacity.resize(
                fields["capacity"], event.available_tickets
            )
        return self._store.update_event(event.id, fields)

    def delete_event(self, event_id: str, principal: Principal | None) -> None:
        """Delete an event with no active registrations.

        Raises:
            ForbiddenError: If the caller is not staff or does not own the event.
            EventNotFoundError: If the event does not exist.
            RegistrationsExistError: If anyone is still registered.
        """
        principal = require_staff(principal)
        event = self._load(event_id)
        require_owner(principal, event.created_by, "Unauthorized to delete this event")
        if self._registrations.count_active(event.id) > 0:
            raise RegistrationsExistError(event.id)
        self._store.delete_event(event.id)
        logger.info("Platform event %s deleted by %s", event.id, principal.user_id)

    def list_staff_events(self, principal: Principal | None) -> list[tuple[PlatformEvent, int]]:
        """Return the caller's events with active registration counts, newest first."""
        principal = require_staff(principal)
        events = self._store.list_platform_events(created_by=principal.user_id)
        counts = self._registrations.count_active_by_event(event.id for event in events)
        events.sort(key=lambda event: event.created_at, reverse=True)
        return [(event, counts.get(event.id, 0)) for event in events]

    def _load(self, event_id: str) -> PlatformEvent:
        event = self._store.get_platform_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @staticmethod
    def _check_dates(start: Any, end: Any) -> None:
        start_at = parse_timestamp(start) if isinstance(start, str) else start
        end_at = parse_timestamp(end) if isinstance(end, str) else end
        if start_at is not None and end_at is not None and end_at < start_at:
            raise ValidationError("endDate must not be before startDate")
