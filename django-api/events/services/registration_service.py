"""Registration workflow.

Per (user, event) pair: none -> registered -> cancelled | attended, with
"ended" derived at read time. Only registered -> cancelled is caller-driven.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import assert_never

from events.domain.errors import (
    AlreadyRegisteredError,
    RegistrationNotActiveError,
    RegistrationNotFoundError,
    ValidationError,
)
from events.domain.lifecycle import project
from events.domain.models import (
    EventRegistrations,
    NewRegistration,
    Registration,
    UnifiedEvent,
)
from events.domain.timestamps import parse_timestamp, utcnow
from events.domain.value_objects import EventSource, Principal, RegistrationStatus
from events.services.access import require_owner, require_principal, require_staff
from events.services.event_service import EventService
from events.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)

_LATEST = datetime.max.replace(tzinfo=UTC)


def _ticket_url(event: UnifiedEvent) -> str | None:
    match event.source:
        case EventSource.PLATFORM:
            return None
        case EventSource.TICKETMASTER:
            return event.ticketmaster_data.url or None
        case _:
            assert_never(event.source)


class RegistrationService:
    """Service for registering users against unified events."""

    def __init__(
        self,
        registrations: RegistrationStore,
        events: EventService,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._registrations = registrations
        self._events = events
        self._clock = clock

    def register(self, principal: Principal | None, event_id: str | None) -> Registration:
        """Register the caller for an event from either source.

        The event's name, dates, venue and source are copied onto the
        registration at creation time.

        Raises:
            UnauthorizedError: If there is no principal.
            ValidationError: If event_id is missing.
            AlreadyRegisteredError: If an active registration already exists.
            EventNotFoundError: If the event cannot be resolved.
            SoldOutError: If a platform event has no tickets left.
        """
        principal = require_principal(principal)
        event_id = (event_id or "").strip()
        if not event_id:
            raise ValidationError("Event ID is required")

        # Key on the resolved id; platform lookups accept any UUID spelling.
        event = self._events.get_event(event_id)
        if self._registrations.find_active(principal.user_id, event.id) is not None:
            raise AlreadyRegisteredError(event.id)

        registration = self._registrations.create(
            NewRegistration(
                user_id=principal.user_id,
                user_email=principal.email,
                user_name=principal.name,
                event_id=event.id,
                event_name=event.name,
                event_date=event.start_date,
                event_end_date=event.end_date,
                event_venue=event.venue.name,
                event_source=event.source,
                ticket_url=_ticket_url(event),
            )
        )
        logger.info("User %s registered for %s", principal.user_id, event.id)
        return registration

    def cancel(self, registration_id: str, principal: Principal | None) -> None:
        """Soft-cancel the caller's registration.

        Raises:
            RegistrationNotFoundError: If the registration does not exist.
            ForbiddenError: If it belongs to someone else.
            RegistrationNotActiveError: If it is not currently registered.
        """
        principal = require_principal(principal)
        registration = self._registrations.get(registration_id)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        require_owner(principal, registration.user_id)
        if registration.status is not RegistrationStatus.REGISTERED:
            raise RegistrationNotActiveError(registration_id)
        self._registrations.cancel(registration_id, self._clock())
        logger.info("Registration %s cancelled by %s", registration_id, principal.user_id)

    def list_for_user(self, principal: Principal | None) -> list[Registration]:
        """Return the caller's active registrations by event date, past ones as ended."""
        principal = require_principal(principal)
        now = self._clock()
        active = [
            project(registration, now)
            for registration in self._registrations.list_for_user(principal.user_id)
            if registration.status is RegistrationStatus.REGISTERED
        ]
        return sorted(active, key=self._event_date_key)

    def recent_activity(self, principal: Principal | None, limit: int = 10) -> list[Registration]:
        """Return the caller's most recent registrations of any status."""
        principal = require_principal(principal)
        now = self._clock()
        registrations = self._registrations.list_for_user(principal.user_id)
        return [project(registration, now) for registration in registrations[:limit]]

    def list_for_staff(self, principal: Principal | None) -> list[EventRegistrations]:
        """Group registrations by the caller's own platform events."""
        principal = require_staff(principal)
        events = self._events.list_platform_events(principal, created_by=principal.user_id)
        by_event: dict[str, list[Registration]] = {}
        now = self._clock()
        for registration in self._registrations.list_for_events(event.id for event in events):
            by_event.setdefault(registration.event_id, []).append(project(registration, now))

        return [
            EventRegistrations(
                id=event.id,
                name=event.name,
                start_date=event.start_date,
                registrations=tuple(by_event[event.id]),
            )
            for event in events
            if event.id in by_event
        ]

    @staticmethod
    def _event_date_key(registration: Registration) -> datetime:
        return parse_timestamp(registration.event_date) or _LATEST
