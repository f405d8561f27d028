"""Counters for the staff dashboard."""

from collections.abc import Callable
from datetime import datetime

from events.domain.models import EventStats, RegistrationStats
from events.domain.timestamps import parse_timestamp, utcnow
from events.domain.value_objects import EventStatus, Principal, RegistrationStatus
from events.services.access import require_staff
from events.stores.interfaces import EventStore, RegistrationStore


class StatsService:
    def __init__(
        self,
        store: EventStore,
        registrations: RegistrationStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._registrations = registrations
        self._clock = clock

    def event_stats(self, principal: Principal | None) -> EventStats:
        require_staff(principal)
        now = self._clock()
        events = self._store.list_platform_events()
        upcoming = past = 0
        for event in events:
            starts_at = parse_timestamp(event.start_date)
            started = starts_at is not None and starts_at <= now
            if not started and event.status is EventStatus.ACTIVE:
                upcoming += 1
            if started or event.status is EventStatus.COMPLETED:
                past += 1
        return EventStats(total_events=len(events), upcoming_events=upcoming, past_events=past)

    def registration_stats(self, principal: Principal | None) -> RegistrationStats:
        require_staff(principal)
        today = self._clock().date()
        registrations = self._registrations.list_all()
        today_count = sum(
            1
            for registration in registrations
            if (registered_at := parse_timestamp(registration.registered_at)) is not None
            and registered_at.date() == today
        )
        pending = sum(
            1 for registration in registrations if registration.status is RegistrationStatus.REGISTERED
        )
        return RegistrationStats(
            total_registrations=len(registrations),
            today_registrations=today_count,
            pending_registrations=pending,
        )
