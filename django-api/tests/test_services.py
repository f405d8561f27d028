"""Unit tests for the event, registration and stats services.

These run against in-memory stores and test error handling and domain
error mapping.
Run with: pytest tests/test_services.py -v
"""

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from events.domain.errors import (
    AlreadyRegisteredError,
    EventNotFoundError,
    ForbiddenError,
    RegistrationNotActiveError,
    RegistrationNotFoundError,
    RegistrationsExistError,
    SoldOutError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from events.domain.value_objects import Capacity, EventSource, EventStatus, RegistrationStatus
from events.services.event_service import EventService
from events.services.registration_service import RegistrationService
from events.services.stats_service import StatsService
from fakes import OTHER_STAFF, STAFF, USER, make_external_event, make_platform_event

NEW_EVENT = {
    "name": "Workshop",
    "description": "Hands-on",
    "start_date": datetime(2030, 4, 1, 9, 0, tzinfo=UTC),
    "end_date": datetime(2030, 4, 1, 17, 0, tzinfo=UTC),
    "venue": {"name": "Lab", "city": "Austin"},
    "category": "Arts & Theatre",
    "capacity": 30,
}


@pytest.fixture
def event_service(event_store, registration_store, provider):
    return EventService(event_store, registration_store, provider)


@pytest.fixture
def registration_service(registration_store, event_service, clock):
    return RegistrationService(registration_store, event_service, clock=clock)


class TestEventService:
    """Tests for EventService."""

    def test_get_platform_event(self, event_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event
        assert event_service.get_event(event.id) == event

    def test_get_external_event_strips_prefix(self, event_service, provider):
        provider.events.append(make_external_event("abc"))
        assert event_service.get_event("tm_abc").id == "tm_abc"

    @pytest.mark.parametrize("event_id", ["", "tm_", "missing"])
    def test_get_event_not_found(self, event_service, event_id):
        """Malformed and unknown ids both raise EventNotFoundError."""
        with pytest.raises(EventNotFoundError):
            event_service.get_event(event_id)

    def test_get_external_event_provider_down(self, event_service, provider):
        provider.fail = True
        with pytest.raises(UpstreamUnavailableError):
            event_service.get_event("tm_abc")

    def test_create_requires_staff(self, event_service):
        with pytest.raises(ForbiddenError):
            event_service.create_event(NEW_EVENT, USER)
        with pytest.raises(UnauthorizedError):
            event_service.create_event(NEW_EVENT, None)

    def test_create_sets_owner_and_availability(self, event_service):
        event = event_service.create_event(NEW_EVENT, STAFF)
        assert event.created_by == STAFF.user_id
        assert event.available_tickets == 30

    def test_create_rejects_end_before_start(self, event_service):
        data = {**NEW_EVENT, "end_date": datetime(2030, 3, 31, tzinfo=UTC)}
        with pytest.raises(ValidationError):
            event_service.create_event(data, STAFF)

    def test_update_recomputes_available_tickets(self, event_service, event_store):
        """Capacity 100 with 60 taken shrunk to 50 leaves no tickets."""
        event = make_platform_event(capacity=Capacity(100), available_tickets=40)
        event_store.events[event.id] = event

        updated = event_service.update_event(event.id, {"capacity": 50}, STAFF)

        assert updated.capacity == Capacity(50)
        assert updated.available_tickets == 0

    def test_update_ignores_read_only_fields(self, event_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event

        updated = event_service.update_event(
            event.id, {"name": "Renamed", "available_tickets": 3, "created_by": "x"}, STAFF
        )

        assert updated.name == "Renamed"
        assert updated.available_tickets == event.available_tickets
        assert updated.created_by == STAFF.user_id

    def test_update_merges_venue(self, event_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event

        updated = event_service.update_event(event.id, {"venue": {"city": "Shelbyville"}}, STAFF)

        assert updated.venue.city == "Shelbyville"
        assert updated.venue.name == event.venue.name

    def test_update_by_other_staff_is_forbidden(self, event_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event
        with pytest.raises(ForbiddenError) as exc_info:
            event_service.update_event(event.id, {"name": "Mine now"}, OTHER_STAFF)
        assert exc_info.value.message == "Unauthorized to update this event"

    def test_update_missing_event(self, event_service):
        with pytest.raises(EventNotFoundError):
            event_service.update_event("nope", {"name": "x"}, STAFF)

    def test_delete_blocked_by_active_registrations(
        self, event_service, registration_service, event_store
    ):
        event = make_platform_event()
        event_store.events[event.id] = event
        registration_service.register(USER, event.id)

        with pytest.raises(RegistrationsExistError):
            event_service.delete_event(event.id, STAFF)
        assert event.id in event_store.events

    def test_delete_blocked_when_registered_under_another_spelling(
        self, event_service, registration_service, event_store
    ):
        event = make_platform_event()
        event_store.events[event.id] = event
        registration_service.register(USER, event.id.upper())

        with pytest.raises(RegistrationsExistError):
            event_service.delete_event(event.id, STAFF)
        assert event.id in event_store.events

    def test_delete_after_cancellation(self, event_service, registration_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event
        registration = registration_service.register(USER, event.id)
        registration_service.cancel(registration.id, USER)

        event_service.delete_event(event.id, STAFF)

        assert event.id not in event_store.events

    def test_delete_by_other_staff_is_forbidden(self, event_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event
        with pytest.raises(ForbiddenError):
            event_service.delete_event(event.id, OTHER_STAFF)

    def test_staff_events_include_registration_counts(
        self, event_service, registration_service, event_store
    ):
        older = make_platform_event(name="Older", created_at="2030-01-01T00:00:00+00:00")
        newer = make_platform_event(name="Newer", created_at="2030-02-01T00:00:00+00:00")
        theirs = make_platform_event(name="Theirs", created_by=OTHER_STAFF.user_id)
        for event in (older, newer, theirs):
            event_store.events[event.id] = event
        registration_service.register(USER, older.id)

        rows = event_service.list_staff_events(STAFF)

        assert [(event.name, count) for event, count in rows] == [("Newer", 0), ("Older", 1)]


class TestRegistrationService:
    """Tests for RegistrationService."""

    def test_register_platform_event_snapshots_and_reserves(
        self, registration_service, event_store
    ):
        event = make_platform_event(capacity=Capacity(5), available_tickets=5)
        event_store.events[event.id] = event

        registration = registration_service.register(USER, event.id)

        assert registration.status is RegistrationStatus.REGISTERED
        assert registration.event_name == event.name
        assert registration.event_venue == event.venue.name
        assert registration.event_source is EventSource.PLATFORM
        assert registration.user_email == USER.email
        assert registration.ticket_url is None
        assert event_store.events[event.id].available_tickets == 4

    def test_register_external_event_keeps_ticket_url(self, registration_service, provider):
        provider.events.append(make_external_event("abc"))

        registration = registration_service.register(USER, "tm_abc")

        assert registration.event_source is EventSource.TICKETMASTER
        assert registration.ticket_url == "https://www.ticketmaster.com/event/abc"

    def test_duplicate_registration_creates_nothing(
        self, registration_service, registration_store, event_store
    ):
        event = make_platform_event()
        event_store.events[event.id] = event
        registration_service.register(USER, event.id)

        with pytest.raises(AlreadyRegisteredError):
            registration_service.register(USER, event.id)
        assert len(registration_store.registrations) == 1

    def test_registration_is_keyed_on_the_resolved_event_id(
        self, registration_service, registration_store, event_store
    ):
        """An uppercased UUID names the same event and counts as a duplicate."""
        event = make_platform_event()
        event_store.events[event.id] = event

        registration = registration_service.register(USER, event.id.upper())

        assert registration.event_id == event.id
        with pytest.raises(AlreadyRegisteredError):
            registration_service.register(USER, event.id)
        assert len(registration_store.registrations) == 1

    def test_register_again_after_cancelling(self, registration_service, event_store):
        event = make_platform_event()
        event_store.events[event.id] = event
        first = registration_service.register(USER, event.id)
        registration_service.cancel(first.id, USER)

        second = registration_service.register(USER, event.id)

        assert second.id != first.id

    def test_register_requires_event_id(self, registration_service):
        with pytest.raises(ValidationError) as exc_info:
            registration_service.register(USER, "  ")
        assert exc_info.value.message == "Event ID is required"

    def test_register_requires_session(self, registration_service):
        with pytest.raises(UnauthorizedError):
            registration_service.register(None, "tm_abc")

    def test_register_unknown_event(self, registration_service):
        with pytest.raises(EventNotFoundError):
            registration_service.register(USER, "tm_ghost")

    def test_register_sold_out(self, registration_service, event_store):
        event = make_platform_event(capacity=Capacity(1), available_tickets=0)
        event_store.events[event.id] = event
        with pytest.raises(SoldOutError):
            registration_service.register(USER, event.id)

    def test_cancel_marks_registration_cancelled(
        self, registration_service, registration_store, event_store
    ):
        event = make_platform_event(capacity=Capacity(5), available_tickets=5)
        event_store.events[event.id] = event
        registration = registration_service.register(USER, event.id)

        registration_service.cancel(registration.id, USER)

        stored = registration_store.registrations[registration.id]
        assert stored.status is RegistrationStatus.CANCELLED
        assert stored.cancelled_at is not None

    def test_cancel_someone_elses_registration(self, registration_service, provider):
        provider.events.append(make_external_event("abc"))
        registration = registration_service.register(USER, "tm_abc")
        with pytest.raises(ForbiddenError):
            registration_service.cancel(registration.id, STAFF)

    def test_cancel_twice(self, registration_service, provider):
        provider.events.append(make_external_event("abc"))
        registration = registration_service.register(USER, "tm_abc")
        registration_service.cancel(registration.id, USER)
        with pytest.raises(RegistrationNotActiveError):
            registration_service.cancel(registration.id, USER)

    def test_cancel_missing(self, registration_service):
        with pytest.raises(RegistrationNotFoundError):
            registration_service.cancel("missing", USER)

    def test_my_registrations_hide_cancelled_and_derive_ended(
        self, registration_service, event_store
    ):
        past = make_platform_event(
            name="Past",
            start_date="2030-02-01T18:00:00+00:00",
            end_date="2030-02-01T20:00:00+00:00",
        )
        future = make_platform_event(name="Future")
        dropped = make_platform_event(name="Dropped")
        for event in (past, future, dropped):
            event_store.events[event.id] = event
        registration_service.register(USER, future.id)
        registration_service.register(USER, past.id)
        cancelled = registration_service.register(USER, dropped.id)
        registration_service.cancel(cancelled.id, USER)

        registrations = registration_service.list_for_user(USER)

        assert [(r.event_name, r.status) for r in registrations] == [
            ("Past", RegistrationStatus.ENDED),
            ("Future", RegistrationStatus.REGISTERED),
        ]

    def test_my_registrations_hide_attended(
        self, registration_service, registration_store, event_store
    ):
        went = make_platform_event(name="Went")
        going = make_platform_event(name="Going")
        for event in (went, going):
            event_store.events[event.id] = event
        attended = registration_service.register(USER, went.id)
        registration_service.register(USER, going.id)
        registration_store.registrations[attended.id] = replace(
            attended, status=RegistrationStatus.ATTENDED
        )

        registrations = registration_service.list_for_user(USER)

        assert [r.event_name for r in registrations] == ["Going"]
        assert len(registration_service.recent_activity(USER)) == 2

    def test_recent_activity_is_newest_first_and_limited(self, registration_service, provider):
        for n in range(12):
            provider.events.append(make_external_event(f"e{n}"))
            registration_service.register(USER, f"tm_e{n}")

        activity = registration_service.recent_activity(USER)

        assert len(activity) == 10
        assert activity[0].event_id == "tm_e11"

    def test_staff_view_groups_by_own_events(self, registration_service, event_store):
        mine = make_platform_event(name="Mine")
        quiet = make_platform_event(name="Quiet")
        theirs = make_platform_event(name="Theirs", created_by=OTHER_STAFF.user_id)
        for event in (mine, quiet, theirs):
            event_store.events[event.id] = event
        registration_service.register(USER, mine.id)
        registration_service.register(USER, theirs.id)

        grouped = registration_service.list_for_staff(STAFF)

        assert [group.name for group in grouped] == ["Mine"]
        assert len(grouped[0].registrations) == 1

    def test_staff_view_requires_staff(self, registration_service):
        with pytest.raises(ForbiddenError):
            registration_service.list_for_staff(USER)


class TestStatsService:
    """Tests for StatsService."""

    def test_event_stats(self, event_store, registration_store, clock):
        for event in (
            make_platform_event(start_date="2030-02-01T10:00:00+00:00", end_date=None),
            make_platform_event(),
            make_platform_event(status=EventStatus.CANCELLED),
        ):
            event_store.events[event.id] = event
        service = StatsService(event_store, registration_store, clock=clock)

        stats = service.event_stats(STAFF)

        assert (stats.total_events, stats.upcoming_events, stats.past_events) == (3, 1, 1)

    def test_registration_stats(self, event_store, registration_store, provider, clock):
        events = EventService(event_store, registration_store, provider)
        registrations = RegistrationService(registration_store, events, clock=clock)
        for n in range(3):
            provider.events.append(make_external_event(f"s{n}"))
            registrations.register(USER, f"tm_s{n}")
        first = next(iter(registration_store.registrations))
        registrations.cancel(first, USER)
        new_year = datetime(2030, 1, 1, tzinfo=UTC)
        service = StatsService(event_store, registration_store, clock=lambda: new_year)

        stats = service.registration_stats(STAFF)

        assert stats.total_registrations == 3
        assert stats.today_registrations == 3
        assert stats.pending_registrations == 2

    def test_stats_require_staff(self, event_store, registration_store):
        service = StatsService(event_store, registration_store)
        with pytest.raises(ForbiddenError):
            service.event_stats(USER)
        with pytest.raises(UnauthorizedError):
            service.registration_stats(None)
