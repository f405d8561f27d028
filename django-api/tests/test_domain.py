"""Unit tests for domain primitives.

Run with: pytest tests/test_domain.py -v
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from events.domain.categories import Category, normalize, to_segment
from events.domain.lifecycle import effective_status, project
from events.domain.timestamps import parse_timestamp
from events.domain.value_objects import (
    Capacity,
    EventId,
    EventSource,
    Price,
    RegistrationStatus,
)
from fakes import make_external_event, make_platform_event


class TestPrice:
    """Tests for Price value object."""

    def test_valid_price(self):
        """Price accepts non-negative amounts."""
        price = Price(amount=Decimal("10.50"), currency="USD")
        assert price.amount == Decimal("10.50")
        assert str(price) == "10.50 USD"

    def test_negative_price_rejected(self):
        """Price rejects negative amounts."""
        with pytest.raises(ValueError):
            Price(amount=Decimal("-1"), currency="USD")

    def test_from_dict_defaults_amount_to_min_and_currency_to_usd(self):
        price = Price.from_dict({"min": 25, "max": 80})
        assert price.amount == Decimal("25")
        assert price.currency == "USD"
        assert price.to_dict() == {"amount": 25.0, "currency": "USD", "min": 25.0, "max": 80.0}

    def test_from_dict_empty(self):
        assert Price.from_dict(None) is None
        assert Price.from_dict({"currency": "EUR"}) is None


class TestCapacity:
    """Tests for Capacity value object."""

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            Capacity(-1)

    def test_shrinking_below_taken_seats_bottoms_out_at_zero(self):
        """Capacity 100 with 40 available (60 taken) resized to 50 leaves 0."""
        resized, available = Capacity(100).resize(50, available_tickets=40)
        assert resized == Capacity(50)
        assert available == 0

    def test_growing_keeps_taken_seats(self):
        _, available = Capacity(100).resize(150, available_tickets=40)
        assert available == 90


class TestEventId:
    """Tests for the unified event identifier."""

    def test_prefix_selects_external_source(self):
        event_id = EventId.from_string("tm_vvG1zZ4")
        assert event_id.source is EventSource.TICKETMASTER
        assert event_id.original_id == "vvG1zZ4"

    def test_unprefixed_id_is_platform(self):
        event_id = EventId.from_string("3f2c7a0e-0c1e-4d4f-9d0b-111111111111")
        assert event_id.source is EventSource.PLATFORM
        assert event_id.original_id == event_id.value

    def test_for_external_adds_prefix(self):
        assert EventId.for_external("abc").value == "tm_abc"

    @pytest.mark.parametrize("raw", ["", "   ", "tm_"])
    def test_malformed_ids_rejected(self, raw):
        with pytest.raises(ValueError):
            EventId.from_string(raw)


class TestEventVariants:
    """Invariants carried by the two unified event variants."""

    def test_platform_event_cannot_use_external_namespace(self):
        with pytest.raises(ValueError):
            make_platform_event(id="tm_123")

    def test_external_event_requires_namespace(self):
        with pytest.raises(ValueError):
            make_external_event(id="123")

    def test_available_tickets_cannot_exceed_capacity(self):
        with pytest.raises(ValueError):
            make_platform_event(capacity=Capacity(10), available_tickets=11)

    def test_source_tags(self):
        assert make_platform_event().source is EventSource.PLATFORM
        assert make_external_event().source is EventSource.TICKETMASTER


class TestCategories:
    """Tests for provider classification normalization."""

    def test_segment_match(self):
        assert normalize({"segment": {"name": "Music"}}) is Category.MUSIC

    def test_genre_keyword_when_segment_unknown(self):
        classification = {"segment": {"name": "Theatre"}, "genre": {"name": "Opera"}}
        assert normalize(classification) is Category.ARTS_THEATRE

    def test_segment_wins_over_genre(self):
        classification = {"segment": {"name": "Sports"}, "genre": {"name": "Rock"}}
        assert normalize(classification) is Category.SPORTS

    def test_genre_keyword_is_substring_match(self):
        classification = {"segment": {"name": "Undefined"}, "genre": {"name": "Hard Rock"}}
        assert normalize(classification) is Category.MUSIC

    def test_missing_classification_is_miscellaneous(self):
        assert normalize(None) is Category.MISCELLANEOUS
        assert normalize({}) is Category.MISCELLANEOUS
        assert normalize({"genre": {"name": "Lecture"}}) is Category.MISCELLANEOUS

    @pytest.mark.parametrize("category", list(Category))
    def test_to_segment_inverts_segment_match(self, category):
        segment = to_segment(category.value)
        assert normalize({"segment": {"name": segment}}) is category

    def test_to_segment_is_case_insensitive(self):
        assert to_segment("arts & theatre") == "Arts & Theatre"

    def test_to_segment_passes_unknown_values_through(self):
        assert to_segment("Film") == "Film"


class TestRegistrationLifecycle:
    """Tests for the derived ended status."""

    ENDS_AT = datetime(2030, 5, 1, 21, 0, tzinfo=UTC)

    def test_registered_after_end_reads_as_ended(self):
        now = datetime(2030, 5, 2, tzinfo=UTC)
        status = effective_status(RegistrationStatus.REGISTERED, self.ENDS_AT, now)
        assert status is RegistrationStatus.ENDED

    def test_registered_before_end_is_unchanged(self):
        now = datetime(2030, 5, 1, 20, 0, tzinfo=UTC)
        status = effective_status(RegistrationStatus.REGISTERED, self.ENDS_AT, now)
        assert status is RegistrationStatus.REGISTERED

    @pytest.mark.parametrize(
        "stored", [RegistrationStatus.CANCELLED, RegistrationStatus.ATTENDED]
    )
    def test_terminal_statuses_never_become_ended(self, stored):
        now = datetime(2031, 1, 1, tzinfo=UTC)
        assert effective_status(stored, self.ENDS_AT, now) is stored

    def test_project_falls_back_to_end_of_start_day(self, registration_store):
        from events.domain.models import NewRegistration

        registration = registration_store.create(
            NewRegistration(
                user_id="u",
                user_email="",
                user_name="",
                event_id="tm_abc",
                event_name="Show",
                event_date="2030-05-01T18:00:00",
                event_venue="Arena",
                event_source=EventSource.TICKETMASTER,
            )
        )
        late_evening = datetime(2030, 5, 1, 23, 0, tzinfo=UTC)
        next_day = datetime(2030, 5, 2, 0, 0, 1, tzinfo=UTC)
        assert project(registration, late_evening).status is RegistrationStatus.REGISTERED
        assert project(registration, next_day).status is RegistrationStatus.ENDED
        assert registration.status is RegistrationStatus.REGISTERED


class TestTimestamps:
    def test_naive_values_read_as_utc(self):
        assert parse_timestamp("2030-05-01T18:00:00") == datetime(2030, 5, 1, 18, tzinfo=UTC)

    def test_invalid_values_are_none(self):
        assert parse_timestamp("") is None
        assert parse_timestamp("next tuesday") is None
