"""Serializers for transforming domain models to API responses and for
validating request input.

Response keys are camelCase. Optional values that are absent are dropped
from the payload rather than rendered as null.
"""

from typing import assert_never

from rest_framework import serializers

from events.domain.categories import Category
from events.domain.models import UnifiedEvent
from events.domain.value_objects import EventSource, EventStatus, SourceFilter


class CompactSerializer(serializers.Serializer):
    """Serializer that omits keys whose value is None."""

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {key: value for key, value in data.items() if value is not None}


# Output


class VenueSerializer(CompactSerializer):
    name = serializers.CharField()
    address = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField(allow_null=True)
    country = serializers.CharField()
    latitude = serializers.FloatField(allow_null=True)
    longitude = serializers.FloatField(allow_null=True)


class PriceSerializer(CompactSerializer):
    amount = serializers.FloatField()
    min = serializers.FloatField(allow_null=True)
    max = serializers.FloatField(allow_null=True)
    currency = serializers.CharField()


class PriceRangeSerializer(CompactSerializer):
    type = serializers.CharField()
    currency = serializers.CharField()
    min = serializers.FloatField(allow_null=True)
    max = serializers.FloatField(allow_null=True)


class ClassificationSerializer(CompactSerializer):
    segment = serializers.CharField()
    genre = serializers.CharField()
    subGenre = serializers.CharField(source="sub_genre", allow_null=True)


class PublicSaleSerializer(CompactSerializer):
    startDateTime = serializers.CharField(source="start_date_time", allow_null=True)
    endDateTime = serializers.CharField(source="end_date_time", allow_null=True)


class TicketmasterDataSerializer(CompactSerializer):
    originalId = serializers.CharField(source="original_id")
    url = serializers.CharField()
    ticketUrl = serializers.CharField(source="ticket_url", allow_null=True)
    priceRanges = PriceRangeSerializer(source="price_ranges", many=True)
    sales = serializers.SerializerMethodField()
    classifications = ClassificationSerializer(many=True)

    def get_sales(self, obj) -> dict:
        return {"public": PublicSaleSerializer(obj.public_sale).data}


class BaseEventSerializer(CompactSerializer):
    """Fields shared by both event variants."""

    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    startDate = serializers.CharField(source="start_date")
    endDate = serializers.CharField(source="end_date", allow_null=True)
    venue = VenueSerializer()
    images = serializers.ListField(child=serializers.CharField())
    category = serializers.CharField()
    price = PriceSerializer(allow_null=True)
    status = serializers.CharField()
    source = serializers.CharField()


class PlatformEventSerializer(BaseEventSerializer):
    createdBy = serializers.CharField(source="created_by")
    createdAt = serializers.CharField(source="created_at")
    updatedAt = serializers.CharField(source="updated_at")
    isPublic = serializers.BooleanField(source="is_public")
    capacity = serializers.IntegerField(source="capacity.value")
    availableTickets = serializers.IntegerField(source="available_tickets")
    tags = serializers.ListField(child=serializers.CharField())


class ExternalEventSerializer(BaseEventSerializer):
    ticketmasterData = TicketmasterDataSerializer(source="ticketmaster_data")
    lastSynced = serializers.CharField(source="last_synced")


def serialize_event(event: UnifiedEvent) -> dict:
    match event.source:
        case EventSource.PLATFORM:
            return PlatformEventSerializer(event).data
        case EventSource.TICKETMASTER:
            return ExternalEventSerializer(event).data
        case _:
            assert_never(event.source)


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    totalElements = serializers.IntegerField(source="total_elements")
    totalPages = serializers.IntegerField(source="total_pages")


class FiltersSerializer(CompactSerializer):
    search = serializers.CharField(allow_null=True)
    category = serializers.CharField(allow_null=True)
    city = serializers.CharField(allow_null=True)
    source = serializers.CharField()


class EventPageSerializer(serializers.Serializer):
    events = serializers.SerializerMethodField()
    pagination = PaginationSerializer()
    filters = FiltersSerializer()

    def get_events(self, obj) -> list[dict]:
        return [serialize_event(event) for event in obj.events]


class RegistrationSerializer(CompactSerializer):
    id = serializers.CharField()
    userId = serializers.CharField(source="user_id")
    userEmail = serializers.CharField(source="user_email")
    userName = serializers.CharField(source="user_name")
    eventId = serializers.CharField(source="event_id")
    eventName = serializers.CharField(source="event_name")
    eventDate = serializers.CharField(source="event_date")
    eventEndDate = serializers.CharField(source="event_end_date", allow_null=True)
    eventVenue = serializers.CharField(source="event_venue")
    eventSource = serializers.CharField(source="event_source")
    registeredAt = serializers.CharField(source="registered_at")
    cancelledAt = serializers.CharField(source="cancelled_at", allow_null=True)
    status = serializers.CharField()
    ticketCount = serializers.IntegerField(source="ticket_count")
    ticketUrl = serializers.CharField(source="ticket_url", allow_null=True)


class EventRegistrationsSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    startDate = serializers.CharField(source="start_date")
    registrations = RegistrationSerializer(many=True)


class EventStatsSerializer(serializers.Serializer):
    totalEvents = serializers.IntegerField(source="total_events")
    upcomingEvents = serializers.IntegerField(source="upcoming_events")
    pastEvents = serializers.IntegerField(source="past_events")


class RegistrationStatsSerializer(serializers.Serializer):
    totalRegistrations = serializers.IntegerField(source="total_registrations")
    todayRegistrations = serializers.IntegerField(source="today_registrations")
    pendingRegistrations = serializers.IntegerField(source="pending_registrations")


# Input


class EventListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    source = serializers.ChoiceField(
        choices=[choice.value for choice in SourceFilter], required=False, allow_blank=True
    )
    page = serializers.IntegerField(min_value=0, default=0)
    size = serializers.IntegerField(min_value=1, max_value=100, default=20)


class ExternalQuerySerializer(serializers.Serializer):
    city = serializers.CharField(required=False, allow_blank=True)
    keyword = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(min_value=0, default=0)
    size = serializers.IntegerField(min_value=1, max_value=200, default=20)


class RegisterSerializer(serializers.Serializer):
    eventId = serializers.CharField(source="event_id", required=False, allow_blank=True)


class VenueInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=255)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    country = serializers.CharField(required=False, allow_blank=True, default="")
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(
        required=False, allow_null=True, min_value=-180, max_value=180
    )


class PriceInputSerializer(serializers.Serializer):
    amount = serializers.FloatField(required=False, min_value=0)
    min = serializers.FloatField(required=False, min_value=0)
    max = serializers.FloatField(required=False, min_value=0)
    currency = serializers.CharField(max_length=3, default="USD")

    def validate(self, attrs):
        if attrs.get("amount") is None and attrs.get("min") is None:
            raise serializers.ValidationError("price needs an amount or a min")
        low, high = attrs.get("min"), attrs.get("max")
        if low is not None and high is not None and high < low:
            raise serializers.ValidationError("price max must not be below min")
        return attrs


class PlatformEventInputSerializer(serializers.Serializer):
    """Create/update payload. Use ``partial=True`` for updates."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    startDate = serializers.DateTimeField(source="start_date")
    endDate = serializers.DateTimeField(source="end_date", required=False, allow_null=True)
    venue = VenueInputSerializer()
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)
    category = serializers.ChoiceField(choices=[category.value for category in Category])
    price = PriceInputSerializer(required=False, allow_null=True)
    capacity = serializers.IntegerField(min_value=0)
    status = serializers.ChoiceField(
        choices=[status.value for status in EventStatus], required=False
    )
    isPublic = serializers.BooleanField(source="is_public", required=False, default=True)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False, default=list
    )
