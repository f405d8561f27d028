"""Wire services to their Django-backed stores and the configured provider."""

from django.conf import settings
from django.core.cache import cache

from events.providers import EventProvider, TicketmasterClient
from events.services.aggregation_service import EventAggregationService
from events.services.event_service import EventService
from events.services.registration_service import RegistrationService
from events.services.stats_service import StatsService
from events.stores.django_store import DjangoEventStore, DjangoRegistrationStore


def build_provider() -> EventProvider:
    return TicketmasterClient(
        api_key=settings.TICKETMASTER_API_KEY,
        base_url=settings.TICKETMASTER_BASE_URL,
        timeout=settings.TICKETMASTER_TIMEOUT,
    )


def event_service() -> EventService:
    return EventService(DjangoEventStore(), DjangoRegistrationStore(), build_provider())


def aggregation_service() -> EventAggregationService:
    return EventAggregationService(
        DjangoEventStore(),
        build_provider(),
        cache=cache,
        platform_ttl=settings.EVENTS_PLATFORM_CACHE_TTL,
        external_ttl=settings.EVENTS_EXTERNAL_CACHE_TTL,
    )


def registration_service() -> RegistrationService:
    return RegistrationService(DjangoRegistrationStore(), event_service())


def stats_service() -> StatsService:
    return StatsService(DjangoEventStore(), DjangoRegistrationStore())
