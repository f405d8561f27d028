"""Django signals for cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.domain.value_objects import EventSource
from events.models import PlatformEvent, Registration
from events.services.aggregation_service import PLATFORM_LEG_CACHE_KEY


@receiver([post_save, post_delete], sender=PlatformEvent)
def invalidate_platform_leg_cache(sender, instance, **kwargs):
    """Invalidate the cached platform leg when an event is saved or deleted."""
    cache.delete(PLATFORM_LEG_CACHE_KEY)


@receiver(post_save, sender=Registration)
def invalidate_platform_leg_on_seat_change(sender, instance, **kwargs):
    """Seat counts move with platform registrations and cancellations."""
    if instance.event_source == EventSource.PLATFORM.value:
        cache.delete(PLATFORM_LEG_CACHE_KEY)
