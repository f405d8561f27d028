"""Django ORM implementation of the event and registration stores."""

import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Count, F

from events import models
from events.domain.errors import AlreadyRegisteredError, SoldOutError
from events.domain.models import NewRegistration, PlatformEvent, Registration, Venue
from events.domain.timestamps import isoformat
from events.domain.value_objects import (
    Capacity,
    EventSource,
    EventStatus,
    Price,
    RegistrationStatus,
)
from events.stores.interfaces import EventStore, RegistrationStore

_EVENT_FIELDS = {
    "name",
    "description",
    "start_date",
    "end_date",
    "venue",
    "images",
    "category",
    "price",
    "capacity",
    "available_tickets",
    "status",
    "is_public",
    "tags",
}


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (TypeError, ValueError):
        return False
    return True


def _venue_from_json(data: Mapping[str, Any] | None) -> Venue:
    data = data or {}
    return Venue(
        name=data.get("name") or "",
        address=data.get("address") or "",
        city=data.get("city") or "",
        country=data.get("country") or "",
        state=data.get("state") or None,
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
    )


def to_platform_event(instance: models.PlatformEvent) -> PlatformEvent:
    return PlatformEvent(
        id=str(instance.id),
        name=instance.name,
        description=instance.description,
        start_date=isoformat(instance.start_date),
        end_date=isoformat(instance.end_date),
        venue=_venue_from_json(instance.venue),
        images=tuple(instance.images or ()),
        category=instance.category,
        price=Price.from_dict(instance.price),
        status=EventStatus(instance.status),
        created_by=instance.created_by,
        created_at=isoformat(instance.created_at),
        updated_at=isoformat(instance.updated_at),
        is_public=instance.is_public,
        capacity=Capacity(instance.capacity),
        available_tickets=instance.available_tickets,
        tags=tuple(instance.tags or ()),
    )


def to_registration(instance: models.Registration) -> Registration:
    return Registration(
        id=str(instance.id),
        user_id=instance.user_id,
        user_email=instance.user_email,
        user_name=instance.user_name,
        event_id=instance.event_id,
        event_name=instance.event_name,
        event_date=instance.event_date,
        event_end_date=instance.event_end_date,
        event_venue=instance.event_venue,
        event_source=EventSource(instance.event_source),
        registered_at=isoformat(instance.registered_at),
        cancelled_at=isoformat(instance.cancelled_at),
        status=RegistrationStatus(instance.status),
        ticket_count=instance.ticket_count,
        ticket_url=instance.ticket_url,
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def list_platform_events(
        self, created_by: str | None = None, public_only: bool = False
    ) -> list[PlatformEvent]:
        queryset = models.PlatformEvent.objects.all()
        if created_by:
            queryset = queryset.filter(created_by=created_by)
        elif public_only:
            queryset = queryset.filter(is_public=True)
        return [to_platform_event(instance) for instance in queryset.order_by("start_date")]

    def get_platform_event(self, event_id: str) -> PlatformEvent | None:
        if not _is_uuid(event_id):
            return None
        instance = models.PlatformEvent.objects.filter(pk=event_id).first()
        return to_platform_event(instance) if instance else None

    def create_event(self, data: Mapping[str, Any], owner_id: str) -> PlatformEvent:
        values = {key: value for key, value in data.items() if key in _EVENT_FIELDS}
        values["available_tickets"] = values["capacity"]
        values.setdefault("status", EventStatus.ACTIVE.value)
        instance = models.PlatformEvent.objects.create(created_by=owner_id, **values)
        return to_platform_event(instance)

    def update_event(self, event_id: str, fields: Mapping[str, Any]) -> PlatformEvent:
        instance = models.PlatformEvent.objects.get(pk=event_id)
        for key, value in fields.items():
            if key in _EVENT_FIELDS:
                setattr(instance, key, value)
        instance.save()
        return to_platform_event(instance)

    def delete_event(self, event_id: str) -> None:
        # Instance delete so post_delete receivers run.
        models.PlatformEvent.objects.get(pk=event_id).delete()


class DjangoRegistrationStore(RegistrationStore):
    """Relational registration store using Django ORM."""

    def find_active(self, user_id: str, event_id: str) -> Registration | None:
        instance = models.Registration.objects.filter(
            user_id=user_id,
            event_id=event_id,
            status=RegistrationStatus.REGISTERED.value,
        ).first()
        return to_registration(instance) if instance else None

    def count_active(self, event_id: str) -> int:
        return models.Registration.objects.filter(
            event_id=event_id, status=RegistrationStatus.REGISTERED.value
        ).count()

    def count_active_by_event(self, event_ids: Iterable[str]) -> dict[str, int]:
        rows = (
            models.Registration.objects.filter(
                event_id__in=list(event_ids),
                status=RegistrationStatus.REGISTERED.value,
            )
            .values("event_id")
            .annotate(total=Count("id"))
        )
        return {row["event_id"]: row["total"] for row in rows}

    def create(self, registration: NewRegistration) -> Registration:
        try:
            with transaction.atomic():
                if registration.event_source is EventSource.PLATFORM:
                    reserved = models.PlatformEvent.objects.filter(
                        pk=registration.event_id, available_tickets__gt=0
                    ).update(available_tickets=F("available_tickets") - 1)
                    if not reserved:
                        raise SoldOutError(registration.event_id)
                instance = models.Registration.objects.create(
                    user_id=registration.user_id,
                    user_email=registration.user_email,
                    user_name=registration.user_name,
                    event_id=registration.event_id,
                    event_name=registration.event_name,
                    event_date=registration.event_date,
                    event_end_date=registration.event_end_date,
                    event_venue=registration.event_venue,
                    event_source=registration.event_source.value,
                    ticket_count=registration.ticket_count,
                    ticket_url=registration.ticket_url,
                )
        except IntegrityError as exc:
            raise AlreadyRegisteredError(registration.event_id) from exc
        return to_registration(instance)

    def get(self, registration_id: str) -> Registration | None:
        if not _is_uuid(registration_id):
            return None
        instance = models.Registration.objects.filter(pk=registration_id).first()
        return to_registration(instance) if instance else None

    def cancel(self, registration_id: str, cancelled_at: datetime) -> Registration:
        with transaction.atomic():
            instance = models.Registration.objects.select_for_update().get(pk=registration_id)
            instance.status = RegistrationStatus.CANCELLED.value
            instance.cancelled_at = cancelled_at
            instance.save(update_fields=["status", "cancelled_at"])
            if instance.event_source == EventSource.PLATFORM.value:
                # After a capacity shrink, seats held can exceed capacity; release
                # only once the remaining holders fit.
                holders = self.count_active(instance.event_id)
                models.PlatformEvent.objects.filter(
                    pk=instance.event_id,
                    available_tickets__lt=F("capacity") - holders,
                ).update(available_tickets=F("available_tickets") + 1)
        return to_registration(instance)

    def list_for_user(self, user_id: str) -> list[Registration]:
        queryset = models.Registration.objects.filter(user_id=user_id).order_by("-registered_at")
        return [to_registration(instance) for instance in queryset]

    def list_for_events(self, event_ids: Iterable[str]) -> list[Registration]:
        queryset = models.Registration.objects.filter(event_id__in=list(event_ids)).order_by(
            "registered_at"
        )
        return [to_registration(instance) for instance in queryset]

    def list_all(self) -> list[Registration]:
        return [to_registration(instance) for instance in models.Registration.objects.all()]
