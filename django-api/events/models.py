"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.utils import timezone

from events.domain.value_objects import EventSource, EventStatus, RegistrationStatus


class PlatformEvent(models.Model):
    """Persistence model for staff-created events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(blank=True, null=True)
    venue = models.JSONField(default=dict)
    images = models.JSONField(default=list, blank=True)
    category = models.CharField(max_length=100)
    price = models.JSONField(blank=True, null=True)
    capacity = models.PositiveIntegerField()
    available_tickets = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=[(status.value, status.value) for status in EventStatus],
        default=EventStatus.ACTIVE.value,
    )
    created_by = models.CharField(max_length=255)
    is_public = models.BooleanField(default=True)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]
        indexes = [
            models.Index(fields=["is_public", "start_date"]),
            models.Index(fields=["created_by", "-created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_tickets__lte=models.F("capacity")),
                name="available_tickets_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Registration(models.Model):
    """Persistence model for registrations.

    ``event_id`` holds a unified id and is not a foreign key: external events
    are never stored.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=255)
    user_email = models.CharField(max_length=255, blank=True, default="")
    user_name = models.CharField(max_length=255, blank=True, default="")
    event_id = models.CharField(max_length=255)
    event_name = models.CharField(max_length=255)
    event_date = models.CharField(max_length=64)
    event_end_date = models.CharField(max_length=64, blank=True, null=True)
    event_venue = models.CharField(max_length=255, blank=True, default="")
    event_source = models.CharField(
        max_length=20,
        choices=[(source.value, source.value) for source in EventSource],
    )
    registered_at = models.DateTimeField(default=timezone.now)
    cancelled_at = models.DateTimeField(blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=[
            (status.value, status.value)
            for status in RegistrationStatus
            if status is not RegistrationStatus.ENDED
        ],
        default=RegistrationStatus.REGISTERED.value,
    )
    ticket_count = models.PositiveIntegerField(default=1)
    ticket_url = models.URLField(max_length=500, blank=True, null=True)

    class Meta:
        ordering = ["-registered_at"]
        indexes = [
            models.Index(fields=["user_id", "-registered_at"]),
            models.Index(fields=["event_id", "status"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "event_id"],
                condition=models.Q(status="registered"),
                name="unique_active_registration",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_name or self.user_id} - {self.event_name}"
