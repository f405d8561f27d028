"""Read-time projections of stored state."""

from dataclasses import replace
from datetime import datetime

from events.domain.models import Registration
from events.domain.value_objects import RegistrationStatus


def effective_status(
    stored: RegistrationStatus, ends_at: datetime | None, now: datetime
) -> RegistrationStatus:
    """Status as seen by readers: an active registration past its event is ended."""
    if stored is RegistrationStatus.REGISTERED and ends_at is not None and now > ends_at:
        return RegistrationStatus.ENDED
    return stored


def project(registration: Registration, now: datetime) -> Registration:
    status = effective_status(registration.status, registration.ends_at(), now)
    if status is registration.status:
        return registration
    return replace(registration, status=status)
