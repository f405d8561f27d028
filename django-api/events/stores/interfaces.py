"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from events.domain.models import NewRegistration, PlatformEvent, Registration


class EventStore(ABC):
    """Interface for platform event persistence operations."""

    @abstractmethod
    def list_platform_events(
        self, created_by: str | None = None, public_only: bool = False
    ) -> list[PlatformEvent]:
        """Return platform events ordered by start_date ascending."""
        ...

    @abstractmethod
    def get_platform_event(self, event_id: str) -> PlatformEvent | None:
        """Return an event by ID, or None if not found or malformed."""
        ...

    @abstractmethod
    def create_event(self, data: Mapping[str, Any], owner_id: str) -> PlatformEvent:
        """Persist a new event owned by owner_id with all tickets available."""
        ...

    @abstractmethod
    def update_event(self, event_id: str, fields: Mapping[str, Any]) -> PlatformEvent:
        """Apply already-validated field values and return the stored event."""
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def find_active(self, user_id: str, event_id: str) -> Registration | None:
        """Return the user's registered-status registration for an event."""
        ...

    @abstractmethod
    def count_active(self, event_id: str) -> int:
        ...

    @abstractmethod
    def count_active_by_event(self, event_ids: Iterable[str]) -> dict[str, int]:
        ...

    @abstractmethod
    def create(self, registration: NewRegistration) -> Registration:
        """Insert a registration, reserving a seat for platform events.

        Raises:
            AlreadyRegisteredError: If an active registration already exists.
            SoldOutError: If a platform event has no tickets left.
        """
        ...

    @abstractmethod
    def get(self, registration_id: str) -> Registration | None:
        ...

    @abstractmethod
    def cancel(self, registration_id: str, cancelled_at: datetime) -> Registration:
        """Flip status to cancelled, releasing a platform seat."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Registration]:
        """Return the user's registrations, newest first."""
        ...

    @abstractmethod
    def list_for_events(self, event_ids: Iterable[str]) -> list[Registration]:
        ...

    @abstractmethod
    def list_all(self) -> list[Registration]:
        ...
