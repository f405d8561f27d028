"""External event provider interface.

Providers fetch from a third-party source and return unified domain models.
"""

from abc import ABC, abstractmethod

from events.domain.models import ExternalEvent, ExternalEventPage, ExternalQuery


class EventProvider(ABC):
    """Interface for an external ticketing source."""

    @abstractmethod
    def search_events(self, query: ExternalQuery) -> ExternalEventPage:
        """Return one provider page of upcoming events.

        Raises:
            UpstreamUnavailableError: On missing credentials, network errors,
                non-success responses or malformed payloads.
        """
        ...

    @abstractmethod
    def get_event(self, original_id: str) -> ExternalEvent:
        """Return a single event by the provider's native id.

        Raises:
            EventNotFoundError: If the provider does not know the id.
            UpstreamUnavailableError: On any other provider failure.
        """
        ...
