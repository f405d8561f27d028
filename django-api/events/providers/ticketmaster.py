"""Ticketmaster Discovery API client."""

import logging
from collections.abc import Mapping
from typing import Any

import requests

from events.domain.categories import to_segment
from events.domain.errors import (
    EventNotFoundError,
    ProviderNotConfiguredError,
    UpstreamUnavailableError,
)
from events.domain.models import ExternalEvent, ExternalEventPage, ExternalQuery, Pagination
from events.domain.timestamps import utcnow
from events.providers.interfaces import EventProvider
from events.providers.normalization import to_external_event

logger = logging.getLogger(__name__)

TICKETMASTER_API_BASE = "https://app.ticketmaster.com/discovery/v2"


class TicketmasterClient(EventProvider):
    """Client for the Ticketmaster Discovery API.

    Every call is a single attempt bounded by ``timeout``; failures raise
    immediately.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = TICKETMASTER_API_BASE,
        timeout: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _get(self, path: str, params: dict[str, Any]) -> requests.Response:
        if not self.api_key:
            raise ProviderNotConfiguredError()

        url = f"{self.base_url}/{path}"
        try:
            return self._session.get(
                url,
                params={"apikey": self.api_key, **params},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Ticketmaster request to %s failed: %s", path, exc)
            raise UpstreamUnavailableError() from exc

    @staticmethod
    def _json(response: requests.Response, path: str) -> Mapping[str, Any]:
        if not response.ok:
            logger.warning("Ticketmaster returned %s for %s", response.status_code, path)
            raise UpstreamUnavailableError()
        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Ticketmaster returned a non-JSON body for %s", path)
            raise UpstreamUnavailableError() from exc
        if not isinstance(data, Mapping):
            logger.warning("Ticketmaster returned an unexpected payload for %s", path)
            raise UpstreamUnavailableError()
        return data

    def search_events(self, query: ExternalQuery) -> ExternalEventPage:
        """
        Search upcoming events.

        Only events starting from now are requested; the provider sorts them
        by date and pages them, nothing is re-paginated here.
        """
        params: dict[str, Any] = {
            "size": query.size,
            "page": query.page,
            "sort": "date,asc",
            "startDateTime": utcnow().strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if query.city:
            params["city"] = query.city
        if query.keyword:
            params["keyword"] = query.keyword
        if query.category:
            params["classificationName"] = to_segment(query.category)

        data = self._json(self._get("events.json", params), "events.json")
        page = data.get("page")
        if not isinstance(page, Mapping):
            logger.warning("Ticketmaster payload is missing page information")
            raise UpstreamUnavailableError()

        embedded = data.get("_embedded")
        raw_events = embedded.get("events", []) if isinstance(embedded, Mapping) else []
        if not isinstance(raw_events, list):
            raise UpstreamUnavailableError()

        synced_at = utcnow()
        events = tuple(to_external_event(raw, synced_at) for raw in raw_events)
        try:
            pagination = Pagination(
                page=int(page.get("number", query.page)),
                size=int(page.get("size", query.size)),
                total_elements=int(page.get("totalElements", len(events))),
                total_pages=int(page.get("totalPages", 0)),
            )
        except (TypeError, ValueError) as exc:
            raise UpstreamUnavailableError() from exc
        return ExternalEventPage(events=events, pagination=pagination)

    def get_event(self, original_id: str) -> ExternalEvent:
        path = f"events/{original_id}.json"
        response = self._get(path, {})
        if response.status_code == 404:
            raise EventNotFoundError(original_id)
        return to_external_event(self._json(response, path))
