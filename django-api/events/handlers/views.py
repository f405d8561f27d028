"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to the exception handler (handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain.models import EventFilters, ExternalQuery
from events.domain.value_objects import SourceFilter
from events.handlers import dependencies
from events.handlers.auth import principal_from_request
from events.handlers.serializers import (
    EventListQuerySerializer,
    EventPageSerializer,
    EventRegistrationsSerializer,
    EventStatsSerializer,
    ExternalQuerySerializer,
    PaginationSerializer,
    PlatformEventInputSerializer,
    PlatformEventSerializer,
    RegisterSerializer,
    RegistrationSerializer,
    RegistrationStatsSerializer,
    serialize_event,
)
from events.services.access import require_principal, require_staff


def _validated(serializer_class, data, **kwargs) -> dict:
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class EventListView(APIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        params = _validated(EventListQuerySerializer, request.query_params)
        filters = EventFilters(
            search=params.get("search") or None,
            category=params.get("category") or None,
            city=params.get("city") or None,
            source=SourceFilter(params.get("source") or SourceFilter.ALL),
        )
        page = dependencies.aggregation_service().list_events(
            filters, params["page"], params["size"]
        )
        return Response(EventPageSerializer(page).data)


class ExternalEventListView(APIView):
    """Handler for GET /api/events/external"""

    def get(self, request: Request) -> Response:
        params = _validated(ExternalQuerySerializer, request.query_params)
        query = ExternalQuery(
            page=params["page"],
            size=params["size"],
            city=params.get("city") or None,
            keyword=params.get("keyword") or None,
            category=params.get("category") or None,
        )
        result = dependencies.event_service().list_external_events(query)
        return Response(
            {
                "events": [serialize_event(event) for event in result.events],
                "pagination": PaginationSerializer(result.pagination).data,
            }
        )


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = dependencies.event_service().get_event(event_id)
        return Response({"event": serialize_event(event)})


class RegisterView(APIView):
    """Handler for POST /api/events/register"""

    def post(self, request: Request) -> Response:
        principal = require_principal(principal_from_request(request))
        data = _validated(RegisterSerializer, request.data)
        registration = dependencies.registration_service().register(
            principal, data.get("event_id")
        )
        return Response(RegistrationSerializer(registration).data)


class RegistrationDetailView(APIView):
    """Handler for DELETE /api/registrations/{registration_id}"""

    def delete(self, request: Request, registration_id: str) -> Response:
        dependencies.registration_service().cancel(
            registration_id, principal_from_request(request)
        )
        return Response({"message": "Registration cancelled successfully"})


class MyRegistrationsView(APIView):
    """Handler for GET /api/registrations/mine"""

    def get(self, request: Request) -> Response:
        registrations = dependencies.registration_service().list_for_user(
            principal_from_request(request)
        )
        return Response({"registrations": RegistrationSerializer(registrations, many=True).data})


class RegistrationActivityView(APIView):
    """Handler for GET /api/registrations/activity"""

    def get(self, request: Request) -> Response:
        registrations = dependencies.registration_service().recent_activity(
            principal_from_request(request)
        )
        return Response({"registrations": RegistrationSerializer(registrations, many=True).data})


class StaffRegistrationsView(APIView):
    """Handler for GET /api/registrations/staff"""

    def get(self, request: Request) -> Response:
        events = dependencies.registration_service().list_for_staff(
            principal_from_request(request)
        )
        return Response({"events": EventRegistrationsSerializer(events, many=True).data})


class PlatformEventListView(APIView):
    """Handler for GET/POST /api/events/platform"""

    def get(self, request: Request) -> Response:
        events = dependencies.event_service().list_platform_events(
            principal_from_request(request),
            created_by=request.query_params.get("createdBy") or None,
            public_only=request.query_params.get("isPublic") != "false",
        )
        return Response({"events": PlatformEventSerializer(events, many=True).data})

    def post(self, request: Request) -> Response:
        principal = require_staff(principal_from_request(request))
        data = _validated(PlatformEventInputSerializer, request.data)
        event = dependencies.event_service().create_event(data, principal)
        return Response(PlatformEventSerializer(event).data, status=status.HTTP_201_CREATED)


class StaffEventListView(APIView):
    """Handler for GET /api/events/platform/staff"""

    def get(self, request: Request) -> Response:
        rows = dependencies.event_service().list_staff_events(principal_from_request(request))
        events = [
            {**PlatformEventSerializer(event).data, "registrations": count}
            for event, count in rows
        ]
        return Response({"events": events})


class PlatformEventDetailView(APIView):
    """Handler for GET/PUT/DELETE /api/events/platform/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = dependencies.event_service().get_platform_event(
            event_id, principal_from_request(request)
        )
        return Response({"event": PlatformEventSerializer(event).data})

    def put(self, request: Request, event_id: str) -> Response:
        principal = require_staff(principal_from_request(request))
        patch = _validated(PlatformEventInputSerializer, request.data, partial=True)
        event = dependencies.event_service().update_event(event_id, patch, principal)
        return Response({"event": PlatformEventSerializer(event).data})

    def delete(self, request: Request, event_id: str) -> Response:
        dependencies.event_service().delete_event(event_id, principal_from_request(request))
        return Response({"message": "Event deleted successfully"})


class EventStatsView(APIView):
    """Handler for GET /api/staff/events/stats"""

    def get(self, request: Request) -> Response:
        stats = dependencies.stats_service().event_stats(principal_from_request(request))
        return Response(EventStatsSerializer(stats).data)


class RegistrationStatsView(APIView):
    """Handler for GET /api/staff/registrations/stats"""

    def get(self, request: Request) -> Response:
        stats = dependencies.stats_service().registration_stats(principal_from_request(request))
        return Response(RegistrationStatsSerializer(stats).data)
