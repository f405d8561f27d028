from django.urls import path

from events.handlers import (
    EventDetailView,
    EventListView,
    EventStatsView,
    ExternalEventListView,
    MyRegistrationsView,
    PlatformEventDetailView,
    PlatformEventListView,
    RegisterView,
    RegistrationActivityView,
    RegistrationDetailView,
    RegistrationStatsView,
    StaffEventListView,
    StaffRegistrationsView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/external", ExternalEventListView.as_view(), name="external-event-list"),
    path("events/register", RegisterView.as_view(), name="event-register"),
    path("events/platform", PlatformEventListView.as_view(), name="platform-event-list"),
    path("events/platform/staff", StaffEventListView.as_view(), name="staff-event-list"),
    path(
        "events/platform/<str:event_id>",
        PlatformEventDetailView.as_view(),
        name="platform-event-detail",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("registrations/mine", MyRegistrationsView.as_view(), name="my-registrations"),
    path(
        "registrations/activity",
        RegistrationActivityView.as_view(),
        name="registration-activity",
    ),
    path("registrations/staff", StaffRegistrationsView.as_view(), name="staff-registrations"),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path("staff/events/stats", EventStatsView.as_view(), name="staff-event-stats"),
    path(
        "staff/registrations/stats",
        RegistrationStatsView.as_view(),
        name="staff-registration-stats",
    ),
]
