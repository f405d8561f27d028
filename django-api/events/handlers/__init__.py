from events.handlers.views import (
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

__all__ = [
    "EventListView",
    "EventDetailView",
    "ExternalEventListView",
    "RegisterView",
    "RegistrationDetailView",
    "MyRegistrationsView",
    "RegistrationActivityView",
    "StaffRegistrationsView",
    "PlatformEventListView",
    "PlatformEventDetailView",
    "StaffEventListView",
    "EventStatsView",
    "RegistrationStatsView",
]
