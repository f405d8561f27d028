from django.contrib import admin

from events.models import PlatformEvent, Registration


@admin.register(PlatformEvent)
class PlatformEventAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "start_date", "capacity", "available_tickets", "status"]
    list_filter = ["category", "status", "is_public"]
    search_fields = ["name", "created_by"]
    readonly_fields = ["available_tickets", "created_at", "updated_at"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["user_name", "event_name", "event_source", "status", "registered_at"]
    list_filter = ["event_source", "status"]
    search_fields = ["user_email", "event_id", "event_name"]
