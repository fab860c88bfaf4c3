# integrations/admin.py

from django.contrib import admin

from integrations.models import GoogleToken, OutboxJob


@admin.register(OutboxJob)
class OutboxJobAdmin(admin.ModelAdmin):
    list_display = ("id", "topic", "status", "attempts", "next_attempt_at", "completed_at")
    list_filter = ("status", "topic")
    readonly_fields = ("created_at", "completed_at", "locked_at")


@admin.register(GoogleToken)
class GoogleTokenAdmin(admin.ModelAdmin):
    list_display = ("service", "user", "expires_at", "updated_at")
    exclude = ("access_token", "refresh_token")
