# apps/bookingapp/admin.py
from django.contrib import admin

from apps.bookingapp.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    """Admin configuration for appointments"""

    list_display = [
        "id",
        "customer_name",
        "service_type",
        "technician",
        "start_time",
        "duration",
        "status",
    ]
    list_filter = ["status", "start_time", "tenant"]
    search_fields = ["customer_name", "service_type", "technician__name"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "start_time"
