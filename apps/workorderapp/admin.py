from django.contrib import admin

from apps.workorderapp.models import WorkOrder


@admin.register(WorkOrder)
class WorkOrderAdmin(admin.ModelAdmin):
    list_display = ["number", "tenant", "status", "technician", "scheduled_start", "estimated_hours"]
    list_filter = ["status", "tenant"]
    search_fields = ["number", "vehicle_id"]
    readonly_fields = ["started_at", "completed_at", "created_at", "updated_at"]
