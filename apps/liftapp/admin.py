from django.contrib import admin

from apps.liftapp.models import Lift, LiftUsage


class LiftUsageInline(admin.TabularInline):
    """Inline admin for the lift usage ledger"""

    model = LiftUsage
    extra = 0
    readonly_fields = ["start_time", "started_at", "end_time", "created_at"]


@admin.register(Lift)
class LiftAdmin(admin.ModelAdmin):
    list_display = ["name", "number", "tenant", "lift_type", "status_display", "in_maintenance"]
    list_filter = ["lift_type", "in_maintenance", "tenant"]
    search_fields = ["name", "number", "location"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [LiftUsageInline]

    def status_display(self, obj):
        return obj.status.value

    status_display.short_description = "Status"


@admin.register(LiftUsage)
class LiftUsageAdmin(admin.ModelAdmin):
    list_display = ["lift", "work_order", "vehicle_id", "start_time", "started_at", "end_time"]
    list_filter = ["lift__tenant"]
    search_fields = ["vehicle_id", "lift__name", "work_order__number"]
    date_hierarchy = "start_time"
