from django.contrib import admin

from apps.quoteapp.models import Quote


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ["number", "tenant", "status", "customer_name", "requested_start", "work_order"]
    list_filter = ["status", "tenant"]
    search_fields = ["number", "customer_name", "vehicle_id"]
    readonly_fields = ["approval_steps", "accepted_at", "created_at", "updated_at"]
