from django.contrib import admin

from apps.techniciansapp.models import Technician


@admin.register(Technician)
class TechnicianAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "tenant", "is_active"]
    list_filter = ["is_active", "tenant"]
    search_fields = ["name", "email"]
