# apps/bookingapp/filters.py
from django.utils import timezone
from django_filters import rest_framework as filters

from apps.bookingapp.models import Appointment


class AppointmentFilter(filters.FilterSet):
    """Filter for appointments by date, status and assignment"""

    # Date filtering
    start_date = filters.DateFilter(field_name="start_time", lookup_expr="date__gte")
    end_date = filters.DateFilter(field_name="start_time", lookup_expr="date__lte")

    # Status filtering
    status = filters.CharFilter(field_name="status")
    statuses = filters.MultipleChoiceFilter(
        field_name="status", choices=Appointment.STATUS_CHOICES
    )

    technician = filters.UUIDFilter(field_name="technician__id")
    work_order = filters.UUIDFilter(field_name="work_order__id")
    unassigned = filters.BooleanFilter(field_name="technician", lookup_expr="isnull")

    # Time range helpers
    today = filters.BooleanFilter(method="filter_today")
    upcoming = filters.BooleanFilter(method="filter_upcoming")

    class Meta:
        model = Appointment
        fields = [
            "status",
            "start_date",
            "end_date",
            "technician",
            "work_order",
            "unassigned",
            "today",
            "upcoming",
        ]

    def filter_today(self, queryset, name, value):
        if value:
            today = timezone.localdate()
            return queryset.filter(start_time__date=today)
        return queryset

    def filter_upcoming(self, queryset, name, value):
        if value:
            return queryset.filter(start_time__gt=timezone.now())
        return queryset
