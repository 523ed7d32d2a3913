from django_filters import rest_framework as filters

from apps.workorderapp.models import WorkOrder


class WorkOrderFilter(filters.FilterSet):
    """Filter for work orders"""

    status = filters.MultipleChoiceFilter(field_name="status", choices=WorkOrder.STATUS_CHOICES)
    technician = filters.UUIDFilter(field_name="technician__id")
    scheduled_from = filters.DateFilter(field_name="scheduled_start", lookup_expr="date__gte")
    scheduled_to = filters.DateFilter(field_name="scheduled_start", lookup_expr="date__lte")

    class Meta:
        model = WorkOrder
        fields = ["status", "technician", "vehicle_id"]
