from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.techniciansapp.models import Technician
from apps.workorderapp.models import WorkOrder
from core.serializers import TenantPrimaryKeyRelatedField


class WorkOrderSerializer(serializers.ModelSerializer):
    """Serializer for work orders"""

    technician = TenantPrimaryKeyRelatedField(
        queryset=Technician.objects.all(), required=False, allow_null=True
    )
    scheduled_end = serializers.DateTimeField(read_only=True)
    number = serializers.CharField(required=False, max_length=50)

    class Meta:
        model = WorkOrder
        fields = [
            "id",
            "number",
            "status",
            "technician",
            "vehicle_id",
            "scheduled_start",
            "estimated_hours",
            "scheduled_end",
            "notes",
            "started_at",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "started_at", "completed_at", "created_at", "updated_at"]

    def validate_status(self, value):
        # Later statuses are only reachable through the lifecycle actions
        if self.instance is None and value not in ("draft", "scheduled"):
            raise serializers.ValidationError(_("New work orders must be draft or scheduled."))
        if self.instance is not None and value != self.instance.status:
            raise serializers.ValidationError(_("Use the start, complete or cancel actions."))
        return value

    def validate_estimated_hours(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError(_("Estimated hours must be positive."))
        return value
