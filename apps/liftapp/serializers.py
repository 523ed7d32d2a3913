from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.liftapp.models import Lift, LiftUsage


class LiftUsageSerializer(serializers.ModelSerializer):
    """Serializer for lift usage ledger records"""

    duration_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = LiftUsage
        fields = [
            "id",
            "lift",
            "work_order",
            "vehicle_id",
            "start_time",
            "planned_end",
            "started_at",
            "end_time",
            "duration_minutes",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class LiftSerializer(serializers.ModelSerializer):
    """Serializer for lifts with their derived status"""

    status = serializers.SerializerMethodField()
    current_usage = serializers.SerializerMethodField()

    class Meta:
        model = Lift
        fields = [
            "id",
            "name",
            "number",
            "lift_type",
            "capacity",
            "location",
            "notes",
            "status",
            "in_maintenance",
            "maintenance_reason",
            "current_usage",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "in_maintenance",
            "maintenance_reason",
            "current_usage",
            "created_at",
            "updated_at",
        ]

    def get_status(self, obj):
        return obj.status.value

    def get_current_usage(self, obj):
        usage = obj.open_usage
        return LiftUsageSerializer(usage).data if usage else None


class LiftReserveSerializer(serializers.Serializer):
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    work_order_id = serializers.UUIDField(required=False)
    vehicle_id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        start_time = data.get("start_time")
        end_time = data.get("end_time")
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError(
                {"end_time": _("Reservation end must be after its start.")}
            )
        return data


class LiftStartUsageSerializer(serializers.Serializer):
    work_order_id = serializers.UUIDField(required=False)
    vehicle_id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    notes = serializers.CharField(required=False, allow_blank=True)


class LiftEndUsageSerializer(serializers.Serializer):
    usage_id = serializers.UUIDField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class LiftMaintenanceSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class UsageHistoryQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
