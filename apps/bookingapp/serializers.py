from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.bookingapp.models import Appointment


def _max_duration():
    return settings.WORKSHOP_SCHEDULING["MAX_DURATION_MINUTES"]


class AppointmentSerializer(serializers.ModelSerializer):
    """Serializer for appointments"""

    technician_name = serializers.CharField(source="technician.name", read_only=True, default=None)
    end_time = serializers.DateTimeField(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "technician",
            "technician_name",
            "work_order",
            "customer_name",
            "service_type",
            "start_time",
            "duration",
            "end_time",
            "status",
            "status_display",
            "notes",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DurationLimitMixin:
    """Caps a ``duration`` field at the configured maximum"""

    def validate_duration(self, value):
        if value is not None and value > _max_duration():
            raise serializers.ValidationError(
                _("Duration cannot exceed %(max)s minutes.") % {"max": _max_duration()}
            )
        return value


class AppointmentCreateSerializer(DurationLimitMixin, serializers.Serializer):
    """Serializer for booking a new appointment"""

    start_time = serializers.DateTimeField()
    duration = serializers.IntegerField(required=False, min_value=1)
    technician_id = serializers.UUIDField(required=False, allow_null=True)
    work_order_id = serializers.UUIDField(required=False, allow_null=True)
    customer_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    service_type = serializers.CharField(required=False, allow_blank=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True)


class AppointmentUpdateSerializer(AppointmentCreateSerializer):
    """Serializer for editing or rescheduling an appointment"""

    start_time = serializers.DateTimeField(required=False)


class AppointmentCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


class AppointmentClaimSerializer(serializers.Serializer):
    technician_id = serializers.UUIDField()


class CheckAvailabilityQuerySerializer(DurationLimitMixin, serializers.Serializer):
    start_time = serializers.DateTimeField()
    duration = serializers.IntegerField(required=False, min_value=1)
    technician_id = serializers.UUIDField(required=False)
    lift_id = serializers.UUIDField(required=False)

    def validate(self, data):
        data.setdefault("duration", settings.WORKSHOP_SCHEDULING["DEFAULT_DURATION_MINUTES"])
        return data


class AvailableSlotsQuerySerializer(DurationLimitMixin, serializers.Serializer):
    date = serializers.DateField()
    duration = serializers.IntegerField(required=False, min_value=1)
    lift_id = serializers.UUIDField(required=False)
