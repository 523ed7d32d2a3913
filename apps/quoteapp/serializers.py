from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.liftapp.models import Lift
from apps.quoteapp.models import Quote
from apps.techniciansapp.models import Technician
from core.serializers import TenantPrimaryKeyRelatedField


class QuoteSerializer(serializers.ModelSerializer):
    """Serializer for quotes"""

    technician = TenantPrimaryKeyRelatedField(
        queryset=Technician.objects.all(), required=False, allow_null=True
    )
    lift = TenantPrimaryKeyRelatedField(queryset=Lift.objects.all(), required=False, allow_null=True)

    class Meta:
        model = Quote
        fields = [
            "id",
            "number",
            "status",
            "customer_name",
            "service_type",
            "vehicle_id",
            "technician",
            "lift",
            "requested_start",
            "estimated_hours",
            "work_order",
            "approval_steps",
            "accepted_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "work_order",
            "approval_steps",
            "accepted_at",
            "created_at",
            "updated_at",
        ]

    def validate_number(self, value):
        tenant = self.context["request"].tenant
        queryset = Quote.objects.filter(tenant=tenant, number=value)
        if self.instance is not None:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError(_("A quote with this number already exists."))
        return value

    def validate_estimated_hours(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError(_("Estimated hours must be positive."))
        return value
