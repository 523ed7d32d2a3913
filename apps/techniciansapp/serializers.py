from rest_framework import serializers

from apps.techniciansapp.models import Technician


class TechnicianSerializer(serializers.ModelSerializer):
    """Serializer for technicians"""

    class Meta:
        model = Technician
        fields = ["id", "name", "email", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]
