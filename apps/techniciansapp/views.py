from rest_framework import viewsets

from apps.techniciansapp.models import Technician
from apps.techniciansapp.serializers import TechnicianSerializer
from core.mixins import TenantScopedMixin


class TechnicianViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """API endpoint for the technicians of the request tenant."""

    queryset = Technician.objects.all()
    serializer_class = TechnicianSerializer
    filterset_fields = ["is_active"]
    search_fields = ["name", "email"]
    ordering_fields = ["name", "created_at"]
