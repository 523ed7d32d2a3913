import logging
import uuid

from django.conf import settings

logger = logging.getLogger(__name__)


class TenantMiddleware:
    """Resolve the tenant a request operates on from the tenant header.

    Sets ``request.tenant`` to the active Tenant named by the header, or None
    when the header is missing, malformed or names an unknown tenant. Views
    refuse tenant-less requests through ``workshop.permissions.HasTenant``.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        header = getattr(settings, "TENANT_HEADER", "X-Tenant-ID")
        self.meta_key = "HTTP_" + header.upper().replace("-", "_")

    def __call__(self, request):
        request.tenant = self._resolve_tenant(request)
        return self.get_response(request)

    def _resolve_tenant(self, request):
        from apps.tenantsapp.models import Tenant

        raw_value = request.META.get(self.meta_key)
        if not raw_value:
            return None

        try:
            tenant_id = uuid.UUID(raw_value.strip())
        except ValueError:
            logger.warning(f"Malformed tenant header on {request.method} {request.path}")
            return None

        tenant = Tenant.objects.filter(id=tenant_id, is_active=True).first()
        if tenant is None:
            logger.warning(f"Unknown or inactive tenant {tenant_id} on {request.path}")
        return tenant
