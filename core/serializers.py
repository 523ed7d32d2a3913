from rest_framework import serializers


class TenantPrimaryKeyRelatedField(serializers.PrimaryKeyRelatedField):
    """Primary key field that only resolves records of the request tenant."""

    def get_queryset(self):
        queryset = super().get_queryset()
        request = self.context.get("request")
        tenant = getattr(request, "tenant", None)
        if tenant is None:
            return queryset.none()
        return queryset.filter(tenant=tenant)
