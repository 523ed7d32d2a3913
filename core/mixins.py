class SwaggerSchemaMixin:
    """
    Mixin to handle Swagger schema generation properly.
    Apply this to ViewSets whose queryset depends on the request tenant.
    """

    def get_queryset(self):
        # Schema generation runs without a tenant-bound request
        if getattr(self, "swagger_fake_view", False):
            return self.queryset.model.objects.none()

        return super().get_queryset()


class TenantScopedMixin(SwaggerSchemaMixin):
    """
    Restrict a ViewSet to the records of the request tenant.

    ``tenant_field`` names the lookup from the model to its tenant, so child
    models (e.g. lift usages) can be scoped through their parent.
    """

    tenant_field = "tenant"

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return queryset
        return queryset.filter(**{self.tenant_field: self.request.tenant})

    def perform_create(self, serializer):
        serializer.save(tenant=self.request.tenant)
