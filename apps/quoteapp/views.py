from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.api_doc_decorators import document_api_endpoint
from apps.quoteapp.models import Quote
from apps.quoteapp.serializers import QuoteSerializer
from apps.quoteapp.services.approval_pipeline import QuoteApprovalPipeline
from apps.workorderapp.serializers import WorkOrderSerializer
from core.mixins import TenantScopedMixin


class QuoteViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """API endpoint for quotes and their approval."""

    queryset = Quote.objects.select_related("work_order")
    serializer_class = QuoteSerializer
    filterset_fields = ["status"]
    search_fields = ["number", "customer_name", "vehicle_id"]
    ordering_fields = ["created_at", "requested_start"]

    @document_api_endpoint(
        summary="Approve a quote",
        description=(
            "Accept the quote, create its work order, reserve the quoted lift and "
            "book the appointment. Optional steps that fail are reported per step "
            "and retried on the next approval."
        ),
        responses={
            200: "Success - Returns the quote, work order and step outcomes",
            400: "Bad Request - Quote rejected or expired",
            404: "Not Found - Quote not found",
        },
        tags=["Quotes"],
    )
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        result = QuoteApprovalPipeline.approve(request.tenant, pk)
        return Response(
            {
                "quote": self.get_serializer(result["quote"]).data,
                "work_order": WorkOrderSerializer(result["work_order"]).data,
                "steps": result["steps"],
            }
        )
