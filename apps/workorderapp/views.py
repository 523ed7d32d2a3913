from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.api_doc_decorators import document_api_endpoint
from apps.workorderapp.filters import WorkOrderFilter
from apps.workorderapp.models import WorkOrder
from apps.workorderapp.serializers import WorkOrderSerializer
from apps.workorderapp.services.work_order_service import WorkOrderService
from core.mixins import TenantScopedMixin

WORK_ORDER_TAGS = ["Work Orders"]


class WorkOrderViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for work orders.

    Status changes go through the start, complete and cancel actions, which
    also drive the lift reserved for the order.
    """

    queryset = WorkOrder.objects.select_related("technician")
    serializer_class = WorkOrderSerializer
    filterset_class = WorkOrderFilter
    search_fields = ["number", "vehicle_id"]
    ordering_fields = ["created_at", "scheduled_start", "number"]

    def perform_create(self, serializer):
        serializer.instance = WorkOrderService.create_work_order(
            self.request.tenant, **serializer.validated_data
        )

    @document_api_endpoint(
        summary="Start a work order",
        description="Move the order to in progress and begin usage of its reserved lift",
        responses={
            200: "Success - Work order started",
            400: "Bad Request - Invalid status transition or lift unavailable",
            404: "Not Found - Work order not found",
        },
        tags=WORK_ORDER_TAGS,
    )
    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        work_order = WorkOrderService.start(request.tenant, pk)
        return Response(self.get_serializer(work_order).data)

    @document_api_endpoint(
        summary="Complete a work order",
        description="Complete the order and release its lift",
        responses={
            200: "Success - Work order completed",
            400: "Bad Request - Work order not in progress",
            404: "Not Found - Work order not found",
        },
        tags=WORK_ORDER_TAGS,
    )
    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        work_order = WorkOrderService.complete(request.tenant, pk)
        return Response(self.get_serializer(work_order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        """Cancel the order and release its lift"""
        work_order = WorkOrderService.cancel(request.tenant, pk)
        return Response(self.get_serializer(work_order).data, status=status.HTTP_200_OK)
