"""
Lift app views.
Handles lift CRUD, occupancy transitions, the usage ledger and maintenance.
"""

from django.db.models import Prefetch
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.api_doc_decorators import document_api_endpoint
from apps.bookingapp.services.scheduling_service import SchedulingService
from apps.liftapp.filters import LiftFilter
from apps.liftapp.models import Lift, LiftUsage
from apps.liftapp.serializers import (
    LiftEndUsageSerializer,
    LiftMaintenanceSerializer,
    LiftReserveSerializer,
    LiftSerializer,
    LiftStartUsageSerializer,
    LiftUsageSerializer,
    UsageHistoryQuerySerializer,
)
from apps.liftapp.services.lift_service import LiftService
from core.mixins import TenantScopedMixin

LIFT_TAGS = ["Lifts"]


class LiftViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for workshop lifts (elevators).

    Besides CRUD it exposes the occupancy state machine:
    - reserve: put a scheduled hold on a free lift
    - start-usage: begin occupancy, taking over an open reservation
    - end-usage: close the open usage and free the lift
    - current-usage / usage-history: read the ledger
    - maintenance / clear-maintenance: operator state
    """

    queryset = Lift.objects.prefetch_related(
        Prefetch(
            "usages",
            queryset=LiftUsage.objects.filter(end_time__isnull=True),
            to_attr="open_usages",
        )
    )
    serializer_class = LiftSerializer
    filterset_class = LiftFilter
    search_fields = ["name", "number", "location"]
    ordering_fields = ["number", "name", "created_at"]
    ordering = ["number"]

    def perform_create(self, serializer):
        serializer.instance = LiftService.create_lift(
            self.request.tenant, **serializer.validated_data
        )

    def perform_update(self, serializer):
        serializer.instance = LiftService.update_lift(
            serializer.instance, **serializer.validated_data
        )

    def destroy(self, request, *args, **kwargs):
        LiftService.delete_lift(request.tenant, kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _usage_response(self, usage):
        return Response(LiftUsageSerializer(usage).data)

    @document_api_endpoint(
        summary="Reserve a lift",
        description="Put a scheduled hold on a free lift",
        request_body=LiftReserveSerializer,
        responses={
            200: "Success - Returns the open usage record",
            400: "Bad Request - Invalid data or lift in maintenance",
            404: "Not Found - Lift or work order not found",
            409: "Conflict - Lift already reserved or in use",
        },
        tags=LIFT_TAGS,
    )
    @action(detail=True, methods=["post"])
    def reserve(self, request, pk=None):
        serializer = LiftReserveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usage = SchedulingService.reserve(request.tenant, pk, **serializer.validated_data)
        return self._usage_response(usage)

    @document_api_endpoint(
        summary="Start lift usage",
        description="Begin occupancy of a lift, taking over its reservation if any",
        request_body=LiftStartUsageSerializer,
        responses={
            200: "Success - Returns the started usage record",
            400: "Bad Request - Lift not available",
            404: "Not Found - Lift or work order not found",
            409: "Conflict - Lift already in use",
        },
        tags=LIFT_TAGS,
    )
    @action(detail=True, methods=["post"], url_path="start-usage")
    def start_usage(self, request, pk=None):
        serializer = LiftStartUsageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usage = SchedulingService.start_usage(request.tenant, pk, **serializer.validated_data)
        return self._usage_response(usage)

    @document_api_endpoint(
        summary="End lift usage",
        description="Close the open usage record and free the lift",
        request_body=LiftEndUsageSerializer,
        responses={
            200: "Success - Returns the closed usage record",
            404: "Not Found - Lift not found or no active usage",
        },
        tags=LIFT_TAGS,
    )
    @action(detail=True, methods=["post"], url_path="end-usage")
    def end_usage(self, request, pk=None):
        serializer = LiftEndUsageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usage = SchedulingService.end_usage(request.tenant, pk, **serializer.validated_data)
        return self._usage_response(usage)

    @action(detail=True, methods=["get"], url_path="current-usage")
    def current_usage(self, request, pk=None):
        """Open usage record of the lift, or null"""
        usage = SchedulingService.current_usage(request.tenant, pk)
        return Response(LiftUsageSerializer(usage).data if usage else None)

    @document_api_endpoint(
        summary="Lift usage history",
        description="Paginated usage ledger of a lift, newest first",
        query_params=[
            {"name": "start_date", "description": "From date (YYYY-MM-DD)", "format": "date"},
            {"name": "end_date", "description": "To date (YYYY-MM-DD)", "format": "date"},
        ],
        tags=LIFT_TAGS,
    )
    @action(detail=True, methods=["get"], url_path="usage-history")
    def usage_history(self, request, pk=None):
        query = UsageHistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        usages = LiftService.usage_history(request.tenant, pk, **query.validated_data)

        page = self.paginate_queryset(usages)
        if page is not None:
            return self.get_paginated_response(LiftUsageSerializer(page, many=True).data)
        return Response(LiftUsageSerializer(usages, many=True).data)

    @action(detail=True, methods=["post"])
    def maintenance(self, request, pk=None):
        """Take the lift out of service"""
        serializer = LiftMaintenanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lift = LiftService.set_maintenance(
            request.tenant, pk, reason=serializer.validated_data.get("reason", "")
        )
        return Response(self.get_serializer(lift).data)

    @action(detail=True, methods=["post"], url_path="clear-maintenance")
    def clear_maintenance(self, request, pk=None):
        """Put the lift back in service"""
        lift = LiftService.clear_maintenance(request.tenant, pk)
        return Response(self.get_serializer(lift).data)
