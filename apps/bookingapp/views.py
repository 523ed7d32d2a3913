"""
Booking app views
Handles endpoints related to appointments, availability checks and slot scans
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.api_doc_decorators import document_api_endpoint
from apps.bookingapp.filters import AppointmentFilter
from apps.bookingapp.models import Appointment
from apps.bookingapp.serializers import (
    AppointmentCancelSerializer,
    AppointmentClaimSerializer,
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
    AvailableSlotsQuerySerializer,
    CheckAvailabilityQuerySerializer,
)
from apps.bookingapp.services.appointment_service import AppointmentService
from apps.bookingapp.services.scheduling_service import SchedulingService
from core.mixins import TenantScopedMixin

BOOKING_TAGS = ["Bookings", "Appointments"]
AVAILABILITY_TAGS = ["Bookings", "Availability"]


class AppointmentViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for managing appointments.

    Provides CRUD operations for appointments with additional actions for:
    - Lifecycle changes (cancel, start, complete, no-show)
    - Claiming an unassigned appointment
    - Point availability checks and day slot scans
    """

    queryset = Appointment.objects.select_related("technician")
    serializer_class = AppointmentSerializer
    filterset_class = AppointmentFilter
    search_fields = ["customer_name", "service_type", "technician__name"]
    ordering_fields = ["start_time", "created_at", "status"]
    ordering = ["-start_time"]

    @document_api_endpoint(
        summary="Create an appointment",
        description="Book a new appointment, optionally for a technician and a work order",
        request_body=AppointmentCreateSerializer,
        responses={
            201: "Created - Appointment booked successfully",
            400: "Bad Request - Invalid data or past date",
            404: "Not Found - Technician or work order not found",
            409: "Conflict - Technician already booked",
        },
        tags=BOOKING_TAGS,
    )
    def create(self, request, *args, **kwargs):
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = AppointmentService.create_appointment(
            request.tenant, **serializer.validated_data
        )
        return Response(self.get_serializer(appointment).data, status=status.HTTP_201_CREATED)

    @document_api_endpoint(
        summary="Update an appointment",
        description="Edit or reschedule a scheduled appointment",
        request_body=AppointmentUpdateSerializer,
        responses={
            200: "Success - Appointment updated",
            400: "Bad Request - Invalid data or appointment not scheduled",
            404: "Not Found - Appointment not found",
            409: "Conflict - Technician already booked",
        },
        tags=BOOKING_TAGS,
    )
    def update(self, request, *args, **kwargs):
        serializer = AppointmentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        appointment = AppointmentService.update_appointment(
            request.tenant, kwargs["pk"], **serializer.validated_data
        )
        return Response(self.get_serializer(appointment).data)

    def destroy(self, request, *args, **kwargs):
        AppointmentService.delete_appointment(request.tenant, kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @document_api_endpoint(
        summary="Cancel an appointment",
        description="Cancel an existing appointment with an optional reason",
        request_body=AppointmentCancelSerializer,
        responses={
            200: "Success - Appointment cancelled successfully",
            400: "Bad Request - Appointment cannot be cancelled",
            404: "Not Found - Appointment not found",
        },
        tags=BOOKING_TAGS,
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        serializer = AppointmentCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = AppointmentService.cancel_appointment(
            request.tenant, pk, reason=serializer.validated_data.get("reason", "")
        )
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        """Mark an appointment as in progress"""
        appointment = AppointmentService.start_appointment(request.tenant, pk)
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        """Mark an appointment as completed"""
        appointment = AppointmentService.complete_appointment(request.tenant, pk)
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=["post"], url_path="no-show")
    def no_show(self, request, pk=None):
        """Mark an appointment as a no-show"""
        appointment = AppointmentService.mark_no_show(request.tenant, pk)
        return Response(self.get_serializer(appointment).data)

    @document_api_endpoint(
        summary="Claim an appointment",
        description="Assign an unassigned scheduled appointment to a technician",
        request_body=AppointmentClaimSerializer,
        responses={
            200: "Success - Appointment assigned",
            400: "Bad Request - Appointment already assigned or not scheduled",
            404: "Not Found - Appointment or technician not found",
            409: "Conflict - Technician already booked",
        },
        tags=BOOKING_TAGS,
    )
    @action(detail=True, methods=["post"])
    def claim(self, request, pk=None):
        serializer = AppointmentClaimSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = AppointmentService.claim_appointment(
            request.tenant, pk, serializer.validated_data["technician_id"]
        )
        return Response(self.get_serializer(appointment).data)

    @document_api_endpoint(
        summary="Check availability",
        description="Check whether a technician and/or a lift are free for a time window",
        query_params=[
            {"name": "start_time", "description": "Window start (ISO-8601)", "required": True},
            {"name": "duration", "description": "Window length in minutes", "type": "integer"},
            {"name": "technician_id", "description": "Technician to check", "format": "uuid"},
            {"name": "lift_id", "description": "Lift to check", "format": "uuid"},
        ],
        responses={
            200: "Success - Returns availability and conflicts",
            400: "Bad Request - Invalid parameters",
            404: "Not Found - Technician or lift not found",
        },
        tags=AVAILABILITY_TAGS,
    )
    @action(detail=False, methods=["get"], url_path="check-availability")
    def check_availability(self, request):
        query = CheckAvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = SchedulingService.check_availability(request.tenant, **query.validated_data)
        return Response(result)

    @document_api_endpoint(
        summary="Available slots",
        description="Bookable slots for a day across appointments, work orders and a lift",
        query_params=[
            {"name": "date", "description": "Day to scan (YYYY-MM-DD)", "required": True},
            {"name": "duration", "description": "Slot length in minutes", "type": "integer"},
            {"name": "lift_id", "description": "Lift that must be free", "format": "uuid"},
        ],
        responses={
            200: "Success - Returns the slots of the day",
            400: "Bad Request - Invalid parameters",
            404: "Not Found - Lift not found",
        },
        tags=AVAILABILITY_TAGS,
    )
    @action(detail=False, methods=["get"], url_path="available-slots")
    def available_slots(self, request):
        query = AvailableSlotsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        result = SchedulingService.get_available_slots(
            request.tenant,
            data["date"],
            duration=data.get("duration"),
            lift_id=data.get("lift_id"),
        )
        return Response(result)
