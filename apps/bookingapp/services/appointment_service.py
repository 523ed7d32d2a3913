# apps/bookingapp/services/appointment_service.py
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.models import Appointment, AppointmentStatus
from apps.bookingapp.services.conflict_service import ConflictService
from apps.bookingapp.utils.time_calculator import calculate_end_time
from apps.techniciansapp.models import Technician
from apps.workorderapp.models import WorkOrder
from core.exceptions import (
    InvalidDataException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    SchedulingConflictException,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "start_time",
    "duration",
    "technician_id",
    "customer_name",
    "service_type",
    "notes",
)


class AppointmentService:
    """Creates appointments and moves them through their lifecycle"""

    @staticmethod
    def get_appointment(tenant, appointment_id, lock=False):
        queryset = Appointment.objects.filter(tenant=tenant)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=appointment_id)
        except (Appointment.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Appointment not found."))

    @staticmethod
    def _lock_technician(tenant, technician_id):
        # The technician row lock serializes bookings for that technician
        try:
            return Technician.objects.select_for_update().get(
                tenant=tenant, id=technician_id, is_active=True
            )
        except (Technician.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Technician not found."))

    @staticmethod
    def _get_work_order(tenant, work_order_id):
        try:
            return WorkOrder.objects.get(tenant=tenant, id=work_order_id)
        except (WorkOrder.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Work order not found."))

    @staticmethod
    def validate_window(start_time, duration, check_past=True):
        """
        Validate a requested appointment window

        Raises:
            InvalidDataException: Past start time or duration out of range
        """
        max_duration = settings.WORKSHOP_SCHEDULING["MAX_DURATION_MINUTES"]
        if duration is None or duration <= 0:
            raise InvalidDataException(_("Duration must be a positive number of minutes."))
        if duration > max_duration:
            raise InvalidDataException(
                _("Duration cannot exceed %(max)s minutes.") % {"max": max_duration}
            )
        if check_past and start_time < timezone.now():
            raise InvalidDataException(_("Cannot schedule an appointment in the past."))

    @staticmethod
    def _ensure_no_conflict(tenant, technician, start_time, duration, exclude_appointment_id=None):
        end_time = calculate_end_time(start_time, duration)
        conflicts = ConflictService.get_conflicting_appointments(
            tenant, technician.id, start_time, end_time, exclude_appointment_id
        )
        if conflicts:
            logger.warning(
                f"Technician {technician.id} already booked between {start_time} and {end_time}"
            )
            raise SchedulingConflictException(
                _("The technician already has an appointment at this time."),
                errors={"conflicting_appointments": [str(a.id) for a in conflicts]},
            )

    @staticmethod
    @transaction.atomic
    def create_appointment(
        tenant,
        start_time,
        duration=None,
        technician_id=None,
        work_order_id=None,
        customer_name="",
        service_type="",
        notes="",
    ):
        """
        Create a new appointment

        Args:
            tenant: Tenant the appointment belongs to
            start_time: Aware datetime the appointment starts
            duration: Length in minutes (defaults to the configured duration)
            technician_id: Optional technician to assign
            work_order_id: Optional work order the appointment is for
            customer_name: Customer display name
            service_type: Free text service description
            notes: Free text notes

        Returns:
            Created Appointment

        Raises:
            InvalidDataException: Past start time or invalid duration
            ResourceNotFoundException: Unknown technician or work order
            SchedulingConflictException: Technician already booked in the window
        """
        if duration is None:
            duration = settings.WORKSHOP_SCHEDULING["DEFAULT_DURATION_MINUTES"]
        AppointmentService.validate_window(start_time, duration)

        work_order = None
        if work_order_id:
            work_order = AppointmentService._get_work_order(tenant, work_order_id)
            if technician_id is None and work_order.technician_id:
                technician_id = work_order.technician_id

        technician = None
        if technician_id:
            technician = AppointmentService._lock_technician(tenant, technician_id)
            AppointmentService._ensure_no_conflict(tenant, technician, start_time, duration)

        appointment = Appointment.objects.create(
            tenant=tenant,
            technician=technician,
            work_order=work_order,
            start_time=start_time,
            duration=duration,
            customer_name=customer_name or "",
            service_type=service_type or "",
            notes=notes or "",
        )
        return appointment

    @staticmethod
    @transaction.atomic
    def update_appointment(tenant, appointment_id, **changes):
        """
        Reschedule or edit a scheduled appointment

        Only scheduled appointments can be edited. A new time or technician is
        validated like a new booking, ignoring the appointment itself.
        """
        appointment = AppointmentService.get_appointment(tenant, appointment_id, lock=True)
        if appointment.status != AppointmentStatus.SCHEDULED.value:
            raise InvalidOperationException(_("Only scheduled appointments can be changed."))

        changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        start_time = changes.get("start_time", appointment.start_time)
        duration = changes.get("duration", appointment.duration)
        technician_id = changes.get("technician_id", appointment.technician_id)

        reschedules = any(key in changes for key in ("start_time", "duration", "technician_id"))
        if reschedules:
            AppointmentService.validate_window(
                start_time, duration, check_past="start_time" in changes
            )
            if technician_id:
                technician = AppointmentService._lock_technician(tenant, technician_id)
                AppointmentService._ensure_no_conflict(
                    tenant, technician, start_time, duration, exclude_appointment_id=appointment.id
                )

        for field, value in changes.items():
            setattr(appointment, field, value)
        appointment.save()
        return appointment

    @staticmethod
    def _transition(tenant, appointment_id, new_status, **extra_fields):
        appointment = AppointmentService.get_appointment(tenant, appointment_id, lock=True)
        if not appointment.can_transition_to(new_status):
            raise InvalidStatusTransitionException(
                _("Cannot change appointment from %(old)s to %(new)s.")
                % {"old": appointment.status, "new": new_status}
            )
        appointment.status = new_status
        for field, value in extra_fields.items():
            setattr(appointment, field, value)
        appointment.save(update_fields=["status", "updated_at", *extra_fields.keys()])
        return appointment

    @staticmethod
    @transaction.atomic
    def cancel_appointment(tenant, appointment_id, reason=""):
        """
        Cancel an appointment

        Cancelling a cancelled, completed or no-show appointment is rejected.

        Raises:
            InvalidStatusTransitionException: If the appointment cannot be cancelled
        """
        return AppointmentService._transition(
            tenant,
            appointment_id,
            AppointmentStatus.CANCELLED.value,
            cancellation_reason=reason or "",
        )

    @staticmethod
    @transaction.atomic
    def start_appointment(tenant, appointment_id):
        return AppointmentService._transition(
            tenant, appointment_id, AppointmentStatus.IN_PROGRESS.value
        )

    @staticmethod
    @transaction.atomic
    def complete_appointment(tenant, appointment_id):
        return AppointmentService._transition(
            tenant, appointment_id, AppointmentStatus.COMPLETED.value
        )

    @staticmethod
    @transaction.atomic
    def mark_no_show(tenant, appointment_id):
        return AppointmentService._transition(tenant, appointment_id, AppointmentStatus.NO_SHOW.value)

    @staticmethod
    @transaction.atomic
    def claim_appointment(tenant, appointment_id, technician_id):
        """
        Let a technician take an unassigned scheduled appointment

        Raises:
            InvalidOperationException: Appointment is assigned or not scheduled
            SchedulingConflictException: Technician is busy at that time
        """
        appointment = AppointmentService.get_appointment(tenant, appointment_id, lock=True)
        if appointment.status != AppointmentStatus.SCHEDULED.value:
            raise InvalidOperationException(_("Only scheduled appointments can be claimed."))
        if appointment.technician_id is not None:
            raise InvalidOperationException(_("Appointment is already assigned to a technician."))

        technician = AppointmentService._lock_technician(tenant, technician_id)
        AppointmentService._ensure_no_conflict(
            tenant,
            technician,
            appointment.start_time,
            appointment.duration,
            exclude_appointment_id=appointment.id,
        )
        appointment.technician = technician
        appointment.save(update_fields=["technician", "updated_at"])
        logger.info(f"Appointment {appointment.id} claimed by technician {technician.id}")
        return appointment

    @staticmethod
    @transaction.atomic
    def delete_appointment(tenant, appointment_id):
        appointment = AppointmentService.get_appointment(tenant, appointment_id, lock=True)
        if appointment.status in (
            AppointmentStatus.IN_PROGRESS.value,
            AppointmentStatus.COMPLETED.value,
        ):
            raise InvalidOperationException(
                _("Appointments in progress or completed cannot be deleted.")
            )
        appointment.delete()
        logger.info(f"Appointment {appointment_id} deleted")
