# apps/bookingapp/services/conflict_service.py

from django.db.models import Q

from apps.bookingapp.models import INACTIVE_STATUSES, Appointment
from apps.bookingapp.utils.time_calculator import overlaps


class ConflictService:
    """Detects double-booking of technicians"""

    @staticmethod
    def get_conflicting_appointments(
        tenant, technician_id, start_time, end_time, exclude_appointment_id=None
    ):
        """
        Find the technician's active appointments overlapping a time window

        Args:
            tenant: Tenant the technician works for
            technician_id: UUID of the technician
            start_time: Datetime of window start
            end_time: Datetime of window end
            exclude_appointment_id: Optional appointment ID to exclude (for updates)

        Returns:
            List of overlapping Appointment objects, earliest first
        """
        # Appointments store a duration, so the end bound is checked in Python
        query = Q(
            tenant=tenant,
            technician_id=technician_id,
            start_time__lt=end_time,
        ) & ~Q(status__in=INACTIVE_STATUSES)

        if exclude_appointment_id:
            query &= ~Q(id=exclude_appointment_id)

        candidates = Appointment.objects.filter(query).order_by("start_time")
        return [
            appointment
            for appointment in candidates
            if overlaps(appointment.start_time, appointment.end_time, start_time, end_time)
        ]

    @staticmethod
    def has_technician_conflict(
        tenant, technician_id, start_time, end_time, exclude_appointment_id=None
    ):
        """
        Check if a proposed window conflicts with the technician's bookings

        Cancelled, completed and no-show appointments never conflict.

        Returns:
            Boolean indicating if a conflict exists
        """
        return bool(
            ConflictService.get_conflicting_appointments(
                tenant, technician_id, start_time, end_time, exclude_appointment_id
            )
        )
