# apps/bookingapp/services/scheduling_service.py
"""
Scheduling facade.

Single entry point the API layer uses to answer "is this free?" and "what
is free on that day?", and to drive lift occupancy. The heavy lifting lives
in ConflictService, AvailabilityService and LiftService.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.services.availability_service import AvailabilityService
from apps.bookingapp.services.conflict_service import ConflictService
from apps.bookingapp.utils.time_calculator import OPEN_END, calculate_end_time
from apps.liftapp.services.lift_service import LiftService
from apps.techniciansapp.models import Technician
from core.exceptions import InvalidDataException, ResourceNotFoundException

logger = logging.getLogger(__name__)


def _conflict_entry(resource_type, resource, start_time, end_time):
    return {
        "resource_type": resource_type,
        "resource_id": str(resource.id),
        "name": resource.name,
        "start_time": start_time.isoformat(),
        # open-ended occupancy has no known end
        "end_time": None if end_time == OPEN_END else end_time.isoformat(),
    }


class SchedulingService:
    @staticmethod
    def check_availability(tenant, start_time, duration, technician_id=None, lift_id=None):
        """
        Point check of a single window against a technician and/or a lift

        Args:
            tenant: Tenant whose resources are checked
            start_time: Aware datetime the window starts
            duration: Window length in minutes
            technician_id: Optional technician to check
            lift_id: Optional lift to check

        Returns:
            Dict with ``available`` and the list of ``conflicts``

        Raises:
            InvalidDataException: Duration not positive or above the configured maximum
            ResourceNotFoundException: Unknown technician or lift
        """
        if duration is None or duration <= 0:
            raise InvalidDataException(_("Duration must be a positive number of minutes."))
        max_duration = settings.WORKSHOP_SCHEDULING["MAX_DURATION_MINUTES"]
        if duration > max_duration:
            raise InvalidDataException(
                _("Duration cannot exceed %(max)s minutes.") % {"max": max_duration}
            )
        end_time = calculate_end_time(start_time, duration)
        conflicts = []

        if technician_id:
            try:
                technician = Technician.objects.get(tenant=tenant, id=technician_id)
            except (Technician.DoesNotExist, ValidationError, ValueError):
                raise ResourceNotFoundException(_("Technician not found."))
            for appointment in ConflictService.get_conflicting_appointments(
                tenant, technician.id, start_time, end_time
            ):
                conflicts.append(
                    _conflict_entry(
                        "technician", technician, appointment.start_time, appointment.end_time
                    )
                )

        if lift_id:
            lift = LiftService.get_lift(tenant, lift_id)
            if lift.in_maintenance:
                conflicts.append(_conflict_entry("lift", lift, start_time, end_time))
            else:
                usages = lift.usages.filter(start_time__lt=end_time).order_by("start_time")
                for usage in LiftService.overlapping_usages(usages, start_time, end_time):
                    conflicts.append(
                        _conflict_entry("lift", lift, usage.start_time, usage.interval_end)
                    )

        return {"available": not conflicts, "conflicts": conflicts}

    @staticmethod
    def get_available_slots(tenant, target_date, duration=None, lift_id=None):
        """
        Day scan of bookable slots

        Returns:
            Dict with the ``date``, every candidate slot and ``has_availability``
        """
        slots = AvailabilityService.generate_slots(
            tenant, target_date, duration=duration, lift_id=lift_id
        )
        return {
            "date": target_date.isoformat(),
            "available_slots": [slot.to_dict() for slot in slots],
            "has_availability": AvailabilityService.has_availability(slots),
        }

    @staticmethod
    def reserve(tenant, lift_id, **kwargs):
        return LiftService.reserve(tenant, lift_id, **kwargs)

    @staticmethod
    def start_usage(tenant, lift_id, **kwargs):
        return LiftService.start_usage(tenant, lift_id, **kwargs)

    @staticmethod
    def end_usage(tenant, lift_id, **kwargs):
        return LiftService.end_usage(tenant, lift_id, **kwargs)

    @staticmethod
    def current_usage(tenant, lift_id):
        return LiftService.current_usage(tenant, lift_id)
