# apps/bookingapp/services/availability_service.py
import logging
from datetime import date, datetime, time, timedelta
from typing import List, NamedTuple, Optional, Tuple

from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.models import INACTIVE_STATUSES, Appointment
from apps.bookingapp.utils.time_calculator import calculate_end_time, overlaps, parse_clock_time
from apps.liftapp.services.lift_service import LiftService
from apps.workorderapp.models import WorkOrder
from core.exceptions import InvalidDataException

logger = logging.getLogger(__name__)

# Type definitions for time ranges
TimeRange = Tuple[time, time]  # (open, close)
Interval = Tuple[datetime, datetime]  # (start_time, end_time)

REASON_APPOINTMENT = "existing appointment"
REASON_WORK_ORDER = "work order in progress"
REASON_LIFT = "lift occupied"


class Slot(NamedTuple):
    """Candidate appointment window with its availability verdict"""

    start: datetime
    end: datetime
    available: bool
    reason: Optional[str] = None

    def to_dict(self):
        return {
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
            "available": self.available,
            "reason": self.reason,
        }


class AvailabilityService:
    """
    Multi-resource slot generator.

    Walks a business day in fixed steps and marks each candidate window as
    blocked by, in order of precedence, an active appointment, an in-progress
    work order, or the requested lift. All durable state is read once per
    call; the per-slot checks run in memory.
    """

    @staticmethod
    def get_scheduling_config():
        return settings.WORKSHOP_SCHEDULING

    @classmethod
    def get_business_hours(cls) -> TimeRange:
        config = cls.get_scheduling_config()
        return (
            parse_clock_time(config["BUSINESS_OPEN"]),
            parse_clock_time(config["BUSINESS_CLOSE"]),
        )

    @classmethod
    def generate_slots(
        cls,
        tenant,
        target_date: date,
        duration: Optional[int] = None,
        lift_id: Optional[str] = None,
        business_hours: Optional[TimeRange] = None,
        step: Optional[int] = None,
    ) -> List[Slot]:
        """
        Generate the ordered candidate slots for one day.

        Args:
            tenant: Tenant whose calendar is scanned
            target_date: Day to scan, in the project time zone
            duration: Slot length in minutes (defaults to the configured duration)
            lift_id: Optional lift that must be free for the whole slot
            business_hours: Optional (open, close) override
            step: Optional step between candidate starts in minutes

        Returns:
            List of Slot, earliest first

        Raises:
            InvalidDataException: If duration is out of range or step is not positive
            ResourceNotFoundException: If the lift does not exist for the tenant
        """
        config = cls.get_scheduling_config()
        duration = config["DEFAULT_DURATION_MINUTES"] if duration is None else duration
        step = config["SLOT_STEP_MINUTES"] if step is None else step
        if duration <= 0:
            raise InvalidDataException(_("Duration must be a positive number of minutes."))
        max_duration = config["MAX_DURATION_MINUTES"]
        if duration > max_duration:
            raise InvalidDataException(
                _("Duration cannot exceed %(max)s minutes.") % {"max": max_duration}
            )
        if step <= 0:
            raise InvalidDataException(_("Slot step must be a positive number of minutes."))

        open_time, close_time = business_hours or cls.get_business_hours()
        day_start = timezone.make_aware(datetime.combine(target_date, open_time))
        day_end = timezone.make_aware(datetime.combine(target_date, close_time))
        if day_end <= day_start:
            return []

        appointment_windows = cls._appointment_windows(tenant, day_start, day_end)
        work_order_windows = cls._work_order_windows(tenant, day_start, day_end)

        lift = None
        lift_usages = []
        if lift_id:
            lift = LiftService.get_lift(tenant, lift_id)
            lift_usages = list(lift.usages.filter(start_time__lt=day_end))

        slots = []
        slot_length = timedelta(minutes=duration)
        step_length = timedelta(minutes=step)
        candidate = day_start
        while candidate < day_end:
            slot_end = candidate + slot_length
            if slot_end > day_end:
                break

            reason = None
            if cls._any_overlap(appointment_windows, candidate, slot_end):
                reason = REASON_APPOINTMENT
            elif cls._any_overlap(work_order_windows, candidate, slot_end):
                reason = REASON_WORK_ORDER
            elif lift is not None and (
                lift.in_maintenance
                or LiftService.window_is_blocked(lift_usages, candidate, slot_end)
            ):
                reason = REASON_LIFT

            slots.append(Slot(candidate, slot_end, reason is None, reason))
            candidate += step_length

        logger.debug(
            f"Generated {len(slots)} slots for tenant {tenant.id} on {target_date} "
            f"({sum(1 for slot in slots if slot.available)} available)"
        )
        return slots

    @staticmethod
    def has_availability(slots: List[Slot]) -> bool:
        return any(slot.available for slot in slots)

    @staticmethod
    def _any_overlap(windows: List[Interval], start_time, end_time) -> bool:
        return any(overlaps(w_start, w_end, start_time, end_time) for w_start, w_end in windows)

    @classmethod
    def _appointment_windows(cls, tenant, day_start, day_end) -> List[Interval]:
        """Active appointments of the tenant touching the business day."""
        earliest_start = day_start - timedelta(
            minutes=cls.get_scheduling_config()["MAX_DURATION_MINUTES"]
        )
        appointments = (
            Appointment.objects.filter(
                tenant=tenant,
                start_time__lt=day_end,
                start_time__gte=earliest_start,
            )
            .exclude(status__in=INACTIVE_STATUSES)
            .only("start_time", "duration")
        )
        windows = []
        for appointment in appointments:
            end_time = calculate_end_time(appointment.start_time, appointment.duration)
            if end_time > day_start:
                windows.append((appointment.start_time, end_time))
        return windows

    @staticmethod
    def _work_order_windows(tenant, day_start, day_end) -> List[Interval]:
        """In-progress work orders with a planned window touching the business day."""
        work_orders = WorkOrder.objects.filter(
            tenant=tenant,
            status="in_progress",
            scheduled_start__isnull=False,
            estimated_hours__isnull=False,
            scheduled_start__lt=day_end,
        ).only("scheduled_start", "estimated_hours")
        windows = []
        for work_order in work_orders:
            end_time = work_order.scheduled_end
            if end_time > day_start:
                windows.append((work_order.scheduled_start, end_time))
        return windows
