# apps/liftapp/services/lift_service.py
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.utils.time_calculator import overlaps
from apps.liftapp.models import LIFT_TRANSITIONS, Lift, LiftOperation, LiftUsage
from apps.workorderapp.models import WorkOrder
from core.exceptions import (
    DuplicateResourceException,
    InvalidDataException,
    InvalidOperationException,
    LiftAlreadyInUseException,
    NoActiveUsageException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


def _append_note(existing, note):
    if not note:
        return existing
    return f"{existing}\n{note}".strip()


class LiftService:
    """
    Occupancy state machine for workshop lifts.

    A lift's status is derived from its usage ledger: no open record means
    free, an open record that has not started means scheduled, a started open
    record means occupied. Every write locks the lift row so concurrent
    requests for the same lift are applied one after another.
    """

    @staticmethod
    def get_lift(tenant, lift_id, lock=False):
        """
        Fetch a lift of the tenant

        Args:
            tenant: Tenant owning the lift
            lift_id: UUID of the lift
            lock: Take a row lock for the rest of the transaction

        Returns:
            Lift instance

        Raises:
            ResourceNotFoundException: If the lift does not exist for the tenant
        """
        queryset = Lift.objects.filter(tenant=tenant)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=lift_id)
        except (Lift.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Lift not found."))

    @staticmethod
    def _get_work_order(tenant, work_order_id):
        if not work_order_id:
            return None
        try:
            return WorkOrder.objects.get(tenant=tenant, id=work_order_id)
        except (WorkOrder.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Work order not found."))

    @staticmethod
    def _check_transition(lift, operation):
        """Return the status the operation leads to, or raise the error it maps to."""
        current = lift.status
        outcome = LIFT_TRANSITIONS[(current, operation)]
        if isinstance(outcome, type) and issubclass(outcome, Exception):
            logger.warning(
                f"Rejected {operation.value} on lift {lift.id}: lift is {current.value}"
            )
            raise outcome()
        return outcome

    @staticmethod
    def _save_usage(usage):
        # Savepoint so a lost race surfaces as a domain error, not a broken transaction
        try:
            with transaction.atomic():
                usage.save()
        except IntegrityError:
            logger.warning(f"Concurrent open usage detected on lift {usage.lift_id}")
            raise LiftAlreadyInUseException()
        return usage

    @staticmethod
    @transaction.atomic
    def reserve(
        tenant,
        lift_id,
        start_time=None,
        end_time=None,
        work_order_id=None,
        vehicle_id=None,
        notes=None,
    ):
        """
        Put a scheduled hold on a lift

        Args:
            tenant: Tenant owning the lift
            lift_id: UUID of the lift
            start_time: Start of the reservation (defaults to now)
            end_time: Optional planned end of the reservation
            work_order_id: Optional work order the reservation is for
            vehicle_id: Optional vehicle identifier
            notes: Optional free text

        Returns:
            The open LiftUsage record

        Raises:
            ResourceNotFoundException: Unknown lift or work order
            LiftInMaintenanceException: Lift is under maintenance
            LiftAlreadyInUseException: Lift already holds an open record
            InvalidDataException: end_time is not after start_time
        """
        start_time = start_time or timezone.now()
        if end_time is not None and end_time <= start_time:
            raise InvalidDataException(_("Reservation end must be after its start."))

        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        next_status = LiftService._check_transition(lift, LiftOperation.RESERVE)
        work_order = LiftService._get_work_order(tenant, work_order_id)

        usage = LiftService._save_usage(
            LiftUsage(
                lift=lift,
                work_order=work_order,
                vehicle_id=vehicle_id or (work_order.vehicle_id if work_order else ""),
                start_time=start_time,
                planned_end=end_time,
                notes=notes or "",
            )
        )

        logger.info(f"Lift {lift.id} reserved from {start_time} -> {next_status.value}")
        return usage

    @staticmethod
    @transaction.atomic
    def start_usage(tenant, lift_id, work_order_id=None, vehicle_id=None, notes=None):
        """
        Begin occupancy of a lift, taking over an open reservation if there is one

        Returns:
            The started LiftUsage record

        Raises:
            ResourceNotFoundException: Unknown lift or work order
            LiftInMaintenanceException: Lift is under maintenance
            LiftNotAvailableException: Lift is already occupied
        """
        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        next_status = LiftService._check_transition(lift, LiftOperation.START_USAGE)
        work_order = LiftService._get_work_order(tenant, work_order_id)
        now = timezone.now()

        usage = lift.open_usage
        if usage is None:
            usage = LiftUsage(
                lift=lift,
                work_order=work_order,
                vehicle_id=vehicle_id or (work_order.vehicle_id if work_order else ""),
                notes=notes or "",
            )
        else:
            if usage.work_order_id is None and work_order is not None:
                usage.work_order = work_order
            if not usage.vehicle_id:
                usage.vehicle_id = vehicle_id or (work_order.vehicle_id if work_order else "")
            usage.notes = _append_note(usage.notes, notes)

        # Occupancy is measured from the moment the vehicle goes up
        usage.start_time = now
        usage.started_at = now
        LiftService._save_usage(usage)

        logger.info(f"Lift {lift.id} usage started at {now} -> {next_status.value}")
        return usage

    @staticmethod
    @transaction.atomic
    def end_usage(tenant, lift_id, usage_id=None, notes=None):
        """
        Close the open usage record of a lift

        Args:
            tenant: Tenant owning the lift
            lift_id: UUID of the lift
            usage_id: Optional id of the record to close
            notes: Optional note appended to the record

        Returns:
            The closed LiftUsage record (``duration_minutes`` is set)

        Raises:
            ResourceNotFoundException: Unknown lift
            NoActiveUsageException: No matching open record
            LiftInMaintenanceException: Lift is under maintenance
        """
        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        next_status = LiftService._check_transition(lift, LiftOperation.END_USAGE)

        queryset = lift.usages.filter(end_time__isnull=True)
        if usage_id:
            queryset = queryset.filter(id=usage_id)
        usage = queryset.first()
        if usage is None:
            raise NoActiveUsageException()

        # A reservation released before it begins closes as an empty interval
        usage.end_time = max(timezone.now(), usage.start_time)
        usage.notes = _append_note(usage.notes, notes)
        usage.save(update_fields=["end_time", "notes"])

        logger.info(
            f"Lift {lift.id} usage {usage.id} ended after {usage.duration_minutes} min "
            f"-> {next_status.value}"
        )
        return usage

    @staticmethod
    def current_usage(tenant, lift_id):
        """Return the open usage record of a lift, or None."""
        return LiftService.get_lift(tenant, lift_id).open_usage

    @staticmethod
    def overlapping_usages(usages, start_time, end_time):
        """Ledger records whose blocked interval overlaps the half-open window."""
        result = []
        for usage in usages:
            usage_end = usage.interval_end
            # empty interval: reservation released before it began
            if usage.start_time >= usage_end:
                continue
            if overlaps(usage.start_time, usage_end, start_time, end_time):
                result.append(usage)
        return result

    @staticmethod
    def window_is_blocked(usages, start_time, end_time):
        return bool(LiftService.overlapping_usages(usages, start_time, end_time))

    @staticmethod
    def is_available(tenant, lift_id, start_time, end_time):
        """
        Check whether a lift is free for the whole window

        A lift under maintenance is never available. Otherwise every ledger
        record, open or closed, is checked for overlap with the window.

        Returns:
            Boolean indicating availability
        """
        lift = LiftService.get_lift(tenant, lift_id)
        if lift.in_maintenance:
            return False
        usages = lift.usages.filter(start_time__lt=end_time)
        return not LiftService.window_is_blocked(usages, start_time, end_time)

    @staticmethod
    def usage_history(tenant, lift_id, start_date=None, end_date=None):
        """Ledger records of a lift, newest first, optionally limited to a date range."""
        lift = LiftService.get_lift(tenant, lift_id)
        queryset = lift.usages.select_related("work_order")
        if start_date:
            queryset = queryset.filter(start_time__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(start_time__date__lte=end_date)
        return queryset.order_by("-start_time")

    @staticmethod
    @transaction.atomic
    def set_maintenance(tenant, lift_id, reason=""):
        """
        Take a lift out of service

        Raises:
            InvalidOperationException: The lift still holds an open usage record
        """
        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        if lift.open_usage is not None:
            raise InvalidOperationException(
                _("End the current usage before putting the lift into maintenance.")
            )
        lift.in_maintenance = True
        lift.maintenance_reason = reason or ""
        lift.save(update_fields=["in_maintenance", "maintenance_reason", "updated_at"])
        logger.info(f"Lift {lift.id} entered maintenance: {reason}")
        return lift

    @staticmethod
    @transaction.atomic
    def clear_maintenance(tenant, lift_id):
        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        lift.in_maintenance = False
        lift.maintenance_reason = ""
        lift.save(update_fields=["in_maintenance", "maintenance_reason", "updated_at"])
        logger.info(f"Lift {lift.id} back in service")
        return lift

    @staticmethod
    def _ensure_unique_number(tenant, number, exclude_id=None):
        queryset = Lift.objects.filter(tenant=tenant, number=number)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        if queryset.exists():
            raise DuplicateResourceException(
                _("A lift with number %(number)s already exists.") % {"number": number}
            )

    @staticmethod
    @transaction.atomic
    def create_lift(tenant, **data):
        LiftService._ensure_unique_number(tenant, data.get("number"))
        lift = Lift.objects.create(tenant=tenant, **data)
        logger.info(f"Lift {lift.id} created for tenant {tenant.id}")
        return lift

    @staticmethod
    @transaction.atomic
    def update_lift(lift, **data):
        if "number" in data:
            LiftService._ensure_unique_number(lift.tenant, data["number"], exclude_id=lift.id)
        for field, value in data.items():
            setattr(lift, field, value)
        lift.save()
        return lift

    @staticmethod
    @transaction.atomic
    def delete_lift(tenant, lift_id):
        """
        Delete a lift and its ledger

        Raises:
            InvalidOperationException: The lift is reserved or in use
        """
        lift = LiftService.get_lift(tenant, lift_id, lock=True)
        if lift.open_usage is not None:
            raise InvalidOperationException(_("Cannot delete a lift that is reserved or in use."))
        lift.delete()
        logger.info(f"Lift {lift_id} deleted")
