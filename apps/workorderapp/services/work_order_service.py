# apps/workorderapp/services/work_order_service.py
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.liftapp.models import LiftUsage
from apps.liftapp.services.lift_service import LiftService
from apps.workorderapp.models import WorkOrder, WorkOrderStatus
from core.exceptions import (
    DuplicateResourceException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


class WorkOrderService:
    """
    Work order lifecycle.

    Starting an order takes over the lift reservation made for it, and
    completing or cancelling it releases the lift. Lift side effects run in
    the same transaction as the status change, so a lift error leaves the
    order untouched.
    """

    @staticmethod
    def get_work_order(tenant, work_order_id, lock=False):
        queryset = WorkOrder.objects.filter(tenant=tenant)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=work_order_id)
        except (WorkOrder.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Work order not found."))

    @staticmethod
    def generate_number(tenant):
        """Next free ``WO-000001`` style number for the tenant."""
        sequence = WorkOrder.objects.filter(tenant=tenant).count() + 1
        number = f"WO-{sequence:06d}"
        while WorkOrder.objects.filter(tenant=tenant, number=number).exists():
            sequence += 1
            number = f"WO-{sequence:06d}"
        return number

    @staticmethod
    @transaction.atomic
    def create_work_order(tenant, number=None, **data):
        """
        Create a work order, numbering it when no number is given

        Raises:
            DuplicateResourceException: The number is already used by the tenant
        """
        if number:
            if WorkOrder.objects.filter(tenant=tenant, number=number).exists():
                raise DuplicateResourceException(
                    _("A work order with number %(number)s already exists.") % {"number": number}
                )
        else:
            number = WorkOrderService.generate_number(tenant)
        work_order = WorkOrder.objects.create(tenant=tenant, number=number, **data)
        logger.info(f"Work order {work_order.number} created for tenant {tenant.id}")
        return work_order

    @staticmethod
    def _ensure_transition(work_order, new_status):
        if not work_order.can_transition_to(new_status):
            raise InvalidStatusTransitionException(
                _("Cannot change work order from %(old)s to %(new)s.")
                % {"old": work_order.status, "new": new_status}
            )

    @staticmethod
    def _open_usage(work_order):
        return (
            LiftUsage.objects.filter(work_order=work_order, end_time__isnull=True)
            .select_related("lift")
            .first()
        )

    @staticmethod
    @transaction.atomic
    def start(tenant, work_order_id):
        """
        Move a work order to in progress

        If the order holds a lift reservation that has not started, lift
        occupancy begins now.

        Raises:
            InvalidStatusTransitionException: Order cannot be started
            LiftInMaintenanceException: Reserved lift went into maintenance
        """
        work_order = WorkOrderService.get_work_order(tenant, work_order_id, lock=True)
        WorkOrderService._ensure_transition(work_order, WorkOrderStatus.IN_PROGRESS.value)

        usage = WorkOrderService._open_usage(work_order)
        if usage is not None and usage.started_at is None:
            LiftService.start_usage(tenant, usage.lift_id, work_order_id=work_order.id)

        now = timezone.now()
        work_order.status = WorkOrderStatus.IN_PROGRESS.value
        work_order.started_at = now
        if work_order.scheduled_start is None:
            work_order.scheduled_start = now
        work_order.save(update_fields=["status", "started_at", "scheduled_start", "updated_at"])
        logger.info(f"Work order {work_order.number} started")
        return work_order

    @staticmethod
    @transaction.atomic
    def complete(tenant, work_order_id):
        """
        Complete an in-progress work order and release its lift

        Raises:
            InvalidStatusTransitionException: Order is not in progress
        """
        work_order = WorkOrderService.get_work_order(tenant, work_order_id, lock=True)
        WorkOrderService._ensure_transition(work_order, WorkOrderStatus.COMPLETED.value)

        usage = WorkOrderService._open_usage(work_order)
        if usage is not None:
            LiftService.end_usage(tenant, usage.lift_id, usage_id=usage.id)

        work_order.status = WorkOrderStatus.COMPLETED.value
        work_order.completed_at = timezone.now()
        work_order.save(update_fields=["status", "completed_at", "updated_at"])
        logger.info(f"Work order {work_order.number} completed")
        return work_order

    @staticmethod
    @transaction.atomic
    def cancel(tenant, work_order_id):
        work_order = WorkOrderService.get_work_order(tenant, work_order_id, lock=True)
        WorkOrderService._ensure_transition(work_order, WorkOrderStatus.CANCELLED.value)

        usage = WorkOrderService._open_usage(work_order)
        if usage is not None:
            LiftService.end_usage(
                tenant, usage.lift_id, usage_id=usage.id, notes=_("Work order cancelled")
            )

        work_order.status = WorkOrderStatus.CANCELLED.value
        work_order.save(update_fields=["status", "updated_at"])
        logger.info(f"Work order {work_order.number} cancelled")
        return work_order
