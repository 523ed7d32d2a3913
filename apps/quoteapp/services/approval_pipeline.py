# apps/quoteapp/services/approval_pipeline.py
"""
Quote approval pipeline.

Approving a quote books the work it describes in three steps:

1. create (or reuse) the work order  - required, aborts approval on failure
2. reserve the quoted lift           - optional
3. create the appointment            - optional

Every step checks whether its effect already exists before acting, so
approving an accepted quote again only re-runs the steps that have not
succeeded yet. Optional step failures are recorded on the quote and never
undo the earlier steps.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.services.appointment_service import AppointmentService
from apps.bookingapp.utils.time_calculator import calculate_end_time, hours_to_minutes
from apps.liftapp.models import LiftUsage
from apps.liftapp.services.lift_service import LiftService
from apps.quoteapp.models import Quote, QuoteStatus
from apps.workorderapp.services.work_order_service import WorkOrderService
from core.exceptions import (
    APIException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)

STEP_DONE = "done"
STEP_SKIPPED = "skipped"
STEP_FAILED = "failed"


class QuoteApprovalPipeline:
    @staticmethod
    def get_quote(tenant, quote_id, lock=False):
        queryset = Quote.objects.filter(tenant=tenant)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=quote_id)
        except (Quote.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(_("Quote not found."))

    @classmethod
    def approve(cls, tenant, quote_id):
        """
        Approve a quote and book its work

        Args:
            tenant: Tenant owning the quote
            quote_id: UUID of the quote

        Returns:
            Dict with the ``quote``, its ``work_order`` and the outcome of each step

        Raises:
            ResourceNotFoundException: Unknown quote
            InvalidStatusTransitionException: Quote is rejected or expired
        """
        # The quote row stays locked until every step outcome is saved
        with transaction.atomic():
            quote = cls.get_quote(tenant, quote_id, lock=True)
            if quote.status not in (QuoteStatus.PENDING.value, QuoteStatus.ACCEPTED.value):
                raise InvalidStatusTransitionException(
                    _("A %(status)s quote cannot be approved.") % {"status": quote.status}
                )
            work_order = cls._ensure_work_order(quote)
            quote.status = QuoteStatus.ACCEPTED.value
            quote.accepted_at = quote.accepted_at or timezone.now()

            steps = {"work_order": {"status": STEP_DONE}}
            steps["lift"] = cls._run_step("lift", cls._reserve_lift, quote, work_order)
            steps["appointment"] = cls._run_step(
                "appointment", cls._create_appointment, quote, work_order
            )

            quote.approval_steps = steps
            quote.save(
                update_fields=[
                    "status",
                    "accepted_at",
                    "work_order",
                    "approval_steps",
                    "updated_at",
                ]
            )
        logger.info(f"Quote {quote.number} approved -> work order {work_order.number}: {steps}")
        return {"quote": quote, "work_order": work_order, "steps": steps}

    @staticmethod
    def _run_step(name, step, quote, work_order):
        # Savepoint per step: a failing step rolls back only its own writes
        try:
            with transaction.atomic():
                return {"status": step(quote, work_order)}
        except APIException as exc:
            logger.warning(f"Quote {quote.number}: {name} step failed: {exc.message}")
            return {"status": STEP_FAILED, "message": str(exc.message)}

    @staticmethod
    def _ensure_work_order(quote):
        if quote.work_order_id:
            return quote.work_order
        work_order = WorkOrderService.create_work_order(
            quote.tenant,
            status="scheduled",
            technician=quote.technician,
            vehicle_id=quote.vehicle_id,
            scheduled_start=quote.requested_start,
            estimated_hours=quote.estimated_hours,
            notes=f"Created from quote {quote.number}",
        )
        quote.work_order = work_order
        return work_order

    @staticmethod
    def _reserve_lift(quote, work_order):
        if quote.lift_id is None:
            return STEP_SKIPPED
        if LiftUsage.objects.filter(work_order=work_order).exists():
            return STEP_SKIPPED

        end_time = None
        if quote.requested_start and quote.estimated_hours:
            end_time = calculate_end_time(
                quote.requested_start, hours_to_minutes(quote.estimated_hours)
            )
        LiftService.reserve(
            quote.tenant,
            quote.lift_id,
            start_time=quote.requested_start,
            end_time=end_time,
            work_order_id=work_order.id,
            vehicle_id=quote.vehicle_id,
        )
        return STEP_DONE

    @staticmethod
    def _create_appointment(quote, work_order):
        if quote.requested_start is None:
            return STEP_SKIPPED
        if work_order.appointments.exists():
            return STEP_SKIPPED

        duration = settings.WORKSHOP_SCHEDULING["DEFAULT_DURATION_MINUTES"]
        if quote.estimated_hours:
            duration = hours_to_minutes(quote.estimated_hours)
        AppointmentService.create_appointment(
            quote.tenant,
            start_time=quote.requested_start,
            duration=duration,
            technician_id=quote.technician_id,
            work_order_id=work_order.id,
            customer_name=quote.customer_name,
            service_type=quote.service_type,
        )
        return STEP_DONE
