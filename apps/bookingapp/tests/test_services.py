# apps/bookingapp/tests/test_services.py
from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings

from apps.bookingapp.services.appointment_service import AppointmentService
from apps.bookingapp.services.availability_service import (
    REASON_APPOINTMENT,
    REASON_LIFT,
    REASON_WORK_ORDER,
    AvailabilityService,
)
from apps.bookingapp.services.conflict_service import ConflictService
from apps.bookingapp.services.scheduling_service import SchedulingService
from apps.bookingapp.tests.factories import AppointmentFactory
from apps.bookingapp.utils.time_calculator import floor_minutes, overlaps
from apps.liftapp.models import LiftUsage
from apps.liftapp.tests.factories import LiftFactory
from apps.techniciansapp.tests.factories import TechnicianFactory
from apps.tenantsapp.tests.factories import TenantFactory
from apps.workorderapp.tests.factories import WorkOrderFactory
from core.exceptions import (
    InvalidDataException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    SchedulingConflictException,
)

DAY = date(2030, 5, 6)


def at(hour, minute=0):
    return datetime(2030, 5, 6, hour, minute, tzinfo=dt_timezone.utc)


class IntervalTest(TestCase):
    """Test cases for the half-open interval helpers"""

    def test_touching_intervals_do_not_overlap(self):
        self.assertFalse(overlaps(at(10), at(11), at(11), at(12)))
        self.assertFalse(overlaps(at(11), at(12), at(10), at(11)))

    def test_partial_and_contained_overlap(self):
        self.assertTrue(overlaps(at(10), at(11), at(10, 30), at(11, 30)))
        self.assertTrue(overlaps(at(9), at(17), at(12), at(13)))
        self.assertTrue(overlaps(at(12), at(13), at(9), at(17)))

    def test_overlap_is_symmetric(self):
        pairs = [
            (at(8), at(9), at(8, 30), at(10)),
            (at(8), at(9), at(9), at(10)),
            (at(8), at(12), at(9), at(10)),
        ]
        for a_start, a_end, b_start, b_end in pairs:
            self.assertEqual(
                overlaps(a_start, a_end, b_start, b_end),
                overlaps(b_start, b_end, a_start, a_end),
            )

    def test_floor_minutes(self):
        self.assertEqual(floor_minutes(at(14, 5), at(15, 10)), 65)
        self.assertEqual(floor_minutes(at(14), at(14) + timedelta(seconds=119)), 1)


class ConflictServiceTest(TestCase):
    """Test cases for technician double-booking detection"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.technician = TechnicianFactory(tenant=self.tenant)
        self.appointment = AppointmentFactory(
            tenant=self.tenant, technician=self.technician, start_time=at(10), duration=60
        )

    def test_overlapping_window_conflicts(self):
        self.assertTrue(
            ConflictService.has_technician_conflict(
                self.tenant, self.technician.id, at(10, 30), at(11, 30)
            )
        )

    def test_adjacent_window_does_not_conflict(self):
        self.assertFalse(
            ConflictService.has_technician_conflict(
                self.tenant, self.technician.id, at(11), at(12)
            )
        )
        self.assertFalse(
            ConflictService.has_technician_conflict(self.tenant, self.technician.id, at(9), at(10))
        )

    def test_inactive_appointments_never_conflict(self):
        for status in ("cancelled", "completed", "no_show"):
            self.appointment.status = status
            self.appointment.save()
            self.assertFalse(
                ConflictService.has_technician_conflict(
                    self.tenant, self.technician.id, at(10), at(11)
                )
            )

    def test_in_progress_appointment_conflicts(self):
        self.appointment.status = "in_progress"
        self.appointment.save()
        self.assertTrue(
            ConflictService.has_technician_conflict(self.tenant, self.technician.id, at(10), at(11))
        )

    def test_excluded_appointment_is_ignored(self):
        self.assertFalse(
            ConflictService.has_technician_conflict(
                self.tenant,
                self.technician.id,
                at(10),
                at(11),
                exclude_appointment_id=self.appointment.id,
            )
        )

    def test_other_technician_is_free(self):
        other = TechnicianFactory(tenant=self.tenant)
        self.assertFalse(
            ConflictService.has_technician_conflict(self.tenant, other.id, at(10), at(11))
        )

    def test_conflicts_are_returned_earliest_first(self):
        later = AppointmentFactory(
            tenant=self.tenant, technician=self.technician, start_time=at(11), duration=30
        )
        conflicts = ConflictService.get_conflicting_appointments(
            self.tenant, self.technician.id, at(9), at(12)
        )
        self.assertEqual([a.id for a in conflicts], [self.appointment.id, later.id])


class AvailabilityServiceTest(TestCase):
    """Test cases for the day slot scan"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.technician = TechnicianFactory(tenant=self.tenant)

    def _slots_by_start(self, **kwargs):
        slots = AvailabilityService.generate_slots(self.tenant, DAY, **kwargs)
        return {slot.start.time(): slot for slot in slots}

    def test_empty_day_has_every_slot_available(self):
        slots = AvailabilityService.generate_slots(self.tenant, DAY, duration=60)

        self.assertEqual(len(slots), 21)
        self.assertEqual(slots[0].start, at(8))
        self.assertEqual(slots[-1].start, at(17))
        self.assertEqual(slots[-1].end, at(18))
        self.assertTrue(all(slot.available for slot in slots))
        self.assertTrue(AvailabilityService.has_availability(slots))

    def test_slots_are_ordered_and_fit_the_day(self):
        slots = AvailabilityService.generate_slots(self.tenant, DAY, duration=90)

        starts = [slot.start for slot in slots]
        self.assertEqual(starts, sorted(starts))
        self.assertEqual(slots[-1].start, at(16, 30))
        for slot in slots:
            self.assertEqual(slot.end - slot.start, timedelta(minutes=90))
            self.assertLessEqual(slot.end, at(18))

    def test_appointment_blocks_overlapping_slots(self):
        AppointmentFactory(tenant=self.tenant, technician=self.technician, start_time=at(10))

        slots = self._slots_by_start(duration=60)

        self.assertTrue(slots[time(9, 0)].available)
        self.assertEqual(slots[time(9, 30)].reason, REASON_APPOINTMENT)
        self.assertEqual(slots[time(10, 0)].reason, REASON_APPOINTMENT)
        self.assertEqual(slots[time(10, 30)].reason, REASON_APPOINTMENT)
        self.assertTrue(slots[time(11, 0)].available)
        self.assertIsNone(slots[time(11, 0)].reason)

    def test_cancelled_appointment_does_not_block(self):
        AppointmentFactory(tenant=self.tenant, start_time=at(10), status="cancelled")

        slots = self._slots_by_start(duration=60)
        self.assertTrue(slots[time(10, 0)].available)

    def test_appointment_starting_before_opening_blocks_first_slot(self):
        AppointmentFactory(tenant=self.tenant, start_time=at(7), duration=90)

        slots = self._slots_by_start(duration=60)
        self.assertEqual(slots[time(8, 0)].reason, REASON_APPOINTMENT)
        self.assertTrue(slots[time(8, 30)].available)

    def test_in_progress_work_order_blocks_its_window(self):
        WorkOrderFactory(
            tenant=self.tenant,
            status="in_progress",
            scheduled_start=at(13),
            estimated_hours=Decimal("2.0"),
        )

        slots = self._slots_by_start(duration=60)

        self.assertTrue(slots[time(12, 0)].available)
        self.assertEqual(slots[time(12, 30)].reason, REASON_WORK_ORDER)
        self.assertEqual(slots[time(14, 30)].reason, REASON_WORK_ORDER)
        self.assertTrue(slots[time(15, 0)].available)

    def test_scheduled_work_order_does_not_block(self):
        WorkOrderFactory(
            tenant=self.tenant,
            status="scheduled",
            scheduled_start=at(13),
            estimated_hours=Decimal("2.0"),
        )

        slots = self._slots_by_start(duration=60)
        self.assertTrue(slots[time(13, 0)].available)

    def test_appointment_takes_precedence_over_work_order(self):
        AppointmentFactory(tenant=self.tenant, start_time=at(13))
        WorkOrderFactory(
            tenant=self.tenant,
            status="in_progress",
            scheduled_start=at(13),
            estimated_hours=Decimal("1.0"),
        )
        lift = LiftFactory(tenant=self.tenant)
        LiftUsage.objects.create(lift=lift, start_time=at(13), end_time=at(14))

        slots = self._slots_by_start(duration=60, lift_id=lift.id)
        self.assertEqual(slots[time(13, 0)].reason, REASON_APPOINTMENT)

    def test_lift_usage_blocks_slots(self):
        lift = LiftFactory(tenant=self.tenant)
        LiftUsage.objects.create(lift=lift, start_time=at(15), started_at=at(15), end_time=at(16))

        slots = self._slots_by_start(duration=60, lift_id=lift.id)

        self.assertTrue(slots[time(14, 0)].available)
        self.assertEqual(slots[time(14, 30)].reason, REASON_LIFT)
        self.assertEqual(slots[time(15, 30)].reason, REASON_LIFT)
        self.assertTrue(slots[time(16, 0)].available)

    def test_lift_usage_is_ignored_without_lift(self):
        lift = LiftFactory(tenant=self.tenant)
        LiftUsage.objects.create(lift=lift, start_time=at(15), end_time=at(16))

        slots = self._slots_by_start(duration=60)
        self.assertTrue(slots[time(15, 0)].available)

    def test_lift_in_maintenance_blocks_whole_day(self):
        lift = LiftFactory(tenant=self.tenant, in_maintenance=True)

        slots = AvailabilityService.generate_slots(self.tenant, DAY, lift_id=lift.id)

        self.assertTrue(all(slot.reason == REASON_LIFT for slot in slots))
        self.assertFalse(AvailabilityService.has_availability(slots))

    def test_unknown_lift(self):
        other_lift = LiftFactory()
        with self.assertRaises(ResourceNotFoundException):
            AvailabilityService.generate_slots(self.tenant, DAY, lift_id=other_lift.id)

    def test_other_tenant_bookings_are_invisible(self):
        AppointmentFactory(start_time=at(10))

        slots = self._slots_by_start(duration=60)
        self.assertTrue(slots[time(10, 0)].available)

    def test_non_positive_duration(self):
        with self.assertRaises(InvalidDataException):
            AvailabilityService.generate_slots(self.tenant, DAY, duration=0)

    def test_duration_longer_than_business_hours(self):
        slots = AvailabilityService.generate_slots(
            self.tenant, DAY, duration=120, business_hours=(time(8, 0), time(9, 0))
        )
        self.assertEqual(slots, [])

    def test_duration_above_maximum(self):
        with self.assertRaises(InvalidDataException):
            AvailabilityService.generate_slots(self.tenant, DAY, duration=481)
        with self.assertRaises(InvalidDataException):
            AvailabilityService.generate_slots(self.tenant, DAY, duration=10**12)

    @override_settings(
        WORKSHOP_SCHEDULING={
            "BUSINESS_OPEN": "09:00",
            "BUSINESS_CLOSE": "12:00",
            "SLOT_STEP_MINUTES": 60,
            "DEFAULT_DURATION_MINUTES": 60,
            "MAX_DURATION_MINUTES": 480,
        }
    )
    def test_configured_business_hours(self):
        slots = AvailabilityService.generate_slots(self.tenant, DAY)
        self.assertEqual([slot.start for slot in slots], [at(9), at(10), at(11)])


class AppointmentServiceTest(TestCase):
    """Test cases for appointment booking and lifecycle"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.technician = TechnicianFactory(tenant=self.tenant)
        self.clock = patch("django.utils.timezone.now", return_value=at(7))
        self.clock.start()
        self.addCleanup(self.clock.stop)

    def _book(self, start=None, duration=60, **kwargs):
        kwargs.setdefault("technician_id", self.technician.id)
        return AppointmentService.create_appointment(
            self.tenant, start_time=start or at(10), duration=duration, **kwargs
        )

    def test_create_appointment(self):
        appointment = self._book(customer_name="Jane Roe", service_type="brakes")

        self.assertEqual(appointment.status, "scheduled")
        self.assertEqual(appointment.technician, self.technician)
        self.assertEqual(appointment.end_time, at(11))

    def test_create_uses_default_duration(self):
        appointment = AppointmentService.create_appointment(self.tenant, start_time=at(10))
        self.assertEqual(appointment.duration, 60)
        self.assertIsNone(appointment.technician)

    def test_create_in_the_past(self):
        with self.assertRaises(InvalidDataException):
            self._book(start=at(6))

    def test_create_with_invalid_duration(self):
        with self.assertRaises(InvalidDataException):
            self._book(duration=0)
        with self.assertRaises(InvalidDataException):
            self._book(duration=481)

    def test_double_booking_is_rejected(self):
        first = self._book()

        with self.assertRaises(SchedulingConflictException) as ctx:
            self._book(start=at(10, 30))
        self.assertEqual(ctx.exception.errors["conflicting_appointments"], [str(first.id)])

        self.assertEqual(self._book(start=at(11)).start_time, at(11))

    def test_unknown_or_inactive_technician(self):
        with self.assertRaises(ResourceNotFoundException):
            self._book(technician_id=TechnicianFactory().id)

        inactive = TechnicianFactory(tenant=self.tenant, is_active=False)
        with self.assertRaises(ResourceNotFoundException):
            self._book(technician_id=inactive.id)

    def test_technician_inherited_from_work_order(self):
        work_order = WorkOrderFactory(tenant=self.tenant, technician=self.technician)

        appointment = AppointmentService.create_appointment(
            self.tenant, start_time=at(10), work_order_id=work_order.id
        )
        self.assertEqual(appointment.technician, self.technician)
        self.assertEqual(appointment.work_order, work_order)

    def test_cancel_twice(self):
        appointment = self._book()

        cancelled = AppointmentService.cancel_appointment(
            self.tenant, appointment.id, reason="customer called"
        )
        self.assertEqual(cancelled.status, "cancelled")
        self.assertEqual(cancelled.cancellation_reason, "customer called")

        with self.assertRaises(InvalidStatusTransitionException):
            AppointmentService.cancel_appointment(self.tenant, appointment.id)

    def test_cancelled_slot_can_be_rebooked(self):
        appointment = self._book()
        AppointmentService.cancel_appointment(self.tenant, appointment.id)

        self.assertEqual(self._book().start_time, at(10))

    def test_lifecycle(self):
        appointment = self._book()

        with self.assertRaises(InvalidStatusTransitionException):
            AppointmentService.complete_appointment(self.tenant, appointment.id)

        AppointmentService.start_appointment(self.tenant, appointment.id)
        completed = AppointmentService.complete_appointment(self.tenant, appointment.id)
        self.assertEqual(completed.status, "completed")

        with self.assertRaises(InvalidStatusTransitionException):
            AppointmentService.mark_no_show(self.tenant, appointment.id)

    def test_reschedule_ignores_itself(self):
        appointment = self._book()

        moved = AppointmentService.update_appointment(
            self.tenant, appointment.id, start_time=at(10, 30)
        )
        self.assertEqual(moved.start_time, at(10, 30))

    def test_reschedule_into_conflict(self):
        self._book()
        other = self._book(start=at(12))

        with self.assertRaises(SchedulingConflictException):
            AppointmentService.update_appointment(self.tenant, other.id, start_time=at(10, 30))

    def test_update_only_when_scheduled(self):
        appointment = self._book()
        AppointmentService.start_appointment(self.tenant, appointment.id)

        with self.assertRaises(InvalidOperationException):
            AppointmentService.update_appointment(self.tenant, appointment.id, notes="late")

    def test_claim_unassigned_appointment(self):
        appointment = self._book(technician_id=None)

        claimed = AppointmentService.claim_appointment(
            self.tenant, appointment.id, self.technician.id
        )
        self.assertEqual(claimed.technician, self.technician)

        with self.assertRaises(InvalidOperationException):
            AppointmentService.claim_appointment(
                self.tenant, appointment.id, TechnicianFactory(tenant=self.tenant).id
            )

    def test_claim_when_technician_is_busy(self):
        self._book()
        unassigned = self._book(start=at(10, 30), technician_id=None)

        with self.assertRaises(SchedulingConflictException):
            AppointmentService.claim_appointment(self.tenant, unassigned.id, self.technician.id)

    def test_delete_rules(self):
        appointment = self._book()
        AppointmentService.start_appointment(self.tenant, appointment.id)
        with self.assertRaises(InvalidOperationException):
            AppointmentService.delete_appointment(self.tenant, appointment.id)

        other = self._book(start=at(14))
        AppointmentService.delete_appointment(self.tenant, other.id)
        with self.assertRaises(ResourceNotFoundException):
            AppointmentService.get_appointment(self.tenant, other.id)

    def test_other_tenant_appointment_is_not_found(self):
        appointment = self._book()
        with self.assertRaises(ResourceNotFoundException):
            AppointmentService.cancel_appointment(TenantFactory(), appointment.id)


class SchedulingServiceTest(TestCase):
    """Test cases for the scheduling facade"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.technician = TechnicianFactory(tenant=self.tenant)
        self.lift = LiftFactory(tenant=self.tenant)

    def test_free_window(self):
        result = SchedulingService.check_availability(
            self.tenant, at(10), 60, technician_id=self.technician.id, lift_id=self.lift.id
        )
        self.assertEqual(result, {"available": True, "conflicts": []})

    def test_technician_conflict_is_reported(self):
        AppointmentFactory(tenant=self.tenant, technician=self.technician, start_time=at(10))

        result = SchedulingService.check_availability(
            self.tenant, at(10, 30), 60, technician_id=self.technician.id
        )

        self.assertFalse(result["available"])
        self.assertEqual(len(result["conflicts"]), 1)
        conflict = result["conflicts"][0]
        self.assertEqual(conflict["resource_type"], "technician")
        self.assertEqual(conflict["resource_id"], str(self.technician.id))
        self.assertEqual(conflict["start_time"], at(10).isoformat())
        self.assertEqual(conflict["end_time"], at(11).isoformat())

    def test_adjacent_appointment_is_available(self):
        AppointmentFactory(tenant=self.tenant, technician=self.technician, start_time=at(10))

        result = SchedulingService.check_availability(
            self.tenant, at(11), 60, technician_id=self.technician.id
        )
        self.assertTrue(result["available"])

    def test_open_lift_usage_has_no_end(self):
        LiftUsage.objects.create(lift=self.lift, start_time=at(9), started_at=at(9))

        result = SchedulingService.check_availability(self.tenant, at(15), 60, lift_id=self.lift.id)

        self.assertFalse(result["available"])
        self.assertEqual(result["conflicts"][0]["resource_type"], "lift")
        self.assertIsNone(result["conflicts"][0]["end_time"])

    def test_both_resources_conflict(self):
        AppointmentFactory(tenant=self.tenant, technician=self.technician, start_time=at(10))
        LiftUsage.objects.create(lift=self.lift, start_time=at(10), end_time=at(11))

        result = SchedulingService.check_availability(
            self.tenant, at(10), 60, technician_id=self.technician.id, lift_id=self.lift.id
        )
        types = [conflict["resource_type"] for conflict in result["conflicts"]]
        self.assertEqual(types, ["technician", "lift"])

    def test_no_resources_is_available(self):
        self.assertTrue(SchedulingService.check_availability(self.tenant, at(10), 30)["available"])

    def test_invalid_duration(self):
        with self.assertRaises(InvalidDataException):
            SchedulingService.check_availability(self.tenant, at(10), 0)
        with self.assertRaises(InvalidDataException):
            SchedulingService.check_availability(self.tenant, at(10), 10**12)

    def test_unknown_technician(self):
        with self.assertRaises(ResourceNotFoundException):
            SchedulingService.check_availability(
                self.tenant, at(10), 60, technician_id=TechnicianFactory().id
            )

    def test_available_slots_payload(self):
        AppointmentFactory(tenant=self.tenant, start_time=at(8))

        result = SchedulingService.get_available_slots(self.tenant, DAY, duration=60)

        self.assertEqual(result["date"], "2030-05-06")
        self.assertTrue(result["has_availability"])
        first = result["available_slots"][0]
        self.assertEqual(first["start_time"], at(8).isoformat())
        self.assertEqual(first["end_time"], at(9).isoformat())
        self.assertFalse(first["available"])
        self.assertEqual(first["reason"], REASON_APPOINTMENT)
