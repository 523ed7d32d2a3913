# apps/bookingapp/tests/test_views.py
from datetime import datetime
from datetime import timezone as dt_timezone

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.bookingapp.models import Appointment
from apps.bookingapp.tests.factories import AppointmentFactory
from apps.liftapp.tests.factories import LiftFactory
from apps.techniciansapp.tests.factories import TechnicianFactory
from apps.tenantsapp.tests.factories import TenantFactory


def at(hour, minute=0):
    return datetime(2030, 5, 6, hour, minute, tzinfo=dt_timezone.utc)


class AppointmentViewSetTest(APITestCase):
    """Test cases for the appointment endpoints"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.technician = TechnicianFactory(tenant=self.tenant)
        self.client = APIClient()
        self.client.credentials(HTTP_X_TENANT_ID=str(self.tenant.id))
        self.list_url = reverse("appointment-list")

    def _book(self, start):
        return self.client.post(
            self.list_url,
            {
                "start_time": start.isoformat(),
                "duration": 60,
                "technician_id": str(self.technician.id),
                "customer_name": "Jane Roe",
            },
            format="json",
        )

    def test_missing_tenant_header(self):
        client = APIClient()
        response = client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_tenant_header(self):
        client = APIClient()
        client.credentials(HTTP_X_TENANT_ID="not-a-uuid")
        response = client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_and_list(self):
        response = self._book(at(10))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["technician_name"], self.technician.name)
        self.assertEqual(response.data["status"], "scheduled")
        self.assertEqual(Appointment.objects.filter(tenant=self.tenant).count(), 1)

        AppointmentFactory(start_time=at(10))
        response = self.client.get(self.list_url)
        self.assertEqual(response.data["count"], 1)

    def test_double_booking_is_a_conflict(self):
        self._book(at(10))

        response = self._book(at(10, 30))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "scheduling_conflict")
        self.assertIn("conflicting_appointments", response.data["details"])

    def test_duration_too_long(self):
        response = self.client.post(
            self.list_url,
            {"start_time": at(10).isoformat(), "duration": 600},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_twice(self):
        appointment_id = self._book(at(10)).data["id"]
        url = reverse("appointment-cancel", kwargs={"pk": appointment_id})

        response = self.client.post(url, {"reason": "sick"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "cancelled")

        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_tenant_appointment_is_not_found(self):
        appointment = AppointmentFactory(start_time=at(10))
        url = reverse("appointment-cancel", kwargs={"pk": appointment.id})

        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_claim(self):
        appointment = AppointmentFactory(tenant=self.tenant, start_time=at(14))
        url = reverse("appointment-claim", kwargs={"pk": appointment.id})

        response = self.client.post(
            url, {"technician_id": str(self.technician.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(str(response.data["technician"]), str(self.technician.id))

    def test_check_availability(self):
        AppointmentFactory(tenant=self.tenant, technician=self.technician, start_time=at(10))
        url = reverse("appointment-check-availability")

        response = self.client.get(
            url,
            {
                "start_time": at(10, 30).isoformat(),
                "duration": 60,
                "technician_id": str(self.technician.id),
            },
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["conflicts"][0]["resource_type"], "technician")

        response = self.client.get(
            url,
            {"start_time": at(11).isoformat(), "technician_id": str(self.technician.id)},
        )
        self.assertTrue(response.data["available"])

    def test_check_availability_requires_start_time(self):
        response = self.client.get(reverse("appointment-check-availability"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_available_slots(self):
        lift = LiftFactory(tenant=self.tenant)
        url = reverse("appointment-available-slots")

        response = self.client.get(
            url, {"date": "2030-05-06", "duration": 60, "lift_id": str(lift.id)}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["date"], "2030-05-06")
        self.assertTrue(response.data["has_availability"])
        self.assertEqual(len(response.data["available_slots"]), 21)
        self.assertEqual(
            set(response.data["available_slots"][0]),
            {"start_time", "end_time", "available", "reason"},
        )

    def test_available_slots_unknown_lift(self):
        response = self.client.get(
            reverse("appointment-available-slots"),
            {"date": "2030-05-06", "lift_id": str(LiftFactory().id)},
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")
        self.assertIn("message", response.data)
        self.assertNotIn("details", response.data)

    def test_check_availability_unknown_lift(self):
        response = self.client.get(
            reverse("appointment-check-availability"),
            {"start_time": at(10).isoformat(), "duration": 60, "lift_id": str(LiftFactory().id)},
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")

    def test_check_availability_duration_above_maximum(self):
        response = self.client.get(
            reverse("appointment-check-availability"),
            {"start_time": at(10).isoformat(), "duration": 1000000000000},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("duration", response.data["details"])

    def test_available_slots_duration_above_maximum(self):
        response = self.client.get(
            reverse("appointment-available-slots"),
            {"date": "2030-05-06", "duration": 1000000000000},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("duration", response.data["details"])
