# apps/workorderapp/tests/test_views.py
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.liftapp.models import LiftUsage
from apps.liftapp.tests.factories import LiftFactory
from apps.techniciansapp.tests.factories import TechnicianFactory
from apps.tenantsapp.tests.factories import TenantFactory


class WorkOrderViewSetTest(APITestCase):
    """Test cases for the work order endpoints"""

    def setUp(self):
        self.tenant = TenantFactory()
        self.client = APIClient()
        self.client.credentials(HTTP_X_TENANT_ID=str(self.tenant.id))

    def _create(self, **data):
        data.setdefault("status", "scheduled")
        return self.client.post(reverse("work-order-list"), data, format="json")

    def test_create_numbers_the_order(self):
        response = self._create(vehicle_id="VAN-1", estimated_hours="1.50")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["number"], "WO-000001")

    def test_create_rejects_late_status(self):
        response = self._create(status="completed")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_rejects_other_tenant_technician(self):
        response = self._create(technician=str(TechnicianFactory().id))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_lifecycle_drives_lift(self):
        lift = LiftFactory(tenant=self.tenant)
        work_order_id = self._create().data["id"]
        self.client.post(
            reverse("elevator-reserve", kwargs={"pk": lift.id}),
            {"work_order_id": work_order_id},
            format="json",
        )

        response = self.client.post(reverse("work-order-start", kwargs={"pk": work_order_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "in_progress")
        self.assertIsNotNone(LiftUsage.objects.get(lift=lift).started_at)

        response = self.client.post(reverse("work-order-complete", kwargs={"pk": work_order_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(LiftUsage.objects.get(lift=lift).end_time)

        response = self.client.post(reverse("work-order-cancel", kwargs={"pk": work_order_id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_status_transition")
