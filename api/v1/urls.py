# api/v1/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.bookingapp.views import AppointmentViewSet
from apps.liftapp.views import LiftViewSet
from apps.quoteapp.views import QuoteViewSet
from apps.techniciansapp.views import TechnicianViewSet
from apps.workorderapp.views import WorkOrderViewSet

# Create a router for v1 API endpoints
router = DefaultRouter()

router.register(r"appointments", AppointmentViewSet, basename="appointment")
router.register(r"elevators", LiftViewSet, basename="elevator")
router.register(r"technicians", TechnicianViewSet, basename="technician")
router.register(r"work-orders", WorkOrderViewSet, basename="work-order")
router.register(r"quotes", QuoteViewSet, basename="quote")

urlpatterns = [
    path("", include(router.urls)),
]
