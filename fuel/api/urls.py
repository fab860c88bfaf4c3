# fuel/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from fuel.api.views import FuelPriceViewSet

router = DefaultRouter()
router.register("prices", FuelPriceViewSet, basename="fuel-price")

urlpatterns = [
    path("", include(router.urls)),
]
