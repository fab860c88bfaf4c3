# sales/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.views import DailySaleViewSet, SafedropViewSet

router = DefaultRouter()
router.register("daily-sales", DailySaleViewSet, basename="daily-sale")
router.register("safedrops", SafedropViewSet, basename="safedrop")

urlpatterns = [
    path("", include(router.urls)),
]
