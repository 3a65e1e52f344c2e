"""API URL configuration for Bebek Süt Takip.

All API endpoints are prefixed with /api/v1/.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from analytics.views import AnalyticsViewSet
from babies.api import BabyViewSet
from feedings.api import FeedingRecordViewSet
from reminders.api import ReminderSettingView

# Main router for top-level resources
router = DefaultRouter()
router.register("babies", BabyViewSet, basename="baby")
router.register("feeding-records", FeedingRecordViewSet, basename="feeding-record")

urlpatterns = [
    path("", include(router.urls)),
    # Feeding records nested under a baby
    path(
        "babies/<uuid:baby_pk>/feeding-records/",
        FeedingRecordViewSet.as_view({"get": "list", "post": "create"}),
        name="baby-feeding-records-list",
    ),
    path(
        "babies/<uuid:baby_pk>/feeding-records/<uuid:pk>/",
        FeedingRecordViewSet.as_view(
            {
                "get": "retrieve",
                "put": "update",
                "patch": "partial_update",
                "delete": "destroy",
            }
        ),
        name="baby-feeding-records-detail",
    ),
    # Analytics endpoints (read-only)
    path(
        "analytics/babies/<uuid:pk>/feeding-stats/",
        AnalyticsViewSet.as_view({"get": "feeding_stats"}),
        name="analytics-feeding-stats",
    ),
    path(
        "analytics/babies/<uuid:pk>/today-summary/",
        AnalyticsViewSet.as_view({"get": "today_summary"}),
        name="analytics-today-summary",
    ),
    # Reminder toggle
    path("reminder/", ReminderSettingView.as_view(), name="reminder"),
]
