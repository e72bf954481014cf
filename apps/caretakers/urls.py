"""Caretaker routes: /api/v1/caretakers/ and the weekend rota editor."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import CaretakerViewSet, WeekendAssignmentsView

router = DefaultRouter()
router.register(r"", CaretakerViewSet, basename="caretaker")

urlpatterns = [
    path("weekends/<str:weekend_date>/", WeekendAssignmentsView.as_view(), name="weekend-assignments"),
    path("", include(router.urls)),
]
