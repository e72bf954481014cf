"""Visit routes: /api/v1/visits/{contractors,contractor-visits,partners,guest-visits}/."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ContractorViewSet, ContractorVisitViewSet, GuestVisitViewSet, PartnerViewSet

router = DefaultRouter()
router.register(r"contractors", ContractorViewSet, basename="contractor")
router.register(r"contractor-visits", ContractorVisitViewSet, basename="contractor-visit")
router.register(r"partners", PartnerViewSet, basename="partner")
router.register(r"guest-visits", GuestVisitViewSet, basename="guest-visit")

urlpatterns = [
    path("", include(router.urls)),
]
