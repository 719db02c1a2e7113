"""URL routing for the properties domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PropertyAvailabilityViewSet, PropertyViewSet

router = DefaultRouter()
router.register(r"", PropertyViewSet, basename="property")

blocked_list = PropertyAvailabilityViewSet.as_view({"get": "list", "post": "create"})
blocked_detail = PropertyAvailabilityViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)

urlpatterns = [
    path("", include(router.urls)),
    path(
        "<int:property_id>/blocked-periods/",
        blocked_list,
        name="property-blocked-period-list",
    ),
    path(
        "<int:property_id>/blocked-periods/<int:pk>/",
        blocked_detail,
        name="property-blocked-period-detail",
    ),
]
