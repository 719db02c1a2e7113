"""Property API views."""

from __future__ import annotations

import structlog
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.availability import AvailabilityChecker, RentalType
from apps.bookings.repositories import DjangoAvailabilityRepository

from .filters import PropertyFilterSet
from .models import Property, PropertyAvailability
from .serializers import (
    AvailabilityQuerySerializer,
    PropertyAvailabilitySerializer,
    PropertySerializer,
)

logger = structlog.get_logger(__name__)


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Read for everyone; writes by the owner and staff."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.is_authenticated

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        return obj.owner_id == user.id


class PropertyViewSet(viewsets.ModelViewSet):
    """Property listings with availability and conflict lookups."""

    queryset = Property.objects.select_related("owner").all()
    serializer_class = PropertySerializer
    permission_classes = [IsPropertyOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PropertyFilterSet
    ordering_fields = ["name", "nightly_rate", "monthly_rent", "created_at"]

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)

    def _checker_query(self, request):
        property_obj = self.get_object()
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return property_obj, query.validated_data

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        """
        AvailabilityResult for ?start_date=&end_date=&rental_type=Daily|Monthly.

        A conflicting range is still HTTP 200; is_available and reason carry
        the answer.
        """
        property_obj, params = self._checker_query(request)
        checker = AvailabilityChecker(DjangoAvailabilityRepository())
        result = checker.check_availability(
            property_obj.pk,
            params["start_date"],
            params["end_date"],
            RentalType(params["rental_type"]),
        )
        logger.info(
            "availability_checked",
            property_id=property_obj.pk,
            rental_type=result.rental_type.value,
            is_available=result.is_available,
            conflicts=len(result.conflicts),
        )
        return Response(result.to_dict())

    @action(detail=True, methods=["get"])
    def conflicts(self, request, pk=None):  # type: ignore
        """Sorted list of every booking, lease and block overlapping the range."""
        property_obj, params = self._checker_query(request)
        checker = AvailabilityChecker(DjangoAvailabilityRepository())
        conflicts = checker.get_conflicts(property_obj.pk, params["start_date"], params["end_date"])
        return Response([conflict.to_dict() for conflict in conflicts])


class PropertyAvailabilityViewSet(viewsets.ModelViewSet):
    """Owner-managed blocked periods and maintenance windows of one property."""

    serializer_class = PropertyAvailabilitySerializer
    queryset = PropertyAvailability.objects.select_related("property").all()
    permission_classes = [permissions.IsAuthenticated, IsPropertyOwnerOrAdmin]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        self.property_object = get_object_or_404(Property, pk=kwargs.get("property_id"))
        self.check_object_permissions(request, self.property_object)

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset().filter(property=self.property_object)
        start = self.request.query_params.get("start")
        end = self.request.query_params.get("end")
        if start:
            qs = qs.filter(end_date__gt=start)
        if end:
            qs = qs.filter(start_date__lt=end)
        return qs.order_by("start_date")

    def check_object_permissions(self, request, obj):  # type: ignore
        if isinstance(obj, PropertyAvailability):
            obj = obj.property
        super().check_object_permissions(request, obj)

    def perform_create(self, serializer):  # type: ignore
        period = serializer.save(property=self.property_object)
        logger.info(
            "property_period_blocked",
            property_id=self.property_object.pk,
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
            kind=period.kind,
        )
