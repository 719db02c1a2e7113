"""API views for the booking domain."""

from __future__ import annotations

import structlog
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.command_handlers import (
    ApproveBookingCommand,
    ApproveBookingHandler,
    CancelBookingCommand,
    CancelBookingHandler,
    ConfirmPaymentCommand,
    ConfirmPaymentHandler,
    CreateBookingCommand,
    CreateBookingHandler,
    QuoteBookingCommand,
    QuoteBookingHandler,
)
from apps.bookings.domain.cancellation import (
    UserRole,
    calculate_refund_amount,
    calculate_refund_percentage,
    days_until_start,
)
from apps.properties.repositories import DjangoPropertyRepository

from .filters import BookingFilterSet
from .models import Booking
from .repositories import DjangoAvailabilityRepository, DjangoBookingRepository
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingQuoteSerializer,
    BookingSerializer,
)

logger = structlog.get_logger(__name__)


def _is_staff(user) -> bool:
    return getattr(user, "is_staff", False) or getattr(user, "is_superuser", False)


def cancelling_role(user, booking: Booking) -> UserRole:
    """
    The property owner cancels as Landlord, the renter as Tenant.
    Anyone else may not cancel.
    """
    if booking.property.owner_id == user.id:
        return UserRole.LANDLORD
    if booking.renter_id == user.id:
        return UserRole.TENANT
    raise PermissionDenied("Only the renter or the property owner can cancel this booking.")


class IsBookingStakeholder(permissions.BasePermission):
    """Renter, property owner and staff have access to a booking."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if _is_staff(user):
            return True
        return obj.renter_id == user.id or obj.property.owner_id == user.id


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and manage bookings."""

    queryset = Booking.objects.select_related("property", "renter", "property__owner").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["start_date", "created_at", "total_price"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "quote":
            return BookingQuoteSerializer
        if self.action == "cancel":
            return BookingCancelSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if _is_staff(user):
            return qs
        return qs.filter(Q(renter=user) | Q(property__owner=user))

    def _booking_response(self, booking_id: int, status_code=status.HTTP_200_OK) -> Response:
        booking = self.get_queryset().get(pk=booking_id)
        serializer = BookingSerializer(booking, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        handler = CreateBookingHandler(
            DjangoBookingRepository(),
            DjangoPropertyRepository(),
            DjangoAvailabilityRepository(),
        )
        booking = handler.handle(CreateBookingCommand(renter_id=request.user.id, **serializer.validated_data))
        logger.info("booking_created", booking_id=booking.id, renter_id=request.user.id)
        return self._booking_response(booking.id, status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], permission_classes=[permissions.AllowAny])
    def quote(self, request):  # type: ignore
        """Full price breakdown for a prospective stay."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        breakdown = QuoteBookingHandler(DjangoPropertyRepository()).handle(
            QuoteBookingCommand(**serializer.validated_data)
        )
        return Response(breakdown.to_dict())

    @action(detail=True, methods=["get"], url_path="refund-preview")
    def refund_preview(self, request, pk=None):  # type: ignore
        """Refund the current user would get by cancelling now."""
        booking: Booking = self.get_object()  # type: ignore
        role = cancelling_role(request.user, booking)
        policy = booking.property.cancellation_policy
        now = timezone.localtime()

        days = days_until_start(booking.start_date, now)
        percentage = calculate_refund_percentage(days, role, policy)
        refund = calculate_refund_amount(booking, now, role, policy)
        return Response(
            {
                "booking_id": booking.pk,
                "user_role": role.value,
                "cancellation_policy": policy,
                "days_until_start": f"{days:.2f}",
                "refund_percentage": str(percentage),
                "refund_amount": f"{refund:.2f}",
                "total_price": f"{booking.total_price:.2f}",
                "currency": booking.currency,
            }
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        role = cancelling_role(request.user, booking)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = CancelBookingHandler(DjangoBookingRepository(), DjangoPropertyRepository())
        handler.handle(
            CancelBookingCommand(
                booking_id=booking.pk,
                user_role=role,
                reason=serializer.validated_data["reason"],
            )
        )
        logger.info("booking_cancelled", booking_id=booking.pk, role=role.value)
        return self._booking_response(booking.pk)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        if booking.property.owner_id != request.user.id and not _is_staff(request.user):
            raise PermissionDenied("Only the property owner can approve a booking.")

        ApproveBookingHandler(DjangoBookingRepository()).handle(ApproveBookingCommand(booking_id=booking.pk))
        return self._booking_response(booking.pk)

    @action(
        detail=True,
        methods=["post"],
        url_path="confirm-payment",
        permission_classes=[permissions.IsAdminUser],
    )
    def confirm_payment(self, request, pk=None):  # type: ignore
        """Record a payment captured by the gateway (staff only)."""
        booking: Booking = self.get_object()  # type: ignore
        reference = str(request.data.get("payment_reference", "")).strip()
        if not reference:
            return Response(
                {"payment_reference": ["This field is required."]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        ConfirmPaymentHandler(DjangoBookingRepository()).handle(
            ConfirmPaymentCommand(booking_id=booking.pk, payment_reference=reference)
        )
        return self._booking_response(booking.pk)
