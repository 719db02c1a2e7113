"""Tests for booking Celery tasks and after-commit notifications."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings.application.command_handlers import CancelBookingCommand, CancelBookingHandler
from apps.bookings.domain.cancellation import UserRole
from apps.bookings.models import Booking
from apps.bookings.repositories import DjangoBookingRepository
from apps.bookings.tasks import notify_booking_cancelled, notify_booking_created, update_booking_statuses
from apps.properties.models import Property
from apps.properties.repositories import DjangoPropertyRepository
from shared.domain.exceptions import BookingStateError

pytestmark = pytest.mark.django_db


@pytest.fixture
def renter(django_user_model):
    return django_user_model.objects.create_user(username="lejla", email="lejla@example.com", password="pass12345")


@pytest.fixture
def rental(django_user_model):
    owner = django_user_model.objects.create_user(username="haris", email="haris@example.com", password="pass12345")
    return Property.objects.create(
        owner=owner,
        name="Studio Marijin Dvor",
        location="Sarajevo",
        nightly_rate=Decimal("60.00"),
        max_guests=2,
    )


@pytest.fixture
def make_booking(rental, renter):
    def make(start_offset: int, nights: int, status: str, **extra) -> Booking:
        today = timezone.localdate()
        return Booking.objects.create(
            property=rental,
            renter=renter,
            start_date=today + timedelta(days=start_offset),
            end_date=today + timedelta(days=start_offset + nights),
            total_price=Decimal("300.00"),
            status=status,
            **extra,
        )

    return make


def test_update_booking_statuses_moves_bookings_along(make_booking):
    starting = make_booking(-1, 3, Booking.Status.UPCOMING)
    already_over = make_booking(-5, 4, Booking.Status.UPCOMING)
    checking_out = make_booking(-3, 3, Booking.Status.ACTIVE)
    future = make_booking(5, 2, Booking.Status.UPCOMING)
    unpaid = make_booking(-1, 3, Booking.Status.PENDING)

    result = update_booking_statuses()

    assert result == {"started": 2, "completed": 2}
    statuses = {b.pk: b.status for b in Booking.objects.all()}
    assert statuses[starting.pk] == Booking.Status.ACTIVE
    assert statuses[already_over.pk] == Booking.Status.COMPLETED
    assert statuses[checking_out.pk] == Booking.Status.COMPLETED
    assert statuses[future.pk] == Booking.Status.UPCOMING
    assert statuses[unpaid.pk] == Booking.Status.PENDING


def test_update_booking_statuses_is_idempotent(make_booking):
    make_booking(-1, 3, Booking.Status.UPCOMING)
    update_booking_statuses()

    assert update_booking_statuses() == {"started": 0, "completed": 0}


def test_notify_booking_created_mails_renter_and_owner(make_booking, mailoutbox):
    booking = make_booking(10, 2, Booking.Status.PENDING)

    assert notify_booking_created(booking.pk) is True

    assert sorted(m.to[0] for m in mailoutbox) == ["haris@example.com", "lejla@example.com"]
    assert f"Booking #{booking.pk} received" in [m.subject for m in mailoutbox]


def test_notify_for_missing_booking_returns_false(mailoutbox):
    assert notify_booking_created(999) is False
    assert notify_booking_cancelled(999) is False
    assert mailoutbox == []


def test_renter_without_email_is_skipped(make_booking, renter, mailoutbox):
    renter.email = ""
    renter.save()
    booking = make_booking(10, 2, Booking.Status.PENDING)

    assert notify_booking_created(booking.pk) is False
    assert [m.to[0] for m in mailoutbox] == ["haris@example.com"]


def test_cancellation_publishes_notification_after_commit(
    make_booking, mailoutbox, django_capture_on_commit_callbacks
):
    booking = make_booking(20, 3, Booking.Status.UPCOMING, payment_status=Booking.PaymentStatus.PAID)
    handler = CancelBookingHandler(DjangoBookingRepository(), DjangoPropertyRepository())
    cancelled_at = datetime.combine(booking.start_date, datetime.min.time(), tzinfo=dt_timezone.utc) - timedelta(days=10)

    with django_capture_on_commit_callbacks(execute=True):
        handler.handle(
            CancelBookingCommand(
                booking_id=booking.pk,
                user_role=UserRole.LANDLORD,
                reason="Water damage",
                cancelled_at=cancelled_at,
            )
        )

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CANCELLED
    assert booking.payment_status == Booking.PaymentStatus.REFUNDED
    # Standard policy, landlord, 10 days ahead: 300 * 0.47
    assert booking.refund_amount == Decimal("141.00")
    assert [m.subject for m in mailoutbox] == [f"Booking #{booking.pk} cancelled"]
    assert "Water damage" in mailoutbox[0].body


def test_nothing_is_published_when_cancellation_is_rejected(
    make_booking, mailoutbox, django_capture_on_commit_callbacks
):
    booking = make_booking(-1, 3, Booking.Status.ACTIVE)
    handler = CancelBookingHandler(DjangoBookingRepository(), DjangoPropertyRepository())

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(BookingStateError, match="cannot be cancelled"):
            handler.handle(CancelBookingCommand(booking_id=booking.pk, user_role=UserRole.TENANT))

    assert callbacks == []
    assert mailoutbox == []
