"""Celery tasks for the booking domain."""

from __future__ import annotations

import structlog
from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.application.command_handlers import (
    CompleteBookingCommand,
    CompleteBookingHandler,
    StartBookingCommand,
    StartBookingHandler,
)
from apps.bookings.repositories import DjangoBookingRepository
from shared.domain.exceptions import DomainError

from .models import Booking

logger = structlog.get_logger(__name__)


# ============================================================================
# NOTIFICATION TASKS (queued by apps.bookings.handlers after commit)
# ============================================================================

@shared_task(name="bookings.notify_booking_created")
def notify_booking_created(booking_id: int) -> bool:
    """Confirmation to the renter and a notice to the owner."""
    from apps.notifications.services import (
        send_booking_created_email,
        send_new_booking_notice_to_owner,
    )

    booking = (
        Booking.objects.select_related("renter", "property", "property__owner")
        .filter(pk=booking_id)
        .first()
    )
    if booking is None:
        logger.error("booking_not_found", booking_id=booking_id, notification="created")
        return False

    renter_sent = send_booking_created_email(booking)
    owner_sent = send_new_booking_notice_to_owner(booking)
    logger.info(
        "booking_created_notified",
        booking_id=booking_id,
        renter_sent=renter_sent,
        owner_sent=owner_sent,
    )
    return renter_sent


@shared_task(name="bookings.notify_booking_cancelled")
def notify_booking_cancelled(booking_id: int) -> bool:
    from apps.notifications.services import send_booking_cancelled_email

    booking = Booking.objects.select_related("renter", "property").filter(pk=booking_id).first()
    if booking is None:
        logger.error("booking_not_found", booking_id=booking_id, notification="cancelled")
        return False

    sent = send_booking_cancelled_email(booking)
    logger.info(
        "booking_cancelled_notified",
        booking_id=booking_id,
        refund_amount=str(booking.refund_amount or 0),
        sent=sent,
    )
    return sent


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="bookings.update_booking_statuses")
def update_booking_statuses() -> dict[str, int]:
    """
    Move bookings along the calendar.

    Upcoming -> Active once the start date is reached.
    Active -> Completed once the end (check-out) date is reached.

    Returns:
        dict: {"started": n, "completed": n}
    """
    today = timezone.localdate()
    repo = DjangoBookingRepository()
    start_handler = StartBookingHandler(repo)
    complete_handler = CompleteBookingHandler(repo)

    to_start = Booking.objects.filter(
        status=Booking.Status.UPCOMING,
        start_date__lte=today,
    ).values_list("pk", flat=True)
    started = 0
    for booking_id in list(to_start):
        try:
            start_handler.handle(StartBookingCommand(booking_id=booking_id))
        except DomainError as e:
            logger.warning("booking_start_skipped", booking_id=booking_id, error=str(e))
            continue
        started += 1

    # Bookings started above in the same run are picked up here when
    # their check-out date has already passed.
    to_complete = Booking.objects.filter(
        status=Booking.Status.ACTIVE,
        end_date__lte=today,
    ).values_list("pk", flat=True)
    completed = 0
    for booking_id in list(to_complete):
        try:
            complete_handler.handle(CompleteBookingCommand(booking_id=booking_id))
        except DomainError as e:
            logger.warning("booking_complete_skipped", booking_id=booking_id, error=str(e))
            continue
        completed += 1

    if started or completed:
        logger.info("booking_statuses_updated", started=started, completed=completed)

    return {"started": started, "completed": completed}
