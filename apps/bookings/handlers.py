"""
Domain event handlers for bookings.

They run after commit (see DjangoUnitOfWork) and only enqueue Celery
tasks, so the request that produced the event never waits on e-mail.
"""

import logging

from apps.bookings.domain.events import BookingCancelled, BookingCreated
from shared.application.message_bus import MessageBus

logger = logging.getLogger(__name__)


def queue_booking_created_notification(event: BookingCreated):
    from apps.bookings.tasks import notify_booking_created

    notify_booking_created.delay(event.booking_id)


def queue_booking_cancelled_notification(event: BookingCancelled):
    from apps.bookings.tasks import notify_booking_cancelled

    notify_booking_cancelled.delay(event.booking_id)


def register(bus: MessageBus):
    bus.subscribe(BookingCreated, queue_booking_created_notification)
    bus.subscribe(BookingCancelled, queue_booking_cancelled_notification)
    logger.debug("Booking event handlers registered")
