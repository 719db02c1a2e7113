"""E-mail notifications for bookings and leases."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.tenants.models import Tenant

logger = logging.getLogger(__name__)


def _display_name(user) -> str:
    return user.get_full_name() or user.get_username()


def send_email_notification(recipient_email: str, subject: str, html_message: str) -> bool:
    """
    Send one HTML e-mail with a plain-text alternative.

    Returns False when the recipient has no address or the backend fails;
    the failure is logged and the caller decides whether to retry.
    """
    if not recipient_email:
        logger.warning(f"Skipping e-mail without recipient: {subject}")
        return False

    try:
        send_mail(
            subject=subject,
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False

    logger.info(f"Email sent to {recipient_email}: {subject}")
    return True


def send_booking_created_email(booking: "Booking") -> bool:
    subject = f"Booking #{booking.pk} received"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {_display_name(booking.renter)}!</h2>
        <p>Your booking for <strong>{booking.property.name}</strong> was received.</p>
        <ul>
            <li><strong>Status:</strong> {booking.get_status_display()}</li>
            <li><strong>Check-in:</strong> {booking.start_date:%d.%m.%Y}</li>
            <li><strong>Check-out:</strong> {booking.end_date:%d.%m.%Y}</li>
            <li><strong>Nights:</strong> {booking.total_nights}</li>
            <li><strong>Total:</strong> {booking.total_price} {booking.currency}</li>
            <li><strong>Security deposit:</strong> {booking.security_deposit} {booking.currency}</li>
        </ul>
        <p>eRents</p>
    </body>
    </html>
    """
    return send_email_notification(booking.renter.email, subject, html_message)


def send_new_booking_notice_to_owner(booking: "Booking") -> bool:
    owner = booking.property.owner
    subject = f"New booking for {booking.property.name}"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {_display_name(owner)}!</h2>
        <p>{_display_name(booking.renter)} booked <strong>{booking.property.name}</strong>
        from {booking.start_date:%d.%m.%Y} to {booking.end_date:%d.%m.%Y}
        for {booking.guests_count} guest(s).</p>
        <p>eRents</p>
    </body>
    </html>
    """
    return send_email_notification(owner.email, subject, html_message)


def send_booking_cancelled_email(booking: "Booking") -> bool:
    subject = f"Booking #{booking.pk} cancelled"
    refund = booking.refund_amount or 0
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {_display_name(booking.renter)}!</h2>
        <p>Your booking for <strong>{booking.property.name}</strong>
        ({booking.start_date:%d.%m.%Y} - {booking.end_date:%d.%m.%Y}) was cancelled.</p>
        <ul>
            <li><strong>Reason:</strong> {booking.cancellation_reason or "-"}</li>
            <li><strong>Refund:</strong> {refund} {booking.currency}</li>
        </ul>
        <p>eRents</p>
    </body>
    </html>
    """
    return send_email_notification(booking.renter.email, subject, html_message)


def send_lease_expiring_email(tenant: "Tenant", end_date, remaining_days: int) -> bool:
    subject = f"Your lease at {tenant.property.name} ends on {end_date:%d.%m.%Y}"
    html_message = f"""
    <html>
    <body>
        <h2>Hello, {_display_name(tenant.user)}!</h2>
        <p>Your lease at <strong>{tenant.property.name}</strong> ends in
        {remaining_days} day(s), on {end_date:%d.%m.%Y}.</p>
        <p>Contact your landlord if you would like to extend it.</p>
        <p>eRents</p>
    </body>
    </html>
    """
    return send_email_notification(tenant.user.email, subject, html_message)
