"""
Booking Domain Events

Published by the unit of work after the transaction commits; handlers
in apps.bookings.handlers turn them into Celery tasks.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Triggers:
    - Confirmation e-mail to the renter
    - Notice to the landlord
    """
    booking_id: int | None
    property_id: int
    renter_id: int
    start_date: date
    end_date: date
    total_price: Decimal
    currency: str


@dataclass(kw_only=True)
class BookingApproved(DomainEvent):
    booking_id: int | None
    property_id: int
    renter_id: int


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """Payment captured (-> UPCOMING)"""
    booking_id: int | None
    property_id: int
    renter_id: int
    payment_reference: str


@dataclass(kw_only=True)
class BookingStarted(DomainEvent):
    booking_id: int | None
    property_id: int


@dataclass(kw_only=True)
class BookingCompleted(DomainEvent):
    """
    Triggers:
    - Review request to the renter
    """
    booking_id: int | None
    property_id: int
    renter_id: int


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Triggers:
    - Refund through the payment gateway (when refund_amount > 0)
    - Notice to renter and landlord
    """
    booking_id: int | None
    property_id: int
    renter_id: int
    reason: str
    refund_amount: Decimal
    currency: str
    old_status: str
