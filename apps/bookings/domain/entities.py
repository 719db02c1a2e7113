"""
Booking Domain Entities

- Booking: Aggregate root of a short-stay reservation
- BookingStatus: Lifecycle states
- PaymentStatus: Payment state tracking
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import BookingStateError, InvalidArgumentError
from shared.domain.value_objects import DateRange, Money


class BookingStatus(str, Enum):
    """
    Booking lifecycle

    State transitions:
    - PENDING -> APPROVED (landlord approved the request)
    - PENDING, APPROVED -> UPCOMING (payment captured)
    - UPCOMING -> ACTIVE (start date reached)
    - ACTIVE -> COMPLETED (end date passed)
    - PENDING, APPROVED, UPCOMING -> CANCELLED
    """
    UPCOMING = 'Upcoming'
    ACTIVE = 'Active'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'
    PENDING = 'Pending'
    APPROVED = 'Approved'


class PaymentStatus(str, Enum):
    PENDING = 'Pending'
    PAID = 'Paid'
    REFUNDED = 'Refunded'
    FAILED = 'Failed'


CANCELLABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.UPCOMING)
RESCHEDULABLE_STATUSES = CANCELLABLE_STATUSES


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - The stay covers at least one night
    - The date range cannot change once the stay is ACTIVE
    - A refund never exceeds total_price
    """

    property_id: int
    renter_id: int
    dates: DateRange
    guests_count: int
    total_price: Money

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: str = ''

    cancellation_reason: str = ''
    refund_amount: Money | None = None
    cancelled_at: datetime | None = None

    def __post_init__(self):
        if self.dates.is_empty:
            raise InvalidArgumentError("A booking must cover at least one night")
        if self.guests_count < 1:
            raise InvalidArgumentError("Guests count must be at least 1")

    @property
    def start_date(self) -> date:
        return self.dates.start_date

    @property
    def end_date(self) -> date:
        return self.dates.end_date

    @property
    def nights(self) -> int:
        return len(self.dates)

    def _transition(self, allowed, target: BookingStatus):
        if self.status not in allowed:
            raise BookingStateError(
                f"Cannot move booking {self.id} from {self.status.value} to {target.value}"
            )
        old_status = self.status
        self.status = target
        return old_status

    def approve(self):
        from apps.bookings.domain.events import BookingApproved

        self._transition((BookingStatus.PENDING,), BookingStatus.APPROVED)
        self.add_event(BookingApproved(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            renter_id=self.renter_id,
        ))

    def confirm_payment(self, payment_reference: str):
        """PENDING/APPROVED -> UPCOMING once the gateway captured the payment"""
        from apps.bookings.domain.events import BookingConfirmed

        self._transition((BookingStatus.PENDING, BookingStatus.APPROVED), BookingStatus.UPCOMING)
        self.payment_status = PaymentStatus.PAID
        self.payment_reference = payment_reference
        self.add_event(BookingConfirmed(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            renter_id=self.renter_id,
            payment_reference=payment_reference,
        ))

    def start(self):
        from apps.bookings.domain.events import BookingStarted

        self._transition((BookingStatus.UPCOMING,), BookingStatus.ACTIVE)
        self.add_event(BookingStarted(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
        ))

    def complete(self):
        from apps.bookings.domain.events import BookingCompleted

        self._transition((BookingStatus.ACTIVE,), BookingStatus.COMPLETED)
        self.add_event(BookingCompleted(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            renter_id=self.renter_id,
        ))

    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def cancel(self, reason: str, refund_amount: Money, cancelled_at: datetime | None = None):
        """
        Cancel the booking and record the refund owed.

        The refund is clamped to the total price.
        """
        from apps.bookings.domain.events import BookingCancelled

        if refund_amount.currency != self.total_price.currency:
            raise InvalidArgumentError("Refund currency must match the booking currency")
        if self.total_price < refund_amount:
            refund_amount = self.total_price

        old_status = self._transition(CANCELLABLE_STATUSES, BookingStatus.CANCELLED)
        self.cancellation_reason = reason
        self.refund_amount = refund_amount
        self.cancelled_at = cancelled_at or datetime.now()
        if self.payment_status == PaymentStatus.PAID and refund_amount.amount > 0:
            self.payment_status = PaymentStatus.REFUNDED

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            renter_id=self.renter_id,
            reason=reason,
            refund_amount=refund_amount.amount,
            currency=refund_amount.currency,
            old_status=old_status.value,
        ))

    def reschedule(self, new_dates: DateRange):
        if self.status not in RESCHEDULABLE_STATUSES:
            raise BookingStateError(
                f"Dates of booking {self.id} are fixed once it is {self.status.value}"
            )
        if new_dates.is_empty:
            raise InvalidArgumentError("A booking must cover at least one night")
        self.dates = new_dates

    def __str__(self):
        return f"Booking #{self.id} ({self.dates}, {self.status.value})"
