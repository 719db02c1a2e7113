"""
Booking Command Handlers

Use cases of the booking domain. Each handler runs inside one
DjangoUnitOfWork so that domain events leave the process only after
the booking row is committed.

Commands:
- QuoteBookingCommand: Price a stay without persisting anything
- CreateBookingCommand: Check availability, price and store a booking
- ApproveBookingCommand: Landlord approves a pending request
- ConfirmPaymentCommand: Payment captured, booking becomes upcoming
- StartBookingCommand: Stay begins
- CompleteBookingCommand: Stay is over
- CancelBookingCommand: Cancel with a refund from the property's policy
"""

from dataclasses import dataclass
from datetime import date, datetime
import logging

from django.utils import timezone

from apps.bookings.domain.availability import AvailabilityChecker, AvailabilityResult, RentalType
from apps.bookings.domain.cancellation import UserRole, calculate_refund_amount
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.pricing import PriceBreakdown, calculate_total_booking_amount
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    BookingNotFoundError,
    BookingStateError,
    DomainError,
    InvalidArgumentError,
)
from shared.domain.value_objects import DateRange, Money

logger = logging.getLogger(__name__)


class BookingUnavailableError(DomainError):
    """The property cannot take the requested stay; `result` says why"""

    def __init__(self, result: AvailabilityResult):
        super().__init__(result.reason)
        self.result = result


# ===== Commands =====

@dataclass
class QuoteBookingCommand:
    property_id: int
    start_date: date
    end_date: date
    guests_count: int


@dataclass
class CreateBookingCommand:
    """
    Request for a short stay.

    A non-empty payment_reference means the gateway already captured the
    payment, so the booking is stored as Upcoming right away.
    """
    property_id: int
    renter_id: int
    start_date: date
    end_date: date
    guests_count: int
    payment_reference: str = ''


@dataclass
class ApproveBookingCommand:
    booking_id: int


@dataclass
class ConfirmPaymentCommand:
    booking_id: int
    payment_reference: str


@dataclass
class StartBookingCommand:
    booking_id: int


@dataclass
class CompleteBookingCommand:
    booking_id: int


@dataclass
class CancelBookingCommand:
    booking_id: int
    user_role: UserRole
    reason: str = ''
    cancelled_at: datetime | None = None


def _requested_stay(start_date: date, end_date: date, guests_count: int) -> DateRange:
    dates = DateRange(start_date, end_date)
    if dates.is_empty:
        raise InvalidArgumentError("end_date must be after start_date")
    if guests_count < 1:
        raise InvalidArgumentError("guests_count must be at least 1")
    return dates


def _check_capacity(profile, guests_count: int):
    if guests_count > profile.max_guests:
        raise InvalidArgumentError(
            f"Guests count ({guests_count}) exceeds property capacity ({profile.max_guests})"
        )


def _price(profile, dates: DateRange, guests_count: int) -> PriceBreakdown:
    return calculate_total_booking_amount(
        nightly_rate=profile.nightly_rate,
        number_of_nights=len(dates),
        number_of_guests=guests_count,
        property_type=profile.property_type,
        property_location=profile.location,
        currency=profile.currency,
    )


# ===== Command Handlers =====

class QuoteBookingHandler:
    """Price breakdown for a prospective stay; nothing is written"""

    def __init__(self, property_repo):
        self.property_repo = property_repo

    def handle(self, command: QuoteBookingCommand) -> PriceBreakdown:
        dates = _requested_stay(command.start_date, command.end_date, command.guests_count)
        profile = self.property_repo.get(command.property_id)
        _check_capacity(profile, command.guests_count)
        return _price(profile, dates, command.guests_count)


class CreateBookingHandler:
    """
    Double booking prevention:
    1. Open a transaction and lock the property row (SELECT FOR UPDATE),
       which serializes concurrent requests for the same property
    2. Ask the AvailabilityChecker for a Daily rental over the range
    3. Price the stay and store the booking with its breakdown
    4. Publish BookingCreated after commit
    """

    def __init__(self, booking_repo, property_repo, availability_repo):
        self.booking_repo = booking_repo
        self.property_repo = property_repo
        self.checker = AvailabilityChecker(availability_repo)

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Raises:
            InvalidArgumentError: bad dates or guest count
            PropertyNotFoundError: unknown property
            BookingUnavailableError: conflicts or unsupported rental type
        """
        dates = _requested_stay(command.start_date, command.end_date, command.guests_count)
        logger.info(
            f"Creating booking for property {command.property_id}, "
            f"renter {command.renter_id}, dates {dates}"
        )

        with DjangoUnitOfWork() as uow:
            profile = self.property_repo.get(command.property_id, lock=True)
            _check_capacity(profile, command.guests_count)

            result = self.checker.check_availability(
                command.property_id, dates.start_date, dates.end_date, RentalType.DAILY
            )
            if not result.is_available:
                raise BookingUnavailableError(result)

            price = _price(profile, dates, command.guests_count)
            booking = Booking(
                property_id=command.property_id,
                renter_id=command.renter_id,
                dates=dates,
                guests_count=command.guests_count,
                total_price=Money(price.total_price, profile.currency),
            )
            self.booking_repo.add(booking, price, profile.nightly_rate)

            booking.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                property_id=booking.property_id,
                renter_id=booking.renter_id,
                start_date=booking.start_date,
                end_date=booking.end_date,
                total_price=booking.total_price.amount,
                currency=booking.total_price.currency,
            ))
            if command.payment_reference:
                booking.confirm_payment(command.payment_reference)
                self.booking_repo.save(booking)

            uow.collect_events(booking)

        logger.info(f"Booking #{booking.id} created ({booking.status.value}, {booking.total_price})")
        return booking


class _BookingTransitionHandler:
    """Load a booking under lock, apply one transition, save"""

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def apply(self, booking: Booking, command):
        raise NotImplementedError

    def handle(self, command) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            if booking is None:
                raise BookingNotFoundError(command.booking_id)

            self.apply(booking, command)

            self.booking_repo.save(booking)
            uow.collect_events(booking)

        logger.info(f"Booking #{booking.id} is now {booking.status.value}")
        return booking


class ApproveBookingHandler(_BookingTransitionHandler):
    def apply(self, booking, command: ApproveBookingCommand):
        booking.approve()


class ConfirmPaymentHandler(_BookingTransitionHandler):
    def apply(self, booking, command: ConfirmPaymentCommand):
        booking.confirm_payment(command.payment_reference)


class StartBookingHandler(_BookingTransitionHandler):
    def apply(self, booking, command: StartBookingCommand):
        booking.start()


class CompleteBookingHandler(_BookingTransitionHandler):
    def apply(self, booking, command: CompleteBookingCommand):
        booking.complete()


class CancelBookingHandler(_BookingTransitionHandler):
    """
    Refund = total price x percentage from the property's cancellation
    policy and the canceller's role, rounded to cents.
    """

    def __init__(self, booking_repo, property_repo):
        super().__init__(booking_repo)
        self.property_repo = property_repo

    def apply(self, booking, command: CancelBookingCommand):
        if not booking.can_be_cancelled():
            raise BookingStateError(
                f"Booking {booking.id} cannot be cancelled. "
                f"Current status: {booking.status.value}"
            )

        cancelled_at = command.cancelled_at or timezone.localtime()
        profile = self.property_repo.get(booking.property_id)
        refund = calculate_refund_amount(
            booking, cancelled_at, command.user_role, profile.cancellation_policy
        )
        logger.info(
            f"Cancelling booking #{booking.id} as {command.user_role.value} "
            f"under {profile.cancellation_policy.value} policy, refund {refund}"
        )
        booking.cancel(command.reason, Money(refund, booking.total_price.currency), cancelled_at)
