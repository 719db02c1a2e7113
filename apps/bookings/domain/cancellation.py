"""
Cancellation Refunds

Refund curves are data: each policy maps to an ordered threshold table
of (minimum days before start, refund percentage) with a floor
percentage for anything below the last threshold.

Landlord-initiated cancellations follow the property's policy and pay a
3 percentage point processing fee (except under Emergency). Tenant
cancellations follow one fixed curve regardless of policy.
"""

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from enum import Enum
from typing import Tuple

from shared.domain.exceptions import InvalidArgumentError
from shared.domain.value_objects import Money, round_money, to_decimal

SECONDS_PER_DAY = Decimal(86400)
PROCESSING_FEE = Decimal('0.03')


class CancellationPolicy(str, Enum):
    STANDARD = 'Standard'
    FLEXIBLE = 'Flexible'
    EMERGENCY = 'Emergency'
    STRICT = 'Strict'


class UserRole(str, Enum):
    LANDLORD = 'Landlord'
    TENANT = 'Tenant'
    USER = 'User'


@dataclass(frozen=True)
class RefundCurve:
    """Step function of days-until-start; thresholds in descending order."""
    steps: Tuple[Tuple[int, Decimal], ...]
    floor: Decimal

    def percentage(self, days_until_start) -> Decimal:
        for min_days, pct in self.steps:
            if days_until_start >= min_days:
                return pct
        return self.floor


LANDLORD_REFUND_CURVES = {
    CancellationPolicy.EMERGENCY: RefundCurve(steps=(), floor=Decimal('1.00')),
    CancellationPolicy.FLEXIBLE: RefundCurve(
        steps=((7, Decimal('1.00')), (3, Decimal('0.75')), (1, Decimal('0.50'))),
        floor=Decimal('0.25'),
    ),
    CancellationPolicy.STANDARD: RefundCurve(
        steps=((14, Decimal('1.00')), (7, Decimal('0.50')), (3, Decimal('0.25'))),
        floor=Decimal('0.00'),
    ),
    CancellationPolicy.STRICT: RefundCurve(steps=(), floor=Decimal('0.00')),
}

TENANT_REFUND_CURVE = RefundCurve(
    steps=((7, Decimal('1.00')), (3, Decimal('0.50')), (1, Decimal('0.25'))),
    floor=Decimal('0.00'),
)

TENANT_ROLES = (UserRole.TENANT, UserRole.USER)


def _coerce_policy(policy) -> CancellationPolicy:
    try:
        return CancellationPolicy(policy)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown cancellation policy: {policy!r}") from exc


def _coerce_role(user_role) -> UserRole | None:
    try:
        return UserRole(user_role)
    except ValueError:
        return None


def days_until_start(start_date, cancellation_date: datetime) -> Decimal:
    """
    Fractional days from the cancellation moment to midnight of the
    start date. Negative once the stay has begun.
    """
    if not isinstance(cancellation_date, datetime):
        raise InvalidArgumentError("cancellation_date must be a datetime")
    start = datetime.combine(start_date, time.min, tzinfo=cancellation_date.tzinfo)
    delta = start - cancellation_date
    return Decimal(delta.days) + Decimal(delta.seconds * 10**6 + delta.microseconds) / (SECONDS_PER_DAY * 10**6)


def calculate_refund_percentage(days_before_start, user_role, policy) -> Decimal:
    policy = _coerce_policy(policy)
    role = _coerce_role(user_role)

    if role is UserRole.LANDLORD:
        percentage = LANDLORD_REFUND_CURVES[policy].percentage(days_before_start)
        if policy is not CancellationPolicy.EMERGENCY and percentage > 0:
            percentage = max(Decimal('0'), percentage - PROCESSING_FEE)
        return percentage
    if role in TENANT_ROLES:
        return TENANT_REFUND_CURVE.percentage(days_before_start)
    return Decimal('0')


def _total_of(booking) -> Decimal:
    total = booking.total_price
    if isinstance(total, Money):
        return total.amount
    return to_decimal(total, 'total_price')


def calculate_refund_amount(booking, cancellation_date: datetime, user_role, policy) -> Decimal:
    """
    Refund owed when `booking` is cancelled at `cancellation_date`.

    `booking` only needs `start_date` and `total_price`. The result is
    rounded to cents and never exceeds the total price.
    """
    total_price = _total_of(booking)
    if total_price < 0:
        raise InvalidArgumentError("total_price cannot be negative")

    days = days_until_start(booking.start_date, cancellation_date)
    percentage = calculate_refund_percentage(days, user_role, policy)
    refund_amount = round_money(total_price * percentage)
    return min(refund_amount, total_price)
