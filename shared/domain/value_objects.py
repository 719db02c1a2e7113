"""
Common Value Objects

Value objects used across the booking and tenancy domains:
- Money: Non-negative monetary amount with currency
- DateRange: Half-open range of dates [start_date, end_date)
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_EVEN

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidArgumentError

SUPPORTED_CURRENCIES = ('BAM', 'EUR', 'USD')

CENT = Decimal('0.01')


def to_decimal(value, name: str = 'value') -> Decimal:
    """Convert int/str/float/Decimal input to Decimal, rejecting junk."""
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except ArithmeticError as exc:
            raise InvalidArgumentError(f"{name} is not a valid number: {value!r}") from exc
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise InvalidArgumentError(f"{name} must be a number, got {type(value).__name__}")
    if not result.is_finite():
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, ties to even (banker's rounding)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Immutable; arithmetic is only defined between equal currencies.
    """
    amount: Decimal
    currency: str = 'BAM'

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_decimal(self.amount, 'amount'))
        if self.amount < 0:
            raise InvalidArgumentError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise InvalidArgumentError(f"Unsupported currency: {self.currency}")

    def _check_currency(self, other: 'Money'):
        if not isinstance(other, Money):
            raise TypeError("Money arithmetic requires Money operands")
        if self.currency != other.currency:
            raise InvalidArgumentError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        return Money(self.amount * to_decimal(factor, 'factor'), self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    start_date is inclusive, end_date is exclusive, so a checkout day can
    be the next guest's check-in day. start_date == end_date is an empty
    range; an inverted range is rejected.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if not isinstance(self.start_date, date) or not isinstance(self.end_date, date):
            raise InvalidArgumentError("DateRange bounds must be dates")
        if self.end_date < self.start_date:
            raise InvalidArgumentError(
                f"End date ({self.end_date}) is before start date ({self.start_date})"
            )

    @property
    def is_empty(self) -> bool:
        return self.start_date == self.end_date

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Half-open overlap test: start1 < end2 AND end1 > start2

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start_date < other.end_date and self.end_date > other.start_date

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    def __len__(self) -> int:
        """Number of nights in the range"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.strftime('%d.%m.%Y')} - {self.end_date.strftime('%d.%m.%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
