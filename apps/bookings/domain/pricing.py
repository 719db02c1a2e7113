"""
Booking Pricing

Pure functions computing every monetary figure of a booking quote:
subtotal, cleaning fee, platform service fee, VAT and security deposit.

Lookups by property type and location are lenient: an unknown value
falls back to the default row rather than failing, because the tables
only list the categories that are priced differently.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidArgumentError
from shared.domain.value_objects import round_money, to_decimal

DEFAULT_KEY = '*'

CLEANING_BASE_FEES = {
    'apartment': Decimal('30'),
    'house': Decimal('50'),
    'villa': Decimal('80'),
    DEFAULT_KEY: Decimal('40'),
}
INCLUDED_GUESTS = 2
EXTRA_GUEST_CLEANING_FEE = Decimal('10')

# (upper bound inclusive, rate) of the whole subtotal; None = no upper bound
SERVICE_FEE_BRACKETS = (
    (Decimal('100'), Decimal('0.08')),
    (Decimal('500'), Decimal('0.10')),
    (None, Decimal('0.12')),
)

# All municipalities currently charge the same VAT
TAX_RATES = {
    'sarajevo': Decimal('0.17'),
    'mostar': Decimal('0.17'),
    'banja luka': Decimal('0.17'),
    DEFAULT_KEY: Decimal('0.17'),
}

DEPOSIT_BASE_PERCENTAGES = {
    'villa': Decimal('0.30'),
    'house': Decimal('0.25'),
    'apartment': Decimal('0.20'),
    DEFAULT_KEY: Decimal('0.20'),
}
DEPOSIT_GUEST_MULTIPLIERS = (
    (2, Decimal('1.0')),
    (4, Decimal('1.2')),
    (6, Decimal('1.4')),
    (None, Decimal('1.6')),
)
MAX_SECURITY_DEPOSIT = Decimal('1000')


@dataclass(frozen=True)
class PriceBreakdown(ValueObject):
    """
    Derived price of a booking; never mutated after computation.

    total_price excludes the deposit, total_with_deposit includes it.
    """
    subtotal: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    taxes: Decimal
    security_deposit: Decimal
    total_price: Decimal
    total_with_deposit: Decimal
    currency: str = 'BAM'

    def to_dict(self) -> dict:
        return {
            'subtotal': _format(self.subtotal),
            'cleaning_fee': _format(self.cleaning_fee),
            'service_fee': _format(self.service_fee),
            'taxes': _format(self.taxes),
            'security_deposit': _format(self.security_deposit),
            'total_price': _format(self.total_price),
            'total_with_deposit': _format(self.total_with_deposit),
            'currency': self.currency,
        }


def _format(amount: Decimal) -> str:
    return str(round_money(amount))


def _non_negative(value, name: str) -> Decimal:
    amount = to_decimal(value, name)
    if amount < 0:
        raise InvalidArgumentError(f"{name} cannot be negative, got {amount}")
    return amount


def _non_negative_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"{name} cannot be negative, got {value}")
    return value


def _lookup(table: dict, key, name: str) -> Decimal:
    if not isinstance(key, str):
        raise InvalidArgumentError(f"{name} must be a string, got {key!r}")
    return table.get(key.lower(), table[DEFAULT_KEY])


def _bracket(brackets, value):
    for upper, rate in brackets:
        if upper is None or value <= upper:
            return rate
    raise AssertionError("bracket table must end with an open bracket")


def calculate_booking_subtotal(nightly_rate, number_of_nights: int) -> Decimal:
    rate = _non_negative(nightly_rate, 'nightly_rate')
    nights = _non_negative_int(number_of_nights, 'number_of_nights')
    return rate * nights


def calculate_cleaning_fee(property_type: str, number_of_guests: int) -> Decimal:
    """Base fee by property type plus a flat fee per guest beyond two."""
    guests = _non_negative_int(number_of_guests, 'number_of_guests')
    base_fee = _lookup(CLEANING_BASE_FEES, property_type, 'property_type')
    extra_guests = max(0, guests - INCLUDED_GUESTS)
    return base_fee + extra_guests * EXTRA_GUEST_CLEANING_FEE


def calculate_service_fee(subtotal) -> Decimal:
    """
    Platform fee on the whole subtotal at the rate of the bracket it
    falls in (not a marginal schedule):
    <= 100 -> 8%, <= 500 -> 10%, above -> 12%.
    """
    amount = _non_negative(subtotal, 'subtotal')
    return amount * _bracket(SERVICE_FEE_BRACKETS, amount)


def calculate_taxes(subtotal, property_location: str) -> Decimal:
    amount = _non_negative(subtotal, 'subtotal')
    rate = _lookup(TAX_RATES, property_location, 'property_location')
    return round_money(amount * rate)


def calculate_security_deposit(total_price, property_type: str, number_of_guests: int) -> Decimal:
    """Percentage of the price scaled by party size, capped at 1000."""
    amount = _non_negative(total_price, 'total_price')
    guests = _non_negative_int(number_of_guests, 'number_of_guests')
    base_percentage = _lookup(DEPOSIT_BASE_PERCENTAGES, property_type, 'property_type')
    multiplier = _bracket(DEPOSIT_GUEST_MULTIPLIERS, guests)
    deposit = round_money(amount * base_percentage * multiplier)
    return min(deposit, MAX_SECURITY_DEPOSIT)


def calculate_total_booking_amount(
    nightly_rate,
    number_of_nights: int,
    number_of_guests: int,
    property_type: str,
    property_location: str,
    currency: str = 'BAM',
) -> PriceBreakdown:
    """
    Compose the full quote.

    VAT applies to subtotal + cleaning + service fee; the deposit is
    computed on the subtotal alone and kept out of total_price.
    """
    subtotal = calculate_booking_subtotal(nightly_rate, number_of_nights)
    cleaning_fee = calculate_cleaning_fee(property_type, number_of_guests)
    service_fee = calculate_service_fee(subtotal)
    taxes = calculate_taxes(subtotal + cleaning_fee + service_fee, property_location)
    security_deposit = calculate_security_deposit(subtotal, property_type, number_of_guests)

    total_price = subtotal + cleaning_fee + service_fee + taxes

    return PriceBreakdown(
        subtotal=subtotal,
        cleaning_fee=cleaning_fee,
        service_fee=service_fee,
        taxes=taxes,
        security_deposit=security_deposit,
        total_price=total_price,
        total_with_deposit=total_price + security_deposit,
        currency=currency,
    )
