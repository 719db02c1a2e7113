"""Unit tests for booking price calculation."""

from decimal import Decimal

import pytest

from apps.bookings.domain.pricing import (
    MAX_SECURITY_DEPOSIT,
    PriceBreakdown,
    calculate_booking_subtotal,
    calculate_cleaning_fee,
    calculate_security_deposit,
    calculate_service_fee,
    calculate_taxes,
    calculate_total_booking_amount,
)
from shared.domain.exceptions import InvalidArgumentError


def test_three_night_apartment_in_sarajevo():
    breakdown = calculate_total_booking_amount(
        nightly_rate=Decimal("100"),
        number_of_nights=3,
        number_of_guests=2,
        property_type="apartment",
        property_location="Sarajevo",
    )

    assert breakdown.subtotal == Decimal("300")
    assert breakdown.cleaning_fee == Decimal("30")
    assert breakdown.service_fee == Decimal("30")
    assert breakdown.taxes == Decimal("61.20")
    assert breakdown.total_price == Decimal("421.20")
    assert breakdown.security_deposit == Decimal("60")
    assert breakdown.total_with_deposit == Decimal("481.20")
    assert breakdown.currency == "BAM"


def test_breakdown_json_form_uses_two_decimal_strings():
    breakdown = calculate_total_booking_amount(100, 3, 2, "apartment", "Sarajevo", currency="EUR")

    assert breakdown.to_dict() == {
        "subtotal": "300.00",
        "cleaning_fee": "30.00",
        "service_fee": "30.00",
        "taxes": "61.20",
        "security_deposit": "60.00",
        "total_price": "421.20",
        "total_with_deposit": "481.20",
        "currency": "EUR",
    }


def test_total_is_sum_of_components_and_excludes_deposit():
    breakdown = calculate_total_booking_amount(Decimal("137.35"), 5, 5, "villa", "Mostar")

    assert breakdown.total_price == (
        breakdown.subtotal + breakdown.cleaning_fee + breakdown.service_fee + breakdown.taxes
    )
    assert breakdown.total_with_deposit == breakdown.total_price + breakdown.security_deposit


def test_pricing_is_deterministic():
    args = (Decimal("89.90"), 4, 3, "house", "Banja Luka")

    assert calculate_total_booking_amount(*args) == calculate_total_booking_amount(*args)


@pytest.mark.parametrize(
    "subtotal, expected",
    [
        (Decimal("0"), Decimal("0")),
        (Decimal("100"), Decimal("8")),
        (Decimal("100.01"), Decimal("10.001")),
        (Decimal("500"), Decimal("50")),
        (Decimal("500.01"), Decimal("60.0012")),
    ],
)
def test_service_fee_rate_applies_to_whole_subtotal(subtotal, expected):
    assert calculate_service_fee(subtotal) == expected


@pytest.mark.parametrize(
    "property_type, guests, expected",
    [
        ("apartment", 1, Decimal("30")),
        ("apartment", 2, Decimal("30")),
        ("house", 4, Decimal("70")),
        ("villa", 3, Decimal("90")),
        ("Villa", 2, Decimal("80")),
        ("cabin", 2, Decimal("40")),
    ],
)
def test_cleaning_fee_by_type_and_extra_guests(property_type, guests, expected):
    assert calculate_cleaning_fee(property_type, guests) == expected


def test_unknown_location_uses_default_vat():
    assert calculate_taxes(Decimal("100"), "Tuzla") == Decimal("17.00")
    assert calculate_taxes(Decimal("100"), "SARAJEVO") == Decimal("17.00")


def test_taxes_round_half_to_even():
    # 0.085 -> 0.08 and 0.255 -> 0.26
    assert calculate_taxes(Decimal("0.5"), "Sarajevo") == Decimal("0.08")
    assert calculate_taxes(Decimal("1.5"), "Sarajevo") == Decimal("0.26")


@pytest.mark.parametrize(
    "guests, expected",
    [
        (2, Decimal("300.00")),
        (4, Decimal("360.00")),
        (6, Decimal("420.00")),
        (7, Decimal("480.00")),
    ],
)
def test_security_deposit_scales_with_guests(guests, expected):
    assert calculate_security_deposit(Decimal("1000"), "villa", guests) == expected


def test_security_deposit_is_capped():
    assert calculate_security_deposit(Decimal("10000"), "villa", 8) == MAX_SECURITY_DEPOSIT


def test_zero_nights_is_priced_as_fees_only():
    breakdown = calculate_total_booking_amount(100, 0, 2, "apartment", "Sarajevo")

    assert breakdown.subtotal == Decimal("0")
    assert breakdown.service_fee == Decimal("0")
    assert breakdown.total_price == Decimal("35.10")


def test_numeric_strings_are_accepted():
    assert calculate_booking_subtotal("49.50", 2) == Decimal("99.00")


@pytest.mark.parametrize(
    "call",
    [
        lambda: calculate_booking_subtotal(Decimal("-1"), 2),
        lambda: calculate_booking_subtotal(Decimal("10"), -1),
        lambda: calculate_booking_subtotal(None, 1),
        lambda: calculate_booking_subtotal("abc", 1),
        lambda: calculate_cleaning_fee(None, 2),
        lambda: calculate_cleaning_fee("apartment", -3),
        lambda: calculate_service_fee(Decimal("-0.01")),
        lambda: calculate_taxes(Decimal("10"), None),
        lambda: calculate_security_deposit(Decimal("-5"), "house", 2),
    ],
)
def test_invalid_inputs_raise(call):
    with pytest.raises(InvalidArgumentError):
        call()


def test_invalid_argument_error_is_a_value_error():
    with pytest.raises(ValueError):
        calculate_booking_subtotal(-1, 1)


def test_price_breakdown_is_immutable():
    breakdown = calculate_total_booking_amount(100, 1, 1, "apartment", "Sarajevo")

    assert isinstance(breakdown, PriceBreakdown)
    with pytest.raises(AttributeError):
        breakdown.total_price = Decimal("0")  # type: ignore[misc]
