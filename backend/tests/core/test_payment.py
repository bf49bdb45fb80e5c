"""Payment Form Validation — card number, Luhn, expiry and CVV checks.

Invariants:
    - Spaces and dashes ignored in the card number
    - Card invalid from the first day of its expiry month
    - Only ASCII digits count
    - YY >= 50 means 19YY
"""

from datetime import date

import pytest

from lessonbook.core.payment import (
    is_expired, luhn_valid, normalize_card_number, parse_expiry, validate_card,
)

VISA = "4111 1111 1111 1111"
TODAY = date(2026, 10, 18)


def test_normalize_strips_spaces_and_dashes():
    assert normalize_card_number("4111-1111 1111-1111") == "4111111111111111"


@pytest.mark.parametrize("digits", ["4111111111111111", "5555555555554444", "378282246310005"])
def test_luhn_accepts_known_test_cards(digits):
    assert luhn_valid(digits)


def test_luhn_rejects_bad_checksum():
    assert not luhn_valid("4111111111111112")


def test_luhn_rejects_non_digits():
    assert not luhn_valid("4111a11111111111")
    assert not luhn_valid("４１１１１１１１１１１１１１１１")
    assert not luhn_valid("")


def test_parse_expiry_two_digit_years():
    assert parse_expiry("12/30") == (2030, 12)
    assert parse_expiry("01/99") == (1999, 1)


@pytest.mark.parametrize("value", ["13/30", "00/30", "1230", "1/30", "ab/cd", ""])
def test_parse_expiry_rejects_malformed(value):
    assert parse_expiry(value) is None


def test_card_expires_when_its_expiry_month_begins():
    assert is_expired(2026, 10, TODAY)
    assert is_expired(2026, 10, date(2026, 10, 1))
    assert not is_expired(2026, 11, TODAY)
    assert not is_expired(2026, 11, date(2026, 10, 31))


def test_valid_card_passes():
    assert validate_card(VISA, "12/30", "123", TODAY) is None


def test_four_digit_cvv_accepted():
    assert validate_card(VISA, "12/30", "1234", TODAY) is None


@pytest.mark.parametrize(
    "card, expiry, cvv, reason",
    [
        ("4111 1111 111", "12/30", "123", "INVALID_CARD_NUMBER"),
        ("4111 1111 1111 1112", "12/30", "123", "INVALID_CHECKSUM"),
        (VISA, "1230", "123", "INVALID_EXPIRY"),
        (VISA, "09/26", "123", "CARD_EXPIRED"),
        (VISA, "10/26", "123", "CARD_EXPIRED"),
        ("４１１１１１１１１１１１１１１１", "12/30", "123", "INVALID_CARD_NUMBER"),
        (VISA, "12/30", "１２３", "INVALID_CVV"),
        (VISA, "１２/30", "123", "INVALID_EXPIRY"),
        (VISA, "12/30", "12", "INVALID_CVV"),
        (VISA, "12/30", "12a", "INVALID_CVV"),
    ],
)
def test_first_failing_check_is_reported(card, expiry, cvv, reason):
    assert validate_card(card, expiry, cvv, TODAY) == reason
