"""Payment Form Validation — offline card checks (format, Luhn, expiry, CVV).

Invariants:
    - Spaces and dashes in the card number are ignored
    - Card number: 13-19 digits and a valid Luhn checksum
    - Expiry: "MM/YY", month 1-12, YY >= 50 means 19YY, otherwise 20YY
    - A card stops being valid once its expiry month begins (checked against the 1st)
    - CVV: 3 or 4 digits
    - Only ASCII 0-9 count as digits

Design Decisions:
    - Format checks only, no gateway: no money ever moves
    - validate_card returns a reason code instead of raising: the endpoint reports
      success=false with status 200, so invalid cards are data, not errors
"""

from datetime import date


MIN_CARD_DIGITS: int = 13
MAX_CARD_DIGITS: int = 19
CENTURY_PIVOT: int = 50


def is_ascii_digits(value: str) -> bool:
    """0-9 only; str.isdigit alone also accepts full-width and other Unicode digits."""
    return bool(value) and value.isascii() and value.isdigit()


def normalize_card_number(card_number: str) -> str:
    return card_number.replace(" ", "").replace("-", "")


def luhn_valid(digits: str) -> bool:
    """Luhn mod-10 checksum over a string of digits."""
    if not is_ascii_digits(digits):
        return False
    total = 0
    for i, char in enumerate(reversed(digits)):
        d = int(char)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def parse_expiry(expiry_date: str) -> tuple[int, int] | None:
    """Parse MM/YY into (year, month), or None when malformed."""
    if not expiry_date or len(expiry_date) != 5 or "/" not in expiry_date:
        return None
    month_part, _, year_part = expiry_date.partition("/")
    if not (is_ascii_digits(month_part) and is_ascii_digits(year_part)):
        return None
    month, year = int(month_part), int(year_part)
    if not 1 <= month <= 12:
        return None
    year += 1900 if year >= CENTURY_PIVOT else 2000
    return year, month


def is_expired(year: int, month: int, today: date) -> bool:
    return date(year, month, 1) <= today


def validate_card(
    card_number: str, expiry_date: str, cvv: str, today: date,
) -> str | None:
    """Return None for a usable card, else the first failing check's code."""
    digits = normalize_card_number(card_number or "")
    if not MIN_CARD_DIGITS <= len(digits) <= MAX_CARD_DIGITS or not is_ascii_digits(digits):
        return "INVALID_CARD_NUMBER"
    if not luhn_valid(digits):
        return "INVALID_CHECKSUM"
    parsed = parse_expiry(expiry_date or "")
    if parsed is None:
        return "INVALID_EXPIRY"
    if is_expired(*parsed, today):
        return "CARD_EXPIRED"
    if not cvv or len(cvv) not in (3, 4) or not is_ascii_digits(cvv):
        return "INVALID_CVV"
    return None


FAILURE_MESSAGES: dict[str, str] = {
    "INVALID_CARD_NUMBER": "Invalid card number.",
    "INVALID_CHECKSUM": "Invalid card number.",
    "INVALID_EXPIRY": "Invalid expiry date. Use MM/YY.",
    "CARD_EXPIRED": "Card has expired.",
    "INVALID_CVV": "Invalid CVV.",
}
SUCCESS_MESSAGE = "Payment details are valid."
