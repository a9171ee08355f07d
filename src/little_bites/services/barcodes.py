"""Barcode normalization and check-digit validation."""

import re

_NON_DIGITS = re.compile(r"\D")
_MIN_LENGTH = 8
EAN_13_LENGTH = 13
UPC_A_LENGTH = 12
EAN_8_LENGTH = 8


def normalize_barcode(raw: str) -> str:
    """Strip everything but digits."""
    return _NON_DIGITS.sub("", raw or "")


def validate_barcode(raw: str) -> bool:
    """Return True for a well-formed EAN-13, UPC-A or EAN-8 barcode."""
    if not raw or len(raw) < _MIN_LENGTH:
        return False
    digits = normalize_barcode(raw)
    if len(digits) == EAN_13_LENGTH:
        return _check_digit_matches(digits, first_weight=1)
    if len(digits) in (UPC_A_LENGTH, EAN_8_LENGTH):
        return _check_digit_matches(digits, first_weight=3)
    return False


def _check_digit_matches(digits: str, *, first_weight: int) -> bool:
    """Verify the GS1 mod-10 check digit with alternating 1/3 weights."""
    other_weight = 4 - first_weight
    total = sum(
        int(digit) * (first_weight if index % 2 == 0 else other_weight)
        for index, digit in enumerate(digits[:-1])
    )
    return int(digits[-1]) == (10 - total % 10) % 10
