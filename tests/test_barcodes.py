"""Tests for barcode validation."""

import pytest

from little_bites.services.barcodes import normalize_barcode, validate_barcode
from tests.conftest import VALID_EAN_8, VALID_EAN_13, VALID_UPC_A


@pytest.mark.parametrize("barcode", [VALID_EAN_13, VALID_UPC_A, VALID_EAN_8])
def test_valid_barcodes(barcode: str) -> None:
    assert validate_barcode(barcode)


@pytest.mark.parametrize(
    "barcode",
    [
        "",
        "1234567",
        "4006381333932",
        "036000291453",
        "73513530",
        "12345678901",
        "abcdefghijklm",
    ],
)
def test_invalid_barcodes(barcode: str) -> None:
    assert not validate_barcode(barcode)


def test_formatting_characters_are_ignored() -> None:
    assert normalize_barcode("4 006381-333931") == VALID_EAN_13
    assert validate_barcode("4 006381-333931")
