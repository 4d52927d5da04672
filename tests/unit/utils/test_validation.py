import pytest

from mandiplus.utils.logger import mask_mobile
from mandiplus.utils.validation import (
    digits_only,
    is_valid_aadhaar,
    is_valid_indian_mobile,
    is_valid_mobile,
    is_valid_otp,
    is_valid_state,
)


@pytest.mark.parametrize(
    "value, expected",
    [("9999999999", True), ("999999999", False), ("99999999a9", False), ("", False)],
)
def test_is_valid_mobile(value, expected):
    assert is_valid_mobile(value) is expected


def test_indian_mobile_must_start_with_6_to_9():
    assert is_valid_indian_mobile("6123456789") is True
    assert is_valid_indian_mobile("5123456789") is False


def test_otp_and_aadhaar():
    assert is_valid_otp("000000") is True
    assert is_valid_otp("12345") is False
    assert is_valid_aadhaar("1234 5678") is True
    assert is_valid_aadhaar("1234-567") is False


def test_state_and_digits():
    assert is_valid_state("WEST_BENGAL") is True
    assert is_valid_state("West Bengal") is False
    assert digits_only("+91 98765-43210") == "919876543210"


def test_mask_mobile():
    assert mask_mobile("9876543210") == "******3210"
    assert mask_mobile(None) == ""
