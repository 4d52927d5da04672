import pytest

from mandiplus.pages.login_page import login_input_error


@pytest.mark.parametrize("number", ["9876543210", "6000000000"])
def test_registrable_numbers_pass(number):
    assert login_input_error(number, "", False) is None


@pytest.mark.parametrize("number", ["0123456789", "5999999999", "98765", ""])
def test_numbers_registration_would_reject_are_refused(number):
    assert login_input_error(number, "", False) == (
        "Please enter a valid 10-digit Indian mobile number"
    )


def test_code_step_checks_only_the_code():
    assert login_input_error("", "123456", True) is None
    assert login_input_error("9876543210", "12ab", True) == "Please enter a valid 6-digit OTP"
