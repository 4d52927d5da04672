import pytest
import requests

from mandiplus.auth.errors import (
    AuthErrorKind,
    InvalidOtp,
    NetworkUnavailable,
    OtpSendFailed,
)


def test_server_message_is_preferred(app_state, backend):
    backend.add(
        "POST",
        "/auth/send-otp",
        status=429,
        json_body={"message": "Too many OTP requests"},
    )

    with pytest.raises(OtpSendFailed) as exc_info:
        app_state.auth_api.send_otp("9999999999")

    assert exc_info.value.message == "Too many OTP requests"
    assert exc_info.value.status_code == 429
    assert exc_info.value.kind == AuthErrorKind.OTP_SEND_FAILED


def test_generic_message_without_server_message(app_state, backend):
    backend.add("POST", "/auth/send-otp", status=500, raw=b"<html>oops</html>")

    with pytest.raises(OtpSendFailed) as exc_info:
        app_state.auth_api.send_otp("9999999999")

    assert exc_info.value.message == "Failed to send OTP"


def test_list_of_validation_messages(app_state, backend):
    backend.add(
        "POST",
        "/auth/verify-otp",
        status=400,
        json_body={"message": ["otp must be 6 digits", "other"]},
    )

    with pytest.raises(InvalidOtp) as exc_info:
        app_state.auth_api.verify_otp("9999999999", "12")

    assert exc_info.value.message == "otp must be 6 digits"


def test_connection_error_is_network_unavailable(app_state, backend):
    backend.add(
        "POST",
        "/auth/send-otp",
        exc=requests.ConnectionError("connection refused"),
    )

    with pytest.raises(NetworkUnavailable):
        app_state.auth_api.send_otp("9999999999")


def test_invalid_json_on_success(app_state, backend):
    backend.add("POST", "/auth/verify-otp", raw=b"not json")

    with pytest.raises(InvalidOtp) as exc_info:
        app_state.auth_api.verify_otp("9999999999", "123456")

    assert exc_info.value.message == "Invalid response from server"


def test_unknown_directive_is_invalid_response(app_state, backend):
    backend.add("POST", "/auth/verify-otp", json_body={"next": "SOMEWHERE"})

    with pytest.raises(InvalidOtp) as exc_info:
        app_state.auth_api.verify_otp("9999999999", "123456")

    assert exc_info.value.message == "Invalid response from server"
