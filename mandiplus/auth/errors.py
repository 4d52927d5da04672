"""
Authentication and session errors.

Every error carries a user-facing message that the UI can show as-is.
"""

from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    OTP_SEND_FAILED = "OtpSendFailed"
    INVALID_OTP = "InvalidOtp"
    REGISTRATION_FAILED = "RegistrationFailed"
    AGENT_REGISTRATION_FAILED = "AgentRegistrationFailed"
    MALFORMED_TOKEN = "MalformedToken"
    PROFILE_FETCH_FAILED = "ProfileFetchFailed"
    CONSENT_SUBMIT_FAILED = "ConsentSubmitFailed"
    NETWORK_UNAVAILABLE = "NetworkUnavailable"


class AuthError(RuntimeError):
    """
    Base error for the session and consent subsystem.

    Args:
        message: User-facing message. Falls back to the class default.
        status_code: HTTP status returned by the backend, if any.
    """

    kind: AuthErrorKind
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class OtpSendFailed(AuthError):
    kind = AuthErrorKind.OTP_SEND_FAILED
    default_message = "Failed to send OTP"


class InvalidOtp(AuthError):
    kind = AuthErrorKind.INVALID_OTP
    default_message = "Invalid OTP"


class RegistrationFailed(AuthError):
    kind = AuthErrorKind.REGISTRATION_FAILED
    default_message = "Registration failed"


class AgentRegistrationFailed(AuthError):
    kind = AuthErrorKind.AGENT_REGISTRATION_FAILED
    default_message = "Agent registration failed"


class MalformedToken(AuthError):
    kind = AuthErrorKind.MALFORMED_TOKEN
    default_message = "Session token could not be read"


class ProfileFetchFailed(AuthError):
    kind = AuthErrorKind.PROFILE_FETCH_FAILED
    default_message = "Failed to fetch user profile"


class ConsentSubmitFailed(AuthError):
    kind = AuthErrorKind.CONSENT_SUBMIT_FAILED
    default_message = "Failed to save consent. Please try again."


class NetworkUnavailable(AuthError):
    kind = AuthErrorKind.NETWORK_UNAVAILABLE
    default_message = "Unable to reach the server. Check your connection."
