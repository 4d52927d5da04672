"""
Authentication API client.

Wraps the backend `/auth` endpoints used by the onboarding handshake.
"""

from typing import Any, Dict

from pydantic import ValidationError

from mandiplus.api.http_client import ApiClient
from mandiplus.auth.errors import (
    AgentRegistrationFailed,
    AuthError,
    InvalidOtp,
    OtpSendFailed,
    RegistrationFailed,
)
from mandiplus.auth.models import AgentRegistration, AuthResponse, DocumentPhoto
from mandiplus.utils.logger import get_logger, mask_mobile

logger = get_logger(__name__)


def _parse(payload: Any, error: type[AuthError]) -> AuthResponse:
    if not isinstance(payload, dict):
        raise error("Invalid response from server")

    try:
        return AuthResponse.model_validate(payload)
    except ValidationError as exc:
        logger.exception("Unexpected auth response shape")
        raise error("Invalid response from server") from exc


class AuthApi:
    """Backend calls for OTP login, registration and agent signup."""

    def __init__(self, client: ApiClient, *, upload_timeout: float = 60) -> None:
        self.client = client
        self.upload_timeout = upload_timeout

    def send_otp(self, mobile_number: str) -> AuthResponse:
        """
        Ask the backend to send a one-time code.

        Raises:
            OtpSendFailed: With the server message when available.
        """
        logger.info(
            "Requesting OTP",
            extra={"mobile": mask_mobile(mobile_number)},
        )

        payload = self.client.post(
            "/auth/send-otp",
            json_data={"mobileNumber": mobile_number},
            error=OtpSendFailed,
        )
        return _parse(payload, OtpSendFailed)

    def verify_otp(self, mobile_number: str, otp: str) -> AuthResponse:
        """
        Verify a one-time code.

        Raises:
            InvalidOtp: With the server message when available.
        """
        logger.info(
            "Verifying OTP",
            extra={"mobile": mask_mobile(mobile_number)},
        )

        payload = self.client.post(
            "/auth/verify-otp",
            json_data={"mobileNumber": mobile_number, "otp": otp},
            error=InvalidOtp,
        )
        return _parse(payload, InvalidOtp)

    def register(self, *, name: str, mobile_number: str, state: str) -> AuthResponse:
        """
        Complete registration of a new user.

        Raises:
            RegistrationFailed: With the server message when available.
        """
        logger.info(
            "Registering user",
            extra={"mobile": mask_mobile(mobile_number), "state": state},
        )

        payload = self.client.post(
            "/auth/register",
            json_data={
                "name": name,
                "mobileNumber": mobile_number,
                "state": state,
            },
            error=RegistrationFailed,
        )
        return _parse(payload, RegistrationFailed)

    def agent_register(
        self,
        form: AgentRegistration,
        photo: DocumentPhoto,
    ) -> AuthResponse:
        """
        Submit the multipart agent signup.

        Raises:
            AgentRegistrationFailed: With the server message when available.
        """
        data: Dict[str, Any] = form.model_dump(by_alias=True)
        files = {
            "aadhaarPhoto": (photo.filename, photo.content, photo.content_type),
        }

        logger.info(
            "Registering agent",
            extra={
                "mobile": mask_mobile(form.phone_number),
                "state": form.state,
                "photo_bytes": len(photo.content),
            },
        )

        payload = self.client.post(
            "/auth/agent-register",
            data=data,
            files=files,
            error=AgentRegistrationFailed,
            timeout=self.upload_timeout,
        )
        return _parse(payload, AgentRegistrationFailed)

    def logout(self, endpoint: str) -> None:
        """Ask the backend to invalidate the current session."""
        self.client.post(endpoint)
