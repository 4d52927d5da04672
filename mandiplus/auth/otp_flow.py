"""
OTP Handshake Orchestrator.

Drives request code -> verify code -> (register) and turns the server's
`next` field into an explicit `Directive`.

State machine:
    NONE -> CODE_SENT -> VERIFIED(LOGIN_VERIFY | HOME) -> session
                      -> VERIFIED(REGISTER) -> registered -> session

Each step is user-triggered; nothing is retried automatically.
"""

import threading
from dataclasses import replace
from typing import Optional

from mandiplus.api.auth_client import AuthApi
from mandiplus.api.http_client import ApiClient
from mandiplus.auth.errors import (
    AgentRegistrationFailed,
    InvalidOtp,
    OtpSendFailed,
    RegistrationFailed,
)
from mandiplus.auth.models import (
    AgentRegistration,
    AuthResponse,
    Directive,
    DirectiveKind,
    DocumentPhoto,
    NextStep,
    OtpChallenge,
    OtpStep,
    RegistrationForm,
)
from mandiplus.state.session_store import SessionStore
from mandiplus.utils.logger import get_logger, mask_mobile

logger = get_logger(__name__)


def directive_from_verification(response: AuthResponse, mobile_number: str) -> Directive:
    """
    Normalize a verify-otp response into a Directive.

    A token without a `next` field is a direct login (HOME). A login
    directive without a token, or a response with neither, is rejected.
    """
    next_step = response.next
    token = response.access_token

    if next_step is None and token:
        next_step = NextStep.HOME

    if next_step == NextStep.REGISTER:
        return Directive(
            kind=DirectiveKind.REGISTER,
            mobile_number=mobile_number,
            message=response.message,
        )

    if next_step in (NextStep.LOGIN_VERIFY, NextStep.HOME):
        if not token:
            raise InvalidOtp("Login failed: No access token received")
        return Directive(
            kind=DirectiveKind(next_step.value),
            mobile_number=mobile_number,
            token=token,
            user=response.user,
            message=response.message,
        )

    raise InvalidOtp("Unexpected response from server")


class OtpOrchestrator:
    """
    Onboarding handshake for one client.

    Args:
        auth_api: Backend `/auth` calls.
        store: Session Store that receives issued tokens.
        client: HTTP client holding the refresh-token cookie.
    """

    def __init__(
        self,
        auth_api: AuthApi,
        store: SessionStore,
        client: Optional[ApiClient] = None,
    ) -> None:
        self._api = auth_api
        self._store = store
        self._client = client
        self._lock = threading.Lock()
        self._challenge: Optional[OtpChallenge] = None
        # Bumped by reset(); responses from an earlier epoch are dropped
        self._epoch = 0

    @property
    def challenge(self) -> Optional[OtpChallenge]:
        with self._lock:
            return self._challenge

    def reset(self) -> None:
        """Discard the current challenge ("Back to login")."""
        with self._lock:
            self._challenge = None
            self._epoch += 1
        logger.debug("OTP challenge reset")

    # --------------------
    # Step 1
    # --------------------
    def request_code(self, mobile_number: str) -> Directive:
        """
        Send a one-time code to `mobile_number`.

        Raises:
            OtpSendFailed: Empty number, a challenge for another number is
                active, or the backend refused.
            NetworkUnavailable: The backend could not be reached.
        """
        mobile_number = (mobile_number or "").strip()
        if not mobile_number:
            raise OtpSendFailed("Please enter a mobile number")

        with self._lock:
            current = self._challenge
            epoch = self._epoch

        if current is not None and current.mobile_number != mobile_number:
            raise OtpSendFailed(
                "A verification is already in progress for another number"
            )

        response = self._api.send_otp(mobile_number)

        with self._lock:
            if self._epoch != epoch:
                logger.info("Dropping OTP send result after reset")
                return Directive(
                    DirectiveKind.CODE_SENT,
                    mobile_number,
                    message=response.message,
                    stale=True,
                )
            self._challenge = OtpChallenge(mobile_number, OtpStep.CODE_SENT)

        logger.info("OTP sent", extra={"mobile": mask_mobile(mobile_number)})
        return Directive(
            kind=DirectiveKind.CODE_SENT,
            mobile_number=mobile_number,
            message=response.message,
        )

    # --------------------
    # Step 2
    # --------------------
    def verify_code(self, mobile_number: str, code: str) -> Directive:
        """
        Verify the code and apply the server directive.

        LOGIN_VERIFY / HOME install the issued token in the Session Store.
        REGISTER leaves the session untouched and unlocks registration.

        Raises:
            InvalidOtp: Wrong code, mismatched number, or a login directive
                without a token.
            NetworkUnavailable: The backend could not be reached.
        """
        mobile_number = (mobile_number or "").strip()
        code = (code or "").strip()
        if not code:
            raise InvalidOtp("Please enter the OTP")

        with self._lock:
            current = self._challenge
            epoch = self._epoch

        if current is None:
            # The backend is authoritative on whether a code was sent
            logger.info(
                "Verifying OTP without a local challenge",
                extra={"mobile": mask_mobile(mobile_number)},
            )
        elif current.mobile_number != mobile_number:
            raise InvalidOtp("OTP was sent to a different number")

        generation = self._store.generation
        response = self._api.verify_otp(mobile_number, code)
        directive = directive_from_verification(response, mobile_number)

        with self._lock:
            if self._epoch != epoch:
                logger.info("Dropping OTP verification result after reset")
                return replace(directive, stale=True)

            if directive.kind == DirectiveKind.REGISTER:
                self._challenge = OtpChallenge(
                    mobile_number,
                    OtpStep.VERIFIED,
                    DirectiveKind.REGISTER,
                )
                logger.info(
                    "New user; registration required",
                    extra={"mobile": mask_mobile(mobile_number)},
                )
                return directive

            self._challenge = None

        installed = self._install(response, generation)
        logger.info(
            "OTP verified; signed in",
            extra={"directive": directive.kind.value, "installed": installed},
        )
        return replace(directive, stale=not installed)

    # --------------------
    # Step 3
    # --------------------
    def complete_registration(self, form: RegistrationForm) -> Directive:
        """
        Register the verified mobile number.

        Raises:
            RegistrationFailed: No REGISTER directive yet, the backend
                refused, or no token was issued.
            NetworkUnavailable: The backend could not be reached.
        """
        with self._lock:
            current = self._challenge
            epoch = self._epoch

        if current is None or not current.can_register:
            raise RegistrationFailed("Verify your mobile number before registering")

        generation = self._store.generation
        response = self._api.register(
            name=form.name,
            mobile_number=current.mobile_number,
            state=form.state,
        )

        if not response.access_token:
            raise RegistrationFailed("Registration failed: missing access token")

        with self._lock:
            if self._epoch != epoch:
                logger.info("Dropping registration result after reset")
                return Directive(
                    DirectiveKind.HOME,
                    current.mobile_number,
                    token=response.access_token,
                    user=response.user,
                    stale=True,
                )
            self._challenge = None

        installed = self._install(response, generation)
        logger.info(
            "Registration complete",
            extra={"mobile": mask_mobile(current.mobile_number), "installed": installed},
        )
        return Directive(
            kind=DirectiveKind.HOME,
            mobile_number=current.mobile_number,
            token=response.access_token,
            user=response.user,
            message=response.message,
            stale=not installed,
        )

    # --------------------
    # Agent signup (no OTP)
    # --------------------
    def register_agent(
        self,
        form: AgentRegistration,
        photo: DocumentPhoto,
    ) -> Directive:
        """
        Single-shot multipart agent registration.

        Raises:
            AgentRegistrationFailed: Missing photo, backend refusal, or no
                token issued.
            NetworkUnavailable: The backend could not be reached.
        """
        if not photo.content:
            raise AgentRegistrationFailed("Please upload Aadhaar photo")

        generation = self._store.generation
        response = self._api.agent_register(form, photo)

        if not response.access_token:
            raise AgentRegistrationFailed("Registration failed: missing access token")

        installed = self._install(response, generation)
        logger.info(
            "Agent registration complete",
            extra={"mobile": mask_mobile(form.phone_number), "installed": installed},
        )
        return Directive(
            kind=DirectiveKind.HOME,
            mobile_number=form.phone_number,
            token=response.access_token,
            user=response.user,
            message=response.message,
            stale=not installed,
        )

    def _install(self, response: AuthResponse, generation: int) -> bool:
        """Hand an issued token to the Session Store unless the session moved on."""
        if not self._store.set_token(
            response.access_token,
            expected_generation=generation,
        ):
            return False

        if response.refresh_token and self._client is not None:
            self._client.set_refresh_token(response.refresh_token)

        if response.user is not None:
            self._store.set_user(response.user)

        return True
