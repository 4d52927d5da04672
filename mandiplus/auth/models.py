"""
Schemas for onboarding, session and consent.

Wire models use the backend's camelCase names as aliases; Python code
works with snake_case attributes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AGENT_IDENTITY = "AGENT"


class UserProfile(BaseModel):
    """
    Cached copy of the backend user record.

    Unknown backend fields are kept so they survive a save/restore cycle.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    identity: Optional[str] = None
    name: Optional[str] = None
    mobile_number: Optional[str] = Field(default=None, alias="mobileNumber")
    state: Optional[str] = None
    mandi_name: Optional[str] = Field(default=None, alias="mandiName")
    consent_given: bool = Field(default=False, alias="isConsent")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def is_agent(self) -> bool:
        return self.identity == AGENT_IDENTITY

    def to_storage(self) -> Dict[str, Any]:
        """Serialize with backend field names for durable storage."""
        return self.model_dump(by_alias=True, exclude_none=True)


class NextStep(str, Enum):
    """Server directive returned by OTP verification."""

    LOGIN_VERIFY = "LOGIN_VERIFY"
    REGISTER = "REGISTER"
    HOME = "HOME"


class AuthResponse(BaseModel):
    """Response body shared by the /auth endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: Optional[str] = None
    next: Optional[NextStep] = None
    mobile_number: Optional[str] = Field(default=None, alias="mobileNumber")
    access_token: Optional[str] = Field(default=None, alias="accessToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    user: Optional[UserProfile] = None


class DirectiveKind(str, Enum):
    """What the UI should do next."""

    CODE_SENT = "CODE_SENT"
    LOGIN_VERIFY = "LOGIN_VERIFY"
    REGISTER = "REGISTER"
    HOME = "HOME"


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    mobile_number: str
    token: Optional[str] = None
    user: Optional[UserProfile] = None
    message: Optional[str] = None
    # Result arrived after the session or challenge was replaced
    stale: bool = False

    @property
    def authenticated(self) -> bool:
        return self.kind in (DirectiveKind.LOGIN_VERIFY, DirectiveKind.HOME)


class OtpStep(str, Enum):
    AWAITING_CODE = "AWAITING_CODE"
    CODE_SENT = "CODE_SENT"
    VERIFIED = "VERIFIED"


@dataclass(frozen=True)
class OtpChallenge:
    """
    Transient OTP handshake record.

    Frozen: the mobile number never changes once a challenge exists;
    steps advance by replacing the record.
    """

    mobile_number: str
    step: OtpStep = OtpStep.AWAITING_CODE
    directive: Optional[DirectiveKind] = None

    @property
    def can_register(self) -> bool:
        return (
            self.step == OtpStep.VERIFIED
            and self.directive == DirectiveKind.REGISTER
        )


class RegistrationForm(BaseModel):
    """Profile fields submitted after a REGISTER directive."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    state: str = Field(min_length=1)


class AgentRegistration(BaseModel):
    """Text fields of the multipart agent signup."""

    model_config = ConfigDict(populate_by_name=True)

    agent_name: str = Field(alias="agentName", min_length=1)
    phone_number: str = Field(alias="phoneNumber", min_length=1)
    state: str = Field(min_length=1)
    mandi_name: str = Field(alias="mandiName", min_length=1)
    aadhaar_number: str = Field(alias="aadhaarNumber", min_length=1)


@dataclass(frozen=True)
class DocumentPhoto:
    filename: str
    content: bytes
    content_type: str = "image/jpeg"


@dataclass(frozen=True)
class ConsentAcknowledgment:
    consent_text: str
    language: str = "en"
    acknowledged_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
