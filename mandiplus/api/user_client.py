"""
User API client.

Fetches canonical user profiles and records consent acknowledgments.
"""

from typing import Any, Dict
from urllib.parse import quote

from pydantic import ValidationError

from mandiplus.api.http_client import ApiClient
from mandiplus.auth.errors import ConsentSubmitFailed, ProfileFetchFailed
from mandiplus.auth.models import ConsentAcknowledgment, UserProfile
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


class UserApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_user(self, user_id: str) -> UserProfile:
        """
        Fetch the canonical profile for `user_id`.

        Raises:
            ProfileFetchFailed: On backend or decoding failure.
            NetworkUnavailable: If the backend cannot be reached.
        """
        logger.info("Fetching user profile", extra={"user_id": user_id})

        payload = self.client.get(f"/users/{quote(user_id, safe='')}", error=ProfileFetchFailed)

        try:
            return UserProfile.model_validate(payload)
        except ValidationError as exc:
            logger.exception(
                "Invalid user profile received",
                extra={"user_id": user_id},
            )
            raise ProfileFetchFailed("Invalid profile received") from exc

    def record_consent(
        self,
        user_id: str,
        acknowledgment: ConsentAcknowledgment,
    ) -> Dict[str, Any]:
        """
        Record a consent acknowledgment.

        Raises:
            ConsentSubmitFailed: On backend failure.
            NetworkUnavailable: If the backend cannot be reached.
        """
        logger.info(
            "Submitting consent",
            extra={"user_id": user_id, "language": acknowledgment.language},
        )

        return self.client.patch(
            f"/users/{quote(user_id, safe='')}/consent",
            json_data={"consentText": acknowledgment.consent_text},
            error=ConsentSubmitFailed,
        )
