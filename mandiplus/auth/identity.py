"""
Identity Resolver.

Turns the current access token into a fresh user profile from the backend.
The cached profile is never used for authorization decisions.
"""

from typing import Optional

from mandiplus.api.user_client import UserApi
from mandiplus.auth.errors import AuthError, MalformedToken, ProfileFetchFailed
from mandiplus.auth.models import UserProfile
from mandiplus.auth.tokens import subject_from_token
from mandiplus.state.session_store import SessionStore
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


class IdentityResolver:
    def __init__(self, store: SessionStore, users: UserApi) -> None:
        self._store = store
        self._users = users

    def resolve_current_user(self, token: Optional[str] = None) -> UserProfile:
        """
        Fetch the canonical profile of the token's subject.

        Args:
            token: Token to resolve; defaults to the current session token.

        Returns:
            The fresh profile. Merging it into the session is up to the caller.

        Raises:
            MalformedToken: No token, or its payload has no readable subject.
            ProfileFetchFailed: The backend could not be reached or refused.
        """
        token = token or self._store.token
        if not token:
            raise MalformedToken("Not signed in")

        user_id = subject_from_token(token)

        try:
            return self._users.get_user(user_id)

        except ProfileFetchFailed:
            raise

        except AuthError as exc:
            logger.warning(
                "Profile fetch failed",
                extra={"user_id": user_id, "reason": exc.message},
            )
            raise ProfileFetchFailed(status_code=exc.status_code) from exc
