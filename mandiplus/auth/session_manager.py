"""
Session lifecycle.

Start-up restore, sign-in profile hydration, on-demand refresh and logout.
"""

from typing import Optional

from mandiplus.api.auth_client import AuthApi
from mandiplus.auth.errors import AuthError, MalformedToken
from mandiplus.auth.identity import IdentityResolver
from mandiplus.auth.models import Directive, UserProfile
from mandiplus.state.session_store import Session, SessionStore
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


class SessionManager:
    """
    Coordinates the Session Store with the Identity Resolver.

    `loading` is True until `initialize()` has finished; the UI shows a
    spinner instead of any page while it is set.
    """

    def __init__(
        self,
        store: SessionStore,
        resolver: IdentityResolver,
        auth_api: AuthApi,
        *,
        logout_endpoint: str = "/auth/logout",
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._auth_api = auth_api
        self._logout_endpoint = logout_endpoint
        self.loading = True

    def initialize(self) -> Session:
        """Restore the persisted session and fill in a missing profile."""
        try:
            session = self._store.hydrate()
            if session.authenticated and session.user is None:
                self.refresh_profile()
            return self._store.get_session()
        finally:
            self.loading = False

    def complete_sign_in(self, directive: Directive) -> Optional[UserProfile]:
        """
        Make sure a freshly signed-in session has a profile.

        Uses the profile returned by the backend when there was one and
        fetches it otherwise. A failed fetch leaves the user signed in
        without a profile.
        """
        if directive.stale or not directive.token:
            return None

        session = self._store.get_session()
        if session.user is not None:
            return session.user

        logger.info("User data missing, fetching profile")
        return self.refresh_profile()

    def refresh_profile(self) -> Optional[UserProfile]:
        """
        Re-fetch the canonical profile and merge it into the session.

        Returns None when the profile could not be fetched. An unreadable
        token signs the user out.
        """
        session = self._store.get_session()
        if not session.authenticated:
            return None

        try:
            user = self._resolver.resolve_current_user(session.token)

        except MalformedToken as exc:
            logger.warning(
                "Session token unreadable; signing out",
                extra={"reason": exc.message},
            )
            self._store.set_token(None, expected_generation=session.generation)
            return None

        except AuthError as exc:
            logger.error(
                "Failed to fetch user profile",
                extra={"reason": exc.message},
            )
            return session.user

        if not self._store.set_user(user, expected_generation=session.generation):
            return None
        return self._store.get_session().user

    def logout(self) -> None:
        """
        Sign out locally, telling the backend on a best-effort basis.

        Never raises: the local session is cleared even if the backend
        call fails.
        """
        if self._store.token and self._logout_endpoint:
            try:
                self._auth_api.logout(self._logout_endpoint)
            except AuthError as exc:
                logger.warning(
                    "Server-side logout failed",
                    extra={"reason": exc.message},
                )

        self._store.logout()
