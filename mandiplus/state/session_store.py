"""
Session Store.

Single owner of the current access token and cached user profile.
All writes go through this class; every other component reads snapshots.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from pydantic import ValidationError

from mandiplus.auth.errors import AuthError
from mandiplus.auth.models import UserProfile
from mandiplus.auth.tokens import decode_claims, is_expired, subject_from_claims
from mandiplus.state.storage import ACCESS_TOKEN_KEY, USER_KEY, SessionStorage
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Session:
    token: Optional[str] = None
    user: Optional[UserProfile] = None
    generation: int = 0

    @property
    def authenticated(self) -> bool:
        return self.token is not None


SessionListener = Callable[[Session], None]


class SessionStore:
    """
    Process-wide holder of the authenticated session.

    `generation` changes every time the token is installed or cleared.
    Callers that start a network operation capture it first and pass it
    back as `expected_generation`; a mismatch means the session was
    replaced meanwhile and the late result is dropped.
    """

    def __init__(
        self,
        storage: SessionStorage,
        *,
        check_expiry: bool = False,
    ) -> None:
        self._storage = storage
        self._check_expiry = check_expiry
        self._lock = threading.RLock()
        self._token: Optional[str] = None
        self._user: Optional[UserProfile] = None
        self._generation = 0
        self._listeners: List[SessionListener] = []

    # --------------------
    # Reads
    # --------------------
    @property
    def token(self) -> Optional[str]:
        with self._lock:
            return self._token

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get_session(self) -> Session:
        with self._lock:
            return Session(self._token, self._user, self._generation)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    # --------------------
    # Writes
    # --------------------
    def set_token(
        self,
        token: Optional[str],
        *,
        expected_generation: Optional[int] = None,
    ) -> bool:
        """
        Install or clear the current token.

        A new token replaces the cached profile, which belonged to the
        previous identity. Returns False when the write was dropped as stale.
        """
        with self._lock:
            if self._is_stale(expected_generation):
                return False

            if token != self._token:
                self._user = None
            self._token = token or None
            self._generation += 1
            self._persist()
            snapshot = self.get_session()

        logger.info(
            "Session token updated",
            extra={
                "authenticated": snapshot.authenticated,
                "generation": snapshot.generation,
            },
        )
        self._notify(snapshot)
        return True

    def set_user(
        self,
        user: Optional[UserProfile],
        *,
        expected_generation: Optional[int] = None,
    ) -> bool:
        """
        Cache the user profile for the current token.

        Consent is monotonic: a profile for the same user that reports
        consent as not given never overrides a locally known `True`.
        """
        with self._lock:
            if self._is_stale(expected_generation):
                return False

            if self._token is None:
                logger.warning("Dropping profile update without an active session")
                return False

            if (
                user is not None
                and self._user is not None
                and self._user.id == user.id
                and self._user.consent_given
                and not user.consent_given
            ):
                user = user.model_copy(update={"consent_given": True})

            self._user = user
            self._persist()
            snapshot = self.get_session()

        self._notify(snapshot)
        return True

    def mark_consent_given(
        self,
        user_id: str,
        *,
        expected_generation: Optional[int] = None,
    ) -> bool:
        """Flip `consent_given` on the cached profile of `user_id`."""
        with self._lock:
            if self._is_stale(expected_generation):
                return False

            if self._user is None or self._user.id != user_id:
                logger.warning(
                    "Consent acknowledgment for a user no longer in session",
                    extra={"user_id": user_id},
                )
                return False

            if self._user.consent_given:
                return True

            self._user = self._user.model_copy(update={"consent_given": True})
            self._persist()
            snapshot = self.get_session()

        logger.info("Consent recorded locally", extra={"user_id": user_id})
        self._notify(snapshot)
        return True

    def hydrate(self) -> Session:
        """
        Restore a persisted session at start-up.

        The token is restored exactly as stored; it is only decoded to
        check expiry (when enabled) and to match the cached profile to its
        subject. An unreadable token is left for the Identity Resolver to
        reject. This method never raises for bad persisted data.
        """
        data = self._storage.load()
        token = data.get(ACCESS_TOKEN_KEY)

        if not token or not isinstance(token, str):
            logger.info("No persisted session found")
            return self.get_session()

        subject = None
        try:
            claims = decode_claims(token)
            subject = subject_from_claims(claims)
        except AuthError as exc:
            if self._check_expiry:
                logger.warning(
                    "Discarding persisted session",
                    extra={"reason": exc.message},
                )
                self._storage.clear()
                return self.get_session()
            logger.info("Persisted token is opaque; restoring as stored")
        else:
            if self._check_expiry and is_expired(claims):
                logger.warning(
                    "Discarding persisted session",
                    extra={"reason": "Session expired"},
                )
                self._storage.clear()
                return self.get_session()

        user = None
        raw_user = data.get(USER_KEY)
        if raw_user:
            try:
                user = UserProfile.model_validate(raw_user)
            except ValidationError:
                logger.warning("Discarding unreadable cached profile")

        if user is not None and subject is not None and user.id != subject:
            logger.warning(
                "Cached profile does not match token subject; discarding it",
                extra={"user_id": user.id},
            )
            user = None

        with self._lock:
            self._token = token
            self._user = user
            self._generation += 1
            snapshot = self.get_session()

        logger.info(
            "Session restored",
            extra={"user_id": subject, "has_profile": user is not None},
        )
        self._notify(snapshot)
        return snapshot

    def logout(self) -> None:
        """Clear token, cached profile and persisted storage."""
        self.set_token(None)
        logger.info("Session cleared")

    # --------------------
    # Internals
    # --------------------
    def _is_stale(self, expected_generation: Optional[int]) -> bool:
        if expected_generation is None or expected_generation == self._generation:
            return False

        logger.info(
            "Dropping stale session write",
            extra={
                "expected_generation": expected_generation,
                "generation": self._generation,
            },
        )
        return True

    def _persist(self) -> None:
        if self._token is None:
            self._storage.clear()
            return

        data = {ACCESS_TOKEN_KEY: self._token}
        if self._user is not None:
            data[USER_KEY] = self._user.to_storage()
        self._storage.save(data)

    def _notify(self, snapshot: Session) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener failed")
