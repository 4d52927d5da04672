"""
Durable client-side storage for the session.

The Session Store only talks to the `SessionStorage` interface, so the
backend can be NiceGUI's persistent storage in the app or plain memory
in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, MutableMapping, Optional

from nicegui import app

from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
USER_KEY = "user"


class SessionStorage(ABC):
    """Persistence interface for the access token and cached profile."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Return the persisted record, or an empty dict."""

    @abstractmethod
    def save(self, data: Dict[str, Any]) -> None:
        """Replace the persisted record."""

    @abstractmethod
    def clear(self) -> None:
        """Remove everything persisted."""


class MemoryStorage(SessionStorage):
    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self) -> Dict[str, Any]:
        return dict(self._data)

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = {}


class NiceGuiStorage(SessionStorage):
    """
    Keep the session record in NiceGUI's persistent storage.

    Uses `app.storage.general`, which NiceGUI writes to disk and loads
    before startup handlers run. It is shared by every browser of this
    client process, matching the single-session model. Per-browser
    `app.storage.user` needs a request context, which start-up restore
    does not have.

    Args:
        key: Entry under which the record is kept.
        backend: Mapping to use instead of `app.storage.general`.
    """

    def __init__(
        self,
        key: str = "mandiplus.session",
        backend: Optional[MutableMapping[str, Any]] = None,
    ) -> None:
        self.key = key
        self._backend = backend

    @property
    def backend(self) -> MutableMapping[str, Any]:
        if self._backend is not None:
            return self._backend
        return app.storage.general

    def load(self) -> Dict[str, Any]:
        data = self.backend.get(self.key)
        if data is None:
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Unexpected persisted session; ignoring",
                extra={"key": self.key},
            )
            return {}

        return dict(data)

    def save(self, data: Dict[str, Any]) -> None:
        self.backend[self.key] = dict(data)

    def clear(self) -> None:
        self.backend.pop(self.key, None)
