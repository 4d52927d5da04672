"""
Backend HTTP client.

Every outbound call goes through one `requests.Session` whose auth hook
reads the current token from the Session Store at dispatch time, so call
sites never deal with Authorization headers themselves.
"""

from typing import Any, Dict, Optional, Type

import requests
from requests import RequestException
from requests.auth import AuthBase

from mandiplus.auth.errors import AuthError, NetworkUnavailable
from mandiplus.config import settings
from mandiplus.state.session_store import Session, SessionStore
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)

REFRESH_TOKEN_COOKIE = "refreshToken"


class BearerAuth(AuthBase):
    """Attach `Authorization: Bearer <token>` when a session is active."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        token = self._store.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request


def _server_message(response: requests.Response) -> Optional[str]:
    """Pull the backend's `message` field out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return None

    if not isinstance(body, dict):
        return None

    message = body.get("message")
    # Validation pipes answer with a list of messages
    if isinstance(message, list):
        message = message[0] if message else None

    return message if isinstance(message, str) and message else None


class ApiClient:
    """
    Thin wrapper around `requests.Session` bound to the backend base URL.

    Args:
        store: Session Store supplying the bearer token.
        base_url: Backend base URL; defaults to settings.
        timeout: Default request timeout in seconds.
        http: Pre-built `requests.Session` (tests mount fake adapters on it).
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.http = http or requests.Session()
        self.http.auth = BearerAuth(store)

        store.subscribe(self._on_session_change)

    def set_refresh_token(self, refresh_token: str) -> None:
        self.http.cookies.set(REFRESH_TOKEN_COOKIE, refresh_token)

    def _on_session_change(self, session: Session) -> None:
        if not session.authenticated:
            self.http.cookies.clear()

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        error: Type[AuthError] = AuthError,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Raises:
            NetworkUnavailable: If the backend cannot be reached.
            AuthError: `error` with the server-supplied message on a
                non-2xx response or an undecodable body.
        """
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.http.request(
                method,
                url,
                json=json_data,
                data=data,
                files=files,
                timeout=timeout or self.timeout,
            )

        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error(
                "Backend unreachable",
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise NetworkUnavailable() from exc

        except RequestException as exc:
            logger.exception(
                "HTTP request failed",
                extra={"method": method, "url": url},
            )
            raise error() from exc

        if not response.ok:
            logger.warning(
                "Backend rejected request",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status_code,
                },
            )
            raise error(
                _server_message(response),
                status_code=response.status_code,
            )

        if not response.content:
            return {}

        try:
            return response.json()

        except ValueError as exc:
            logger.exception(
                "Invalid JSON response",
                extra={"url": url},
            )
            raise error("Invalid response from server") from exc

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("POST", endpoint, **kwargs)

    def patch(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("PATCH", endpoint, **kwargs)
