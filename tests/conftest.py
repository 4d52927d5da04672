"""
Pytest configuration and fixtures.

The backend is replaced by a `requests` transport adapter mounted on the
client's HTTP session, so the real auth hook, headers and multipart
encoding run on every test request.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import pytest
import requests
from jose import jwt
from requests.adapters import BaseAdapter

from mandiplus.config import Settings
from mandiplus.state.app_state import AppState
from mandiplus.state.storage import MemoryStorage

BASE_URL = "http://backend.test"


class FakeBackend(BaseAdapter):
    """
    Canned responses keyed by (method, path).

    Each route holds a queue; the last entry repeats once the others
    have been consumed.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.requests: List[requests.PreparedRequest] = []
        self.timeouts: List[Any] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        raw: Optional[bytes] = None,
        exc: Optional[Exception] = None,
    ) -> None:
        self.routes.setdefault((method, path), []).append(
            {"status": status, "json": json_body, "raw": raw, "exc": exc}
        )

    def calls(self, method: str, path: str) -> List[requests.PreparedRequest]:
        return [
            r
            for r in self.requests
            if r.method == method and urlparse(r.url).path == path
        ]

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        queue = self.routes.get((request.method, urlparse(request.url).path))

        if not queue:
            canned = {"status": 404, "json": {"message": "Not Found"}, "raw": None, "exc": None}
        else:
            canned = queue.pop(0) if len(queue) > 1 else queue[0]

        if canned["exc"] is not None:
            raise canned["exc"]

        response = requests.Response()
        response.status_code = canned["status"]
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        response.headers["Content-Type"] = "application/json"
        if canned["raw"] is not None:
            response._content = canned["raw"]
        elif canned["json"] is not None:
            response._content = json.dumps(canned["json"]).encode("utf-8")
        else:
            response._content = b""
        return response

    def close(self) -> None:
        pass


def make_token(sub: Optional[str] = "user-1", **claims: Any) -> str:
    """Mint a signed JWT; the client never checks the signature."""
    payload = dict(claims)
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def profile(user_id: str = "user-1", **fields: Any) -> Dict[str, Any]:
    data = {
        "id": user_id,
        "name": "Ravi Kumar",
        "identity": "USER",
        "mobileNumber": "9999999999",
        "state": "PUNJAB",
        "isConsent": False,
    }
    data.update(fields)
    return data


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        API_BASE_URL=BASE_URL,
        REQUEST_TIMEOUT=5,
        LOGOUT_ENDPOINT="/auth/logout",
        CHECK_TOKEN_EXPIRY=False,
    )


@pytest.fixture
def app_state(backend, storage, test_settings) -> AppState:
    http = requests.Session()
    http.mount("http://", backend)
    return AppState(test_settings, storage=storage, http=http)


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def profile_factory():
    return profile
