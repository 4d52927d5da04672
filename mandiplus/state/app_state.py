"""
Process-wide client state.

Wires the session components together once per client process. Pages
import `state` and never construct components themselves.
"""

from typing import Optional

import requests

from mandiplus.api.auth_client import AuthApi
from mandiplus.api.http_client import ApiClient
from mandiplus.api.user_client import UserApi
from mandiplus.auth.consent_gate import ConsentGate
from mandiplus.auth.identity import IdentityResolver
from mandiplus.auth.otp_flow import OtpOrchestrator
from mandiplus.auth.session_manager import SessionManager
from mandiplus.config import Settings, settings
from mandiplus.state.session_store import SessionStore
from mandiplus.state.storage import NiceGuiStorage, SessionStorage


class AppState:
    def __init__(
        self,
        config: Settings = settings,
        *,
        storage: Optional[SessionStorage] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.store = SessionStore(
            storage or NiceGuiStorage(config.SESSION_STORAGE_KEY),
            check_expiry=config.CHECK_TOKEN_EXPIRY,
        )
        self.client = ApiClient(
            self.store,
            base_url=config.API_BASE_URL,
            timeout=config.REQUEST_TIMEOUT,
            http=http,
        )
        self.auth_api = AuthApi(self.client, upload_timeout=config.UPLOAD_TIMEOUT)
        self.users = UserApi(self.client)

        self.resolver = IdentityResolver(self.store, self.users)
        self.otp = OtpOrchestrator(self.auth_api, self.store, self.client)
        self.sessions = SessionManager(
            self.store,
            self.resolver,
            self.auth_api,
            logout_endpoint=config.LOGOUT_ENDPOINT,
        )
        self.consent = ConsentGate(self.store, self.users)

        #  UI / FLOW STATE
        self.submitting: bool = False

    @property
    def user(self):
        return self.store.get_session().user


state = AppState()
