import requests

from mandiplus.api.http_client import REFRESH_TOKEN_COOKIE


def test_no_token_sends_no_authorization_header(app_state, backend):
    backend.add("GET", "/users/user-1", json_body={"id": "user-1"})

    app_state.client.get("/users/user-1")

    assert "Authorization" not in backend.requests[-1].headers


def test_token_change_is_visible_to_next_call(app_state, backend, token_factory):
    backend.add("GET", "/ping", json_body={})
    first = token_factory("user-1")
    second = token_factory("user-2")

    app_state.store.set_token(first)
    app_state.client.get("/ping")
    app_state.store.set_token(second)
    app_state.client.get("/ping")
    app_state.store.set_token(None)
    app_state.client.get("/ping")

    headers = [r.headers.get("Authorization") for r in backend.calls("GET", "/ping")]
    assert headers == [f"Bearer {first}", f"Bearer {second}", None]


def test_hydrated_token_is_attached(storage, backend, test_settings, token_factory):
    from mandiplus.state.app_state import AppState

    token = token_factory()
    storage.save({"accessToken": token})
    http = requests.Session()
    http.mount("http://", backend)
    reloaded = AppState(test_settings, storage=storage, http=http)
    backend.add("GET", "/ping", json_body={})

    reloaded.store.hydrate()
    reloaded.client.get("/ping")

    assert backend.requests[-1].headers["Authorization"] == f"Bearer {token}"


def test_clearing_session_drops_refresh_cookie(app_state, token_factory):
    app_state.store.set_token(token_factory())
    app_state.client.set_refresh_token("refresh-1")
    assert app_state.client.http.cookies.get(REFRESH_TOKEN_COOKIE) == "refresh-1"

    app_state.store.logout()

    assert app_state.client.http.cookies.get(REFRESH_TOKEN_COOKIE) is None
