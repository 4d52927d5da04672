from mandiplus.auth.models import UserProfile
from mandiplus.state.session_store import SessionStore
from mandiplus.state.storage import ACCESS_TOKEN_KEY, USER_KEY, MemoryStorage


def _user(**fields):
    data = {"id": "user-1", "name": "Ravi", "isConsent": False}
    data.update(fields)
    return UserProfile.model_validate(data)


def test_set_token_persists_and_clears(token_factory):
    storage = MemoryStorage()
    store = SessionStore(storage)
    token = token_factory()

    assert store.set_token(token) is True
    assert store.token == token
    assert storage.load() == {ACCESS_TOKEN_KEY: token}

    store.set_token(None)
    assert store.token is None
    assert storage.load() == {}


def test_token_survives_simulated_reload(token_factory):
    storage = MemoryStorage()
    token = token_factory()
    SessionStore(storage).set_token(token)

    reloaded = SessionStore(storage)
    session = reloaded.hydrate()

    assert session.token == token
    assert reloaded.token == token


def test_hydrate_restores_cached_profile(token_factory):
    storage = MemoryStorage()
    store = SessionStore(storage)
    store.set_token(token_factory())
    store.set_user(_user(isConsent=True))

    session = SessionStore(storage).hydrate()

    assert session.user is not None
    assert session.user.id == "user-1"
    assert session.user.consent_given is True


def test_opaque_token_survives_reload():
    storage = MemoryStorage()
    SessionStore(storage).set_token("abc")

    session = SessionStore(storage).hydrate()

    assert session.token == "abc"
    assert storage.load() == {ACCESS_TOKEN_KEY: "abc"}


def test_opaque_token_keeps_cached_profile():
    storage = MemoryStorage(
        {ACCESS_TOKEN_KEY: "abc", USER_KEY: {"id": "user-1", "isConsent": True}}
    )

    session = SessionStore(storage).hydrate()

    assert session.user is not None
    assert session.user.consent_given is True


def test_undecodable_token_is_discarded_when_expiry_checked():
    storage = MemoryStorage({ACCESS_TOKEN_KEY: "not-a-jwt"})
    store = SessionStore(storage, check_expiry=True)

    session = store.hydrate()

    assert session.authenticated is False
    assert storage.load() == {}


def test_token_without_subject_is_restored(token_factory):
    token = token_factory(sub=None, role="x")
    storage = MemoryStorage({ACCESS_TOKEN_KEY: token})

    assert SessionStore(storage).hydrate().token == token


def test_hydrate_keeps_expired_token_unless_expiry_checked(token_factory):
    token = token_factory(exp=1)

    lenient = SessionStore(MemoryStorage({ACCESS_TOKEN_KEY: token}))
    strict = SessionStore(MemoryStorage({ACCESS_TOKEN_KEY: token}), check_expiry=True)

    assert lenient.hydrate().token == token
    assert strict.hydrate().authenticated is False


def test_hydrate_drops_profile_of_other_user(token_factory):
    storage = MemoryStorage(
        {
            ACCESS_TOKEN_KEY: token_factory("user-1"),
            USER_KEY: {"id": "user-2", "isConsent": True},
        }
    )

    session = SessionStore(storage).hydrate()

    assert session.authenticated is True
    assert session.user is None


def test_new_token_replaces_cached_profile(token_factory):
    store = SessionStore(MemoryStorage())
    store.set_token(token_factory("user-1"))
    store.set_user(_user())

    store.set_token(token_factory("user-2"))

    assert store.get_session().user is None


def test_consent_is_monotonic(token_factory):
    store = SessionStore(MemoryStorage())
    store.set_token(token_factory())
    store.set_user(_user(isConsent=True))

    store.set_user(_user(isConsent=False, name="Ravi K"))

    user = store.get_session().user
    assert user.consent_given is True
    assert user.name == "Ravi K"


def test_stale_writes_are_dropped(token_factory):
    store = SessionStore(MemoryStorage())
    generation = store.generation

    store.set_token(token_factory("user-1"))

    assert store.set_token(token_factory("user-2"), expected_generation=generation) is False
    assert store.set_user(_user(), expected_generation=generation) is False
    assert store.mark_consent_given("user-1", expected_generation=generation) is False


def test_profile_without_session_is_dropped():
    store = SessionStore(MemoryStorage())

    assert store.set_user(_user()) is False
    assert store.get_session().user is None


def test_mark_consent_given_updates_and_persists(token_factory):
    storage = MemoryStorage()
    store = SessionStore(storage)
    store.set_token(token_factory())
    store.set_user(_user())

    assert store.mark_consent_given("user-1") is True
    assert store.get_session().user.consent_given is True
    assert storage.load()[USER_KEY]["isConsent"] is True


def test_logout_clears_everything_and_notifies(token_factory):
    storage = MemoryStorage()
    store = SessionStore(storage)
    seen = []
    store.subscribe(seen.append)
    store.set_token(token_factory())
    store.set_user(_user())

    store.logout()

    session = store.get_session()
    assert session.token is None
    assert session.user is None
    assert storage.load() == {}
    assert seen[-1].authenticated is False


def test_failing_listener_does_not_break_writes(token_factory):
    store = SessionStore(MemoryStorage())

    def boom(_):
        raise RuntimeError("listener failure")

    store.subscribe(boom)

    assert store.set_token(token_factory()) is True
