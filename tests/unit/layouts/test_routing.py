from mandiplus.auth.models import (
    Directive,
    DirectiveKind,
    OtpChallenge,
    OtpStep,
    UserProfile,
)
from mandiplus.layouts.routing import (
    agent_redirect,
    login_view_for,
    member_redirect,
    route_for_directive,
)

AGENT = UserProfile(id="a1", identity="AGENT", isConsent=True)
FARMER = UserProfile(id="u1", identity="USER", isConsent=True)


def test_register_directive_carries_mobile_number():
    directive = Directive(DirectiveKind.REGISTER, "9999999999")

    assert route_for_directive(directive) == "/register?mobile=9999999999"


def test_signed_in_directives_go_home():
    assert route_for_directive(Directive(DirectiveKind.HOME, "1", token="t")) == "/home"
    assert (
        route_for_directive(Directive(DirectiveKind.LOGIN_VERIFY, "1", token="t", user=AGENT))
        == "/agent"
    )


def test_code_sent_and_stale_stay_put():
    assert route_for_directive(Directive(DirectiveKind.CODE_SENT, "1")) is None
    assert route_for_directive(Directive(DirectiveKind.HOME, "1", token="t", stale=True)) is None


def test_agent_redirect():
    assert agent_redirect(None, loading=True) is None
    assert agent_redirect(None, loading=False) == "/login"
    assert agent_redirect(FARMER, loading=False) == "/home"
    assert agent_redirect(AGENT, loading=False) is None


def test_member_redirect():
    assert member_redirect(authenticated=False, loading=False) == "/login"
    assert member_redirect(authenticated=True, loading=False) is None
    assert member_redirect(authenticated=False, loading=True) is None


def test_login_form_without_challenge():
    assert login_view_for(None) == (False, False)


def test_pending_code_reopens_code_step_with_back():
    challenge = OtpChallenge("9999999999", OtpStep.CODE_SENT)

    assert login_view_for(challenge) == (True, True)


def test_pending_registration_still_offers_back():
    challenge = OtpChallenge("9999999999", OtpStep.VERIFIED, DirectiveKind.REGISTER)

    assert login_view_for(challenge) == (False, True)
