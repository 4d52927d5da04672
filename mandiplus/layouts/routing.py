"""
Navigation decisions.

Pure functions so page guards can be tested without a running UI.
"""

from typing import Optional, Tuple
from urllib.parse import urlencode

from mandiplus.auth.models import (
    Directive,
    DirectiveKind,
    OtpChallenge,
    OtpStep,
    UserProfile,
)

LOGIN_ROUTE = "/login"
HOME_ROUTE = "/home"
AGENT_HOME_ROUTE = "/agent"
REGISTER_ROUTE = "/register"


def home_route_for(user: Optional[UserProfile]) -> str:
    if user is not None and user.is_agent:
        return AGENT_HOME_ROUTE
    return HOME_ROUTE


def route_for_directive(directive: Directive) -> Optional[str]:
    """
    Where to go after an onboarding step.

    Returns None when the UI should stay put (code sent, or a result that
    arrived after the session moved on).
    """
    if directive.stale:
        return None

    if directive.kind == DirectiveKind.REGISTER:
        return f"{REGISTER_ROUTE}?{urlencode({'mobile': directive.mobile_number})}"

    if directive.authenticated:
        return home_route_for(directive.user)

    return None


def member_redirect(authenticated: bool, loading: bool) -> Optional[str]:
    """Redirect for pages that need any signed-in user."""
    if loading or authenticated:
        return None
    return LOGIN_ROUTE


def agent_redirect(user: Optional[UserProfile], loading: bool) -> Optional[str]:
    """
    Redirect for agent-only pages.

    No user goes to login, a non-agent goes home, an agent stays.
    """
    if loading:
        return None
    if user is None:
        return LOGIN_ROUTE
    if not user.is_agent:
        return HOME_ROUTE
    return None


def login_view_for(challenge: Optional[OtpChallenge]) -> Tuple[bool, bool]:
    """
    Initial login form for a pending challenge.

    Returns `(show_code_step, show_back)`. Any pending challenge pins the
    mobile number, so "Back to login" stays reachable while one exists.
    """
    if challenge is None:
        return False, False
    return challenge.step == OtpStep.CODE_SENT, True
