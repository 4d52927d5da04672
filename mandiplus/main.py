"""
Application entrypoint and route definitions.

Registers all pages and starts the NiceGUI app.
"""

from nicegui import app, ui

from mandiplus.config import settings
from mandiplus.layouts.routing import (
    LOGIN_ROUTE,
    agent_redirect,
    home_route_for,
    member_redirect,
)
from mandiplus.pages.agent_signup_page import show_agent_signup_page
from mandiplus.pages.home_page import show_agent_home_page, show_home_page
from mandiplus.pages.login_page import show_login_page
from mandiplus.pages.register_page import show_register_page
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


def _restore_session() -> None:
    """
    Restore the persisted session before any page renders.

    Must stay synchronous: NiceGUI runs async startup handlers as
    background tasks that may still be pending when pages are served.
    """
    session = state.sessions.initialize()
    logger.info(
        "Session initialized",
        extra={"authenticated": session.authenticated},
    )


app.on_startup(_restore_session)


@ui.page("/")
def root() -> None:
    """Root route – redirects to home or login."""
    session = state.store.get_session()
    target = home_route_for(session.user) if session.authenticated else LOGIN_ROUTE
    logger.debug("Root route accessed; redirecting", extra={"target": target})
    ui.navigate.to(target)


@ui.page("/login")
def login() -> None:
    """Login page route."""
    session = state.store.get_session()
    if session.authenticated:
        ui.navigate.to(home_route_for(session.user))
        return

    logger.debug("Login page accessed")
    show_login_page()


@ui.page("/register")
def register(mobile: str = "") -> None:
    """Registration page route."""
    logger.debug("Register page accessed")
    show_register_page(mobile)


@ui.page("/agent/signup")
def agent_signup(mobile: str = "") -> None:
    """Agent signup page route."""
    logger.debug("Agent signup page accessed")
    show_agent_signup_page(mobile)


@ui.page("/home")
def home() -> None:
    """Home page route."""
    session = state.store.get_session()
    target = member_redirect(session.authenticated, state.sessions.loading)
    if target:
        logger.warning("Unauthorized access to home; redirecting to login")
        ui.navigate.to(target)
        return

    show_home_page()


@ui.page("/agent")
def agent_home() -> None:
    """Agent-only home route."""
    target = agent_redirect(state.user, state.sessions.loading)
    if target:
        logger.warning("Agent page access denied", extra={"target": target})
        ui.navigate.to(target)
        return

    show_agent_home_page()


def start_app() -> None:
    """
    Start the NiceGUI application.
    """
    logger.info("Starting Mandi Plus client")

    ui.run(
        title=settings.UI_TITLE,
        port=settings.UI_PORT,
        reload=False,
        storage_secret=settings.STORAGE_SECRET,
    )


if __name__ == "__main__":
    start_app()
