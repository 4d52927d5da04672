"""
Follow-up navigation after an onboarding step.
"""

import asyncio

from nicegui import ui

from mandiplus.auth.models import Directive
from mandiplus.layouts.routing import home_route_for, route_for_directive
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


async def follow_directive(directive: Directive, success_message: str) -> None:
    """
    Hydrate the profile for a signed-in directive, then navigate.

    Stale directives are ignored.
    """
    if directive.stale:
        logger.info("Ignoring stale onboarding result")
        return

    if directive.authenticated or directive.token:
        user = await asyncio.to_thread(state.sessions.complete_sign_in, directive)
        if user is None:
            logger.warning("Login complete but user data is still missing")
        ui.notify(success_message, type="positive")
        ui.navigate.to(home_route_for(user))
        return

    target = route_for_directive(directive)
    if target:
        ui.navigate.to(target)
