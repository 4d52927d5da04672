"""
Home pages for signed-in users and agents.

Both render behind the consent overlay.
"""

import asyncio

from nicegui import ui

from mandiplus.layouts.consent_layout import consent_guard
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger
from mandiplus.utils.validation import INDIAN_STATES

logger = get_logger(__name__)


def show_home_page() -> None:
    consent_guard(_home_content)


def show_agent_home_page() -> None:
    consent_guard(_agent_content)


def _header() -> None:
    with ui.row().classes("w-full items-center justify-between p-4 bg-white shadow"):
        ui.label("Mandi Plus").classes("text-xl font-bold text-emerald-700")
        ui.button("Logout", on_click=_logout).props("flat").classes("text-gray-600")


def _home_content() -> None:
    user = state.user
    _header()

    with ui.column().classes("w-full max-w-3xl mx-auto p-6 gap-2"):
        if user is None:
            ui.label("Welcome!").classes("text-2xl font-semibold")
            ui.label("We could not load your profile. Some details may be missing.").classes(
                "text-sm text-gray-500"
            )
            ui.button("Retry", on_click=_refresh_profile).props("outline")
            return

        ui.label(f"Welcome, {user.name or user.mobile_number or ''}").classes(
            "text-2xl font-semibold"
        )
        if user.state:
            ui.label(INDIAN_STATES.get(user.state, user.state)).classes("text-gray-500")


def _agent_content() -> None:
    user = state.user
    _header()

    with ui.column().classes("w-full max-w-3xl mx-auto p-6 gap-2"):
        ui.label("Agent Dashboard").classes("text-2xl font-semibold")
        if user is not None:
            ui.label(user.name or "").classes("text-gray-700")
            if user.mandi_name:
                ui.label(f"Mandi: {user.mandi_name}").classes("text-gray-500")


async def _refresh_profile() -> None:
    user = await asyncio.to_thread(state.sessions.refresh_profile)
    if user is None:
        ui.notify("Could not load your profile. Please try again.", type="negative")
        return
    ui.navigate.reload()


async def _logout() -> None:
    """Sign out; the local session is always cleared."""
    logger.info("Logout requested")
    await asyncio.to_thread(state.sessions.logout)
    ui.navigate.to("/login")
