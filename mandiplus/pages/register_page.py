"""
Registration page UI.

Shown after OTP verification returned REGISTER for a new mobile number.
"""

import asyncio

from nicegui import ui
from pydantic import ValidationError

from mandiplus.auth.errors import AuthError
from mandiplus.auth.models import RegistrationForm
from mandiplus.layouts.auth_layout import auth_layout
from mandiplus.pages.navigation import follow_directive
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger
from mandiplus.utils.validation import (
    INDIAN_STATES,
    is_valid_indian_mobile,
    is_valid_state,
)

logger = get_logger(__name__)


def show_register_page(mobile: str = "") -> None:
    """
    Render the registration form.

    Args:
        mobile: Mobile number from the query string, used only as a
            display hint; the verified challenge is authoritative.
    """
    challenge = state.otp.challenge

    if challenge is None or not challenge.can_register:
        logger.warning("Registration page opened without a verified number")
        ui.navigate.to("/login")
        return

    if mobile and mobile != challenge.mobile_number:
        logger.warning("Ignoring mobile number from query string")

    auth_layout(
        "Create your account",
        f"Mobile number {challenge.mobile_number} verified",
        lambda: _register_form(challenge.mobile_number),
    )


def _register_form(mobile_number: str) -> None:
    name = (
        ui.input(label="Full Name", placeholder="Your name")
        .props("outlined dense")
        .classes("w-full")
    )

    ui.input(label="Mobile Number", value=mobile_number).props(
        "outlined dense readonly"
    ).classes("w-full mt-3")

    state_select = (
        ui.select(INDIAN_STATES, label="State", with_input=True)
        .props("outlined dense")
        .classes("w-full mt-3")
    )

    register_btn = ui.button(
        "Register",
        on_click=lambda: _handle_register(
            mobile_number,
            name.value,
            state_select.value,
            register_btn,
        ),
    ).classes("w-full mt-5 bg-emerald-600 text-white font-semibold rounded-lg")

    ui.separator().classes("my-4")

    def start_over() -> None:
        state.otp.reset()
        ui.navigate.to("/login")

    ui.button("Use a different number", on_click=start_over).props("flat").classes(
        "w-full"
    )


async def _handle_register(
    mobile_number: str,
    name: str,
    state_code: str,
    button,
) -> None:
    """Submit the profile for the verified number and sign in."""
    if state.submitting:
        return

    if not name or not state_code:
        ui.notify("Please fill in all required fields", type="warning")
        return

    if not is_valid_indian_mobile(mobile_number):
        ui.notify("Please enter a valid 10-digit Indian mobile number", type="warning")
        return

    if not is_valid_state(state_code):
        ui.notify("Please select a valid state", type="warning")
        return

    try:
        form = RegistrationForm(name=name.strip(), state=state_code)
    except ValidationError:
        ui.notify("Please fill in all required fields", type="warning")
        return

    state.submitting = True
    button.disable()

    try:
        directive = await asyncio.to_thread(state.otp.complete_registration, form)
        await follow_directive(directive, "Registration successful!")

    except AuthError as exc:
        logger.warning("Registration failed", extra={"reason": exc.message})
        ui.notify(exc.message, type="negative")

    finally:
        state.submitting = False
        button.enable()
