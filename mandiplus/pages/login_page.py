"""
Login page UI.

Two-step mobile number + OTP form.
"""

import asyncio
from typing import Optional

from nicegui import ui

from mandiplus.auth.errors import AuthError
from mandiplus.layouts.auth_layout import auth_layout
from mandiplus.layouts.routing import login_view_for
from mandiplus.pages.navigation import follow_directive
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger
from mandiplus.utils.validation import is_valid_indian_mobile, is_valid_otp

logger = get_logger(__name__)


def show_login_page() -> None:
    """Render the login page."""
    auth_layout("Mandi Plus", "Sign in to your account", _login_form)


def _login_form() -> None:
    mobile = (
        ui.input(label="Mobile Number", placeholder="10-digit mobile number")
        .props("outlined dense maxlength=10 inputmode=numeric")
        .classes("w-full")
    )

    otp_hint = ui.label("").classes("text-sm text-gray-500 mt-3")
    otp = (
        ui.input(label="OTP", placeholder="Enter 6-digit OTP")
        .props("outlined dense maxlength=6 inputmode=numeric")
        .classes("w-full")
    )

    submit_btn = ui.button("Get OTP").classes(
        "w-full mt-5 bg-emerald-600 text-white font-semibold rounded-lg"
    )

    ui.separator().classes("my-4")

    back_btn = ui.button("Back to login").props("flat").classes("w-full")
    with ui.column().classes("w-full items-center") as signup_links:
        ui.label("New here? Verify your number to create an account.").classes(
            "text-sm text-gray-500"
        )
        ui.link("Register as an agent", "/agent/signup").classes("text-sm")

    def show_code_step(code_sent: bool, show_back: bool | None = None) -> None:
        otp.set_visibility(code_sent)
        otp_hint.set_visibility(code_sent)
        back_btn.set_visibility(code_sent if show_back is None else show_back)
        signup_links.set_visibility(not code_sent)
        if code_sent:
            mobile.props("readonly")
        else:
            mobile.props(remove="readonly")
        submit_btn.set_text("Verify OTP" if code_sent else "Get OTP")
        if code_sent:
            otp_hint.set_text(f"Enter OTP sent to {mobile.value}")
        else:
            otp.set_value("")

    def go_back() -> None:
        state.otp.reset()
        show_code_step(False)

    challenge = state.otp.challenge
    if challenge is not None:
        mobile.set_value(challenge.mobile_number)
    show_code_step(*login_view_for(challenge))

    back_btn.on_click(go_back)
    submit_btn.on_click(
        lambda: _handle_submit(
            mobile.value,
            otp.value,
            otp.visible,
            submit_btn,
            show_code_step,
        )
    )


def login_input_error(mobile_number: str, code: str, code_sent: bool) -> Optional[str]:
    """
    Client-side check of the current login step.

    Uses the same mobile rule as registration, so a number that passes
    here can always be registered.
    """
    if not code_sent and not is_valid_indian_mobile(mobile_number):
        return "Please enter a valid 10-digit Indian mobile number"

    if code_sent and not is_valid_otp(code):
        return "Please enter a valid 6-digit OTP"

    return None


async def _handle_submit(
    mobile_number: str,
    code: str,
    code_sent: bool,
    button,
    show_code_step,
) -> None:
    """
    Send the OTP on the first step, verify it on the second.
    """
    if state.submitting:
        return

    mobile_number = (mobile_number or "").strip()
    code = (code or "").strip()

    problem = login_input_error(mobile_number, code, code_sent)
    if problem:
        ui.notify(problem, type="warning")
        return

    state.submitting = True
    button.disable()

    try:
        if not code_sent:
            await asyncio.to_thread(state.otp.request_code, mobile_number)
            show_code_step(True)
            ui.notify("OTP sent to your mobile number!", type="positive")
        else:
            directive = await asyncio.to_thread(
                state.otp.verify_code,
                mobile_number,
                code,
            )
            await follow_directive(directive, "Login successful!")

    except AuthError as exc:
        logger.warning("Login step failed", extra={"reason": exc.message})
        ui.notify(exc.message, type="negative")

    finally:
        state.submitting = False
        button.enable()
