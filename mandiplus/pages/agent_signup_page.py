"""
Agent signup page UI.

Single-shot multipart registration with an Aadhaar photo; no OTP step.
"""

import asyncio
from typing import Dict, Optional

from nicegui import ui
from pydantic import ValidationError

from mandiplus.auth.errors import AuthError
from mandiplus.auth.models import AgentRegistration, DocumentPhoto
from mandiplus.layouts.auth_layout import auth_layout
from mandiplus.pages.navigation import follow_directive
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger
from mandiplus.utils.validation import (
    INDIAN_STATES,
    digits_only,
    is_valid_aadhaar,
    is_valid_mobile,
)

logger = get_logger(__name__)


def show_agent_signup_page(mobile: str = "") -> None:
    """
    Render the agent signup form.

    Args:
        mobile: Optional prefill for the phone number.
    """
    auth_layout(
        "Agent Signup",
        "Register as a Mandi Plus agent",
        lambda: _agent_form(mobile),
    )


def _agent_form(mobile: str) -> None:
    photo: Dict[str, Optional[DocumentPhoto]] = {"file": None}

    agent_name = ui.input(label="Agent Name").props("outlined dense").classes("w-full")
    phone = (
        ui.input(label="Mobile Number", value=mobile)
        .props("outlined dense maxlength=10 inputmode=numeric")
        .classes("w-full mt-3")
    )
    state_select = (
        ui.select(INDIAN_STATES, label="State", with_input=True)
        .props("outlined dense")
        .classes("w-full mt-3")
    )
    mandi_name = ui.input(label="Mandi Name").props("outlined dense").classes("w-full mt-3")
    aadhaar = (
        ui.input(label="Aadhaar Number")
        .props("outlined dense inputmode=numeric")
        .classes("w-full mt-3")
    )

    async def on_upload(event) -> None:
        content = await event.file.read()
        photo["file"] = DocumentPhoto(
            filename=event.file.name,
            content=content,
            content_type=event.file.content_type or "image/jpeg",
        )
        logger.debug("Aadhaar photo selected", extra={"bytes": len(content)})

    ui.upload(
        label="Aadhaar Photo",
        on_upload=on_upload,
        auto_upload=True,
        max_files=1,
    ).props("accept=image/*").classes("w-full mt-3")

    submit_btn = ui.button(
        "Create Agent Account",
        on_click=lambda: _handle_agent_signup(
            {
                "agentName": agent_name.value,
                "phoneNumber": phone.value,
                "state": state_select.value,
                "mandiName": mandi_name.value,
                "aadhaarNumber": aadhaar.value,
            },
            photo["file"],
            submit_btn,
        ),
    ).classes("w-full mt-5 bg-purple-700 text-white font-semibold rounded-lg")

    ui.separator().classes("my-4")
    ui.link("Back to login", "/login").classes("text-sm text-center w-full")


async def _handle_agent_signup(
    fields: Dict[str, Optional[str]],
    photo: Optional[DocumentPhoto],
    button,
) -> None:
    """Validate, submit the multipart signup and sign in."""
    if state.submitting:
        return

    if not all(fields.values()):
        ui.notify("Please fill all fields", type="warning")
        return

    phone_number = digits_only(fields["phoneNumber"])
    if not is_valid_mobile(phone_number):
        ui.notify("Enter a valid 10-digit mobile number", type="warning")
        return

    if not is_valid_aadhaar(fields["aadhaarNumber"]):
        ui.notify("Enter a valid Aadhaar number", type="warning")
        return

    if photo is None:
        ui.notify("Please upload Aadhaar photo", type="warning")
        return

    try:
        form = AgentRegistration.model_validate({**fields, "phoneNumber": phone_number})
    except ValidationError:
        ui.notify("Please fill all fields", type="warning")
        return

    state.submitting = True
    button.disable()

    try:
        directive = await asyncio.to_thread(state.otp.register_agent, form, photo)
        await follow_directive(directive, "Agent account created!")

    except AuthError as exc:
        logger.warning("Agent signup failed", extra={"reason": exc.message})
        ui.notify(exc.message, type="negative")

    finally:
        state.submitting = False
        button.enable()
