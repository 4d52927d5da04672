"""
Consent overlay.

Wraps page content: when the gate is BLOCKED the content is rendered
blurred and inert underneath a modal that cannot be dismissed without
acknowledging the terms.
"""

import asyncio
from typing import Callable

from nicegui import ui

from mandiplus.auth.consent_gate import CONSENT_TEXT, CONSENT_TITLE, GateState
from mandiplus.auth.errors import AuthError
from mandiplus.state.app_state import state
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)

LANGUAGE_LABELS = {"en": "English", "hi": "हिंदी"}
AGREE_LABELS = {"en": "I agree to the above terms", "hi": "मैं उपरोक्त शर्तों से सहमत हूँ"}
SUBMIT_LABELS = {"en": "I Agree & Continue", "hi": "सहमत हूँ और जारी रखें"}


def consent_guard(content_fn: Callable[[], None]) -> None:
    """
    Render `content_fn` behind the consent gate.

    Args:
        content_fn: Callback that renders the page content.
    """

    @ui.refreshable
    def gated() -> None:
        gate_state = state.consent.state(loading=state.sessions.loading)

        if gate_state == GateState.LOADING:
            with ui.column().classes("w-screen h-screen items-center justify-center"):
                ui.spinner(size="xl")
            ui.timer(0.2, lambda: None if state.sessions.loading else gated.refresh())
            return

        if gate_state == GateState.ALLOWED:
            content_fn()
            return

        with ui.element("div").classes(
            "h-screen overflow-hidden blur-sm pointer-events-none select-none"
        ).props('aria-hidden="true"'):
            content_fn()

        _consent_modal(on_allowed=gated.refresh)

    gated()


def _consent_modal(on_allowed: Callable[[], None]) -> None:
    with ui.element("div").classes(
        "fixed inset-0 z-[9999] flex items-center justify-center "
        "bg-black/60 backdrop-blur-md p-4"
    ):
        with ui.card().classes(
            "bg-white p-6 rounded-xl shadow-2xl max-w-2xl w-full max-h-[90vh] overflow-y-auto"
        ):
            ui.label(CONSENT_TITLE).classes("text-xl font-bold text-gray-800 mb-4")

            language = ui.toggle(LANGUAGE_LABELS, value="en").classes("mb-4")

            text = ui.label(CONSENT_TEXT["en"]).classes(
                "bg-gray-50 p-4 rounded-lg border text-sm text-gray-700 leading-relaxed"
            )
            agreed = ui.checkbox(AGREE_LABELS["en"]).classes("mt-4")

            submit_btn = ui.button(SUBMIT_LABELS["en"]).classes(
                "w-full mt-4 bg-green-600 text-white font-semibold"
            )

            def _switch_language(event) -> None:
                text.set_text(CONSENT_TEXT[event.value])
                agreed.set_text(AGREE_LABELS[event.value])
                submit_btn.set_text(SUBMIT_LABELS[event.value])

            language.on_value_change(_switch_language)
            submit_btn.on_click(
                lambda: _handle_consent(
                    language.value,
                    agreed.value,
                    submit_btn,
                    on_allowed,
                )
            )


async def _handle_consent(
    language: str,
    agreed: bool,
    button,
    on_allowed: Callable[[], None],
) -> None:
    """Submit the acknowledgment; stay blocked on failure."""
    if not agreed:
        ui.notify("Please check the agreement checkbox to continue", type="warning")
        return

    if state.consent.pending:
        return

    button.disable()

    try:
        gate_state = await asyncio.to_thread(state.consent.acknowledge, language)

    except AuthError as exc:
        logger.warning("Consent not recorded", extra={"reason": exc.message})
        ui.notify(exc.message, type="negative")
        button.enable()
        return

    if gate_state == GateState.ALLOWED:
        ui.notify("Consent recorded successfully", type="positive")
        on_allowed()
    else:
        button.enable()
