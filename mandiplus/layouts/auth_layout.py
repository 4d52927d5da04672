"""
Authentication layout components.

Provides a reusable layout for onboarding screens
(login, registration, agent signup).
"""

from typing import Callable

from nicegui import ui

from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)


def auth_layout(title: str, subtitle: str, content_fn: Callable[[], None]) -> None:
    """
    Render a centered authentication layout.

    Args:
        title: Title displayed at the top of the card.
        subtitle: Muted line under the title.
        content_fn: Callback that renders the inner form content.

    Raises:
        RuntimeError: If content rendering fails.
    """
    logger.debug(
        "Rendering authentication layout",
        extra={"title": title},
    )

    with ui.column().classes(
        "w-screen min-h-screen items-center justify-center bg-[#f8fafc]"
    ):
        with ui.card().classes("w-[400px] bg-white shadow-xl rounded-2xl p-6"):
            ui.label(title).classes("text-2xl font-bold text-center text-gray-800")
            ui.label(subtitle).classes("text-sm text-gray-500 text-center mb-6")

            try:
                content_fn()
            except Exception as exc:
                logger.exception(
                    "Failed to render auth layout content",
                    extra={"title": title},
                )
                ui.label("Something went wrong. Please refresh the page.").classes(
                    "text-red-500"
                )
                raise RuntimeError("Auth layout rendering failed") from exc
