"""
Reusable UI builder functions for the editor page.

Compact layout: toolbar, editor, input box, output/error panel.
"""

from typing import Callable

from nicegui import ui

from execution_client import ExecutionResult
from session import PresentationMode

EDITOR_THEMES = {
    PresentationMode.DARK: "oneDark",
    PresentationMode.LIGHT: "basicLight",
}

_BUTTON_PROPS = "unelevated no-caps"


def editor_theme(mode: PresentationMode) -> str:
    """CodeMirror theme name for a presentation mode."""
    return EDITOR_THEMES[mode]


def theme_button_label(mode: PresentationMode) -> str:
    """The toggle names the mode it switches *to*."""
    return "☀️ Light Mode" if mode is PresentationMode.DARK else "🌙 Dark Mode"


def build_header(title: str, mode: PresentationMode, on_toggle: Callable):
    """Title row with the theme toggle. Returns the toggle button."""
    with ui.row().classes("w-full items-center justify-between"):
        ui.label(f"🐍 {title}").classes("text-2xl font-bold")
        button = ui.button(
            theme_button_label(mode), on_click=on_toggle,
        ).props(_BUTTON_PROPS + " color=grey-9")
    return button


def build_toolbar(
    on_run: Callable,
    on_download: Callable,
    on_upload: Callable,
    on_reset: Callable,
):
    """Action buttons. Returns the spinner shown while a run is in flight."""
    with ui.row().classes("w-full items-center gap-2 mt-2"):
        ui.button("Run ▶", on_click=on_run).props(_BUTTON_PROPS + " color=green")
        ui.button(
            "💾 Download Code", on_click=on_download,
        ).props(_BUTTON_PROPS + " color=blue")
        ui.button(
            "📂 Upload File", on_click=on_upload,
        ).props(_BUTTON_PROPS + " color=orange")
        ui.button(
            "♻️ Reset Code", on_click=on_reset,
        ).props(_BUTTON_PROPS + " color=red")
        spinner = ui.spinner(size="sm", color="green")
        spinner.visible = False
    return spinner


def build_result_panel(result: ExecutionResult) -> None:
    """Render program output, plus the error block when the run failed."""
    ui.label("Output:").classes("text-lg font-bold mt-4")
    ui.label(result.output).classes(
        "w-full p-2 bg-gray-100 text-black whitespace-pre-wrap"
    ).style("font-family: monospace; min-height: 2.5em;")

    if result.has_error:
        ui.label("Error:").classes("text-lg font-bold text-red-600 mt-2")
        ui.label(result.display_error()).classes(
            "w-full p-2 bg-red-50 text-red-600 whitespace-pre-wrap"
        ).style("font-family: monospace; word-break: break-all;")
