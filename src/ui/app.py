"""
Main NiceGUI application: single-page Python editor.

Layout:
- Header: title + light/dark toggle
- Code editor (CodeMirror, Python highlighting)
- Program input box
- Toolbar: run, download, upload, reset
- Output panel, with an error block when the last run failed

Run with:
    python scripts/run_ui.py
"""

import logging

from nicegui import app, ui

from document_store import DocumentStore, FileDocumentStore, MappingDocumentStore
from editor_settings import EditorSettings, load_settings
from execution_client import ExecutionClient
from file_transfer import IMPORT_ACCEPT
from session import PresentationMode, SessionController
from ui.components import (
    build_header,
    build_toolbar,
    build_result_panel,
    editor_theme,
    theme_button_label,
)
from ui.workers import make_submitter, run_code, import_upload

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════════════

def main() -> None:
    settings = load_settings()
    client = ExecutionClient(
        settings.endpoint_url, timeout=settings.request_timeout,
    )
    logger.info("Execution endpoint: %s", settings.endpoint_url)

    @ui.page("/")
    def index():
        _build_page(settings, client)

    ui.run(
        title=settings.title,
        host=settings.host,
        port=settings.port,
        reload=False,
        storage_secret=settings.storage_secret,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Page builder
# ═══════════════════════════════════════════════════════════════════════════

def _document_store(settings: EditorSettings, user_storage) -> DocumentStore:
    """File-backed slot when a document path is configured, else per-browser storage."""
    if settings.document_path:
        return FileDocumentStore(settings.document_path)
    # app.storage.user is per browser and survives reloads
    return MappingDocumentStore(user_storage)


def _build_page(settings: EditorSettings, client: ExecutionClient) -> None:
    store = _document_store(settings, app.storage.user)
    controller = SessionController(
        store,
        make_submitter(client),
        discard_stale_runs=settings.discard_stale_runs,
    )
    state = controller.state
    pending = {"runs": 0}
    rendered = {"result": state.result}

    dark = ui.dark_mode(value=state.mode is PresentationMode.DARK)

    with ui.column().classes("w-full max-w-4xl mx-auto p-5 gap-2"):
        theme_button = build_header(
            settings.title, state.mode, controller.on_toggle_theme,
        )

        editor = ui.codemirror(
            state.document,
            language="Python",
            theme=editor_theme(state.mode),
            on_change=lambda e: controller.on_edit(e.value),
        ).classes("w-full").style("height:300px; border:1px solid #ccc;")

        ui.textarea(
            label="Input:",
            on_change=lambda e: controller.on_input_edit(e.value),
        ).props("outlined autogrow").classes("w-full")

        # Hidden picker, opened from the toolbar button
        upload = ui.upload(
            auto_upload=True,
            on_upload=lambda e: _handle_upload(e, controller, upload, refresh),
        ).props(f'accept="{IMPORT_ACCEPT}"').classes("hidden")

        spinner = build_toolbar(
            on_run=lambda: run_code(controller, pending, refresh),
            on_download=lambda: _handle_download(controller),
            on_upload=lambda: upload.run_method("pickFiles"),
            on_reset=controller.on_reset,
        )

        result_container = ui.element("div").classes("w-full")
        with result_container:
            build_result_panel(state.result)

    def refresh(*_):
        try:
            current = controller.state
            if editor.value != current.document:
                editor.value = current.document
            editor.set_theme(editor_theme(current.mode))
            dark.value = current.mode is PresentationMode.DARK
            theme_button.text = theme_button_label(current.mode)
            spinner.visible = pending["runs"] > 0
            if current.result != rendered["result"]:
                rendered["result"] = current.result
                result_container.clear()
                with result_container:
                    build_result_panel(current.result)
        except Exception:
            pass  # Client disconnected

    controller.on_change = refresh


# ═══════════════════════════════════════════════════════════════════════════
# Event handlers
# ═══════════════════════════════════════════════════════════════════════════

def _handle_download(controller: SessionController) -> None:
    artifact = controller.on_export()
    ui.download(artifact.content, artifact.filename, artifact.media_type)


async def _handle_upload(event, controller: SessionController, upload,
                         refresh) -> None:
    changed = await import_upload(controller, event, refresh)
    upload.reset()
    # A failed or empty import is a silent no-op
    if changed:
        ui.notify(f"Loaded {event.name}", type="positive")
