"""
Background task wrappers for remote runs and file imports.

Uses NiceGUI's run.io_bound so blocking HTTP calls run in a thread while
the page stays responsive.
"""

import logging
from typing import Callable

from nicegui import run

from execution_client import (
    CONNECTION_FAILURE_RESULT, ExecutionClient, ExecutionResult,
)
from session import SessionController, Submitter

logger = logging.getLogger(__name__)


def make_submitter(client: ExecutionClient) -> Submitter:
    """Adapt the blocking client into the async submitter the session awaits."""

    async def submit(code: str, program_input: str) -> ExecutionResult:
        result = await run.io_bound(client.run, code, program_input)
        if result is None:
            # io_bound yields None when the app is shutting down
            return CONNECTION_FAILURE_RESULT
        return result

    return submit


async def run_code(
    controller: SessionController,
    pending: dict,
    notify: Callable,
) -> None:
    """Run the current document, keeping a count of in-flight runs for the UI."""
    pending["runs"] = pending.get("runs", 0) + 1
    _safe_notify(notify)
    try:
        await controller.on_run()
    except Exception:
        logger.exception("Run failed")
    finally:
        pending["runs"] -= 1
        _safe_notify(notify)


async def import_upload(controller: SessionController, event,
                        notify: Callable) -> bool:
    """Load an uploaded file into the editor. Returns True if the document changed."""
    try:
        changed = await controller.on_import_selected(event)
    except Exception:
        logger.exception("Import failed")
        changed = False
    _safe_notify(notify)
    return changed


def _safe_notify(notify: Callable) -> None:
    try:
        notify()
    except Exception:
        pass  # Client disconnected
