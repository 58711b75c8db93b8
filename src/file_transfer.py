"""
Export the document as a downloadable file and import a selected file.

Stateless: nothing here holds on to the document between calls.
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional

from nicegui import run

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "code.py"
EXPORT_MEDIA_TYPE = "text/x-python"
IMPORT_ACCEPT = ".py"  # picker hint only; any file is accepted


@dataclass(frozen=True)
class ExportArtifact:
    """A file ready to be handed to the browser as a download."""
    filename: str
    media_type: str
    content: bytes


def export_document(text: str) -> ExportArtifact:
    """Wrap the document text as a ``code.py`` artifact."""
    return ExportArtifact(
        filename=EXPORT_FILENAME,
        media_type=EXPORT_MEDIA_TYPE,
        content=text.encode("utf-8"),
    )


def read_selected_file(selected) -> Optional[str]:
    """Read a user-selected file as text.

    *selected* may be None (nothing picked), a path, a NiceGUI upload event
    (anything with a ``content`` stream), or a file-like object. Returns the
    full text unmodified, or None when nothing was selected or the file could
    not be read.
    """
    if selected is None:
        return None

    try:
        if isinstance(selected, (str, os.PathLike)):
            with open(selected, "rb") as f:
                raw = f.read()
        else:
            stream = getattr(selected, "content", selected)
            raw = stream.read()
    except (OSError, AttributeError) as exc:
        logger.warning("Could not read selected file: %s", exc)
        return None

    if isinstance(raw, str):
        return raw
    # Never reject content: undecodable bytes become U+FFFD
    return raw.decode("utf-8", errors="replace")


async def import_file(selected) -> Optional[str]:
    """Read *selected* off the event loop. None means "leave the document alone"."""
    if selected is None:
        return None
    text = await run.io_bound(read_selected_file, selected)
    if text is not None:
        logger.info("Imported %d chars from %s", len(text), _describe(selected))
    return text


def _describe(selected) -> str:
    name = getattr(selected, "name", None)
    if name:
        return name
    if isinstance(selected, (str, os.PathLike)):
        return os.path.basename(selected)
    return type(selected).__name__
