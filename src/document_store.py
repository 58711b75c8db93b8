"""
Persistence for the single editor document slot.

The session writes through to the store after every document change.
Storage is best-effort: failures are logged and swallowed so the in-memory
document stays authoritative for the rest of the session.
"""
import os
import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import MutableMapping, Optional, Any

logger = logging.getLogger(__name__)

DEFAULT_CODE = 'print("Hello, world!")'
DEFAULT_SLOT_KEY = "code"


class DocumentStore(ABC):
    """Load/save contract for the persisted document slot."""

    def load(self) -> str:
        """Return the persisted document, or DEFAULT_CODE if absent or corrupt."""
        try:
            text = self._read()
        except Exception as exc:
            logger.warning("Document slot unreadable, using default: %s", exc)
            return DEFAULT_CODE
        if text is None:
            return DEFAULT_CODE
        if not isinstance(text, str):
            logger.warning(
                "Document slot holds %s, not text; using default",
                type(text).__name__,
            )
            return DEFAULT_CODE
        return text

    def save(self, text: str) -> bool:
        """Overwrite the slot with *text*. Returns False if storage failed."""
        try:
            self._write(text)
        except Exception as exc:
            logger.warning("Document slot not saved (%d chars): %s", len(text), exc)
            return False
        return True

    @abstractmethod
    def _read(self) -> Optional[Any]:
        """Return the raw slot value, or None when the slot is empty."""
        ...

    @abstractmethod
    def _write(self, text: str) -> None:
        ...


class MappingDocumentStore(DocumentStore):
    """Slot kept under one key of a mutable mapping.

    The web UI passes NiceGUI's per-browser ``app.storage.user``; tests pass
    a plain dict.
    """

    def __init__(self, mapping: MutableMapping, key: str = DEFAULT_SLOT_KEY):
        self.mapping = mapping
        self.key = key

    def _read(self):
        return self.mapping.get(self.key)

    def _write(self, text):
        self.mapping[self.key] = text


class FileDocumentStore(DocumentStore):
    """Slot kept as raw UTF-8 text in a single file."""

    def __init__(self, path):
        self.path = Path(path)

    def _read(self):
        if not self.path.is_file():
            return None
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def _write(self, text):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Slot always holds either the old or the new text, never a partial one.
        fd, tmp_path = tempfile.mkstemp(
            prefix=".slot_", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
