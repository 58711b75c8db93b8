"""
Settings for the editor web UI.

Defaults, overridden by ``.editor_settings.json`` at the repo root (if any),
then by PYIDE_* environment variables.
"""
import os
import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from execution_client import DEFAULT_ENDPOINT

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
SETTINGS_PATH = BASE_DIR / ".editor_settings.json"

DEFAULT_STORAGE_SECRET = "change-me"


@dataclass
class EditorSettings:
    endpoint_url: str = DEFAULT_ENDPOINT
    request_timeout: Optional[float] = None  # None = transport default
    discard_stale_runs: bool = True
    storage_secret: str = DEFAULT_STORAGE_SECRET
    # Keep the document in this file instead of per-browser storage
    document_path: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 8080
    title: str = "Online Python IDE"


def _env_number(name: str, convert, current):
    raw = os.environ.get(name)
    if not raw:
        return current
    try:
        return convert(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid number", name, raw)
        return current


def load_settings(path=SETTINGS_PATH) -> EditorSettings:
    settings = EditorSettings()
    path = Path(path)
    if path.is_file():
        try:
            with open(path, encoding="utf-8") as f:
                saved = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            saved = {}
        if isinstance(saved, dict):
            known = {f.name for f in fields(EditorSettings)}
            for key, value in saved.items():
                if key in known:
                    setattr(settings, key, value)

    env = os.environ
    if env.get("PYIDE_ENDPOINT_URL"):
        settings.endpoint_url = env["PYIDE_ENDPOINT_URL"]
    if env.get("PYIDE_STORAGE_SECRET"):
        settings.storage_secret = env["PYIDE_STORAGE_SECRET"]
    if env.get("PYIDE_DOCUMENT_PATH"):
        settings.document_path = env["PYIDE_DOCUMENT_PATH"]
    settings.request_timeout = _env_number(
        "PYIDE_REQUEST_TIMEOUT", float, settings.request_timeout,
    )
    settings.port = _env_number("PYIDE_PORT", int, settings.port)

    if settings.storage_secret == DEFAULT_STORAGE_SECRET:
        logger.warning(
            "storage_secret is the built-in default; set PYIDE_STORAGE_SECRET "
            "before exposing the editor to other users"
        )
    return settings
