"""JSON persistence for the application state.

The state document is a single JSON object with camelCase keys::

    {
      "character": {...},
      "chatMessages": [...],
      "apiUrl": "...",
      "apiKey": "...",
      "model": "...",
      "systemPrompt": "...",
      "campaignSummary": {...},
      "maxPreviousMessages": 10,
      "enableCharacterTool": true
    }

Imports merge over the current in-memory state. A key that is absent or
null keeps its current value; an empty string is taken as written. A key
whose value does not validate is skipped and logged. Exported files and
the local state store share this format.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from barkeep.core.config import get_settings
from barkeep.core.exceptions import PersistenceError
from barkeep.core.logging import get_logger
from barkeep.models.app_state import AppState


logger = get_logger(__name__)

# Persisted key -> AppState field
PERSISTED_KEYS: dict[str, str] = {
    "character": "character",
    "chatMessages": "chat_messages",
    "apiUrl": "api_url",
    "apiKey": "api_key",
    "model": "model",
    "systemPrompt": "system_prompt",
    "campaignSummary": "campaign_summary",
    "maxPreviousMessages": "max_previous_messages",
    "enableCharacterTool": "enable_character_tool",
}

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


# =============================================================================
# Documents
# =============================================================================


def export_state(state: AppState) -> dict[str, Any]:
    """Serialize the persisted part of the state.

    Args:
        state: Application state.

    Returns:
        JSON-ready dict with the persisted camelCase keys.
    """
    dumped = state.model_dump(mode="json", by_alias=True)
    return {key: dumped[key] for key in PERSISTED_KEYS}


def import_state(data: dict[str, Any], base: AppState | None = None) -> AppState:
    """Merge a state document over a base state.

    Args:
        data: Parsed JSON document.
        base: State providing values for absent keys; defaults to a fresh
            AppState.

    Returns:
        A new AppState. ``base`` is not modified.

    Raises:
        PersistenceError: If ``data`` is not a JSON object.
    """
    if not isinstance(data, dict):
        raise PersistenceError(
            "State document must be a JSON object",
            details={"type": type(data).__name__},
        )

    base = base or AppState()
    updates: dict[str, Any] = {}
    skipped: list[str] = []

    for key, field_name in PERSISTED_KEYS.items():
        value = data.get(key)
        if value is None:
            continue
        try:
            updates[field_name] = getattr(AppState.model_validate({key: value}), field_name)
        except PydanticValidationError as exc:
            skipped.append(key)
            logger.warning("Skipping invalid state key", key=key, errors=exc.error_count())

    logger.info("State imported", keys=sorted(updates), skipped=skipped)
    return base.model_copy(update=updates, deep=True)


# =============================================================================
# Files
# =============================================================================


def export_filename(state: AppState) -> str:
    """Default export file name, ``<character name>-sheet.json``."""
    name = _UNSAFE_FILENAME_CHARS.sub("", state.character.name).strip() or "character"
    return f"{name}-sheet.json"


def save_to_file(state: AppState, path: str | Path | None = None) -> Path:
    """Write the state document to a JSON file.

    Args:
        state: Application state.
        path: Target file, or a directory to place ``export_filename`` in.
            If None, uses the configured ``export_dir``.

    Returns:
        The written path.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    if path is None:
        path = get_settings().storage.export_dir / export_filename(state)
    path = Path(path)
    if path.is_dir():
        path = path / export_filename(state)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(export_state(state), f, ensure_ascii=False, indent=2)
    except OSError as exc:
        raise PersistenceError(f"Failed to write state file: {exc}", path=str(path)) from exc

    logger.info("State saved", path=str(path), messages=len(state.chat_messages))
    return path


def load_from_file(path: str | Path, base: AppState | None = None) -> AppState:
    """Read a state document and merge it over ``base``.

    Raises:
        PersistenceError: If the file is missing, unreadable or not a JSON
            object.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise PersistenceError(f"Invalid JSON in state file: {exc}", path=str(path)) from exc
    except OSError as exc:
        raise PersistenceError(f"Failed to read state file: {exc}", path=str(path)) from exc

    try:
        return import_state(data, base)
    except PersistenceError as exc:
        exc.details["path"] = str(path)
        raise


# =============================================================================
# Local Store
# =============================================================================


class StateStore:
    """Local state file that outlives the process.

    Saved after every change and loaded once at start-up, so a restart
    resumes where the player left off.

    Attributes:
        path: The state file.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: State file. If None, uses the configured ``state_path``.
        """
        if path is None:
            path = get_settings().storage.state_path
        self.path = Path(path)

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, state: AppState) -> Path:
        """Persist the state."""
        return save_to_file(state, self.path)

    def load(self, base: AppState | None = None) -> AppState:
        """Load the stored state, or ``base`` when nothing is stored yet."""
        if not self.exists:
            logger.debug("No stored state", path=str(self.path))
            return base or AppState()
        return load_from_file(self.path, base)

    def clear(self) -> None:
        """Delete the stored state, if any."""
        self.path.unlink(missing_ok=True)


__all__ = [
    "PERSISTED_KEYS",
    "export_state",
    "import_state",
    "export_filename",
    "save_to_file",
    "load_from_file",
    "StateStore",
]
