"""Session storage for the GoTrue CLI.

Stores the signed-in session and the service URL it belongs to in
~/.gotrue/session.json with restrictive permissions.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..types import Session
from .constants import STATE_DIR_NAME, STATE_FILE_NAME

logger = logging.getLogger(__name__)


def get_state_path() -> Path:
    return Path.home() / STATE_DIR_NAME / STATE_FILE_NAME


def load_state() -> dict[str, Any] | None:
    """Load stored state from ~/.gotrue/session.json.

    Returns None if file doesn't exist, is corrupt, or is not a dict.
    """
    state_path = get_state_path()
    if not state_path.exists():
        return None
    try:
        data = json.loads(state_path.read_text())
        if not isinstance(data, dict):
            return None
        return data
    except (json.JSONDecodeError, OSError):
        return None


def load_session() -> Session | None:
    """Return the stored session, or None if nothing usable is stored."""
    state = load_state()
    if not state or not isinstance(state.get("session"), dict):
        return None
    try:
        return Session.from_dict(state["session"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Ignoring unreadable session in %s", get_state_path())
        return None


def save_state(url: str, session: Session) -> None:
    """Save the session with atomic write and restrictive permissions.

    - Directory: 0700 (owner read/write/execute only)
    - File: 0600 (owner read/write only)
    - Atomic: writes to temp file in same dir, then os.replace()
    """
    state_path = get_state_path()
    state_dir = state_path.parent
    state_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(state_dir, 0o700)

    content = json.dumps({"url": url, "session": session.to_dict()}, indent=2)

    fd, tmp_path = tempfile.mkstemp(dir=state_dir, prefix=".session_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, state_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def clear_state() -> bool:
    """Delete the state file. Returns False if there was nothing to delete."""
    state_path = get_state_path()
    if not state_path.exists():
        return False
    state_path.unlink()
    return True


def stored_url() -> str | None:
    state = load_state()
    url = state.get("url") if state else None
    return url if isinstance(url, str) and url else None
