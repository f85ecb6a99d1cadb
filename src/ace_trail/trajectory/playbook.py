"""Per-session record of playbook patterns applied during a session.

Stored as ``patterns-used-<session_id>.json`` (a JSON array of pattern ids)
next to the trajectory logs. One writer per session is assumed; concurrent
appends to the same session may lose an update.
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from src.ace_trail.utils.settings import resolve_ace_dir

logger = logging.getLogger("src.ace_trail.trajectory")

_PATTERN_IDS = TypeAdapter(list[str])


def playbook_state_file(session_id: str, ace_dir: str | Path | None = None) -> Path:
    return resolve_ace_dir(ace_dir) / f"patterns-used-{session_id}.json"


def load_playbook_used(session_id: str, ace_dir: str | Path | None = None) -> list[str]:
    """Pattern ids recorded for ``session_id``; empty when absent or corrupt."""
    state_file = playbook_state_file(session_id, ace_dir)
    if not state_file.exists():
        return []
    try:
        return _PATTERN_IDS.validate_json(state_file.read_bytes())
    except (OSError, ValidationError) as exc:
        logger.debug("ignoring unreadable playbook state %s: %s", state_file, exc)
        return []


def save_playbook_used(
    session_id: str, pattern_ids: list[str], ace_dir: str | Path | None = None
) -> bool:
    """Overwrite the session's pattern list. Returns False if it could not be written."""
    state_file = playbook_state_file(session_id, ace_dir)
    try:
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(json.dumps(list(pattern_ids)), encoding="utf-8")
    except OSError as exc:
        logger.warning("failed to save playbook state %s: %s", state_file, exc)
        return False
    return True


def append_playbook_used(
    session_id: str, pattern_id: str, ace_dir: str | Path | None = None
) -> list[str]:
    """Record ``pattern_id`` for the session unless already present.

    Returns the session's pattern list after the append.
    """
    existing = load_playbook_used(session_id, ace_dir)
    if pattern_id not in existing:
        existing.append(pattern_id)
        save_playbook_used(session_id, existing, ace_dir)
    return existing
