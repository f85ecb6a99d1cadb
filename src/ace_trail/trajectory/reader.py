"""Read AI-Trail hook logs into typed trajectory records.

Each hook appends one JSON object per line to its own file in the ace
directory. Logs are written by other processes and may hold truncated,
blank or foreign lines; anything that does not decode into a known record
shape is skipped rather than raised.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.ace_trail.trajectory.models import (
    EditTrajectoryEntry,
    McpTrajectoryEntry,
    ResponseTrajectoryEntry,
    ShellTrajectoryEntry,
    TrajectoryCollection,
    TrajectoryEntry,
    TrajectoryType,
)

logger = logging.getLogger("src.ace_trail.trajectory")

TRAJECTORY_FILES: dict[TrajectoryType, str] = {
    TrajectoryType.MCP: "mcp_trajectory.jsonl",
    TrajectoryType.SHELL: "shell_trajectory.jsonl",
    TrajectoryType.EDIT: "edit_trajectory.jsonl",
    TrajectoryType.RESPONSE: "response_trajectory.jsonl",
}

# Checked in order; the first field set fully present decides the variant.
_VARIANT_FIELDS: tuple[tuple[frozenset[str], type[TrajectoryEntry]], ...] = (
    (frozenset({"tool_name", "tool_input"}), McpTrajectoryEntry),
    (frozenset({"command", "output", "duration"}), ShellTrajectoryEntry),
    (frozenset({"file_path", "edits"}), EditTrajectoryEntry),
    (frozenset({"text"}), ResponseTrajectoryEntry),
)

_BOM = "\ufeff"


def _classify(payload: dict[str, Any]) -> type[TrajectoryEntry] | None:
    for fields, model in _VARIANT_FIELDS:
        if fields.issubset(payload):
            return model
    return None


def parse_trajectory_line(line: str) -> TrajectoryEntry | None:
    """Parse one JSONL line into a trajectory record.

    Returns None for blank lines, malformed JSON, non-object values, lines
    matching no record shape, and records missing required header fields.
    """
    if not line or not line.strip():
        return None

    text = line.strip().lstrip(_BOM)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None

    model = _classify(payload)
    if model is None:
        return None

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.debug("invalid %s record: %s", model.kind.value, exc.errors(include_url=False))
        return None


def read_trajectory_file(file_path: str | Path) -> list[TrajectoryEntry]:
    """Read every parseable record from a JSONL file, in line order.

    A missing or unreadable file yields an empty list.
    """
    path = Path(file_path)
    if not path.exists():
        return []

    entries: list[TrajectoryEntry] = []
    skipped = 0
    try:
        # Binary mode so a single undecodable line cannot abort the whole file.
        with open(path, "rb") as handle:
            for raw in handle:
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError:
                    skipped += 1
                    continue
                entry = parse_trajectory_line(line)
                if entry is None:
                    if line.strip():
                        skipped += 1
                    continue
                entries.append(entry)
    except OSError as exc:
        logger.debug("cannot read trajectory file %s: %s", path, exc)
        return []

    if skipped:
        logger.debug("skipped %d unparseable lines in %s", skipped, path)
    return entries


def read_all_trajectories(ace_dir: str | Path) -> TrajectoryCollection:
    """Read the four hook logs in ``ace_dir``.

    Missing files (or a missing directory) contribute empty lists; each file
    is read independently of the others.
    """
    base = Path(ace_dir)
    return TrajectoryCollection(
        **{
            kind.value: read_trajectory_file(base / file_name)
            for kind, file_name in TRAJECTORY_FILES.items()
        }
    )


def filter_by_conversation_id(
    entries: Iterable[TrajectoryEntry], conversation_id: str
) -> list[TrajectoryEntry]:
    """Keep the entries belonging to ``conversation_id``, preserving order."""
    return [entry for entry in entries if entry.conversation_id == conversation_id]
