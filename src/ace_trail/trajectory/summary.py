"""Trajectory summarization for pattern learning.

Condenses a session's hook records into counts, frequency tables, deduped
file/command lists, the AI-Trail string and the step list ace_learn consumes.
"""

import json
from typing import Any

from src.ace_trail.trajectory.models import (
    EditTrajectoryEntry,
    McpTrajectoryEntry,
    ResponseTrajectoryEntry,
    ShellTrajectoryEntry,
    TrajectoryCollection,
    TrajectorySummary,
    TrajectorySummaryContext,
)

RESPONSE_PREVIEW_CHARS = 80


def format_ai_trail(mcp: int, shell: int, edits: int, responses: int) -> str:
    return f"MCP:{mcp} Shell:{shell} Edits:{edits} Responses:{responses}"


def _describe_tool_call(entry: McpTrajectoryEntry) -> str:
    step = f"Called tool: {entry.tool_name}"
    try:
        tool_input = json.loads(entry.tool_input)
    except (json.JSONDecodeError, TypeError):
        return step
    if not isinstance(tool_input, dict):
        return step
    if tool_input.get("query"):
        step += f' with query: "{tool_input["query"]}"'
    elif tool_input.get("path"):
        step += f" on path: {tool_input['path']}"
    return step


def _describe_shell(entry: ShellTrajectoryEntry) -> str:
    suffix = " (with errors)" if "error" in entry.output.lower() else ""
    return f"Ran command: {entry.command}{suffix}"


def _describe_edit(entry: EditTrajectoryEntry) -> str:
    n = len(entry.edits)
    return f"Edited file: {entry.file_path} ({n} change{'' if n == 1 else 's'})"


def _describe_response(entry: ResponseTrajectoryEntry) -> str:
    lines = entry.text.strip().splitlines()
    first_line = lines[0] if lines else ""
    if len(first_line) > RESPONSE_PREVIEW_CHARS:
        first_line = first_line[: RESPONSE_PREVIEW_CHARS - 3] + "..."
    return f"Responded: {first_line}"


def build_trajectory_summary(trajectories: TrajectoryCollection) -> TrajectorySummary:
    """Summarize all four record kinds of a (usually filtered) collection.

    Counts are raw record counts. Tool frequencies, edited files and shell
    commands keep first-occurrence order. Steps follow the collection order
    within each kind: tool calls, shell commands, edits, then responses.

    Args:
        trajectories: Records grouped by kind

    Returns:
        Summary without git or playbook context
    """
    mcp = trajectories.mcp
    shell = trajectories.shell
    edit = trajectories.edit
    response = trajectories.response

    tool_calls: dict[str, int] = {}
    steps: list[str] = []
    for entry in mcp:
        if isinstance(entry, McpTrajectoryEntry):
            tool_calls[entry.tool_name] = tool_calls.get(entry.tool_name, 0) + 1
            steps.append(_describe_tool_call(entry))

    # dict keys double as an insertion-ordered set
    shell_commands: dict[str, None] = {}
    for entry in shell:
        if isinstance(entry, ShellTrajectoryEntry):
            shell_commands.setdefault(entry.command, None)
            steps.append(_describe_shell(entry))

    edited_files: dict[str, None] = {}
    for entry in edit:
        if isinstance(entry, EditTrajectoryEntry):
            edited_files.setdefault(entry.file_path, None)
            steps.append(_describe_edit(entry))

    for entry in response:
        if isinstance(entry, ResponseTrajectoryEntry):
            steps.append(_describe_response(entry))

    return TrajectorySummary(
        mcp_count=len(mcp),
        shell_count=len(shell),
        edit_count=len(edit),
        response_count=len(response),
        ai_trail_string=format_ai_trail(len(mcp), len(shell), len(edit), len(response)),
        tool_calls=tool_calls,
        edited_files=list(edited_files),
        shell_commands=list(shell_commands),
        trajectory_steps=steps,
    )


def build_trajectory_summary_with_context(
    trajectories: TrajectoryCollection,
    context: TrajectorySummaryContext | None = None,
) -> TrajectorySummary:
    """Build a summary and attach git and playbook context when given.

    Fields the context leaves unset stay None, so "no context" remains
    distinguishable from an empty playbook list.
    """
    summary = build_trajectory_summary(trajectories)
    if context is None:
        return summary
    return summary.model_copy(
        update={"git": context.git, "playbook_used": context.playbook_used}
    )


def render_followup_message(summary: TrajectorySummary) -> str:
    """Message handed back to the assistant when a session stops."""
    parts = [f"Session complete. AI-Trail: {summary.ai_trail_string}."]
    if summary.git is not None:
        parts.append(f"Git: {summary.git.branch} ({summary.git.hash}).")
    parts.append("Call ace_learn to capture patterns.")
    return " ".join(parts)


def summary_to_dict(summary: TrajectorySummary) -> dict[str, Any]:
    """Serialize a summary with its downstream (camelCase) keys.

    Unset optional fields are dropped rather than emitted as null.
    """
    return summary.model_dump(mode="json", by_alias=True, exclude_none=True)
