"""AI-Trail trajectory reading and summarization.

Reads the hook logs an AI coding assistant writes to its ace directory
(MCP tool calls, shell commands, file edits, responses), narrows them to one
conversation and condenses them into a summary for pattern learning, along
with the playbook patterns recorded for the session.
"""

from src.ace_trail.trajectory.models import (
    BaseTrajectoryEntry,
    EditChange,
    EditTrajectoryEntry,
    GitContext,
    McpTrajectoryEntry,
    ResponseTrajectoryEntry,
    ShellTrajectoryEntry,
    TrajectoryCollection,
    TrajectoryEntry,
    TrajectorySummary,
    TrajectorySummaryContext,
    TrajectoryType,
)
from src.ace_trail.trajectory.playbook import (
    append_playbook_used,
    load_playbook_used,
    save_playbook_used,
)
from src.ace_trail.trajectory.reader import (
    TRAJECTORY_FILES,
    filter_by_conversation_id,
    parse_trajectory_line,
    read_all_trajectories,
    read_trajectory_file,
)
from src.ace_trail.trajectory.summary import (
    build_trajectory_summary,
    build_trajectory_summary_with_context,
    render_followup_message,
    summary_to_dict,
)

__all__ = [
    "BaseTrajectoryEntry",
    "EditChange",
    "EditTrajectoryEntry",
    "GitContext",
    "McpTrajectoryEntry",
    "ResponseTrajectoryEntry",
    "ShellTrajectoryEntry",
    "TrajectoryCollection",
    "TrajectoryEntry",
    "TrajectorySummary",
    "TrajectorySummaryContext",
    "TrajectoryType",
    "TRAJECTORY_FILES",
    "parse_trajectory_line",
    "read_trajectory_file",
    "read_all_trajectories",
    "filter_by_conversation_id",
    "build_trajectory_summary",
    "build_trajectory_summary_with_context",
    "render_followup_message",
    "summary_to_dict",
    "load_playbook_used",
    "save_playbook_used",
    "append_playbook_used",
]
