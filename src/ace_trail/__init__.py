from src.ace_trail.tools import get_git_context, detect_commits_in_session
from src.ace_trail.trajectory import (
    build_trajectory_summary_with_context,
    filter_by_conversation_id,
    read_all_trajectories,
)

__all__ = [
    "read_all_trajectories",
    "filter_by_conversation_id",
    "build_trajectory_summary_with_context",
    "get_git_context",
    "detect_commits_in_session",
]
