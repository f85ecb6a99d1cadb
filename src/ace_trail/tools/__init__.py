from src.ace_trail.tools.git_tools import (
    GitContextResolver,
    SubprocessGitResolver,
    detect_commits_in_session,
    get_git_context,
    resolve_session_git_context,
)

__all__ = [
    "get_git_context",
    "detect_commits_in_session",
    "resolve_session_git_context",
    "GitContextResolver",
    "SubprocessGitResolver",
]
