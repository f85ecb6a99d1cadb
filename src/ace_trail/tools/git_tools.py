"""Repository context for trajectory summaries.

Resolves branch and commit for a workspace through the git CLI and scans
shell trajectories for commits made during a session. Git failures never
propagate: a directory that is not a repository, a missing git binary or a
timeout all resolve to the "unknown" context.
"""

import logging
import re
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from src.ace_trail.trajectory.models import GitContext, ShellTrajectoryEntry, TrajectoryEntry
from src.ace_trail.utils.settings import GIT_TIMEOUT_SECONDS

logger = logging.getLogger("src.ace_trail.tools")

UNKNOWN = "unknown"

TIMEOUT_EXIT_CODE = 124
NOT_FOUND_EXIT_CODE = 127

_COMMIT_COMMAND_RE: re.Pattern[str] = re.compile(r"\bgit\s+commit\b")

# Commit confirmation banner, e.g. "[main abc1234] Fix bug".
_COMMIT_BANNER_RE: re.Pattern[str] = re.compile(
    r"^\[[^\s\]]+\s+([a-f0-9]{7,40})\]", re.MULTILINE
)


def _git_binary() -> str | None:
    return shutil.which("git")


def _run_git_cli(
    args: list[str],
    cwd: str | Path | None = None,
    timeout: float = GIT_TIMEOUT_SECONDS,
) -> tuple[int, str, str]:
    git_binary = _git_binary()
    if git_binary is None:
        return NOT_FOUND_EXIT_CODE, "", "git is not installed"
    try:
        result = subprocess.run(
            [git_binary, *args],
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr
    except subprocess.TimeoutExpired:
        return TIMEOUT_EXIT_CODE, "", f"git command timed out after {timeout}s"
    except OSError as exc:
        # cwd missing or not a directory
        return NOT_FOUND_EXIT_CODE, "", str(exc)


def _rev_parse(args: list[str], cwd: str | Path, timeout: float) -> str:
    code, stdout, stderr = _run_git_cli(["rev-parse", *args], cwd=cwd, timeout=timeout)
    value = stdout.strip()
    if code != 0 or not value:
        logger.debug("git rev-parse %s failed (exit %d): %s", " ".join(args), code, stderr.strip())
        return UNKNOWN
    return value


def get_git_context(
    workspace_path: str | Path | None = None,
    timeout: float = GIT_TIMEOUT_SECONDS,
) -> GitContext:
    """Resolve branch and short commit hash for ``workspace_path``.

    Defaults to the process working directory. Branch and hash fall back to
    "unknown" independently; ``is_repo`` is False only when the directory is
    not inside a work tree or git could not be run at all.

    Args:
        workspace_path: Directory to inspect
        timeout: Seconds allowed per git call

    Returns:
        Repository context, never raising on git failures
    """
    cwd = Path(workspace_path) if workspace_path else Path.cwd()

    code, stdout, stderr = _run_git_cli(
        ["rev-parse", "--is-inside-work-tree"], cwd=cwd, timeout=timeout
    )
    if code != 0 or stdout.strip() != "true":
        logger.debug("not a git work tree: %s (exit %d) %s", cwd, code, stderr.strip())
        return GitContext(is_repo=False, branch=UNKNOWN, hash=UNKNOWN)

    return GitContext(
        is_repo=True,
        branch=_rev_parse(["--abbrev-ref", "HEAD"], cwd, timeout),
        hash=_rev_parse(["--short", "HEAD"], cwd, timeout),
    )


class GitContextResolver(Protocol):
    """Anything that can describe the repository a workspace lives in."""

    def resolve_repo_context(self, path: str | Path | None = None) -> GitContext: ...


class SubprocessGitResolver:
    """GitContextResolver backed by the git CLI."""

    def __init__(self, timeout: float = GIT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def resolve_repo_context(self, path: str | Path | None = None) -> GitContext:
        return get_git_context(path, timeout=self._timeout)


def is_commit_command(command: str) -> bool:
    return bool(_COMMIT_COMMAND_RE.search(command))


def extract_commit_hash(output: str) -> str | None:
    match = _COMMIT_BANNER_RE.search(output)
    return match.group(1) if match else None


def detect_commits_in_session(shell_entries: Iterable[TrajectoryEntry]) -> list[str]:
    """Short hashes of commits made by ``git commit`` calls, in log order.

    One hash per commit attempt whose output carries the confirmation
    banner. Repeated hashes (e.g. an amend reusing one) are kept.

    Args:
        shell_entries: Session records; anything but shell records is skipped

    Returns:
        Commit hashes, possibly empty
    """
    commits: list[str] = []
    for entry in shell_entries:
        if not isinstance(entry, ShellTrajectoryEntry):
            continue
        if not is_commit_command(entry.command):
            continue
        sha = extract_commit_hash(entry.output)
        if sha:
            commits.append(sha)
        else:
            logger.debug("commit without banner in output: %s", entry.command)
    return commits


def resolve_session_git_context(
    shell_entries: Iterable[TrajectoryEntry],
    workspace_path: str | Path | None = None,
    resolver: GitContextResolver | None = None,
) -> GitContext:
    """Git context for a session, with the commits found in its shell log."""
    resolver = resolver or SubprocessGitResolver()
    context = resolver.resolve_repo_context(workspace_path)
    return context.model_copy(
        update={"session_commits": detect_commits_in_session(shell_entries)}
    )
