import json
import logging

import click

from src.ace_trail.tools.git_tools import resolve_session_git_context
from src.ace_trail.trajectory import (
    TrajectorySummaryContext,
    append_playbook_used,
    build_trajectory_summary_with_context,
    load_playbook_used,
    read_all_trajectories,
    render_followup_message,
    summary_to_dict,
)
from src.ace_trail.trajectory.models import TrajectoryCollection, TrajectorySummary
from src.ace_trail.utils.settings import resolve_ace_dir

ace_dir_option = click.option(
    "--ace-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory with the trajectory JSONL logs (default: $ACE_TRAIL_DIR or .cursor/ace)",
)


def _collect(
    ace_dir: str | None,
    conversation_id: str | None,
    workspace: str | None,
    session_id: str | None,
    with_git: bool,
) -> TrajectorySummary:
    directory = resolve_ace_dir(ace_dir)
    trajectories: TrajectoryCollection = read_all_trajectories(directory)
    if conversation_id:
        trajectories = trajectories.for_conversation(conversation_id)

    context = TrajectorySummaryContext(
        git=resolve_session_git_context(trajectories.shell, workspace) if with_git else None,
        playbook_used=load_playbook_used(session_id, directory) if session_id else None,
    )
    return build_trajectory_summary_with_context(trajectories, context)


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
def main(debug: bool) -> None:
    """Summarize AI-Trail trajectories recorded by the assistant hooks."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


@main.command()
@ace_dir_option
@click.option("--conversation-id", default=None, help="Only summarize this conversation")
@click.option("--workspace", default=None, type=click.Path(), help="Repository path for git context")
@click.option("--session-id", default=None, help="Attach the playbook patterns recorded for this session")
@click.option("--git/--no-git", "with_git", default=True, help="Resolve git branch, hash and session commits")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
def summarize(
    ace_dir: str | None,
    conversation_id: str | None,
    workspace: str | None,
    session_id: str | None,
    with_git: bool,
    as_json: bool,
) -> None:
    """Summarize the trajectory logs in the ace directory."""
    summary = _collect(ace_dir, conversation_id, workspace, session_id, with_git)

    if as_json:
        click.echo(json.dumps(summary_to_dict(summary), indent=2, ensure_ascii=False))
        return

    click.secho(f"📊 AI-Trail: {summary.ai_trail_string}", fg="blue")
    if summary.git is not None:
        git = summary.git
        if git.is_repo:
            click.secho(f"   Git: {git.branch} ({git.hash})", fg="blue", dim=True)
        else:
            click.secho("   Git: not a repository", fg="yellow", dim=True)
        if git.session_commits:
            click.secho(f"   Commits: {', '.join(git.session_commits)}", fg="blue", dim=True)
    if summary.tool_calls:
        tools = ", ".join(f"{name}×{count}" for name, count in summary.tool_calls.items())
        click.secho(f"   Tools: {tools}", fg="blue", dim=True)
    if summary.edited_files:
        click.secho(f"   Edited: {', '.join(summary.edited_files)}", fg="blue", dim=True)
    if summary.playbook_used:
        click.secho(f"   Playbook: {', '.join(summary.playbook_used)}", fg="blue", dim=True)
    for step in summary.trajectory_steps:
        click.echo(f"  - {step}")


@main.command("stop-hook")
@ace_dir_option
@click.option("--workspace", default=None, type=click.Path(), help="Repository path for git context")
def stop_hook(ace_dir: str | None, workspace: str | None) -> None:
    """Stop hook: read the hook payload on stdin, print the follow-up JSON.

    Only a completed, non-looping stop produces a follow-up message; every
    other payload (including invalid JSON) gets an empty object.
    """
    try:
        payload = json.loads(click.get_text_stream("stdin").read() or "{}")
    except json.JSONDecodeError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    if payload.get("status") != "completed" or str(payload.get("loop_count", 0)) != "0":
        click.echo("{}")
        return

    summary = _collect(
        ace_dir,
        conversation_id=payload.get("conversation_id") or None,
        workspace=workspace,
        session_id=None,
        with_git=True,
    )
    click.echo(json.dumps({"followup_message": render_followup_message(summary)}, ensure_ascii=False))


@main.group()
def playbook() -> None:
    """Record which playbook patterns a session applied."""


@playbook.command("add")
@ace_dir_option
@click.argument("session_id")
@click.argument("pattern_id")
def playbook_add(ace_dir: str | None, session_id: str, pattern_id: str) -> None:
    patterns = append_playbook_used(session_id, pattern_id, ace_dir)
    click.echo(f"{session_id}: {len(patterns)} pattern(s) recorded")


@playbook.command("list")
@ace_dir_option
@click.argument("session_id")
def playbook_list(ace_dir: str | None, session_id: str) -> None:
    for pattern_id in load_playbook_used(session_id, ace_dir):
        click.echo(pattern_id)


if __name__ == "__main__":
    main()
