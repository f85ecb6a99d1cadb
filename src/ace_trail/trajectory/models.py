"""Pydantic models for AI-Trail trajectory aggregation.

Records for the four hook logs (MCP tool calls, shell executions, file edits,
agent responses), the per-directory collection, git context and the derived
session summary.
"""

import json
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TrajectoryType(str, Enum):
    """Record kinds, one per hook log file."""

    MCP = "mcp"
    SHELL = "shell"
    EDIT = "edit"
    RESPONSE = "response"


class BaseTrajectoryEntry(BaseModel):
    """Header fields shared by every hook record."""

    # Hook payloads grow new fields between assistant releases.
    model_config = ConfigDict(extra="ignore")

    kind: ClassVar[TrajectoryType]

    conversation_id: str = Field(min_length=1, description="Groups records into one session")
    generation_id: str = Field(min_length=1, description="Identifies one assistant turn")
    hook_event_name: str = Field(description="Hook that produced the record")
    model: str | None = Field(default=None, description="Model name reported by the host")
    cursor_version: str | None = Field(default=None)
    workspace_roots: list[str] | None = Field(default=None)
    user_email: str | None = Field(default=None)


class McpTrajectoryEntry(BaseTrajectoryEntry):
    """MCP tool invocation."""

    kind: ClassVar[TrajectoryType] = TrajectoryType.MCP

    tool_name: str
    tool_input: str = Field(description="Serialized tool arguments, opaque")
    result_json: str | None = Field(default=None)

    @field_validator("tool_input", mode="before")
    @classmethod
    def _serialize_structured_input(cls, value: Any) -> Any:
        # Some hosts log tool_input as an object instead of a JSON string.
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return value


class ShellTrajectoryEntry(BaseTrajectoryEntry):
    """Shell command execution."""

    kind: ClassVar[TrajectoryType] = TrajectoryType.SHELL

    command: str
    output: str
    duration: float = Field(description="Execution time in milliseconds")
    sandbox: bool | None = Field(default=None)


class EditChange(BaseModel):
    model_config = ConfigDict(extra="ignore")

    old_string: str
    new_string: str


class EditTrajectoryEntry(BaseTrajectoryEntry):
    """File edit with its ordered replacements."""

    kind: ClassVar[TrajectoryType] = TrajectoryType.EDIT

    file_path: str
    edits: list[EditChange] = Field(default_factory=list)


class ResponseTrajectoryEntry(BaseTrajectoryEntry):
    """Agent response text."""

    kind: ClassVar[TrajectoryType] = TrajectoryType.RESPONSE

    text: str


TrajectoryEntry = Union[
    McpTrajectoryEntry,
    ShellTrajectoryEntry,
    EditTrajectoryEntry,
    ResponseTrajectoryEntry,
]


class TrajectoryCollection(BaseModel):
    """All records read from one ace directory, keyed by kind, in file line order."""

    model_config = ConfigDict(frozen=True)

    mcp: list[TrajectoryEntry] = Field(default_factory=list)
    shell: list[TrajectoryEntry] = Field(default_factory=list)
    edit: list[TrajectoryEntry] = Field(default_factory=list)
    response: list[TrajectoryEntry] = Field(default_factory=list)

    def by_kind(self, kind: TrajectoryType | str) -> list[TrajectoryEntry]:
        return list(getattr(self, TrajectoryType(kind).value))

    def for_conversation(self, conversation_id: str) -> "TrajectoryCollection":
        """Return a new collection holding only ``conversation_id``'s records."""
        return TrajectoryCollection(
            **{
                kind.value: [
                    entry for entry in self.by_kind(kind)
                    if entry.conversation_id == conversation_id
                ]
                for kind in TrajectoryType
            }
        )


class GitContext(BaseModel):
    """Repository state at summary time."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_repo: bool = Field(default=False)
    branch: str = Field(default="unknown")
    hash: str = Field(default="unknown", description="Abbreviated commit hash")
    session_commits: list[str] | None = Field(
        default=None, description="Commits detected in the session's shell log"
    )


class TrajectorySummaryContext(BaseModel):
    """Optional extras merged verbatim into a summary."""

    model_config = ConfigDict(frozen=True)

    git: GitContext | None = None
    playbook_used: list[str] | None = None


class TrajectorySummary(BaseModel):
    """Derived, immutable digest of one session's trajectory."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    mcp_count: int = Field(default=0)
    shell_count: int = Field(default=0)
    edit_count: int = Field(default=0, description="Edit operations before dedup")
    response_count: int = Field(default=0)
    ai_trail_string: str = Field(description="MCP:<n> Shell:<n> Edits:<n> Responses:<n>")
    tool_calls: dict[str, int] = Field(
        default_factory=dict, description="Tool name -> calls, first-occurrence order"
    )
    edited_files: list[str] = Field(default_factory=list)
    shell_commands: list[str] = Field(default_factory=list)
    trajectory_steps: list[str] = Field(default_factory=list)
    git: GitContext | None = Field(default=None)
    playbook_used: list[str] | None = Field(default=None, alias="playbook_used")
