"""
Data models for the session helper.

Configuration entities are pydantic models parsed from the JSON config file
(camelCase keys). Runtime values such as window descriptors and planned
startup steps are plain dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_STARTUP_DELAY_MS,
    DEFAULT_STEP_DELAY_MS,
    DEFAULT_WORKSPACE_COUNT,
)


class _ConfigModel(BaseModel):
    """Base for configuration models: camelCase aliases, immutable."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WorkspaceGroup(_ConfigModel):
    """Commands launched on one workspace, in listed order."""

    index: int = Field(0, ge=0, description="Target workspace (zero-based)")
    commands: List[str] = Field(default_factory=list, description="Shell command lines")


class RuleMatch(_ConfigModel):
    """Window constraints of a rule. Empty strings count as unset."""

    app_id: Optional[str] = Field(None, alias="appId", description="Exact application id")
    title_regex: Optional[str] = Field(
        None, alias="titleRegex", description="Case-insensitive title pattern"
    )


class Rule(_ConfigModel):
    """Dynamic rule: move matching new windows to a workspace."""

    match: RuleMatch = Field(default_factory=RuleMatch)
    workspace_index: int = Field(0, ge=0, alias="workspaceIndex")


class Configuration(_ConfigModel):
    """Session configuration, loaded once per session."""

    workspace_count: int = Field(DEFAULT_WORKSPACE_COUNT, ge=1, alias="workspaceCount")
    startup_delay_ms: int = Field(DEFAULT_STARTUP_DELAY_MS, ge=0, alias="startupDelayMs")
    step_delay_ms: int = Field(DEFAULT_STEP_DELAY_MS, ge=0, alias="stepDelayMs")
    focus_workspace_index_after: int = Field(0, ge=0, alias="focusWorkspaceIndexAfter")
    workspaces: List[WorkspaceGroup] = Field(default_factory=list)
    dynamic_rules_enabled: bool = Field(False, alias="dynamicRulesEnabled")
    dynamic_rules: List[Rule] = Field(default_factory=list, alias="dynamicRules")

    @property
    def command_count(self) -> int:
        return sum(len(group.commands) for group in self.workspaces)


@dataclass(frozen=True)
class WindowDescriptor:
    """What rule matching knows about a window."""

    app_id: Optional[str] = None
    title: str = ""


class StepKind(str, Enum):
    """Kind of action in the startup playlist."""
    ACTIVATE_WORKSPACE = "activate_workspace"
    SPAWN_COMMAND = "spawn_command"


@dataclass(frozen=True)
class PlannedStep:
    """One entry of the startup playlist.

    Attributes:
        offset_ms: Delay relative to the start of the playlist
        due_ms: Delay relative to session enable (startup delay + offset)
        kind: Action to perform
        target: Workspace index or command line
    """

    offset_ms: int
    due_ms: int
    kind: StepKind
    target: Union[int, str]

    def describe(self) -> str:
        if self.kind == StepKind.ACTIVATE_WORKSPACE:
            return f"activate workspace {self.target}"
        return f"spawn {self.target}"


@dataclass(frozen=True)
class StartupPlan:
    """Ordered startup playlist derived from a Configuration."""

    startup_delay_ms: int
    steps: List[PlannedStep] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def to_json(self) -> dict:
        return {
            "startup_delay_ms": self.startup_delay_ms,
            "steps": [
                {
                    "due_ms": step.due_ms,
                    "offset_ms": step.offset_ms,
                    "kind": step.kind.value,
                    "target": step.target,
                }
                for step in self.steps
            ],
        }
