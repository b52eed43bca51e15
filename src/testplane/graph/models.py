"""Build-graph data structures produced by target inference.

These mirror the shape the host build engine consumes: camelCase keys on the
wire, snake_case attributes in Python. All models are plain data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _GraphModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Targets
# =============================================================================


class TargetDependency(_GraphModel):
    """Reference to another target this one depends on."""

    target: str
    projects: Literal["self"] | list[str] = "self"
    params: Literal["forward", "ignore"] = "ignore"


class TargetHelpExample(_GraphModel):
    args: list[str] = Field(default_factory=list)


class TargetHelp(_GraphModel):
    command: str
    example: TargetHelpExample | None = None


class TargetMetadata(_GraphModel):
    """Display metadata for a target."""

    technologies: list[str] = Field(default_factory=list)
    description: str | None = None
    help: TargetHelp | None = None
    non_atomized_target: str | None = Field(default=None, alias="nonAtomizedTarget")


class TargetOptions(_GraphModel):
    cwd: str | None = None


class Target(_GraphModel):
    """A named, schedulable unit of work."""

    command: str | None = None
    executor: str | None = None
    options: TargetOptions | None = None
    cache: bool = False
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)
    depends_on: list[TargetDependency] | None = Field(default=None, alias="dependsOn")
    parallelism: bool = True
    metadata: TargetMetadata | None = None


# =============================================================================
# Projects
# =============================================================================


class ProjectMetadata(_GraphModel):
    """Project-level display metadata."""

    target_groups: dict[str, list[str]] = Field(default_factory=dict, alias="targetGroups")


class ProjectTargets(_GraphModel):
    """The memoized unit: targets plus project metadata for one configuration."""

    targets: dict[str, Target] = Field(default_factory=dict)
    metadata: ProjectMetadata | None = None


class ProjectDescriptor(_GraphModel):
    """A project contributed by one configuration file."""

    name: str
    root: str
    targets: dict[str, Target] = Field(default_factory=dict)
    metadata: ProjectMetadata | None = None


@dataclass(frozen=True)
class ConfigFile:
    """A test-runner configuration file within the workspace."""

    path: str  # workspace-relative, forward slashes
    workspace_root: Path

    @property
    def project_root(self) -> str:
        """Directory containing the configuration file, relative to the workspace."""
        parent = Path(self.path).parent.as_posix()
        return parent or "."

    @property
    def absolute_path(self) -> Path:
        return self.workspace_root / self.path

    @property
    def absolute_project_root(self) -> Path:
        return self.workspace_root / self.project_root
