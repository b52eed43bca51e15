"""Workspace-level lookups shared by inference plugins.

- CreateNodesContext: what a plugin sees of the workspace
- Named inputs: nx.json overlaid by the project's project.json
- Configuration file globbing across the workspace
- Content hashes that key the memoization store
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from testplane.core.errors import ConfigParseError
from testplane.core.excludes import PRUNABLE_FILES, is_prunable_dir
from testplane.core.globs import create_matcher
from testplane.core.hashing import hash_array, hash_file, hash_object
from testplane.core.paths import join_path_fragments, normalize_path

WORKSPACE_CONFIG_FILE = "nx.json"
PROJECT_CONFIG_FILE = "project.json"


def read_json_file(path: Path) -> Any:
    """Read a JSON file, raising ConfigParseError on malformed content."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError.for_file(str(path), str(e)) from e


def read_json_object(path: Path) -> dict[str, Any]:
    """Read a JSON file whose top level must be an object; ``null`` reads as empty."""
    data = read_json_file(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError.for_file(str(path), f"expected a JSON object, got {type(data).__name__}")
    return data


def _named_inputs_of(config: dict[str, Any], source: Path) -> dict[str, Any]:
    named_inputs = config.get("namedInputs") or {}
    if not isinstance(named_inputs, dict):
        raise ConfigParseError.for_file(str(source), "namedInputs must be an object")
    return named_inputs


@dataclass
class CreateNodesContext:
    """Workspace view handed to an inference plugin."""

    workspace_root: Path
    workspace_data_directory: Path
    workspace_config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_workspace(
        cls,
        workspace_root: Path,
        workspace_data_directory: Path,
    ) -> CreateNodesContext:
        """Build a context, reading nx.json when the workspace has one."""
        config_path = workspace_root / WORKSPACE_CONFIG_FILE
        workspace_config = read_json_object(config_path) if config_path.is_file() else {}
        _named_inputs_of(workspace_config, config_path)
        return cls(
            workspace_root=workspace_root,
            workspace_data_directory=workspace_data_directory,
            workspace_config=workspace_config,
        )


def get_named_inputs(project_root: str, context: CreateNodesContext) -> dict[str, Any]:
    """Named inputs visible to a project.

    Workspace-level ``namedInputs`` come first; the project's own
    ``project.json`` entries override same-named ones.
    """
    named_inputs = dict(
        _named_inputs_of(context.workspace_config, context.workspace_root / WORKSPACE_CONFIG_FILE)
    )
    project_config_path = context.workspace_root / project_root / PROJECT_CONFIG_FILE
    if project_config_path.is_file():
        named_inputs.update(_named_inputs_of(read_json_object(project_config_path), project_config_path))
    return named_inputs


def _walk_files(root: Path) -> Iterator[Path]:
    """Yield files under ``root`` in sorted order, skipping pruned directories."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable_dir(d))
        for filename in sorted(filenames):
            if filename in PRUNABLE_FILES:
                continue
            yield Path(dirpath) / filename


def find_config_files(workspace_root: Path, pattern: str) -> list[str]:
    """Workspace-relative paths of files matching ``pattern``, sorted."""
    matcher = create_matcher(pattern)
    found: list[str] = []
    for path in _walk_files(workspace_root):
        rel = normalize_path(path.relative_to(workspace_root))
        if matcher(rel):
            found.append(rel)
    return sorted(found)


def calculate_hash_for_create_nodes(
    project_root: str,
    options: BaseModel,
    context: CreateNodesContext,
    additional_files: list[str] | None = None,
    additional_directories: list[str] | None = None,
) -> str:
    """Memoization key for one project's inferred targets.

    Covers every file under the project root (except pruned directories),
    the additional project-relative files, every file under the additional
    workspace-relative directories, the named inputs visible to the project,
    and the normalized options.
    """
    absolute_root = context.workspace_root / project_root
    file_hashes: list[str] = []
    for path in _walk_files(absolute_root):
        rel = normalize_path(path.relative_to(absolute_root))
        file_hashes.append(f"{rel}:{hash_file(path)}")
    for extra in additional_files or []:
        extra_path = absolute_root / extra
        if extra_path.is_file():
            file_hashes.append(f"+{extra}:{hash_file(extra_path)}")
    for directory in additional_directories or []:
        absolute_dir = context.workspace_root / directory
        for path in _walk_files(absolute_dir):
            rel = normalize_path(path.relative_to(absolute_dir))
            file_hashes.append(f"@{directory}/{rel}:{hash_file(path)}")

    return hash_array(
        [
            join_path_fragments(project_root),
            hash_array(file_hashes),
            hash_object(get_named_inputs(project_root, context)),
            hash_object(options.model_dump(mode="json")),
        ]
    )
