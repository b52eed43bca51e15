"""Portable path tokens for target inputs and outputs.

Target outputs are expressed relative to one of two tokens so that the host
build engine can relocate them:

- ``{projectRoot}/...`` for paths inside the owning project
- ``{workspaceRoot}/...`` for paths that escape the project

All returned strings use forward slashes regardless of platform.
"""

from __future__ import annotations

import os
import posixpath
import re

PROJECT_ROOT_TOKEN = "{projectRoot}"
WORKSPACE_ROOT_TOKEN = "{workspaceRoot}"

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Convert a filesystem path to forward-slash form without a drive letter."""
    return _DRIVE_LETTER.sub("", os.fspath(path)).replace("\\", "/")


def join_path_fragments(*fragments: str) -> str:
    """Join and normalize path fragments into a portable path.

    ``.`` and ``..`` segments are collapsed, trailing slashes dropped.
    """
    joined = posixpath.join(*(normalize_path(f) for f in fragments))
    return posixpath.normpath(joined)


def _escapes(relative: str) -> bool:
    return relative == ".." or relative.startswith("../")


def is_within(path: str, root: str) -> bool:
    """Check whether workspace-relative ``path`` lies inside ``root``."""
    return not _escapes(normalize_path(os.path.relpath(path, root)))


def resolve_output(candidate: str, workspace_root: str, project_root: str) -> str:
    """Express an output path relative to the project or workspace token.

    Args:
        candidate: Output path as declared in configuration, relative to the
            project root (absolute paths are taken as-is).
        workspace_root: Absolute workspace root.
        project_root: Project root relative to the workspace root.

    Returns:
        ``{projectRoot}/<rel>`` when the path stays inside the project,
        otherwise ``{workspaceRoot}/<rel>``.
    """
    full_project_root = os.path.abspath(os.path.join(workspace_root, project_root))
    full_path = os.path.abspath(os.path.join(full_project_root, candidate))

    relative_to_project = normalize_path(os.path.relpath(full_path, full_project_root))
    if _escapes(relative_to_project):
        return join_path_fragments(
            WORKSPACE_ROOT_TOKEN,
            os.path.relpath(full_path, os.path.abspath(workspace_root)),
        )
    return join_path_fragments(PROJECT_ROOT_TOKEN, relative_to_project)


def with_subfolder(output: str, subfolder: str | None) -> str:
    """Namespace an output path under ``subfolder``.

    File-like paths (with an extension) get the subfolder inserted before the
    file name; directory-like paths get it appended.
    """
    if not subfolder:
        return output
    portable = normalize_path(output)
    directory, base = posixpath.split(portable)
    _, ext = posixpath.splitext(base)
    if ext:
        return join_path_fragments(directory or ".", subfolder, base)
    return join_path_fragments(portable, subfolder)
