"""PHPUnit test file discovery."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from testplane.core.errors import DirectoryNotFoundError
from testplane.core.excludes import is_prunable_dir
from testplane.core.globs import PatternLike, create_matcher
from testplane.core.paths import normalize_path

TEST_FILE_PATTERN = "**/*Test.php"


def discover(test_suite_dir: Path, pattern: PatternLike = TEST_FILE_PATTERN) -> Iterator[Path]:
    """Yield test files under ``test_suite_dir``.

    Walks the subtree on every call, skipping dependency and VCS directories.
    Entries are visited in sorted order within each directory. Matching is
    case-sensitive against the path relative to ``test_suite_dir``.

    Raises:
        DirectoryNotFoundError: If ``test_suite_dir`` is not a directory.
        PatternMatchError: If ``pattern`` cannot be applied.
    """
    if not test_suite_dir.is_dir():
        raise DirectoryNotFoundError.for_path(str(test_suite_dir))
    return _walk(test_suite_dir, pattern)


def _walk(root: Path, pattern: PatternLike) -> Iterator[Path]:
    matcher = create_matcher(pattern)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable_dir(d))
        current = Path(dirpath)
        for filename in sorted(filenames):
            path = current / filename
            if matcher(normalize_path(path.relative_to(root))):
                yield path
