"""Output paths declared by PHPUnit targets."""

from __future__ import annotations

import re

from testplane.core.paths import resolve_output, with_subfolder
from testplane.phpunit.config import ParsedConfiguration

DEFAULT_TEST_OUTPUT = ".phpunit.cache/test-results"

_SUBFOLDER_UNSAFE = re.compile(r"[/\\.]")


def get_test_output(config: ParsedConfiguration) -> str:
    return config.cache_result_file or DEFAULT_TEST_OUTPUT


def get_coverage_output(config: ParsedConfiguration) -> str | None:
    return config.coverage_cache_directory


def output_subfolder(relative_test_file: str) -> str:
    """Filesystem-safe token for a test file: separators and dots become hyphens."""
    return _SUBFOLDER_UNSAFE.sub("-", relative_test_file)


def compute_outputs(
    test_output: str,
    coverage_output: str | None,
    workspace_root: str,
    project_root: str,
    subfolder: str | None = None,
) -> list[str]:
    """Normalized outputs for a target, test output first, duplicates dropped."""
    outputs = [
        resolve_output(with_subfolder(test_output, subfolder), workspace_root, project_root)
    ]
    if coverage_output:
        outputs.append(
            resolve_output(with_subfolder(coverage_output, subfolder), workspace_root, project_root)
        )
    return list(dict.fromkeys(outputs))
