"""Glob and regex path matchers.

Patterns are matched case-sensitively against forward-slash relative paths.
A leading ``**/`` also matches at depth zero.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Callable, Sequence
from functools import lru_cache

from testplane.core.errors import PatternMatchError

Matcher = Callable[[str], bool]
PatternLike = str | re.Pattern[str] | Sequence[str | re.Pattern[str]]

MAX_PATTERN_LENGTH = 1024 * 64


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise ValueError("pattern is too long")
    return re.compile(fnmatch.translate(pattern))


def matches_glob(rel_path: str, pattern: str) -> bool:
    """Check if a path matches a glob pattern, with ** support."""
    if _compile_glob(pattern).match(rel_path):
        return True
    # Handle **/pattern for any-depth matching
    if pattern.startswith("**/"):
        return _compile_glob(pattern[3:]).match(rel_path) is not None
    return False


def create_matcher(pattern: PatternLike) -> Matcher:
    """Build a predicate over relative paths.

    Strings are globs, compiled regexes are searched, and sequences match
    when any member does. Failures while matching raise PatternMatchError
    naming both the path and the pattern.
    """
    if isinstance(pattern, re.Pattern):
        return lambda path: pattern.search(path) is not None
    if isinstance(pattern, str):

        def match(path: str) -> bool:
            try:
                return matches_glob(path, pattern)
            except (re.error, ValueError, TypeError) as e:
                raise PatternMatchError.for_pattern(path, pattern, str(e)) from e

        return match

    matchers = [create_matcher(p) for p in pattern]
    return lambda path: any(m(path) for m in matchers)
