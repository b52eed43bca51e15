"""Directories that are never walked during discovery or hashing.

Tier 0 (HARDCODED_DIRS): VCS internals and tool data directories.
Tier 1 (DEFAULT_PRUNABLE_DIRS): dependencies, caches and test outputs.

PRUNABLE_DIRS = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS is what walkers use.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # Tool data
        ".testplane",
        ".nx",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # PHP ecosystem
        # -------------------------------------------------------------------------
        "vendor",  # Composer dependencies
        ".phpunit.cache",  # PHPUnit 10+ result cache
        # -------------------------------------------------------------------------
        # JavaScript/Node.js ecosystem (monorepo tooling)
        # -------------------------------------------------------------------------
        "node_modules",
        ".npm",
        ".yarn",
        ".pnpm-store",
        # -------------------------------------------------------------------------
        # Editors
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS

# Runner state files rewritten on every test run
PRUNABLE_FILES: frozenset[str] = frozenset((".phpunit.result.cache",))


def is_prunable_dir(name: str) -> bool:
    """Check if a directory name should not be descended into."""
    return name in PRUNABLE_DIRS

