"""PHPUnit inference entry point.

``create_nodes`` takes the phpunit.xml files of a workspace and returns the
projects they define. Each file is processed independently; the memoization
store is loaded once up front and written back once at the end, whether or
not any file failed.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from pathlib import Path

from testplane.config.loader import get_workspace_data_directory, load_config
from testplane.config.models import (
    DEFAULT_TARGET_NAME,
    NormalizedOptions,
    PhpUnitPluginOptions,
    TestPlaneConfig,
)
from testplane.core.errors import InferenceError
from testplane.core.hashing import hash_object
from testplane.core.logging import get_logger, set_run_id
from testplane.graph.cache import TargetsCache, targets_cache_path
from testplane.graph.models import ConfigFile, ProjectDescriptor
from testplane.graph.workspace import CreateNodesContext, find_config_files
from testplane.phpunit.targets import create_nodes_internal

log = get_logger(__name__)

PLUGIN_NAME = "phpunit"
DEFAULT_PARALLELISM = 4


def normalize_options(options: PhpUnitPluginOptions | None) -> NormalizedOptions:
    """Apply defaults; an empty CI target name disables per-file targets."""
    options = options or PhpUnitPluginOptions()
    return NormalizedOptions(
        target_name=options.target_name or DEFAULT_TARGET_NAME,
        ci_target_name=options.ci_target_name or None,
    )


async def create_nodes(
    config_file_paths: Iterable[str],
    options: PhpUnitPluginOptions | None,
    context: CreateNodesContext,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> dict[str, ProjectDescriptor]:
    """Infer projects for a batch of phpunit.xml files.

    Args:
        config_file_paths: Workspace-relative configuration file paths.
        options: Plugin options; defaults apply when None.
        context: Workspace context.
        parallelism: Maximum files processed concurrently.

    Returns:
        Projects keyed by project root.

    Raises:
        InferenceError: If any file failed. Carries each failure and the
            projects inferred from the files that succeeded.
    """
    normalized = normalize_options(options)
    cache_path = targets_cache_path(
        context.workspace_data_directory,
        PLUGIN_NAME,
        hash_object(normalized.model_dump(mode="json")),
    )
    targets_cache = TargetsCache.load(cache_path)
    config_files = [ConfigFile(path=p, workspace_root=context.workspace_root) for p in config_file_paths]

    start_time = time.time()
    sem = asyncio.Semaphore(parallelism)

    async def process(config_file: ConfigFile) -> ProjectDescriptor | None:
        async with sem:
            return await asyncio.to_thread(
                create_nodes_internal,
                config_file,
                normalized,
                context,
                targets_cache,
            )

    try:
        results = await asyncio.gather(
            *(process(f) for f in config_files),
            return_exceptions=True,
        )
    finally:
        targets_cache.save()

    projects: dict[str, ProjectDescriptor] = {}
    failures: list[tuple[str, BaseException]] = []
    for config_file, result in zip(config_files, results, strict=True):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            log.error("phpunit_config_failed", config_file=config_file.path, error=str(result))
            failures.append((config_file.path, result))
        elif result is not None:
            projects[result.root] = result

    log.info(
        "phpunit_inference_complete",
        config_files=len(config_files),
        projects=len(projects),
        failures=len(failures),
        duration_sec=round(time.time() - start_time, 3),
    )
    if failures:
        raise InferenceError.aggregate(failures, projects)
    return projects


def infer_targets(
    workspace_root: Path,
    config: TestPlaneConfig | None = None,
) -> dict[str, ProjectDescriptor]:
    """Discover every phpunit.xml in a workspace and infer its projects.

    Uses ``config`` when given, otherwise loads it from the workspace.
    """
    workspace_root = workspace_root.resolve()
    config = config or load_config(workspace_root)
    context = CreateNodesContext.for_workspace(
        workspace_root, get_workspace_data_directory(workspace_root, config)
    )
    config_files = find_config_files(workspace_root, config.inference.config_glob)

    set_run_id()
    log.info("phpunit_inference_started", workspace=str(workspace_root), config_files=len(config_files))
    return asyncio.run(
        create_nodes(
            config_files,
            config.phpunit,
            context,
            parallelism=config.inference.parallelism,
        )
    )
