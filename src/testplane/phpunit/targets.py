"""PHPUnit target builder.

Turns one ``phpunit.xml`` into build targets:

- ``<targetName>``: runs the whole suite
- ``<ciTargetName>--<file>``: one target per discovered test file
- ``<ciTargetName>``: no-op aggregator depending on every per-file target

Per-file outputs are namespaced under a subfolder derived from the file path
so that atomized runs never overwrite each other.
"""

from __future__ import annotations

import os

from testplane.config.models import NormalizedOptions
from testplane.core.hashing import hash_string
from testplane.core.logging import get_logger
from testplane.core.paths import is_within, join_path_fragments, normalize_path
from testplane.graph.cache import TargetsCache
from testplane.graph.models import (
    ConfigFile,
    ProjectDescriptor,
    ProjectMetadata,
    ProjectTargets,
    Target,
    TargetDependency,
    TargetHelp,
    TargetHelpExample,
    TargetMetadata,
    TargetOptions,
)
from testplane.graph.workspace import (
    CreateNodesContext,
    calculate_hash_for_create_nodes,
    get_named_inputs,
    read_json_file,
)
from testplane.phpunit.config import ParsedConfiguration, read_phpunit_config
from testplane.phpunit.discovery import discover
from testplane.phpunit.outputs import (
    compute_outputs,
    get_coverage_output,
    get_test_output,
    output_subfolder,
)

log = get_logger(__name__)

PROJECT_MANIFEST = "composer.json"
PHPUNIT_COMMAND = "./vendor/bin/phpunit"
CI_TARGET_GROUP = "Test (CI)"
NOOP_EXECUTOR = "nx:noop"

_HELP = TargetHelp(
    command=f"{PHPUNIT_COMMAND} --help",
    example=TargetHelpExample(args=["--colors"]),
)


def _metadata(description: str, non_atomized_target: str | None = None) -> TargetMetadata:
    return TargetMetadata(
        technologies=["php"],
        description=description,
        help=_HELP,
        non_atomized_target=non_atomized_target,
    )


def _default_inputs(named_inputs: dict[str, object]) -> list[str]:
    # Existence check only; the category's contents are not inspected
    if "production" in named_inputs:
        return ["default", "^production"]
    return ["default", "^default"]


def _test_directory(project_root: str, phpunit_config: ParsedConfiguration) -> str:
    """Workspace-relative directory searched for test files."""
    suite_dir = phpunit_config.test_suite_directory
    return join_path_fragments(project_root, suite_dir) if suite_dir else project_root


def _external_test_directories(config_file: ConfigFile, options: NormalizedOptions) -> list[str]:
    # Discovery outside the project root is not covered by the project walk
    if not options.ci_target_name:
        return []
    test_dir = _test_directory(config_file.project_root, read_phpunit_config(config_file.absolute_path))
    if is_within(test_dir, config_file.project_root):
        return []
    return [test_dir]


class _SubfolderAllocator:
    """Hands out unique output subfolders within one project."""

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}

    def allocate(self, relative_test_file: str) -> str:
        token = output_subfolder(relative_test_file)
        owner = self._owners.get(token)
        if owner is not None and owner != relative_test_file:
            disambiguated = f"{token}-{hash_string(relative_test_file)[:8]}"
            log.warning(
                "output_subfolder_collision",
                file=relative_test_file,
                conflicts_with=owner,
                subfolder=disambiguated,
            )
            token = disambiguated
        self._owners[token] = relative_test_file
        return token


def build_phpunit_targets(
    config_file: ConfigFile,
    options: NormalizedOptions,
    context: CreateNodesContext,
) -> ProjectTargets:
    """Build the targets and metadata for one phpunit.xml.

    Raises:
        ConfigParseError: If the configuration is not well-formed XML.
        DirectoryNotFoundError: If per-file targets are enabled and the
            declared test-suite directory does not exist.
    """
    project_root = config_file.project_root
    workspace_root = str(context.workspace_root)
    phpunit_config: ParsedConfiguration = read_phpunit_config(config_file.absolute_path)
    named_inputs = get_named_inputs(project_root, context)

    test_output = get_test_output(phpunit_config)
    coverage_output = get_coverage_output(phpunit_config)
    inputs = _default_inputs(named_inputs)
    outputs = compute_outputs(test_output, coverage_output, workspace_root, project_root)

    base_target = Target(
        command=PHPUNIT_COMMAND,
        options=TargetOptions(cwd="{projectRoot}"),
        cache=True,
        inputs=inputs,
        outputs=outputs,
        parallelism=False,
        metadata=_metadata("Runs PHPUnit Tests"),
    )
    targets: dict[str, Target] = {options.target_name: base_target}
    metadata: ProjectMetadata | None = None

    if options.ci_target_name:
        ci_target_name = options.ci_target_name
        ci_group: list[str] = []
        depends_on: list[TargetDependency] = []
        subfolders = _SubfolderAllocator()

        test_dir = _test_directory(project_root, phpunit_config)
        absolute_project_root = config_file.absolute_project_root

        for test_file in discover(context.workspace_root / test_dir):
            relative_file = normalize_path(os.path.relpath(test_file, absolute_project_root))
            target_name = f"{ci_target_name}--{relative_file}"
            targets[target_name] = base_target.model_copy(
                update={
                    "command": f"{PHPUNIT_COMMAND} {relative_file}",
                    "outputs": compute_outputs(
                        test_output,
                        coverage_output,
                        workspace_root,
                        project_root,
                        subfolders.allocate(relative_file),
                    ),
                    "metadata": _metadata(f"Runs PHPUnit Tests in {relative_file} in CI"),
                }
            )
            ci_group.append(target_name)
            depends_on.append(TargetDependency(target=target_name, projects="self", params="forward"))

        targets[ci_target_name] = Target(
            executor=NOOP_EXECUTOR,
            cache=base_target.cache,
            inputs=base_target.inputs,
            outputs=base_target.outputs,
            depends_on=depends_on,
            parallelism=False,
            metadata=_metadata("Runs PHPUnit Tests in CI", non_atomized_target=options.target_name),
        )
        ci_group.append(ci_target_name)
        metadata = ProjectMetadata(target_groups={CI_TARGET_GROUP: ci_group})

    return ProjectTargets(targets=targets, metadata=metadata)


def create_nodes_internal(
    config_file: ConfigFile,
    options: NormalizedOptions,
    context: CreateNodesContext,
    targets_cache: TargetsCache,
) -> ProjectDescriptor | None:
    """Infer the project owning ``config_file``.

    Returns None when the configuration's directory has no composer.json;
    such files belong to fixtures or other non-project directories.
    """
    project_root = config_file.project_root
    manifest_path = config_file.absolute_project_root / PROJECT_MANIFEST
    if not manifest_path.is_file():
        log.debug("phpunit_config_skipped", config_file=config_file.path, reason="no composer.json")
        return None

    manifest = read_json_file(manifest_path) or {}
    key = calculate_hash_for_create_nodes(
        project_root,
        options,
        context,
        additional_files=[PROJECT_MANIFEST],
        additional_directories=_external_test_directories(config_file, options),
    )
    project_targets = targets_cache.get_or_compute(
        key, lambda: build_phpunit_targets(config_file, options, context)
    )

    name = manifest.get("name") if isinstance(manifest, dict) else None
    return ProjectDescriptor(
        name=name or project_root,
        root=project_root,
        targets=project_targets.targets,
        metadata=project_targets.metadata,
    )
