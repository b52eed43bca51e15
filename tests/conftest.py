"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small workspace builder shared by the test packages.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))


PHPUNIT_XML_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<phpunit {root_attrs}>
    <testsuites>
        <testsuite name="{suite_name}"{suite_attrs}>
{suite_body}
        </testsuite>
    </testsuites>
{extra}
</phpunit>
"""


def phpunit_xml(
    *,
    cache_result_file: str | None = None,
    coverage_cache_directory: str | None = None,
    suite_name: str = "unit",
    directory: str | None = None,
    directory_as_attribute: bool = False,
) -> str:
    """Render a phpunit.xml document."""
    root_attrs = 'bootstrap="vendor/autoload.php"'
    if cache_result_file:
        root_attrs += f' cacheResultFile="{cache_result_file}"'
    suite_attrs = ""
    suite_body = ""
    if directory is not None:
        if directory_as_attribute:
            suite_attrs = f' directory="{directory}"'
        else:
            suite_body = f"            <directory>{directory}</directory>"
    extra = ""
    if coverage_cache_directory:
        extra = f'    <coverage cacheDirectory="{coverage_cache_directory}"/>'
    return PHPUNIT_XML_TEMPLATE.format(
        root_attrs=root_attrs,
        suite_name=suite_name,
        suite_attrs=suite_attrs,
        suite_body=suite_body,
        extra=extra,
    )


class WorkspaceBuilder:
    """Writes files into a temporary workspace."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, rel_path: str, content: str = "") -> Path:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def write_json(self, rel_path: str, data: Any) -> Path:
        return self.write(rel_path, json.dumps(data))

    def project(
        self,
        project_root: str,
        *,
        name: str | None = None,
        manifest: bool = True,
        test_files: tuple[str, ...] = (),
        **xml_options: Any,
    ) -> str:
        """Create a PHP project and return its phpunit.xml workspace path."""
        prefix = "" if project_root == "." else f"{project_root}/"
        if manifest:
            self.write_json(f"{prefix}composer.json", {"name": name or f"acme/{Path(project_root).name}"})
        for test_file in test_files:
            self.write(f"{prefix}{test_file}", "<?php\n")
        config_path = f"{prefix}phpunit.xml"
        self.write(config_path, phpunit_xml(**xml_options))
        return config_path


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    root = tmp_path / "workspace"
    root.mkdir()
    return WorkspaceBuilder(root)


@pytest.fixture
def render_phpunit_xml() -> Any:
    return phpunit_xml
