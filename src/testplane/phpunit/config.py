"""PHPUnit configuration reader.

Extracts only what target inference needs from ``phpunit.xml``:

- ``cacheResultFile`` attribute on the root element
- ``cacheDirectory`` attribute on the ``<coverage>`` element
- ``<testsuites>/<testsuite>`` names and source directories

Missing optional values come back as ``None``; only malformed XML is an error.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from testplane.core.errors import ConfigParseError


@dataclass(frozen=True)
class TestSuite:
    """A ``<testsuite>`` declaration."""

    __test__ = False

    name: str | None
    directory: str | None = None


@dataclass(frozen=True)
class ParsedConfiguration:
    """Structured view of a phpunit.xml file."""

    cache_result_file: str | None = None
    coverage_cache_directory: str | None = None
    test_suites: tuple[TestSuite, ...] = field(default_factory=tuple)

    @property
    def test_suite(self) -> TestSuite | None:
        """The first declared test suite, which drives discovery."""
        return self.test_suites[0] if self.test_suites else None

    @property
    def test_suite_name(self) -> str | None:
        suite = self.test_suite
        return suite.name if suite else None

    @property
    def test_suite_directory(self) -> str | None:
        suite = self.test_suite
        return suite.directory if suite else None


def _local_name(tag: str) -> str:
    # Strip "{namespace}" prefixes so namespaced documents parse the same
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_test_suite(element: ET.Element) -> TestSuite:
    directory = _non_empty(element.get("directory"))
    if directory is None:
        for child in _children(element, "directory"):
            directory = _non_empty(child.text)
            if directory:
                break
    return TestSuite(name=_non_empty(element.get("name")), directory=directory)


def parse_phpunit_config(content: str, source: str = "<string>") -> ParsedConfiguration:
    """Parse phpunit.xml content.

    Args:
        content: Raw XML text.
        source: Path used in error messages.

    Raises:
        ConfigParseError: If the content is not well-formed XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ConfigParseError.for_file(source, str(e)) from e

    coverage_dir: str | None = None
    for coverage in _children(root, "coverage"):
        coverage_dir = _non_empty(coverage.get("cacheDirectory"))
        if coverage_dir:
            break

    suites: list[TestSuite] = []
    for testsuites in _children(root, "testsuites"):
        suites.extend(_parse_test_suite(s) for s in _children(testsuites, "testsuite"))
    # Some configs declare a single <testsuite> directly under the root
    suites.extend(_parse_test_suite(s) for s in _children(root, "testsuite"))

    return ParsedConfiguration(
        cache_result_file=_non_empty(root.get("cacheResultFile")),
        coverage_cache_directory=coverage_dir,
        test_suites=tuple(suites),
    )


def read_phpunit_config(path: Path) -> ParsedConfiguration:
    """Read and parse a phpunit.xml file from disk."""
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError.for_file(str(path), str(e)) from e
    return parse_phpunit_config(content, source=str(path))
