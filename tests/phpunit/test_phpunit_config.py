"""Tests for the phpunit.xml configuration reader."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from testplane.core.errors import ConfigParseError, ErrorCode
from testplane.phpunit.config import (
    ParsedConfiguration,
    TestSuite,
    parse_phpunit_config,
    read_phpunit_config,
)


class TestParsePhpunitConfig:
    """Extraction of outputs and test suites."""

    def test_full_configuration(self, render_phpunit_xml: Callable[..., str]) -> None:
        # Given
        content = render_phpunit_xml(
            cache_result_file="custom/out.cache",
            coverage_cache_directory="coverage",
            suite_name="unit",
            directory="tests",
        )

        # When
        config = parse_phpunit_config(content)

        # Then
        assert config.cache_result_file == "custom/out.cache"
        assert config.coverage_cache_directory == "coverage"
        assert config.test_suite_name == "unit"
        assert config.test_suite_directory == "tests"

    def test_missing_optional_values_are_none(self) -> None:
        config = parse_phpunit_config("<phpunit/>")

        assert config == ParsedConfiguration()
        assert config.cache_result_file is None
        assert config.coverage_cache_directory is None
        assert config.test_suite is None
        assert config.test_suite_name is None
        assert config.test_suite_directory is None

    def test_directory_attribute_form(self, render_phpunit_xml: Callable[..., str]) -> None:
        content = render_phpunit_xml(directory="tests/Unit", directory_as_attribute=True)
        assert parse_phpunit_config(content).test_suite_directory == "tests/Unit"

    def test_suite_without_directory(self) -> None:
        content = '<phpunit><testsuites><testsuite name="all"/></testsuites></phpunit>'
        config = parse_phpunit_config(content)
        assert config.test_suites == (TestSuite(name="all", directory=None),)

    def test_multiple_suites_first_drives_discovery(self) -> None:
        content = """
        <phpunit>
          <testsuites>
            <testsuite name="unit"><directory>tests/Unit</directory></testsuite>
            <testsuite name="feature"><directory>tests/Feature</directory></testsuite>
          </testsuites>
        </phpunit>
        """
        config = parse_phpunit_config(content)

        assert [s.name for s in config.test_suites] == ["unit", "feature"]
        assert config.test_suite_directory == "tests/Unit"

    def test_whitespace_around_directory_text_stripped(self) -> None:
        content = (
            "<phpunit><testsuites><testsuite name='u'>"
            "<directory>\n   tests  \n</directory>"
            "</testsuite></testsuites></phpunit>"
        )
        assert parse_phpunit_config(content).test_suite_directory == "tests"

    def test_empty_attributes_treated_as_absent(self) -> None:
        content = '<phpunit cacheResultFile=""><coverage cacheDirectory=""/></phpunit>'
        config = parse_phpunit_config(content)
        assert config.cache_result_file is None
        assert config.coverage_cache_directory is None

    def test_namespaced_document(self) -> None:
        content = """<?xml version="1.0"?>
        <phpunit xmlns="https://schema.phpunit.de/coverage/1.0" cacheResultFile="r.cache">
          <coverage cacheDirectory="cov"/>
          <testsuites><testsuite name="u"><directory>tests</directory></testsuite></testsuites>
        </phpunit>
        """
        config = parse_phpunit_config(content)
        assert config.cache_result_file == "r.cache"
        assert config.coverage_cache_directory == "cov"
        assert config.test_suite_directory == "tests"

    @pytest.mark.parametrize(
        "content",
        ["", "<phpunit>", "<phpunit><testsuites></phpunit>", "not xml at all"],
    )
    def test_malformed_xml_raises(self, content: str) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            parse_phpunit_config(content, source="pkg/phpunit.xml")
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR
        assert exc_info.value.details["path"] == "pkg/phpunit.xml"


class TestReadPhpunitConfig:
    def test_reads_from_disk(self, tmp_path: Path, render_phpunit_xml: Callable[..., str]) -> None:
        path = tmp_path / "phpunit.xml"
        path.write_text(render_phpunit_xml(directory="tests"))

        assert read_phpunit_config(path).test_suite_directory == "tests"

    def test_error_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "phpunit.xml"
        path.write_text("<phpunit")

        with pytest.raises(ConfigParseError) as exc_info:
            read_phpunit_config(path)
        assert exc_info.value.details["path"] == str(path)
