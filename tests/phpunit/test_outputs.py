"""Tests for target output resolution."""

from __future__ import annotations

from testplane.phpunit.config import ParsedConfiguration
from testplane.phpunit.outputs import (
    DEFAULT_TEST_OUTPUT,
    compute_outputs,
    get_coverage_output,
    get_test_output,
    output_subfolder,
)

WORKSPACE = "/repo"
PROJECT = "packages/api"


class TestConfiguredOutputs:
    def test_default_test_output(self) -> None:
        assert get_test_output(ParsedConfiguration()) == DEFAULT_TEST_OUTPUT == (
            ".phpunit.cache/test-results"
        )

    def test_configured_test_output(self) -> None:
        config = ParsedConfiguration(cache_result_file="custom/out.cache")
        assert get_test_output(config) == "custom/out.cache"

    def test_coverage_absent_by_default(self) -> None:
        assert get_coverage_output(ParsedConfiguration()) is None

    def test_configured_coverage(self) -> None:
        config = ParsedConfiguration(coverage_cache_directory="coverage")
        assert get_coverage_output(config) == "coverage"


class TestOutputSubfolder:
    def test_separators_and_dots_become_hyphens(self) -> None:
        assert output_subfolder("tests/sub/BarTest.php") == "tests-sub-BarTest-php"

    def test_backslashes_replaced(self) -> None:
        assert output_subfolder("tests\\FooTest.php") == "tests-FooTest-php"

    def test_known_collision_of_raw_tokens(self) -> None:
        # Raw tokens are not injective; the builder disambiguates these.
        assert output_subfolder("a/b-Test.php") == output_subfolder("a-b/Test.php")


class TestComputeOutputs:
    def test_test_output_only(self) -> None:
        assert compute_outputs("custom/out.cache", None, WORKSPACE, PROJECT) == [
            "{projectRoot}/custom/out.cache"
        ]

    def test_test_output_then_coverage(self) -> None:
        outputs = compute_outputs(DEFAULT_TEST_OUTPUT, "coverage", WORKSPACE, PROJECT)
        assert outputs == [
            "{projectRoot}/.phpunit.cache/test-results",
            "{projectRoot}/coverage",
        ]

    def test_duplicates_removed(self) -> None:
        outputs = compute_outputs("build/out", "build/out", WORKSPACE, PROJECT)
        assert outputs == ["{projectRoot}/build/out"]

    def test_subfolder_applied_to_both(self) -> None:
        outputs = compute_outputs(
            "custom/out.cache", "coverage", WORKSPACE, PROJECT, "tests-FooTest-php"
        )
        assert outputs == [
            "{projectRoot}/custom/tests-FooTest-php/out.cache",
            "{projectRoot}/coverage/tests-FooTest-php",
        ]

    def test_escaping_output_uses_workspace_token(self) -> None:
        outputs = compute_outputs("../../reports/phpunit", None, WORKSPACE, PROJECT)
        assert outputs == ["{workspaceRoot}/reports/phpunit"]
