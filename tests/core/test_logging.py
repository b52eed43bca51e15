"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from testplane.config.models import LoggingConfig, LogOutputConfig
from testplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        assert set_run_id("run-123") == "run-123"
        assert get_run_id() == "run-123"

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        rid = set_run_id()
        assert len(rid) == 12

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        set_run_id("to-clear")
        clear_run_id()
        assert get_run_id() is None


class TestConfigureLogging:
    """Logging configuration tests."""

    def teardown_method(self) -> None:
        clear_run_id()
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def test_given_json_file_output_when_logging_then_writes_json_with_run_id(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "logs" / "testplane.jsonl"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_run_id("abc")

        # When
        get_logger("test").info("phpunit_inference_complete", projects=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "phpunit_inference_complete"
        assert record["projects"] == 2
        assert record["run_id"] == "abc"
        assert record["logger"] == "test"

    def test_level_applies_to_root_logger(self) -> None:
        configure_logging(level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_given_logger_created_before_configure_when_logging_then_uses_configured_outputs(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        # Given
        early = get_logger("early")
        log_file = tmp_path / "early.jsonl"
        configure_logging(
            config=LoggingConfig(
                level="WARNING",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        # When
        early.debug("filtered_out")
        early.warning("kept", detail=1)
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert [r["event"] for r in records] == ["kept"]
        assert records[0]["logger"] == "early"
        assert capsys.readouterr().out == ""

    def test_module_level_loggers_follow_configuration(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        from testplane.graph import cache

        log_file = tmp_path / "cache.jsonl"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        cache.log.debug("targets_cache_miss", key="abc")
        cache.log.warning("targets_cache_unreadable", path="x")
        for handler in logging.getLogger().handlers:
            handler.flush()

        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert events == ["targets_cache_unreadable"]
        assert capsys.readouterr().out == ""
