"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from proofscan.config.models import LoggingConfig, LogOutputConfig
from proofscan.core.logging import (
    bind_source,
    clear_source,
    configure_logging,
    get_log_file_path,
    get_logger,
    get_source,
)


class TestSourceCorrelation:
    """Source path context variable tests."""

    def setup_method(self) -> None:
        clear_source()

    def test_given_path_when_bound_then_can_retrieve(self) -> None:
        # Given
        path = Path("src/lib.rs")

        # When
        result = bind_source(path)

        # Then
        assert result == "src/lib.rs"
        assert get_source() == "src/lib.rs"

    def test_given_bound_source_when_clear_then_removed(self) -> None:
        bind_source("a.rs")

        clear_source()

        assert get_source() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_source()

    def teardown_method(self) -> None:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()
        clear_source()

    def test_given_json_file_output_when_logging_then_writes_json_with_source(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "logs" / "proofscan.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        bind_source("crate/src/lib.rs")

        # When
        get_logger("test").info("harnesses_extracted", count=3)
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "harnesses_extracted"
        assert record["count"] == 3
        assert record["source"] == "crate/src/lib.rs"
        assert record["logger"] == "test"
        assert record["level"] == "info"
        assert get_log_file_path() == log_file

    def test_given_level_when_lower_event_then_filtered(self, tmp_path: Path) -> None:
        log_file = tmp_path / "quiet.log"
        configure_logging(
            config=LoggingConfig(
                level="WARNING",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        get_logger().debug("malformed_source", error_count=1)
        get_logger().warning("source_parse_failed", error="x")
        for handler in logging.getLogger().handlers:
            handler.flush()

        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert events == ["source_parse_failed"]

    def test_given_simple_params_when_configured_then_console_handler(self) -> None:
        configure_logging(level="DEBUG")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert logging.getLogger().level == logging.DEBUG
        assert get_log_file_path() is None

    def test_given_reconfigure_when_called_twice_then_handlers_replaced(self) -> None:
        configure_logging(level="INFO")
        configure_logging(level="INFO")

        assert len(logging.getLogger().handlers) == 1

    def test_given_relative_destination_when_validated_then_rejected(self) -> None:
        with pytest.raises(ValueError, match="absolute"):
            LogOutputConfig(destination="relative.log")
