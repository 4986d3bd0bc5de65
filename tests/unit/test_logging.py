"""Unit tests for logging and timing infrastructure."""

import json
import logging
import sys
from pathlib import Path

import pytest

from css_enhancer.enhancer_logging import (
    LOGGER_NAME,
    JSONFormatter,
    LogCategory,
    get_category_logger,
    get_logger,
    setup_logging,
)
from css_enhancer.timing import PerformanceTimer, timed


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_file_output(self, tmp_path: Path) -> None:
        """Test basic logging setup with a log file."""
        log_file = tmp_path / "nested" / "test.log"
        logger = setup_logging(log_file=log_file, quiet=True)

        logger.info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_json_format(self, tmp_path: Path) -> None:
        """Test JSON log format with extra fields."""
        log_file = tmp_path / "json.log"
        setup_logging(log_file=log_file, log_format="json", quiet=True)

        get_logger().info("JSON test message", extra={"rule_count": 4})

        entry = json.loads(log_file.read_text().strip().split("\n")[-1])
        assert entry["message"] == "JSON test message"
        assert entry["level"] == "INFO"
        assert entry["logger"] == LOGGER_NAME
        assert entry["rule_count"] == 4
        assert "timestamp" in entry
        assert entry["category"] is None

    def test_json_category(self, tmp_path: Path) -> None:
        """Test that category loggers are tagged in JSON entries."""
        log_file = tmp_path / "json.log"
        setup_logging(log_file=log_file, log_format="json", quiet=True)

        get_category_logger(LogCategory.MAPPER).debug("mapped", extra={"node_count": 3})

        entry = json.loads(log_file.read_text().strip())
        assert entry["category"] == "mapper"
        assert entry["logger"] == "css_enhancer.mapper"
        assert entry["node_count"] == 3

    def test_quiet_has_no_console_handler(self) -> None:
        logger = setup_logging(quiet=True)

        assert not any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_verbose_console_level(self) -> None:
        logger = setup_logging(level="WARNING", verbose=True)

        console = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(console) == 1
        assert console[0].level == logging.DEBUG

    def test_rotation_parameters(self, tmp_path: Path) -> None:
        """Test that rotation settings reach the file handler."""
        logger = setup_logging(
            log_file=tmp_path / "rotate.log", quiet=True, rotation_count=2, max_bytes=512
        )

        for i in range(50):
            logger.info(f"Log entry {i} " + "x" * 50)

        assert (tmp_path / "rotate.log.1").exists()
        assert not (tmp_path / "rotate.log.3").exists()


class TestCategoryLoggers:
    """Tests for category loggers."""

    @pytest.mark.parametrize("category", list(LogCategory))
    def test_category_logger_name(self, category: LogCategory) -> None:
        logger = get_category_logger(category)

        assert logger.name == f"{LOGGER_NAME}.{category.value}"

    def test_category_logs_reach_package_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "cat.log"
        setup_logging(log_file=log_file, quiet=True)

        get_category_logger(LogCategory.PARSER).warning("parser says hi")

        assert "css_enhancer.parser" in log_file.read_text()


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_exception_included(self) -> None:
        try:
            raise ValueError("broken")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "failed"
        assert "ValueError: broken" in entry["exception"]


class TestTiming:
    """Tests for timed and PerformanceTimer."""

    def test_timer_measures(self) -> None:
        with PerformanceTimer("block", auto_log=False) as timer:
            assert timer.elapsed_ms >= 0

        assert timer.duration_ms >= 0
        assert timer.elapsed_ms >= timer.duration_ms

    def test_timer_logs(self, tmp_path: Path) -> None:
        log_file = tmp_path / "perf.log"
        setup_logging(log_file=log_file, quiet=True)

        with PerformanceTimer("stage"):
            pass

        assert "[PERF] stage:" in log_file.read_text()

    def test_timed_decorator(self, tmp_path: Path) -> None:
        log_file = tmp_path / "timed.log"
        setup_logging(log_file=log_file, quiet=True)

        @timed("double")
        def double(x: int) -> int:
            return x * 2

        assert double(4) == 8
        assert double.__name__ == "double"
        assert "[PERF] double:" in log_file.read_text()

    def test_timed_reraises(self, tmp_path: Path) -> None:
        log_file = tmp_path / "timed.log"
        setup_logging(log_file=log_file, quiet=True)

        @timed()
        def fail() -> None:
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            fail()

        text = log_file.read_text()
        assert "[PERF] fail failed after" in text
        assert text.rstrip().endswith(": nope")
