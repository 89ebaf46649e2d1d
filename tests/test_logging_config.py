"""
tests/test_logging_config.py

Tests for the logging configuration.
"""

import logging

import pytest

from component_8_logging_config import (
    PERFORMANCE_LOGGER_NAME,
    PerformanceLogger,
    PlannerLogFormatter,
    StructuredLogger,
    console_level_from_env,
    get_logger,
    setup_logging,
)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_handlers = list(perf_logger.handlers)
    perf_propagate = perf_logger.propagate
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    for handler in perf_logger.handlers:
        if handler not in perf_handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    perf_logger.handlers[:] = perf_handlers
    perf_logger.propagate = perf_propagate


class TestStructuredLogger:
    """Tests for StructuredLogger and PlannerLogFormatter"""

    def test_get_logger(self):
        """Test 1: get_logger returns a structured adapter"""
        logger = get_logger("blocks_planner.test")
        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "blocks_planner.test"

    def test_extra_rendered(self, caplog):
        """Test 2: extra is moved to extra_info and formatted as key=value"""
        logger = get_logger("blocks_planner.test")

        with caplog.at_level(logging.INFO, logger="blocks_planner.test"):
            logger.info("Plan found", extra={"actions": 4})

        record = caplog.records[-1]
        assert record.extra_info == {"actions": 4}
        formatted = PlannerLogFormatter(use_colors=False).format(record)
        assert formatted.endswith("Plan found | actions=4")


class TestPerformanceLogger:
    """Tests for PerformanceLogger"""

    def test_duration_recorded(self):
        """Test 1: The duration is measured on exit"""
        with PerformanceLogger(logging.getLogger("blocks_planner.test"), "op") as perf:
            pass
        assert perf.duration_ms is not None
        assert perf.duration_ms >= 0

    def test_exception_propagates(self):
        """Test 2: Exceptions inside the block are not swallowed"""
        with pytest.raises(ValueError):
            with PerformanceLogger(logging.getLogger("blocks_planner.test"), "op"):
                raise ValueError("boom")


class TestSetupLogging:
    """Tests for setup_logging"""

    def test_file_logging(self, tmp_path, restore_logging):
        """Test 1: File logging creates the main and error log files"""
        log_file = tmp_path / "planner.log"

        setup_logging(log_file=log_file)
        get_logger("blocks_planner.test").info("hello")

        for handler in logging.getLogger().handlers:
            handler.flush()
        assert log_file.exists()
        assert (tmp_path / "blocks_planner_errors.log").exists()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_console_only(self, restore_logging):
        """Test 2: Without file logging only the console handler is installed"""
        setup_logging(enable_file_logging=False)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert logging.getLogger(PERFORMANCE_LOGGER_NAME).propagate


class TestConsoleLevelFromEnv:
    """Tests for console_level_from_env"""

    def test_named_level(self):
        """Test 1: Level names are read case-insensitively"""
        assert console_level_from_env({"BLOCKS_PLANNER_LOG_LEVEL": "debug"}) == logging.DEBUG
        assert console_level_from_env({"BLOCKS_PLANNER_LOG_LEVEL": "WARNING"}) == logging.WARNING

    def test_fallback(self):
        """Test 2: Unset or unknown names fall back to the default"""
        assert console_level_from_env({}) == logging.INFO
        assert console_level_from_env({"BLOCKS_PLANNER_LOG_LEVEL": "chatty"}) == logging.INFO
        assert console_level_from_env({}, default=logging.ERROR) == logging.ERROR

    def test_performance_log_next_to_main_log(self, tmp_path, restore_logging):
        """Test 3: Search timings go to a file beside the main log"""
        setup_logging(log_file=tmp_path / "planner.log")

        with PerformanceLogger(logging.getLogger("blocks_planner.test"), "search"):
            pass

        perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
        for handler in perf_logger.handlers:
            handler.flush()
        assert not perf_logger.propagate
        assert "search:" in (tmp_path / "blocks_planner_performance.log").read_text(
            encoding="utf-8"
        )
