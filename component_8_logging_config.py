"""
component_8_logging_config.py

Central logging system for the blocks world planner.

Features:
- Console and file based logging
- Structured formatting with timestamps and component names
- Separate error-only and performance log files
- Performance tracking for the search loop
- Contextual key=value information via ``extra``

Usage:
    from component_8_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Search started", extra={"start_facts": 12, "goal_facts": 12})
"""

import logging
import logging.handlers
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Literal, Mapping, MutableMapping, Optional, Tuple, Type

from common.constants import ENV_LOG_LEVEL

LOG_DIR: Path = Path("logs")

DEFAULT_LOG_FILE: Path = LOG_DIR / "blocks_planner.log"
ERROR_LOG_FILE: Path = LOG_DIR / "blocks_planner_errors.log"
PERFORMANCE_LOG_FILE: Path = LOG_DIR / "blocks_planner_performance.log"

PERFORMANCE_LOGGER_NAME: str = "blocks_planner.performance"

CONSOLE_LOG_LEVEL: int = logging.INFO
FILE_LOG_LEVEL: int = logging.DEBUG


class PlannerLogFormatter(logging.Formatter):
    """
    Formatter for structured log lines, optionally coloured for the console.
    """

    COLORS: Dict[str, str] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = False, include_extra: bool = True) -> None:
        self.use_colors: bool = use_colors
        self.include_extra: bool = include_extra

        # [TIMESTAMP] [LEVEL] [COMPONENT] MESSAGE
        fmt = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_message = super().format(record)

        if self.include_extra and hasattr(record, "extra_info"):
            extra_str = " | ".join(f"{k}={v}" for k, v in record.extra_info.items())
            log_message += f" | {extra_str}"

        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            log_message = f"{color}{log_message}{reset}"

        return log_message


class PerformanceLogger:
    """
    Context manager that times a critical operation.

    Usage:
        with PerformanceLogger(logger.logger, "Greedy search", blocks=10):
            engine.solve(start, goal)
    """

    def __init__(
        self, logger: logging.Logger, operation_name: str, **context: Any
    ) -> None:
        self.logger: logging.Logger = logger
        self.operation_name: str = operation_name
        self.context: Dict[str, Any] = context
        self.start_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self.start_time = datetime.now()
        self.logger.debug(
            f"START: {self.operation_name}", extra={"extra_info": self.context}
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Literal[False]:
        assert (
            self.start_time is not None
        ), "PerformanceLogger was not entered before exit"
        self.duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000

        if exc_type is None:
            self.logger.debug(
                f"END: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={
                    "extra_info": {**self.context, "duration_ms": self.duration_ms}
                },
            )

            perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
            perf_logger.info(
                f"{self.operation_name}: {self.duration_ms:.2f}ms",
                extra={
                    "extra_info": {**self.context, "duration_ms": self.duration_ms}
                },
            )
        else:
            self.logger.error(
                f"FAILED: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={
                    "extra_info": {
                        **self.context,
                        "duration_ms": self.duration_ms,
                        "error": str(exc_val),
                    }
                },
            )

        # never swallow the exception
        return False


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that stores the ``extra`` dict as ``extra_info`` on the record.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra", {})
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs

    def log_exception(self, exc: Exception, message: str = "", **context: Any) -> None:
        """Log an exception with full traceback and context."""
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        self.error(
            f"{message}: {type(exc).__name__}: {str(exc)}\n{tb_str}", extra=context
        )


def console_level_from_env(
    environ: Optional[Mapping[str, str]] = None, default: int = CONSOLE_LOG_LEVEL
) -> int:
    """
    Console level named by BLOCKS_PLANNER_LOG_LEVEL ("DEBUG", "info", ...).

    Unset or unknown names fall back to ``default``.
    """
    env = os.environ if environ is None else environ
    name = env.get(ENV_LOG_LEVEL, "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def _rotating_handler(
    path: Path, level: int, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(PlannerLogFormatter(use_colors=False, include_extra=True))
    return handler


def setup_logging(
    console_level: int = CONSOLE_LOG_LEVEL,
    file_level: int = FILE_LOG_LEVEL,
    log_file: Optional[Path] = None,
    enable_file_logging: bool = True,
    enable_performance_logging: bool = True,
) -> None:
    """
    Configure the global logging system.

    Search runs log one DEBUG line per expansion, so the console stays at
    INFO by default while the main file keeps everything.

    Args:
        console_level: Level for console output
        file_level: Level for the main log file
        log_file: Main log file path (default: logs/blocks_planner.log); the
            error and performance files are written next to it
        enable_file_logging: Write the main and error log files
        enable_performance_logging: Route search timings to their own file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        PlannerLogFormatter(use_colors=True, include_extra=True)
    )
    root_logger.addHandler(console_handler)

    file_path = log_file or DEFAULT_LOG_FILE
    log_dir = file_path.parent
    if enable_file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _rotating_handler(file_path, file_level, 10 * 1024 * 1024, 5)
        )
        root_logger.addHandler(
            _rotating_handler(
                log_dir / ERROR_LOG_FILE.name, logging.ERROR, 5 * 1024 * 1024, 3
            )
        )

    # timings stay on the console unless they get their own file
    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_logger.handlers.clear()
    perf_to_file = enable_file_logging and enable_performance_logging
    perf_logger.propagate = not perf_to_file
    if perf_to_file:
        perf_logger.setLevel(logging.INFO)
        perf_logger.addHandler(
            _rotating_handler(
                log_dir / PERFORMANCE_LOG_FILE.name, logging.INFO, 5 * 1024 * 1024, 3
            )
        )

    logging.getLogger("blocks_planner.logging_config").info(
        "Logging initialised",
        extra={
            "extra_info": {
                "console_level": logging.getLevelName(console_level),
                "file_level": logging.getLevelName(file_level),
                "log_file": str(file_path) if enable_file_logging else None,
                "performance_logging": perf_to_file,
            }
        },
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Create a structured logger for a component.

    Args:
        name: Component name (usually __name__)

    Example:
        logger = get_logger(__name__)
        logger.info("Plan found", extra={"plan_length": 7})
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger, {})


def log_component_error(
    logger: StructuredLogger, component_name: str, error: Exception, **context: Any
) -> None:
    """Log an error in a component with full traceback."""
    logger.log_exception(error, message=f"ERROR in {component_name}", **context)
