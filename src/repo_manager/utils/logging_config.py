"""Logging configuration for the application."""

import logging
import logging.handlers
import sys

from .path_manager import PathManager

PROCESS_LOGGER_NAME = "repo_manager.services.process_runner"


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record):
        # Color a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}"
                f"{self.COLORS['RESET']}"
            )

        return super().format(record)


def _rotating_handler(
    filename: str, level: int, max_file_size: int, backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        PathManager.get_log_dir() / filename,
        maxBytes=max_file_size,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_to_console: bool = True,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Set up logging configuration for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files
        log_to_console: Whether to log to console
        max_file_size: Maximum size of log files before rotation
        backup_count: Number of backup log files to keep
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            ColoredFormatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)

    if log_to_file:
        try:
            PathManager.get_log_dir().mkdir(parents=True, exist_ok=True)

            root_logger.addHandler(
                _rotating_handler("app.log", numeric_level, max_file_size, backup_count)
            )
            root_logger.addHandler(
                _rotating_handler(
                    "errors.log", logging.ERROR, max_file_size, backup_count
                )
            )

            # Every external process invocation, regardless of the root level
            process_logger = logging.getLogger(PROCESS_LOGGER_NAME)
            process_logger.setLevel(logging.DEBUG)
            process_logger.handlers.clear()
            process_logger.addHandler(
                _rotating_handler(
                    "git_operations.log", logging.DEBUG, max_file_size, backup_count
                )
            )
            process_logger.propagate = True

        except OSError as e:
            logging.getLogger(__name__).error(f"Failed to set up file logging: {e}")

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured - Level: {level}, File: {log_to_file}, Console: {log_to_console}"
    )


def set_log_level(level: str) -> None:
    """
    Change the logging level for all handlers.

    Args:
        level: New logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # errors.log keeps its own ERROR threshold
    for handler in root_logger.handlers:
        if not getattr(handler, "baseFilename", "").endswith("errors.log"):
            handler.setLevel(numeric_level)

    logging.getLogger(__name__).info(f"Log level changed to {level}")
