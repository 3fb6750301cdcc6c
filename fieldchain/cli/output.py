"""Output formatting and logging setup for CLI operations.

This module provides:
- configure_logging: Console and optional file logging for a command run
- report_failures: One line per recorded validation failure
- handle_error: Formatted error messages with context and optional stack traces
"""

import logging
import sys
import traceback
from pathlib import Path
from typing import TextIO

from fieldchain.validation.result import ValidationResult

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(log_level: str = "warning", log_file: Path | None = None) -> logging.Logger:
    """Configure the fieldchain logger for a command run.

    Log records go to stderr so stdout stays clean for command output. When
    log_file is given, records are also appended to that file.

    Args:
        log_level: One of debug, info, warning, error (case-insensitive)
        log_file: Optional path of a log file

    Returns:
        The configured "fieldchain" logger

    Raises:
        ValueError: If log_level is not a known level
    """
    level_name = log_level.lower()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}. Use one of: {', '.join(LOG_LEVELS)}")
    level = getattr(logging, level_name.upper())

    logger = logging.getLogger("fieldchain")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def report_failures(result: ValidationResult, stream: TextIO | None = None) -> None:
    """Write each failure of a result on its own line, to stderr by default."""
    stream = stream or sys.stderr
    print(f"✗ {result.session_name}: {len(result.failures)} validation failure(s)", file=stream)
    for failure in result.failures:
        print(f"  {failure.message}", file=stream)


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Format and display error message with context.

    Displays error messages to stderr with optional context fields from
    FieldchainError exceptions. When verbose mode is enabled, also displays
    the full stack trace.

    Args:
        error: Exception to display
        verbose: Whether to show stack trace (default False)
    """
    print(f"Error: {error}", file=sys.stderr)

    if hasattr(error, "context") and error.context:
        print("Context:", file=sys.stderr)
        for key, value in error.context.items():
            print(f"  {key}: {value}", file=sys.stderr)

    if verbose:
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
