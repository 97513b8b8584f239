"""
Centralized logging utilities for punchcard.

Provides standardized logging functions for common scenarios so that the
encoders, the persistence layer and the CLI format their records the same way.
"""

import logging
from typing import Any


def log_command_handling(
    logger: logging.Logger, command_name: str, details: str = ""
) -> None:
    """Log the start of command handling with consistent format."""
    detail_str = f": {details}" if details else ""
    logger.info(f"Handling {command_name} command{detail_str}")


def log_command_error(
    logger: logging.Logger, command_name: str, error: Exception
) -> None:
    """Log command execution errors with consistent format."""
    logger.error(f"Error handling {command_name} command: {error}")


def log_debug_operation(
    logger: logging.Logger, operation: str, details: Any = None
) -> None:
    """Log debug information for operations."""
    if details is not None:
        logger.debug(f"{operation}: {details}")
    else:
        logger.debug(f"{operation}")


def log_data_processing(
    logger: logging.Logger, operation: str, data_info: str = ""
) -> None:
    """Log data processing operations with consistent format."""
    info_str = f" - {data_info}" if data_info else ""
    logger.debug(f"[DATA] {operation}{info_str}")
