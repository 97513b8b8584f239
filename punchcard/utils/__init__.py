"""
Utilities package for punchcard.

Contains common utility functions used across the punchcard codebase.
"""

from .logging_utils import (
    log_command_error,
    log_command_handling,
    log_data_processing,
    log_debug_operation,
)

__all__ = [
    "log_command_handling",
    "log_command_error",
    "log_debug_operation",
    "log_data_processing",
]
