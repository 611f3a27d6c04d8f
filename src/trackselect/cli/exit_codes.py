"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (options, config, input)
    20-29: Target/file errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for trackselect CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    OPTIONS_ERROR = 10
    CONFIG_ERROR = 11
    INVALID_ARGUMENTS = 12

    # Target/file errors (20-29)
    TARGET_NOT_FOUND = 20
    MANIFEST_ERROR = 21

    # Operation errors (40-49)
    OPERATION_FAILED = 40
    JOB_FAILED = 41
    COMPOSITION_ERROR = 42
