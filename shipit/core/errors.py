"""Exit codes for the CLI.

A release either completes or stops at the first fatal step, so the
process only distinguishes success from failure. The values are part of
the command-line contract and must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes."""

    OK = 0
    RELEASE_FAILED = 1
