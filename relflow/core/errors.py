"""Process exit codes for the relflow CLI.

The values are used as shell exit status and must stay stable:
- 0: Success
- 1: User error (bad configuration, non-SNAPSHOT version, dirty tree)
- 2: Environment error (git failed, timed out, HEAD unreadable)
- 3: Build error (build or post-release step failed)
- 5: I/O error (manifest missing or not writable)
- 6: Rollback error (cleanup after a failed release also failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    IO_ERROR = 5
    ROLLBACK_ERROR = 6
