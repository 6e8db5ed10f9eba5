"""Error presentation and exit code mapping for release failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from relflow.core.errors import ErrorCode
from relflow.output.console import Style

if TYPE_CHECKING:
    from relflow.output.console import ConsoleProtocol
    from relflow.release.errors import ReleaseError

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.stage:
        console.print(f"stage: {error.stage}", Style.DIM)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if error.cause is not None:
        console.print("caused by:", Style.DIM)
        print_release_error(error.cause, console)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "config_invalid" | "version_invalid" | "dirty_working_tree":
            return int(ErrorCode.USER_ERROR)
        case "process_timeout" | "command_failed" | "commit_unreadable" | "branch_unreadable":
            return int(ErrorCode.ENV_ERROR)
        case "build_failed" | "post_release_failed":
            return int(ErrorCode.BUILD_ERROR)
        case "manifest_missing" | "manifest_write_error":
            return int(ErrorCode.IO_ERROR)
        case "rollback_failed":
            return int(ErrorCode.ROLLBACK_ERROR)
