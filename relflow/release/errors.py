"""Error types for the release workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "config_invalid",
    "version_invalid",
    "dirty_working_tree",
    "commit_unreadable",
    "branch_unreadable",
    "process_timeout",
    "command_failed",
    "manifest_missing",
    "manifest_write_error",
    "build_failed",
    "post_release_failed",
    "rollback_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``stage`` names the workflow stage that failed, when known. ``cause``
    links a rollback failure back to the error that triggered the rollback,
    so neither is lost.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    stage: str | None = None
    cause: ReleaseError | None = None

    def pretty(self) -> str:
        text = self.message
        if self.stage:
            text = f"[{self.stage}] {text}"
        if self.hint:
            text = f"{text} (hint: {self.hint})"
        if self.cause is not None:
            text = f"{text}\ncaused by: {self.cause.pretty()}"
        return text
