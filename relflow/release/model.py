from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from time import monotonic

from relflow.core.config import (
    DEFAULT_DEV_MARKER,
    DEFAULT_GIT_TIMEOUT_SECONDS,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_REMOTE,
)
from relflow.core.result import Result


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    """What the build and post-release steps are told about the release."""

    release_version: str


# A step reports its outcome as Ok(None) or Err(reason). Exceptions raised by
# a step are converted into the same failure outcome.
ReleaseStep = Callable[[ReleaseInfo], Result[None, str]]


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Caller configuration for one release.

    Attributes:
        project_path: Project root holding the manifest and git working tree
        build: Build step, run after the manifest is bumped to the release version
        post_release: Optional step run after tagging (e.g. publishing artifacts)
        release_version: Explicit release version (derived when None)
        next_dev_version: Explicit next development version (derived when None)
        debug: Print ``[release]`` trace lines for this run
        manifest_name: Manifest file name relative to ``project_path``
        remote: Remote the tag and branch are pushed to
        dev_marker: Development suffix marker (without the leading dash)
        git_timeout: Seconds before a git process is killed; None disables it
    """

    project_path: Path | None
    build: ReleaseStep | None
    post_release: ReleaseStep | None = None
    release_version: str | None = None
    next_dev_version: str | None = None
    debug: bool = False
    manifest_name: str = DEFAULT_MANIFEST_NAME
    remote: str = DEFAULT_REMOTE
    dev_marker: str = DEFAULT_DEV_MARKER
    git_timeout: float | None = DEFAULT_GIT_TIMEOUT_SECONDS


class ReleaseStage(Enum):
    VALIDATING = "validating"
    READING_STATE = "reading_state"
    BUMPING_RELEASE = "bumping_release"
    BUILDING = "building"
    COMMITTING_RELEASE = "committing_release"
    TAGGING = "tagging"
    POST_RELEASE = "post_release"
    BUMPING_NEXT_DEV = "bumping_next_dev"
    COMMITTING_NEXT_DEV = "committing_next_dev"
    PUSHING_TAG = "pushing_tag"
    PUSHING_BRANCH = "pushing_branch"
    DONE = "done"
    ROLLING_BACK = "rolling_back"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class ReleaseSession:
    """State of one ``perform`` call, filled in as each step completes."""

    stage: ReleaseStage = ReleaseStage.VALIDATING
    pre_release_commit: str | None = None
    dev_branch: str | None = None
    dev_version: str | None = None
    release_version: str | None = None
    release_tag_name: str | None = None
    next_dev_version: str | None = None
    started_at: float = field(default_factory=monotonic)

    def elapsed_ms(self) -> int:
        return int((monotonic() - self.started_at) * 1000)


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    release_version: str
    dev_version: str
    release_time_ms: int
