from __future__ import annotations

import re
from dataclasses import dataclass

from relflow.core.config import DEFAULT_DEV_MARKER
from relflow.core.result import Err, Ok, Result
from relflow.release.errors import ReleaseError

_NUMERIC_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _split(version: str) -> tuple[str, str | None]:
    core, sep, suffix = version.strip().partition("-")
    return core, (suffix if sep else None)


def parse_core(version: str) -> SemVer | None:
    """Parse the numeric ``MAJOR.MINOR.PATCH`` part, ignoring any suffix."""
    core, _ = _split(version)
    m = _NUMERIC_RE.match(core)
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def is_development_version(version: str, marker: str = DEFAULT_DEV_MARKER) -> bool:
    return marker in version


def has_three_components(version: str) -> bool:
    return parse_core(version) is not None


def next_patch(version: str) -> str:
    """Patch increment with semver semantics.

    A pre-release is promoted to its own release (``1.2.3-SNAPSHOT`` ->
    ``1.2.3``); a release gets its patch bumped (``1.2.3`` -> ``1.2.4``).
    """
    base = parse_core(version)
    if base is None:
        raise ValueError(f"not a MAJOR.MINOR.PATCH version: {version!r}")
    _, suffix = _split(version)
    if suffix is not None:
        return str(base)
    return str(SemVer(base.major, base.minor, base.patch + 1))


def release_version_for(dev_version: str, override: str | None = None) -> str:
    if override:
        return override
    return next_patch(dev_version)


def next_dev_version_for(
    release_version: str,
    override: str | None = None,
    marker: str = DEFAULT_DEV_MARKER,
) -> str:
    if override:
        return override
    return f"{next_patch(release_version)}-{marker}"


def check_development_version(
    version: str, marker: str = DEFAULT_DEV_MARKER
) -> Result[str, ReleaseError]:
    if not is_development_version(version, marker):
        return Err(
            ReleaseError(
                kind="version_invalid",
                message=f"Can not release a non-{marker} version: {version}",
                hint="Update the manifest version prior to release",
            )
        )
    if not has_three_components(version):
        return Err(
            ReleaseError(
                kind="version_invalid",
                message=f"Project version must have three numeric components: {version}",
                hint=f"Expected e.g. 1.0.0-{marker}",
            )
        )
    return Ok(version)
