"""Per-project settings loaded from ``relflow.toml``.

The file is optional. When present it holds a single ``[release]`` table:

    [release]
    manifest = "package.json"
    remote = "origin"
    dev_marker = "SNAPSHOT"
    git_timeout = 30        # seconds; 0 disables the timeout
    build = "npm test"
    post_release = "npm publish"

Command-line flags override whatever the file says.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_number, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "DEFAULT_DEV_MARKER",
    "DEFAULT_GIT_TIMEOUT_SECONDS",
    "DEFAULT_MANIFEST_NAME",
    "DEFAULT_REMOTE",
    "Settings",
    "load_settings",
]

CONFIG_FILE_NAME = "relflow.toml"

DEFAULT_MANIFEST_NAME = "package.json"
DEFAULT_REMOTE = "origin"
DEFAULT_DEV_MARKER = "SNAPSHOT"
DEFAULT_GIT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Settings file could not be read or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    """Project release settings."""

    manifest: str = DEFAULT_MANIFEST_NAME
    remote: str = DEFAULT_REMOTE
    dev_marker: str = DEFAULT_DEV_MARKER
    git_timeout: float | None = DEFAULT_GIT_TIMEOUT_SECONDS
    build: str | None = None
    post_release: str | None = None

    @classmethod
    def from_dict(cls, data: StrDict) -> Settings:
        release: StrDict = get_table(data, "release") or {}

        timeout = get_number(release, "git_timeout")
        git_timeout: float | None
        if timeout is None:
            git_timeout = DEFAULT_GIT_TIMEOUT_SECONDS
        elif timeout <= 0:
            git_timeout = None
        else:
            git_timeout = timeout

        return cls(
            manifest=get_str(release, "manifest") or DEFAULT_MANIFEST_NAME,
            remote=get_str(release, "remote") or DEFAULT_REMOTE,
            dev_marker=get_str(release, "dev_marker") or DEFAULT_DEV_MARKER,
            git_timeout=git_timeout,
            build=get_str(release, "build"),
            post_release=get_str(release, "post_release"),
        )


def load_settings(path: Path) -> Result[Settings, ConfigError]:
    """Load settings from ``path``; a missing file yields defaults.

    Args:
        path: Path to a ``relflow.toml`` file

    Returns:
        Ok(Settings) on success, Err(ConfigError) if the file exists but
        cannot be read or is not valid TOML.
    """
    import tomllib

    if not path.exists():
        return Ok(Settings())

    try:
        data_obj: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(Settings.from_dict(data))
