"""Manifest ``version`` field store.

The manifest is the single source of truth for the current version and is
re-read on every call. Writes replace the whole file, keep key order and
every other field, and use 2-space indentation.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path

from relflow.core.config import DEFAULT_MANIFEST_NAME
from relflow.core.result import Err, Ok, Result
from relflow.core.structured import StrDict, as_str_dict
from relflow.release.errors import ReleaseError

__all__ = ["manifest_path", "read_manifest", "read_version", "write_version"]


def manifest_path(project_path: Path, manifest_name: str = DEFAULT_MANIFEST_NAME) -> Path:
    return project_path / manifest_name


def read_manifest(path: Path) -> Result[StrDict, ReleaseError]:
    """Parse the manifest into a dict; any failure is ``manifest_missing``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok(data)


def read_version(
    project_path: Path, manifest_name: str = DEFAULT_MANIFEST_NAME
) -> Result[str, ReleaseError]:
    path = manifest_path(project_path, manifest_name)
    parsed = read_manifest(path)
    if isinstance(parsed, Err):
        return parsed

    value = parsed.value.get("version")
    if not isinstance(value, str) or not value.strip():
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"missing version in {path.name}",
                hint=str(path),
            )
        )
    return Ok(value.strip())


def write_version(
    project_path: Path,
    version: str,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
) -> Result[Path, ReleaseError]:
    """Set the manifest ``version`` field and return the manifest path."""
    path = manifest_path(project_path, manifest_name)
    parsed = read_manifest(path)
    if isinstance(parsed, Err):
        return parsed

    data = parsed.value
    data["version"] = version
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    try:
        _replace_text(path, content)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_write_error",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(path)


def _replace_text(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
