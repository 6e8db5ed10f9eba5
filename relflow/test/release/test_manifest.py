from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok
from relflow.release import manifest as manifest_mod
from relflow.release.manifest import read_version, write_version


def test_read_version(project: Path) -> None:
    assert read_version(project) == Ok("1.2.3-SNAPSHOT")


def test_read_version_missing_file(tmp_path: Path) -> None:
    result = read_version(tmp_path)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_missing"


def test_read_version_invalid_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")

    result = read_version(tmp_path)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_missing"
    assert "invalid JSON" in result.error.message


def test_read_version_requires_object_with_version(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("[1, 2]", encoding="utf-8")
    assert isinstance(read_version(tmp_path), Err)

    (tmp_path / "package.json").write_text('{"name": "x"}', encoding="utf-8")
    result = read_version(tmp_path)
    assert isinstance(result, Err)
    assert "missing version" in result.error.message


def test_custom_manifest_name(tmp_path: Path) -> None:
    (tmp_path / "release.json").write_text('{"version": "3.0.0-SNAPSHOT"}', encoding="utf-8")

    assert read_version(tmp_path, "release.json") == Ok("3.0.0-SNAPSHOT")


def test_write_version_keeps_order_and_fields(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text(
        '{"name": "demo", "version": "1.0.0-SNAPSHOT", "scripts": {"test": "jest"}}',
        encoding="utf-8",
    )

    result = write_version(tmp_path, "1.0.0")

    assert result == Ok(path)
    assert path.read_text(encoding="utf-8") == (
        "{\n"
        '  "name": "demo",\n'
        '  "version": "1.0.0",\n'
        '  "scripts": {\n'
        '    "test": "jest"\n'
        "  }\n"
        "}\n"
    )
    assert [p.name for p in tmp_path.iterdir()] == ["package.json"]


def test_write_version_missing_manifest(tmp_path: Path) -> None:
    result = write_version(tmp_path, "1.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_missing"


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
@pytest.mark.parametrize("mode", [0o644, 0o755])
def test_write_version_keeps_file_mode(project: Path, mode: int) -> None:
    path = project / "package.json"
    path.chmod(mode)

    assert write_version(project, "1.2.3") == Ok(path)

    assert stat.S_IMODE(path.stat().st_mode) == mode
    assert read_version(project) == Ok("1.2.3")


def test_write_version_reports_write_failure(
    project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def refuse(path: Path, content: str) -> None:
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(manifest_mod, "_replace_text", refuse)

    result = write_version(project, "1.2.3")

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_write_error"
    assert "Permission denied" in result.error.message
    assert read_version(project) == Ok("1.2.3-SNAPSHOT")
