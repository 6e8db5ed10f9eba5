from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok, Result
from relflow.git import repository as repository_mod
from relflow.platform.process import CommandResult, ProcessError

MUTATING = {"commit", "tag", "push", "reset"}


@dataclass
class FakeGit:
    """Stands in for ``run_process`` inside ``relflow.git.repository``."""

    status: str = ""
    head: str = "abc123\n"
    branch: str = "main\n"
    calls: list[list[str]] = field(default_factory=list)
    timeouts: list[float | None] = field(default_factory=list)
    failures: list[tuple[tuple[str, ...], ProcessError]] = field(default_factory=list)

    def fail(
        self,
        *prefix: str,
        returncode: int = 1,
        stderr: str = "boom",
        timed_out: bool = False,
    ) -> None:
        self.failures.append(
            (
                prefix,
                ProcessError(
                    command=("git", *prefix),
                    returncode=-1 if timed_out else returncode,
                    stdout="",
                    stderr=stderr,
                    timed_out=timed_out,
                    timeout=30.0,
                ),
            )
        )

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[CommandResult, ProcessError]:
        del env
        assert cmd[:3] == ["git", "-C", str(cwd)]
        args = cmd[3:]
        self.calls.append(args)
        self.timeouts.append(timeout)

        for prefix, error in self.failures:
            if tuple(args[: len(prefix)]) == prefix:
                return Err(error)

        if args[:1] == ["status"]:
            return Ok(CommandResult(stdout=self.status, stderr=""))
        if args[:2] == ["rev-parse", "--verify"]:
            return Ok(CommandResult(stdout=self.head, stderr=""))
        if args[:2] == ["rev-parse", "--abbrev-ref"]:
            return Ok(CommandResult(stdout=self.branch, stderr=""))
        return Ok(CommandResult(stdout="", stderr=""))

    @property
    def mutations(self) -> list[list[str]]:
        return [c for c in self.calls if c[0] in MUTATING]


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr(repository_mod, "run_process", fake)
    return fake


def write_manifest(project: Path, version: str) -> Path:
    path = project / "package.json"
    path.write_text(
        json.dumps({"name": "test-project", "version": version, "private": True}, indent=2) + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    write_manifest(root, "1.2.3-SNAPSHOT")
    return root
