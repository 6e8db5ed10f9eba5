"""Tests for git/repository.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from relflow.core.result import Err, Ok, Result
from relflow.git import repository as repository_mod
from relflow.git.repository import Repository
from relflow.platform.process import CommandResult, ProcessError


class _Recorder:
    def __init__(self, result: Result[CommandResult, ProcessError]) -> None:
        self.result = result
        self.calls: list[tuple[list[str], Path, float | None]] = []

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[CommandResult, ProcessError]:
        self.calls.append((cmd, cwd, timeout))
        return self.result


def _patch(monkeypatch: pytest.MonkeyPatch, result: Result[CommandResult, ProcessError]) -> _Recorder:
    recorder = _Recorder(result)
    monkeypatch.setattr(repository_mod, "run_process", recorder)
    return recorder


def _out(stdout: str) -> Ok[CommandResult]:
    return Ok(CommandResult(stdout=stdout, stderr=""))


class TestRun:
    def test_runs_git_in_repo_with_timeout(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        recorder = _patch(monkeypatch, _out(""))

        Repository(tmp_path, timeout=12.0).run(["status", "--porcelain"])

        assert recorder.calls == [
            (["git", "-C", str(tmp_path), "status", "--porcelain"], tmp_path, 12.0)
        ]

    def test_default_timeout_is_thirty_seconds(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        recorder = _patch(monkeypatch, _out(""))

        Repository(tmp_path).run(["status"])

        assert recorder.calls[0][2] == 30.0

    def test_failure_message_has_args_exit_code_and_output(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        error = ProcessError(
            command=("git",), returncode=1, stdout="nothing added", stderr="pathspec error"
        )
        _patch(monkeypatch, Err(error))

        result = Repository(tmp_path).commit_paths(["package.json"], "msg")

        assert isinstance(result, Err)
        assert result.error.kind == "command_failed"
        assert result.error.args == ("commit", "package.json", "-m", "msg")
        assert result.error.returncode == 1
        assert "git commit package.json -m msg (exit code 1)" in result.error.message
        assert "stdout:\nnothing added" in result.error.message
        assert "stderr:\npathspec error" in result.error.message

    def test_timeout_maps_to_process_timeout(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        error = ProcessError(
            command=("git",), returncode=-1, stdout="", stderr="", timed_out=True, timeout=30.0
        )
        _patch(monkeypatch, Err(error))

        result = Repository(tmp_path).push("origin", "main")

        assert isinstance(result, Err)
        assert result.error.kind == "process_timeout"
        assert "git push origin main timed out after 30.0s" in result.error.message


class TestQueries:
    def test_head_commit_is_trimmed(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        recorder = _patch(monkeypatch, _out("0123abcd\n"))

        assert Repository(tmp_path).head_commit() == Ok("0123abcd")
        assert recorder.calls[0][0][3:] == ["rev-parse", "--verify", "HEAD"]

    def test_current_branch_is_trimmed(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        recorder = _patch(monkeypatch, _out("main\n"))

        assert Repository(tmp_path).current_branch() == Ok("main")
        assert recorder.calls[0][0][3:] == ["rev-parse", "--abbrev-ref", "HEAD"]

    def test_status_is_verbatim(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _patch(monkeypatch, _out(" M package.json\n"))

        assert Repository(tmp_path).status_porcelain() == Ok(" M package.json\n")


class TestMutations:
    @pytest.mark.parametrize(
        ("call", "expected"),
        [
            (lambda r: r.commit_paths(["package.json"], "m"), ["commit", "package.json", "-m", "m"]),
            (lambda r: r.create_annotated_tag("1.0.0", "m"), ["tag", "-a", "-m", "m", "1.0.0"]),
            (lambda r: r.push("origin", "1.0.0"), ["push", "origin", "1.0.0"]),
            (lambda r: r.reset_hard("abc"), ["reset", "--hard", "abc"]),
            (lambda r: r.delete_tag("1.0.0"), ["tag", "-d", "1.0.0"]),
        ],
    )
    def test_argument_vectors(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, call, expected: list[str]
    ) -> None:
        recorder = _patch(monkeypatch, _out(""))

        call(Repository(tmp_path))

        assert recorder.calls[0][0][3:] == expected

    def test_tag_returns_name(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _patch(monkeypatch, _out(""))

        assert Repository(tmp_path).create_annotated_tag("1.0.0", "m") == Ok("1.0.0")


def test_exists(tmp_path: Path) -> None:
    assert Repository(tmp_path).exists() is False
    (tmp_path / ".git").mkdir()
    assert Repository(tmp_path).exists() is True
