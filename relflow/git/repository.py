"""Git repository abstraction.

``Repository`` runs git against one working tree and returns Result types.
Every command goes through :meth:`Repository.run`, which enforces the
timeout and turns process failures into a :class:`GitError` whose message
carries the full command, exit code and captured output.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.status_porcelain():
        case Ok(""):
            print("clean")
        case Ok(output):
            print(f"dirty:\n{output}")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from relflow.core.config import DEFAULT_GIT_TIMEOUT_SECONDS
from relflow.core.result import Err, Ok, Result
from relflow.platform.process import CommandResult, ProcessError
from relflow.platform.process import run as run_process

__all__ = ["GitError", "GitErrorKind", "Repository"]

GitErrorKind = Literal["process_timeout", "command_failed"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        kind: ``process_timeout`` if git was killed, ``command_failed`` otherwise
        args: Arguments passed to git (without ``git -C <path>``)
        message: Human-readable message including exit code and output
        returncode: Process return code (-1 if killed or not started)
    """

    kind: GitErrorKind
    args: tuple[str, ...]
    message: str
    returncode: int = 1


def _git_error(args: Sequence[str], error: ProcessError) -> GitError:
    joined = " ".join(args)
    if error.timed_out:
        return GitError(
            kind="process_timeout",
            args=tuple(args),
            message=f"git {joined} timed out after {error.timeout}s and was killed",
            returncode=error.returncode,
        )
    return GitError(
        kind="command_failed",
        args=tuple(args),
        message=(
            f"Could not execute git {joined} (exit code {error.returncode}); "
            f"stdout:\n{error.stdout}\nstderr:\n{error.stderr}"
        ),
        returncode=error.returncode,
    )


class Repository:
    """Git working tree at ``path``.

    Attributes:
        path: Path to the working tree root
        timeout: Seconds before a git process is killed (None for no limit)
    """

    def __init__(self, path: Path, *, timeout: float | None = DEFAULT_GIT_TIMEOUT_SECONDS) -> None:
        self.path = path
        self.timeout = timeout

    def exists(self) -> bool:
        """Check if this is a git working tree (``.git`` dir or worktree file)."""
        return (self.path / ".git").exists()

    def run(self, args: Sequence[str]) -> Result[CommandResult, GitError]:
        """Run ``git <args>`` in this repository.

        stdout and stderr are returned verbatim on success.
        """
        result = run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=self.timeout,
        )
        match result:
            case Err(e):
                return Err(_git_error(args, e))
            case Ok(output):
                return Ok(output)

    def head_commit(self) -> Result[str, GitError]:
        """Return the trimmed HEAD commit hash (may be empty)."""
        return self.run(["rev-parse", "--verify", "HEAD"]).map(lambda out: out.stdout.strip())

    def current_branch(self) -> Result[str, GitError]:
        """Return the trimmed abbreviated branch name (``HEAD`` when detached)."""
        return self.run(["rev-parse", "--abbrev-ref", "HEAD"]).map(lambda out: out.stdout.strip())

    def status_porcelain(self) -> Result[str, GitError]:
        """Return raw ``git status --porcelain`` output; empty means clean."""
        return self.run(["status", "--porcelain"]).map(lambda out: out.stdout)

    def commit_paths(self, paths: Sequence[str], message: str) -> Result[CommandResult, GitError]:
        """Commit exactly ``paths`` (nothing else staged is included)."""
        return self.run(["commit", *paths, "-m", message])

    def create_annotated_tag(self, name: str, message: str) -> Result[str, GitError]:
        """Create an annotated tag at HEAD and return its name."""
        return self.run(["tag", "-a", "-m", message, name]).map(lambda _: name)

    def push(self, remote: str, ref: str) -> Result[CommandResult, GitError]:
        return self.run(["push", remote, ref])

    def reset_hard(self, commit: str) -> Result[CommandResult, GitError]:
        return self.run(["reset", "--hard", commit])

    def delete_tag(self, name: str) -> Result[CommandResult, GitError]:
        return self.run(["tag", "-d", name])
