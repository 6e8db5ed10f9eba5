"""Subprocess execution with Result-based error handling.

This is the only module allowed to call :mod:`subprocess` directly. Each
call spawns exactly one process and never retries.

Usage:
    result = run(["git", "status", "--porcelain"], cwd=project, timeout=30.0)
    match result:
        case Ok(output):
            print(output.stdout)
        case Err(error) if error.timed_out:
            print("git hung")
        case Err(error):
            print(f"exit {error.returncode}: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result

__all__ = ["CommandResult", "ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output of a successful command.

    Output is kept verbatim; callers strip where a single value is expected.
    """

    stdout: str
    stderr: str


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process never ran or was killed.
        stdout: Standard output captured before the failure.
        stderr: Standard error captured before the failure.
        timed_out: True if the process was killed after exceeding the timeout.
        timeout: The timeout that applied, in seconds.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False
    timeout: float | None = None

    def __str__(self) -> str:
        cmd_str = " ".join(self.command)
        if self.timed_out:
            return f"{cmd_str} timed out after {self.timeout}s"
        return f"{cmd_str} failed (exit {self.returncode})"


def _as_text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[CommandResult, ProcessError]:
    """Execute a command and capture its output.

    ``subprocess.run`` kills the child when the timeout expires, so a hung
    process never outlives the call.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(CommandResult) on exit status 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
                timed_out=True,
                timeout=timeout,
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
                timeout=timeout,
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
                timeout=timeout,
            )
        )

    return Ok(CommandResult(stdout=proc.stdout, stderr=proc.stderr))


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with output going straight to the terminal.

    Used for long-running user commands (builds) where live output matters
    and no timeout applies.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)
