"""Build/post-release steps backed by shell command strings."""

from __future__ import annotations

import os
import shlex
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.platform.process import run_streaming
from relflow.release.model import ReleaseInfo, ReleaseStep

RELEASE_VERSION_ENV = "RELFLOW_RELEASE_VERSION"


def shell_step(command: str, *, cwd: Path, console: ConsoleProtocol, label: str) -> ReleaseStep:
    """Return a step that runs ``command`` in ``cwd`` with live output.

    The release version is exported as ``RELFLOW_RELEASE_VERSION``.
    """

    def step(info: ReleaseInfo) -> Result[None, str]:
        try:
            argv = shlex.split(command)
        except ValueError as e:
            return Err(f"invalid {label} command {command!r}: {e}")
        if not argv:
            return Err(f"invalid {label} command: empty")

        console.print(f"$ {command}", Style.DIM)
        env = os.environ.copy()
        env[RELEASE_VERSION_ENV] = info.release_version
        result = run_streaming(argv, cwd=cwd, env=env)
        if isinstance(result, Err):
            e = result.error
            detail = f": {e.stderr}" if e.stderr else ""
            return Err(f"{label} command failed (exit {e.returncode}){detail}")
        return Ok(None)

    return step


def noop_step() -> ReleaseStep:
    def step(info: ReleaseInfo) -> Result[None, str]:
        del info
        return Ok(None)

    return step
