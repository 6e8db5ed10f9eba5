from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relflow.core.config import CONFIG_FILE_NAME, Settings, load_settings
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Path
    settings: Settings
    console: ConsoleProtocol


def build_context(project: Path | None) -> CLIContext:
    try:
        root = (project or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid project path: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    settings_result = load_settings(root / CONFIG_FILE_NAME)
    if isinstance(settings_result, Err):
        typer.echo(f"error: {settings_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(project=root, settings=settings_result.value, console=RichConsole())
