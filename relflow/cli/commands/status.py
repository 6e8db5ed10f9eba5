"""Status command - read-only preview of what a release would do."""

from __future__ import annotations

from pathlib import Path

import typer

from relflow.cli.context import build_context
from relflow.core.errors import ErrorCode
from relflow.core.result import Err, Ok
from relflow.git.repository import Repository
from relflow.output.console import Style
from relflow.output.errors import print_release_error, release_error_exit_code
from relflow.release.manifest import read_version
from relflow.release.version import check_development_version, next_dev_version_for, next_patch


def status(
    project: Path | None = typer.Option(
        None, "-p", "--project", help="Path to the project (current directory by default)."
    ),
) -> None:
    """Show the manifest version, the versions a release would produce, and git state."""
    ctx = build_context(project)
    console = ctx.console
    settings = ctx.settings

    console.header(str(ctx.project))

    version = read_version(ctx.project, settings.manifest)
    if isinstance(version, Err):
        print_release_error(version.error, console)
        raise typer.Exit(code=release_error_exit_code(version.error))

    console.print(f"manifest: {settings.manifest}")
    console.print(f"version: {version.value}")

    releasable = True
    match check_development_version(version.value, settings.dev_marker):
        case Ok(dev):
            release_version = next_patch(dev)
            console.print(f"release version: {release_version}")
            console.print(
                f"next dev version: {next_dev_version_for(release_version, marker=settings.dev_marker)}"
            )
        case Err(e):
            releasable = False
            console.warning(e.message)

    repo = Repository(ctx.project, timeout=settings.git_timeout)
    if not repo.exists():
        console.warning("not a git repository")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    match repo.current_branch():
        case Ok(branch):
            console.print(f"branch: {branch or '?'}")
        case Err(e):
            console.print(f"branch: ? ({e.message})", Style.DIM)

    match repo.head_commit():
        case Ok(sha) if sha:
            console.print(f"HEAD: {sha}")
        case _:
            releasable = False
            console.warning("HEAD has no commit")

    match repo.status_porcelain():
        case Ok(""):
            console.success("working tree clean")
        case Ok(output):
            releasable = False
            console.warning("working tree has uncommitted changes")
            for line in output.splitlines():
                console.print(f"    {line}", Style.DIM)
        case Err(e):
            releasable = False
            console.error(e.message)

    if not releasable:
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    console.success("ready to release")
