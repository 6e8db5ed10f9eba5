"""Release command - perform a full SNAPSHOT release."""

from __future__ import annotations

from pathlib import Path

import typer

from relflow.cli.context import build_context
from relflow.core.result import Err
from relflow.output.errors import print_release_error, release_error_exit_code
from relflow.release.model import ReleaseConfig
from relflow.release.orchestrator import perform
from relflow.release.steps import noop_step, shell_step


def release(
    project: Path | None = typer.Option(
        None, "-p", "--project", help="Path to the project (current directory by default)."
    ),
    release_version: str | None = typer.Option(
        None, "--release-version", help="Release version (derived from the manifest otherwise)."
    ),
    dev_version: str | None = typer.Option(
        None, "--dev-version", help="Next development version (derived otherwise)."
    ),
    build: str | None = typer.Option(
        None, "--build", help="Shell command run as the build step, e.g. 'npm test'."
    ),
    post_release: str | None = typer.Option(
        None, "--post-release", help="Shell command run after tagging, e.g. 'npm publish'."
    ),
    remote: str | None = typer.Option(None, "--remote", help="Remote to push to."),
    manifest: str | None = typer.Option(None, "--manifest", help="Manifest file name."),
    debug: bool = typer.Option(False, "--debug", help="Print [release] trace lines."),
) -> None:
    """Release the current SNAPSHOT version, then bump to the next one."""
    ctx = build_context(project)
    settings = ctx.settings
    console = ctx.console

    build_cmd = build or settings.build
    post_cmd = post_release or settings.post_release

    config = ReleaseConfig(
        project_path=ctx.project,
        build=(
            shell_step(build_cmd, cwd=ctx.project, console=console, label="build")
            if build_cmd
            else noop_step()
        ),
        post_release=(
            shell_step(post_cmd, cwd=ctx.project, console=console, label="post-release")
            if post_cmd
            else None
        ),
        release_version=release_version,
        next_dev_version=dev_version,
        debug=debug,
        manifest_name=manifest or settings.manifest,
        remote=remote or settings.remote,
        dev_marker=settings.dev_marker,
        git_timeout=settings.git_timeout,
    )

    result = perform(config, console=console)
    if isinstance(result, Err):
        console.print("Release failed")
        console.print("--------------")
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    outcome = result.value
    console.success(f"Release performed in {outcome.release_time_ms}ms")
    console.print("-----------------------------------------------")
    console.print(f"released version: {outcome.release_version}")
    console.print(f"dev version: {outcome.dev_version}")
