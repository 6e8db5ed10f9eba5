"""Release transaction.

``perform`` walks a project from a SNAPSHOT version to a tagged, pushed
release and on to the next SNAPSHOT:

    validating -> reading_state -> bumping_release -> building
    -> committing_release -> tagging -> post_release -> bumping_next_dev
    -> committing_next_dev -> pushing_tag -> pushing_branch -> done

Any failure after validation goes through ``rolling_back`` (hard reset to
the pre-release commit, then delete the release tag) and ends in
``failed``. The original error is always returned; if the rollback itself
fails, a ``rollback_failed`` error is returned with the original error as
its ``cause``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.git.repository import GitError, Repository
from relflow.output.console import ConsoleProtocol, RichConsole, Style
from relflow.release import manifest
from relflow.release.errors import ReleaseError, ReleaseErrorKind
from relflow.release.model import (
    ReleaseConfig,
    ReleaseInfo,
    ReleaseOutcome,
    ReleaseSession,
    ReleaseStage,
    ReleaseStep,
)
from relflow.release.version import (
    check_development_version,
    next_dev_version_for,
    parse_core,
    release_version_for,
)

__all__ = ["perform", "validate_config"]


@dataclass(frozen=True, slots=True)
class _Tracer:
    console: ConsoleProtocol | None
    enabled: bool

    def __call__(self, message: str) -> None:
        if self.enabled and self.console is not None:
            self.console.print(f"[release] {message}", Style.DIM)


def _config_error(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="config_invalid",
            message=message,
            hint=hint,
            stage=str(ReleaseStage.VALIDATING),
        )
    )


def validate_config(config: ReleaseConfig | None) -> Result[Path, ReleaseError]:
    """Check the configuration without touching git or writing any file.

    Returns:
        Ok(project_path) when the release may start.
    """
    if config is None:
        return _config_error("Release requires a configuration object")
    if not config.project_path:
        return _config_error("Release requires a project path")

    project_path = Path(config.project_path)
    if not project_path.is_dir():
        return _config_error(f"Project path is not a directory: {project_path}")
    if config.build is None or not callable(config.build):
        return _config_error("Release requires a callable build step")
    if config.post_release is not None and not callable(config.post_release):
        return _config_error("Post-release step must be callable when supplied")

    path = manifest.manifest_path(project_path, config.manifest_name)
    if not path.is_file():
        return _config_error(f"Manifest not found: {path}", hint="Run from the project root")

    if (
        config.release_version
        and not config.next_dev_version
        and parse_core(config.release_version) is None
    ):
        return _config_error(
            f"Cannot derive the next dev version from release version {config.release_version}",
            hint="Pass an explicit next dev version or a MAJOR.MINOR.PATCH release version",
        )

    return Ok(project_path)


def _git_failure(error: GitError) -> ReleaseError:
    return ReleaseError(kind=error.kind, message=error.message)


def _invoke_step(
    step: ReleaseStep,
    info: ReleaseInfo,
    *,
    kind: ReleaseErrorKind,
    label: str,
) -> Result[None, ReleaseError]:
    try:
        outcome = step(info)
    except Exception as e:  # caller code: an exception is the step's failure outcome
        return Err(
            ReleaseError(
                kind=kind,
                message=f"{label} step raised {type(e).__name__}: {e}",
            )
        )
    if isinstance(outcome, Err):
        return Err(ReleaseError(kind=kind, message=f"{label} step failed: {outcome.error}"))
    return Ok(None)


def _run_transaction(
    config: ReleaseConfig,
    project_path: Path,
    repo: Repository,
    session: ReleaseSession,
    trace: _Tracer,
) -> Result[ReleaseOutcome, ReleaseError]:
    session.stage = ReleaseStage.READING_STATE

    current = manifest.read_version(project_path, config.manifest_name)
    if isinstance(current, Err):
        return current
    checked = check_development_version(current.value, config.dev_marker)
    if isinstance(checked, Err):
        return checked
    session.dev_version = checked.value
    trace(f"#perform:read DEV version as {session.dev_version}")

    status = repo.status_porcelain()
    if isinstance(status, Err):
        return Err(_git_failure(status.error))
    if status.value:
        return Err(
            ReleaseError(
                kind="dirty_working_tree",
                message=(
                    "Outstanding git changes present; commit all changes prior to "
                    f"running a release:\n{status.value}"
                ),
            )
        )
    trace("#perform:verified there are no uncommitted changes")

    head = repo.head_commit()
    if isinstance(head, Err):
        return Err(_git_failure(head.error))
    if not head.value:
        return Err(ReleaseError(kind="commit_unreadable", message="Could not read current commit."))
    session.pre_release_commit = head.value
    trace(f"#perform:read pre-release commit as {session.pre_release_commit}")

    branch = repo.current_branch()
    if isinstance(branch, Err):
        return Err(_git_failure(branch.error))
    if not branch.value:
        return Err(ReleaseError(kind="branch_unreadable", message="Could not read current branch."))
    session.dev_branch = branch.value
    trace(f"#perform:read DEV branch as {session.dev_branch}")

    session.stage = ReleaseStage.BUMPING_RELEASE
    release_version = release_version_for(session.dev_version, config.release_version)
    session.release_version = release_version
    trace(f"#perform:picked release version as {release_version}; updating manifest")
    written = manifest.write_version(project_path, release_version, config.manifest_name)
    if isinstance(written, Err):
        return written

    session.stage = ReleaseStage.BUILDING
    trace("#perform:executing build")
    info = ReleaseInfo(release_version=release_version)
    assert config.build is not None
    built = _invoke_step(config.build, info, kind="build_failed", label="build")
    if isinstance(built, Err):
        return built

    session.stage = ReleaseStage.COMMITTING_RELEASE
    trace(f"#perform:executed build; committing release version as {release_version}")
    committed = repo.commit_paths(
        [config.manifest_name], f"[release] - releasing {release_version}"
    )
    if isinstance(committed, Err):
        return Err(_git_failure(committed.error))

    session.stage = ReleaseStage.TAGGING
    trace("#perform:tagging release version")
    tagged = repo.create_annotated_tag(release_version, f"[release] - {release_version} release")
    if isinstance(tagged, Err):
        return Err(_git_failure(tagged.error))
    session.release_tag_name = tagged.value
    trace(f"#perform:tagged {session.release_tag_name}")

    if config.post_release is not None:
        session.stage = ReleaseStage.POST_RELEASE
        trace("#perform:executing post release steps")
        posted = _invoke_step(
            config.post_release, info, kind="post_release_failed", label="post-release"
        )
        if isinstance(posted, Err):
            return posted

    session.stage = ReleaseStage.BUMPING_NEXT_DEV
    next_dev_version = next_dev_version_for(
        release_version, config.next_dev_version, config.dev_marker
    )
    session.next_dev_version = next_dev_version
    trace(f"#perform:picked next DEV version as {next_dev_version}")
    written = manifest.write_version(project_path, next_dev_version, config.manifest_name)
    if isinstance(written, Err):
        return written

    session.stage = ReleaseStage.COMMITTING_NEXT_DEV
    trace("#perform:committing next DEV version")
    committed = repo.commit_paths(
        [config.manifest_name], f"[release] - updating dev version to {next_dev_version}"
    )
    if isinstance(committed, Err):
        return Err(_git_failure(committed.error))

    session.stage = ReleaseStage.PUSHING_TAG
    trace("#perform:pushing released tag")
    pushed = repo.push(config.remote, release_version)
    if isinstance(pushed, Err):
        return Err(_git_failure(pushed.error))

    session.stage = ReleaseStage.PUSHING_BRANCH
    trace(f"#perform:pushing DEV version ({session.dev_branch})")
    pushed = repo.push(config.remote, session.dev_branch)
    if isinstance(pushed, Err):
        return Err(_git_failure(pushed.error))

    session.stage = ReleaseStage.DONE
    trace("#perform:done")
    return Ok(
        ReleaseOutcome(
            release_version=release_version,
            dev_version=next_dev_version,
            release_time_ms=session.elapsed_ms(),
        )
    )


def _rollback(
    repo: Repository,
    session: ReleaseSession,
    error: ReleaseError,
    trace: _Tracer,
) -> Err[ReleaseError]:
    session.stage = ReleaseStage.ROLLING_BACK

    commit = session.pre_release_commit
    if commit:
        reset = repo.reset_hard(commit)
        if isinstance(reset, Err):
            session.stage = ReleaseStage.FAILED
            return Err(
                ReleaseError(
                    kind="rollback_failed",
                    message=f"could not reset to pre-release commit {commit}: {reset.error.message}",
                    hint=f"Run `git reset --hard {commit}` and remove any release tag by hand",
                    stage=str(ReleaseStage.ROLLING_BACK),
                    cause=error,
                )
            )
        trace(f"#reset:reverted to pre-release commit {commit}")
    else:
        trace("#reset:no pre-release commit recorded")

    tag = session.release_tag_name
    if tag:
        deleted = repo.delete_tag(tag)
        if isinstance(deleted, Err):
            session.stage = ReleaseStage.FAILED
            return Err(
                ReleaseError(
                    kind="rollback_failed",
                    message=f"could not delete release tag {tag}: {deleted.error.message}",
                    hint=f"Run `git tag -d {tag}`",
                    stage=str(ReleaseStage.ROLLING_BACK),
                    cause=error,
                )
            )
        trace(f"#deleteTag:deleted tag {tag}")
    else:
        trace("#deleteTag:no release tag recorded")

    session.stage = ReleaseStage.FAILED
    return Err(error)


def perform(
    config: ReleaseConfig | None,
    *,
    console: ConsoleProtocol | None = None,
    repository: Repository | None = None,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Run one release transaction.

    Args:
        config: Release configuration; validated before anything else happens
        console: Where ``[release]`` debug traces go when ``config.debug`` is set
        repository: Git working tree to operate on (defaults to the project path)

    Returns:
        Ok(ReleaseOutcome) on success. Err(ReleaseError) on failure; a
        ``config_invalid`` error means nothing was touched, any other error
        has already been rolled back.
    """
    validated = validate_config(config)
    if isinstance(validated, Err):
        return validated
    assert config is not None
    project_path = validated.value

    if config.debug and console is None:
        console = RichConsole()
    trace = _Tracer(console=console, enabled=config.debug)
    repo = repository or Repository(project_path, timeout=config.git_timeout)
    session = ReleaseSession()

    result = _run_transaction(config, project_path, repo, session, trace)
    if isinstance(result, Ok):
        return result

    error = result.error
    if error.stage is None:
        error = replace(error, stage=str(session.stage))
    trace(f"#perform:error performing release - {error.message}")
    return _rollback(repo, session, error, trace)
