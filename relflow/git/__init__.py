"""Git operations module.

Usage:
    from relflow.git import Repository

    repo = Repository(Path("/path/to/project"))
    match repo.head_commit():
        case Ok(sha):
            print(f"HEAD is {sha}")
        case Err(e):
            print(e.message)
"""

from relflow.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
