"""Release workflow.

- version: pure version rules (SNAPSHOT detection, patch bumps)
- manifest: read/write the manifest ``version`` field
- model: caller configuration, per-run session, outcome
- orchestrator: the ``perform`` transaction with rollback
- steps: shell-command build/post-release steps
"""

from __future__ import annotations

from relflow.release.errors import ReleaseError
from relflow.release.model import ReleaseConfig, ReleaseInfo, ReleaseOutcome, ReleaseStep
from relflow.release.orchestrator import perform

__all__ = [
    "ReleaseConfig",
    "ReleaseError",
    "ReleaseInfo",
    "ReleaseOutcome",
    "ReleaseStep",
    "perform",
]
