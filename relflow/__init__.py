"""relflow - SNAPSHOT-to-release workflow for git-tracked projects."""

__version__ = "0.1.0"
