"""Platform adapters (subprocess execution)."""

from relflow.platform.process import CommandResult, ProcessError, run, run_streaming

__all__ = ["CommandResult", "ProcessError", "run", "run_streaming"]
