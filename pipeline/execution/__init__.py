"""pipeline.execution

Process execution and timing primitives.
"""

from __future__ import annotations

from .model import CmdResult, Runner, Stopwatch
from .runner import log_captured_output, run_cmd

__all__ = ["CmdResult", "Runner", "Stopwatch", "log_captured_output", "run_cmd"]
