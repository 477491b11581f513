"""pipeline.pipeline

A single, high-level object for running the build.

Callers (the CLI, CI scripts, tests) should not have to know the step order or
which runner executes processes. :class:`DeployPipeline` owns both; the
process runner is a constructor argument so tests can swap in a fake.
"""

from __future__ import annotations

import time
from typing import Callable

from pipeline.execution.model import Runner
from pipeline.execution.runner import run_cmd
from pipeline.models import BuildConfig, BuildResult
from pipeline.orchestrator import run_build


class DeployPipeline:
    """High-level facade over the build.

    Build it via :func:`pipeline.wiring.build_pipeline` rather than importing
    the step modules directly.
    """

    def __init__(
        self,
        *,
        runner: Runner = run_cmd,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._runner = runner
        self._clock = clock

    def run(self, config: BuildConfig) -> BuildResult:
        """Run the full build; raises :class:`~pipeline.models.BuildError` on fatal failure."""
        return run_build(config, self._runner, clock=self._clock)
