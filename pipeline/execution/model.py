"""pipeline.execution.model

Shared data structures for process execution and timing.

The execution layer is split into:

* :mod:`pipeline.execution.model`  – plain values (results, stopwatches)
* :mod:`pipeline.execution.runner` – subprocess execution (side effects)

These dataclasses contain no side effects so the pipeline steps and the tests
can build them freely.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class Runner(Protocol):
    """Signature shared by :func:`pipeline.execution.runner.run_cmd` and test fakes."""

    def __call__(
        self,
        cmd: List[str],
        *,
        cwd: Optional[object] = None,
        env: Optional[dict] = None,
        stream: bool = True,
    ) -> CmdResult: ...


@dataclass(frozen=True)
class Stopwatch:
    """A started timer. Pass it along instead of keeping a global timer table."""

    started: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False, repr=False)

    @classmethod
    def start(cls, clock: Callable[[], float] = time.monotonic) -> "Stopwatch":
        return cls(started=clock(), clock=clock)

    def elapsed_seconds(self) -> int:
        """Whole seconds since start, floored, never negative."""
        return max(0, int(math.floor(self.clock() - self.started)))
