"""pipeline.execution.runner

Subprocess execution helpers for the pipeline steps.

Rule
----
Only this module should touch ``subprocess``.

It provides:

* :func:`run_cmd` - run a subprocess (no ``shell=True``) to completion.
* :func:`log_captured_output` - surface the output of a quiet command that failed.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Optional

from .model import CmdResult

logger = logging.getLogger(__name__)


def run_cmd(
    cmd: List[str],
    *,
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
    stream: bool = True,
) -> CmdResult:
    """Run a subprocess and wait for it.

    With ``stream=True`` the child inherits stdout/stderr so package-manager
    progress shows up live; otherwise output is captured on the result.

    Never raises on non-zero exit codes; only raises on execution errors
    (e.g. binary not found). There is no timeout.
    """
    t0 = time.time()

    # If env is provided, merge it onto the current process environment.
    env2 = None
    if env is not None:
        env2 = os.environ.copy()
        env2.update(env)

    command_str = " ".join(cmd)
    logger.debug("exec: %s (cwd=%s)", command_str, cwd)

    if stream:
        proc = subprocess.run(cmd, cwd=str(cwd) if cwd else None, env=env2, text=True)
    else:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=env2,
            text=True,
            capture_output=True,
        )
    elapsed = time.time() - t0

    return CmdResult(
        exit_code=proc.returncode,
        elapsed_seconds=elapsed,
        command_str=command_str,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )


def log_captured_output(res: CmdResult) -> None:
    """Log what a captured (``stream=False``) command printed. No-op for streamed runs."""
    for name, text in (("stdout", res.stdout), ("stderr", res.stderr)):
        if text.strip():
            logger.error("%s of '%s':\n%s", name, res.command_str, text.rstrip())
