"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration / environment variables
- choose real vs stub implementations (useful for testing)
- build the high-level pipeline facade object

Keeping this wiring in one place prevents configuration setup from being
duplicated across entrypoints (CLI, CI scripts, tests).
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv

from pipeline.build_plan import load_build_plan
from pipeline.execution.model import Runner
from pipeline.execution.runner import run_cmd
from pipeline.models import BuildConfig
from pipeline.pipeline import DeployPipeline


def resolve_root_dir(root: Optional[str | Path] = None, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Explicit root, else ``BUILD_ROOT_DIR``, else the working directory."""
    env = os.environ if environ is None else environ
    raw = root or env.get("BUILD_ROOT_DIR")
    return Path(raw).expanduser().resolve() if raw else Path.cwd().resolve()


def load_env_file(env_file: Optional[str | Path], root_dir: Path) -> bool:
    """Load ``.env`` into ``os.environ``; variables already set win."""
    path = Path(env_file) if env_file else root_dir / ".env"
    if not path.exists():
        return False
    return bool(load_dotenv(path, override=False))


def build_config(
    *,
    root: Optional[str | Path] = None,
    plan: Optional[str | Path] = None,
    env_file: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    load_env: bool = True,
) -> BuildConfig:
    """Resolve the :class:`BuildConfig` once, from CLI values + environment + optional plan."""
    root_dir = resolve_root_dir(root, environ)
    if load_env and environ is None:
        load_env_file(env_file, root_dir)

    env = os.environ if environ is None else environ
    plan_path = plan or env.get("BUILD_PLAN")

    targets = ()
    patches = None
    if plan_path:
        build_plan = load_build_plan(plan_path, root_dir=root_dir)
        targets = build_plan.targets
        patches = build_plan.patches_to_keep

    return BuildConfig.from_env(env, root_dir=root_dir, targets=targets, patches_to_keep=patches)


def build_pipeline(
    *,
    runner: Runner = run_cmd,
    clock: Callable[[], float] = time.monotonic,
) -> DeployPipeline:
    return DeployPipeline(runner=runner, clock=clock)
