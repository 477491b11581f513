"""pipeline.steps.deploy

Pruned production deployments via ``pnpm deploy``.
"""

from __future__ import annotations

from typing import Dict

from pipeline.core import PRODUCTION_ENV, deploy_command
from pipeline.execution.model import Runner
from pipeline.execution.runner import log_captured_output
from pipeline.models import BuildConfig, BuildError, DeployTarget


def deploy_env(config: BuildConfig) -> Dict[str, str]:
    env = dict(config.subprocess_env)
    env.update(PRODUCTION_ENV)
    return env


def deploy_target(config: BuildConfig, target: DeployTarget, runner: Runner) -> None:
    """Write a production-only copy of *target* into its output directory."""
    print(f"🚀 Creating pruned production deployment for {target.name} in '{target.output_dir}'...")
    try:
        target.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildError("deploy", f"could not create output directory {target.output_dir}: {e}") from e

    cmd = deploy_command(target.pnpm_filter, target.output_dir)
    try:
        # In CI the deploy output is captured and only shown on failure.
        res = runner(cmd, cwd=config.root_dir, env=deploy_env(config), stream=config.verbose)
    except OSError as e:
        raise BuildError("deploy", f"could not start '{' '.join(cmd)}': {e}") from e
    if not res.ok:
        log_captured_output(res)
        raise BuildError(
            "deploy",
            f"deploy of {target.name} failed: '{res.command_str}' exited with code {res.exit_code}",
        )


def deploy_all(config: BuildConfig, runner: Runner) -> None:
    for target in config.targets:
        deploy_target(config, target, runner)
