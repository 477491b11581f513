"""pipeline.steps.prebuild

Local pre-build: dependency install, full build, license report.

Failure policy
--------------
* install / build: fatal (:class:`BuildError`)
* third-party license report: best-effort, a failure is only a warning
"""

from __future__ import annotations

import logging
from typing import List

from pipeline.core import build_command, install_command, license_command
from pipeline.execution.model import CmdResult, Runner
from pipeline.models import BuildConfig, BuildError

logger = logging.getLogger(__name__)


def _run(runner: Runner, cmd: List[str], config: BuildConfig) -> CmdResult:
    # Streamed in CI too; these are the only commands whose output CI logs show.
    return runner(cmd, cwd=config.root_dir, env=config.subprocess_env, stream=True)


def install_and_build(config: BuildConfig, runner: Runner) -> None:
    """Run ``pnpm install --frozen-lockfile`` then ``pnpm build``."""
    print("📦 Running pnpm install and build...")
    for cmd in (install_command(), build_command()):
        try:
            res = _run(runner, cmd, config)
        except OSError as e:
            raise BuildError("prebuild", f"could not start '{' '.join(cmd)}': {e}") from e
        if not res.ok:
            raise BuildError(
                "prebuild",
                f"'{res.command_str}' exited with code {res.exit_code}",
            )


def generate_third_party_licenses(config: BuildConfig, runner: Runner) -> bool:
    """Best-effort license report. Returns True when it succeeded."""
    print("📜 Generating third-party licenses...")
    cmd = license_command()
    try:
        res = _run(runner, cmd, config)
    except OSError as e:
        logger.warning("License generation failed: %s", e)
        print("⚠️ Third-party license generation failed, continuing build...")
        return False

    if not res.ok:
        logger.warning("License generation failed: '%s' exited with code %s", res.command_str, res.exit_code)
        print("⚠️ Third-party license generation failed, continuing build...")
        return False

    print("✅ Third-party licenses generated successfully")
    return True


def run_prebuild(config: BuildConfig, runner: Runner) -> bool:
    """Install + build (fatal) followed by the license report (best-effort).

    Returns whether the license report was produced.
    """
    install_and_build(config, runner)
    licenses_ok = generate_third_party_licenses(config, runner)
    print("✅ pnpm install and build completed")
    return licenses_ok
