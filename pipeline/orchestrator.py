"""pipeline.orchestrator

The build sequence, start to finish.

    clean -> install+build -> licenses -> backup/trim/patch manifests
          -> (exclude test controller) -> deploy each target
          -> restore manifests -> measure -> write build manifests

Every process is awaited before the next one starts. Expected fatal
failures surface as :class:`~pipeline.models.BuildError`; the CLI maps it to
exit code 1.
"""

from __future__ import annotations

import time
from typing import Callable, List

from prune_deploy.domain.manifest import BuildDurations, BuildManifest

from pipeline.core import PACKAGE_JSON
from pipeline.execution.model import Runner, Stopwatch
from pipeline.models import BuildConfig, BuildError, BuildResult, TargetOutput
from pipeline.steps.artifacts import copy_third_party_licenses, write_build_manifest
from pipeline.steps.clean import clean_outputs
from pipeline.steps.deploy import deploy_all
from pipeline.steps.package_json import exclude_test_controller, prepare_manifests, warn_pending_backups
from pipeline.steps.prebuild import run_prebuild
from pipeline.steps.sizing import artifact_size_label


def run_build(
    config: BuildConfig,
    runner: Runner,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> BuildResult:
    total = Stopwatch.start(clock)

    clean_outputs(config)

    build_timer = Stopwatch.start(clock)
    run_prebuild(config, runner)
    package_build = build_timer.elapsed_seconds()
    print(f"✅ Package build completed in {format_duration(package_build)}")

    # Lists leftover backups itself if trimming or patch cleanup fails.
    backups = prepare_manifests(config, runner)

    deploy_timer = Stopwatch.start(clock)
    try:
        if config.exclude_test_controller:
            exclude_test_controller(config.cli_package_dir / PACKAGE_JSON, config.test_controller_exclude_glob)
        deploy_all(config, runner)
        package_deploy = deploy_timer.elapsed_seconds()
        backups.restore()
    except BuildError:
        warn_pending_backups(backups)
        raise

    print("📏 Calculating output sizes...")
    outputs: List[TargetOutput] = []
    for target in config.targets:
        size = artifact_size_label(target.output_dir)
        if target.ship_licenses:
            copy_third_party_licenses(config, target)
        manifest = BuildManifest.create(
            artifact_size=size,
            durations=BuildDurations(
                package_build=package_build,
                package_deploy=package_deploy,
                total=total.elapsed_seconds(),
            ),
        )
        path = write_build_manifest(target.output_dir, manifest)
        outputs.append(TargetOutput(target=target, artifact_size=size, manifest_path=path))

    print(f"✅ Package deployment completed in {format_duration(package_deploy)}")

    return BuildResult(
        package_build_seconds=package_build,
        package_deploy_seconds=package_deploy,
        total_seconds=total.elapsed_seconds(),
        outputs=outputs,
    )


def format_duration(seconds: int) -> str:
    """``3725`` -> ``1h 2m 5s``, ``65`` -> ``1m 5s``, ``7`` -> ``7s``."""
    hours, rem = divmod(int(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
