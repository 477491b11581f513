from __future__ import annotations

import logging

from cli.ui import print_divider, print_failure, print_header, print_summary
from pipeline.models import BuildConfig, BuildError
from pipeline.pipeline import DeployPipeline

logger = logging.getLogger(__name__)


def run_build_command(pipeline: DeployPipeline, config: BuildConfig) -> int:
    """Run the build and turn the outcome into a process exit code."""
    print_header("Build & Production Preparation")
    print(f"INFO: Monorepo root    : {config.root_dir}")
    for target in config.targets:
        print(f"INFO: Output ({target.name}) : {target.output_dir}")
    if config.exclude_test_controller:
        print("INFO: Test controller will be excluded from the CLI package")
    print_divider()

    try:
        result = pipeline.run(config)
    except BuildError as e:
        logger.debug("fatal build error in stage %s", e.stage, exc_info=True)
        print_failure(str(e))
        return 1

    print_summary(config, result)
    return 0
