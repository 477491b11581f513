from __future__ import annotations

import sys
from typing import TextIO

from pipeline.models import BuildConfig, BuildResult
from pipeline.orchestrator import format_duration

DIVIDER = "-----------------------------------------------"


def print_header(title: str, *, out: TextIO = sys.stdout) -> None:
    print("", file=out)
    print(f"===== {title} =====", file=out)


def print_divider(*, out: TextIO = sys.stdout) -> None:
    print(DIVIDER, file=out)


def print_failure(message: str, *, out: TextIO = sys.stderr) -> None:
    print("\n🛑 BUILD PROCESS FAILED!", file=out)
    print(f"An error occurred during the build process: {message}", file=out)


def print_summary(config: BuildConfig, result: BuildResult, *, out: TextIO = sys.stdout) -> None:
    """Final report: where each artifact went, how big it is, how long it took."""
    print("", file=out)
    print("================ BUILD SUMMARY ================", file=out)
    print("✅ Build completed successfully!", file=out)
    print("", file=out)
    print("📦 Build Output:", file=out)
    for o in result.outputs:
        print(f"   {o.target.name}:", file=out)
        print(f"   Directory:      {o.target.output_dir.resolve()}", file=out)
        print(f"   Size:           {o.artifact_size}", file=out)
        print("", file=out)
    print("⏱️  Build Times:", file=out)
    print(f"   Package Build:  {format_duration(result.package_build_seconds)}", file=out)
    print(f"   Package Deploy: {format_duration(result.package_deploy_seconds)}", file=out)
    print("   -----------------------------", file=out)
    print(f"   Total Time:     {format_duration(result.total_seconds)}", file=out)
    print("", file=out)
    print("📋 Build Manifests:", file=out)
    for o in result.outputs:
        print(f"   {o.manifest_path.resolve()}", file=out)
    if config.ci:
        print("   (CI mode: package.json backups were skipped)", file=out)
    print("==============================================", file=out)
