#!/usr/bin/env python3
"""
Production build + pruned deployment for a pnpm monorepo.

Steps:
  1) clean previous output
  2) pnpm install --frozen-lockfile && pnpm build (+ best-effort license report)
  3) back up and trim package.json files, filter dependency patches
  4) pnpm deploy (production only) for each target
  5) restore package.json files, measure output, write build-manifest.json

Behaviour is driven by environment variables (flags are optional overrides):
  CI=true                       CI mode: no backups, test controller excluded
  INCLUDE_TEST_CONTROLLER=true  keep the test controller even in CI
  BUILD_ROOT_DIR=/path          monorepo root (default: working directory)
  BUILD_PLAN=/path/plan.yaml    optional target / patch overrides

Usage:
  python build_cli.py
  CI=true python build_cli.py --root ../n8n
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from cli.commands.build import run_build_command
from pipeline.wiring import build_config, build_pipeline


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a pnpm monorepo and create pruned production deployments.")
    parser.add_argument("--root", default=None, help="Monorepo root (default: $BUILD_ROOT_DIR or the working directory).")
    parser.add_argument("--plan", default=None, help="Optional YAML build plan (default: $BUILD_PLAN).")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: <root>/.env).")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level (default: INFO).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(root=args.root, plan=args.plan, env_file=args.env_file)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: invalid build configuration: {e}", file=sys.stderr)
        return 1

    return run_build_command(build_pipeline(), config)


if __name__ == "__main__":
    raise SystemExit(main())
