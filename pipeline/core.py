# pipeline/core.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

PACKAGE_MANAGER = "pnpm"
NODE = "node"

# Patch entries (by name prefix) that production deploys still need.
PATCHES_TO_KEEP: Tuple[str, ...] = ("pdfjs-dist", "pkce-challenge", "bull")

PACKAGE_JSON = "package.json"
BACKUP_SUFFIX = ".bak"
DEPENDENCY_CACHE_DIR = "node_modules"

CLI_PACKAGE_DIR = Path("packages") / "cli"
TEST_CONTROLLER_EXCLUDE_GLOB = "!dist/**/e2e.*"

LICENSE_SCRIPT = Path("scripts") / "generate-third-party-licenses.mjs"
FE_TRIM_SCRIPT = Path(".github") / "scripts" / "trim-fe-packageJson.js"
THIRD_PARTY_LICENSES = "THIRD_PARTY_LICENSES.md"

# (name, pnpm filter, output dir relative to the monorepo root, ships licenses)
DEFAULT_TARGETS: List[Tuple[str, str, str, bool]] = [
    ("n8n", "n8n", "compiled", True),
    ("task-runner-javascript", "@n8n/task-runner", "dist/task-runner-javascript", False),
]

PRODUCTION_ENV: Dict[str, str] = {
    "NODE_ENV": "production",
    "DOCKER_BUILD": "true",
}


def install_command() -> List[str]:
    return [PACKAGE_MANAGER, "install", "--frozen-lockfile"]


def build_command() -> List[str]:
    return [PACKAGE_MANAGER, "build"]


def license_command() -> List[str]:
    return [NODE, LICENSE_SCRIPT.as_posix()]


def fe_trim_command() -> List[str]:
    return [NODE, FE_TRIM_SCRIPT.as_posix()]


def deploy_command(pnpm_filter: str, output_dir: Path) -> List[str]:
    """Build the ``pnpm deploy`` command for one target.

    The command is returned as a list (safe, no shell).
    """
    return [
        PACKAGE_MANAGER,
        f"--filter={pnpm_filter}",
        "--prod",
        "--legacy",
        "deploy",
        "--no-optional",
        output_dir.as_posix(),
    ]
