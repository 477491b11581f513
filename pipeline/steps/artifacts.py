"""pipeline.steps.artifacts

Files written into the deployed output next to the pruned dependency tree.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from prune_deploy.domain.manifest import BUILD_MANIFEST_FILENAME, BuildManifest
from prune_deploy.io.fs import write_json_atomic

from pipeline.core import THIRD_PARTY_LICENSES
from pipeline.models import BuildConfig, BuildError, DeployTarget

logger = logging.getLogger(__name__)


def copy_third_party_licenses(config: BuildConfig, target: DeployTarget) -> Optional[Path]:
    """Copy the generated license report into *target* if it exists."""
    src = config.cli_package_dir / THIRD_PARTY_LICENSES
    if not src.is_file():
        logger.info("No license report at %s; nothing to copy", src)
        return None

    dest = target.output_dir / THIRD_PARTY_LICENSES
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
    except OSError as e:
        logger.warning("Could not copy %s into %s: %s", src, target.output_dir, e)
        return None
    return dest


def write_build_manifest(output_dir: Path, manifest: BuildManifest) -> Path:
    path = Path(output_dir) / BUILD_MANIFEST_FILENAME
    try:
        write_json_atomic(path, manifest.to_dict(), indent=2, sort_keys=False)
    except OSError as e:
        raise BuildError("manifest", f"could not write {path}: {e}") from e
    return path
