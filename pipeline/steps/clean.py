"""pipeline.steps.clean

Remove output from a previous run.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

from pipeline.models import BuildConfig, BuildError


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False if nothing was there."""
    p = Path(path)
    if p.is_symlink() or p.is_file():
        p.unlink()
        return True
    if p.is_dir():
        shutil.rmtree(p)
        return True
    return False


def clean_outputs(config: BuildConfig) -> List[Path]:
    """Remove every target output directory; returns the ones that existed."""
    removed: List[Path] = []
    for target in config.targets:
        print(f"🧹 Cleaning previous output for {target.name}: {target.output_dir}")
        try:
            existed = remove_path(target.output_dir)
        except OSError as e:
            raise BuildError("clean", f"could not remove {target.output_dir}: {e}") from e
        if existed:
            removed.append(target.output_dir)
    return removed
