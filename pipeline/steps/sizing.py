"""pipeline.steps.sizing

Artifact size measurement.
"""

from __future__ import annotations

import logging
import os
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

logger = logging.getLogger(__name__)

SIZE_UNITS = ("B", "K", "M", "G")
UNKNOWN_SIZE = "Unknown"


def directory_size(path: Path) -> int:
    """Total bytes of regular files below *path*. Symlinks are not followed.

    Raises ``OSError`` if the tree cannot be read.
    """
    total = 0
    with os.scandir(path) as it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                total += directory_size(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
    return total


def format_size(num_bytes: float) -> str:
    """Human readable size: 0 -> ``0.0B``, 1536 -> ``1.5K``, 1048576 -> ``1.0M``."""
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    # Ties round up (1.25 -> 1.3); Decimal(float) is exact.
    rounded = Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded}{SIZE_UNITS[unit]}"


def artifact_size_label(path: Path) -> str:
    """Best-effort formatted size of an output directory."""
    try:
        return format_size(directory_size(path))
    except OSError as e:
        logger.warning("Could not measure %s: %s", path, e)
        return UNKNOWN_SIZE
