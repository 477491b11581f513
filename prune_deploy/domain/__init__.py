"""prune_deploy.domain

Canonical data contracts for build artifacts.
"""

from __future__ import annotations

from .manifest import BUILD_MANIFEST_FILENAME, BuildDurations, BuildManifest

__all__ = [
    "BUILD_MANIFEST_FILENAME",
    "BuildDurations",
    "BuildManifest",
]
