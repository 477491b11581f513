"""prune_deploy.io

Filesystem helpers shared by the pipeline steps.
"""

from __future__ import annotations

from .fs import read_json, write_json_atomic

__all__ = [
    "read_json",
    "write_json_atomic",
]
