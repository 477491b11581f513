"""pipeline.build_plan

Optional YAML plan that overrides the built-in deploy defaults.

Why this exists
---------------
The defaults in :mod:`pipeline.core` describe the usual two deployments
(application + JavaScript task runner) and the patch allow-list. Forks of the
monorepo sometimes need a different set without editing code:

.. code-block:: yaml

    patches_to_keep:
      - pdfjs-dist
      - bull
    targets:
      - name: n8n
        filter: n8n
        output_dir: compiled
        ship_licenses: true
      - name: task-runner-javascript
        filter: "@n8n/task-runner"
        output_dir: dist/task-runner-javascript

Both keys are optional. Relative ``output_dir`` values are anchored at the
monorepo root.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pipeline.models import DeployTarget


@dataclass(frozen=True)
class BuildPlan:
    patches_to_keep: Optional[Tuple[str, ...]] = None
    targets: Tuple[DeployTarget, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, root_dir: Path) -> "BuildPlan":
        patches = data.get("patches_to_keep")
        if patches is not None:
            if not isinstance(patches, list):
                raise ValueError("'patches_to_keep' must be a list of strings")
            patches = tuple(str(p) for p in patches if str(p).strip())

        raw_targets = data.get("targets") or []
        if not isinstance(raw_targets, list):
            raise ValueError("'targets' must be a list of mappings")
        targets = []
        for item in raw_targets:
            if not isinstance(item, dict):
                raise ValueError(f"Each target must be a mapping, got: {item!r}")
            targets.append(DeployTarget.from_dict(item, root_dir=root_dir))

        return cls(patches_to_keep=patches, targets=tuple(targets))


def load_build_plan(path: str | Path, *, root_dir: Path) -> BuildPlan:
    """Load a build plan from YAML."""
    import yaml

    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Build plan not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Build plan is not valid YAML: {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Build plan YAML must be a mapping/object at top level: {p}")
    return BuildPlan.from_dict(raw, root_dir=root_dir)
