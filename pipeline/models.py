"""pipeline.models

Lightweight data structures used across the pipeline.

Why this exists
---------------
Every step needs the same handful of facts: where the monorepo lives, whether
we run in CI, which targets get deployed and where. Reading those from
``os.environ`` inside each step would scatter the branching across the code.

:class:`BuildConfig` is populated once at startup and handed to each step.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pipeline.core import (
    CLI_PACKAGE_DIR,
    DEFAULT_TARGETS,
    PATCHES_TO_KEEP,
    TEST_CONTROLLER_EXCLUDE_GLOB,
)


class BuildError(RuntimeError):
    """A fatal pipeline failure. The CLI turns this into exit code 1."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        return f"[{self.stage}] {self.args[0]}"


def env_flag(environ: Mapping[str, str], name: str) -> bool:
    """Flags are only on when set to the literal string ``true``."""
    return environ.get(name) == "true"


@dataclass(frozen=True)
class DeployTarget:
    """One pruned deployment produced by ``pnpm deploy``."""

    name: str
    pnpm_filter: str
    output_dir: Path
    ship_licenses: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, root_dir: Path) -> "DeployTarget":
        name = str(data.get("name") or "").strip()
        pnpm_filter = str(data.get("filter") or name).strip()
        output = str(data.get("output_dir") or "").strip()
        if not name or not output:
            raise ValueError(f"Deploy target needs 'name' and 'output_dir': {dict(data)}")
        ship_licenses = data.get("ship_licenses", False)
        if not isinstance(ship_licenses, bool):
            raise ValueError(f"Deploy target '{name}': 'ship_licenses' must be true or false, got {ship_licenses!r}")
        out = Path(output)
        if not out.is_absolute():
            out = root_dir / out
        return cls(name=name, pnpm_filter=pnpm_filter, output_dir=out, ship_licenses=ship_licenses)


def default_targets(root_dir: Path) -> Tuple[DeployTarget, ...]:
    return tuple(
        DeployTarget(name=name, pnpm_filter=flt, output_dir=root_dir / out, ship_licenses=lic)
        for name, flt, out, lic in DEFAULT_TARGETS
    )


@dataclass(frozen=True)
class BuildConfig:
    """Everything the pipeline needs to know, resolved once."""

    root_dir: Path
    ci: bool = False
    include_test_controller: bool = False
    targets: Tuple[DeployTarget, ...] = ()
    patches_to_keep: Tuple[str, ...] = PATCHES_TO_KEEP
    test_controller_exclude_glob: str = TEST_CONTROLLER_EXCLUDE_GLOB

    def __post_init__(self) -> None:
        if not self.targets:
            object.__setattr__(self, "targets", default_targets(self.root_dir))
        root = Path(self.root_dir).resolve()
        for t in self.targets:
            # Cleaning the output must never remove the monorepo itself.
            out = Path(t.output_dir).resolve()
            if out == root or out in root.parents:
                raise ValueError(f"Output directory of target '{t.name}' must not contain the monorepo root: {out}")

    @property
    def exclude_test_controller(self) -> bool:
        return self.ci and not self.include_test_controller

    @property
    def skip_backups(self) -> bool:
        """CI checkouts are throwaway; manifests are not backed up or restored there."""
        return self.ci

    @property
    def cli_package_dir(self) -> Path:
        return self.root_dir / CLI_PACKAGE_DIR

    @property
    def app_target(self) -> DeployTarget:
        for t in self.targets:
            if t.ship_licenses:
                return t
        return self.targets[0]

    @property
    def output_dirs(self) -> List[Path]:
        return [t.output_dir for t in self.targets]

    @property
    def verbose(self) -> bool:
        """Outside CI every command streams its output; in CI only install, build and licenses do."""
        return not self.ci

    @property
    def subprocess_env(self) -> Dict[str, str]:
        return {"FORCE_COLOR": "0" if self.ci else "1"}

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        root_dir: Optional[Path] = None,
        targets: Sequence[DeployTarget] = (),
        patches_to_keep: Optional[Sequence[str]] = None,
    ) -> "BuildConfig":
        env = os.environ if environ is None else environ
        if root_dir is None:
            raw_root = env.get("BUILD_ROOT_DIR")
            root_dir = Path(raw_root) if raw_root else Path.cwd()
        root = Path(root_dir).expanduser().resolve()
        return cls(
            root_dir=root,
            ci=env_flag(env, "CI"),
            include_test_controller=env_flag(env, "INCLUDE_TEST_CONTROLLER"),
            targets=tuple(targets),
            patches_to_keep=tuple(patches_to_keep) if patches_to_keep is not None else PATCHES_TO_KEEP,
        )


@dataclass(frozen=True)
class TargetOutput:
    """What one deploy target produced."""

    target: DeployTarget
    artifact_size: str
    manifest_path: Path


@dataclass(frozen=True)
class BuildResult:
    package_build_seconds: int
    package_deploy_seconds: int
    total_seconds: int
    outputs: List[TargetOutput] = field(default_factory=list)
