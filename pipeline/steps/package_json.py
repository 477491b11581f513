"""pipeline.steps.package_json

Pre-deploy edits to ``package.json`` manifests, and the backup that undoes them.

``pnpm deploy`` copies manifests into the pruned output as they are on disk.
Before deploying we therefore:

1. back up every manifest in the tree (skipped in CI),
2. let the frontend trim script strip dev-only fields,
3. drop dependency patches that production does not need,
4. optionally hide the e2e test controller from the CLI package,

and after deploying move the backups back into place.

Note: restoring is a separate, explicit step. If any step between backup and
restore fails, the backups stay on disk next to the edited files (``*.bak``),
are listed in a warning, and must be moved back by hand.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from prune_deploy.io.fs import read_json, write_json_atomic

from pipeline.core import BACKUP_SUFFIX, DEPENDENCY_CACHE_DIR, FE_TRIM_SCRIPT, PACKAGE_JSON, fe_trim_command
from pipeline.execution.model import Runner
from pipeline.execution.runner import log_captured_output
from pipeline.models import BuildConfig, BuildError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Discovery + backup
# ---------------------------------------------------------------------------


def discover_package_manifests(root_dir: Path, exclude_dirs: Iterable[Path] = ()) -> List[Path]:
    """Find every ``package.json`` under *root_dir*.

    Directories named ``node_modules`` and anything inside *exclude_dirs*
    (build output) are not descended into. Results are sorted.
    """
    root = Path(root_dir).resolve()
    excluded = {Path(p).resolve() for p in exclude_dirs}

    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        here = Path(dirpath)
        dirnames[:] = [
            d for d in dirnames if d != DEPENDENCY_CACHE_DIR and (here / d).resolve() not in excluded
        ]
        if PACKAGE_JSON in filenames and (here / PACKAGE_JSON).is_file():
            found.append(here / PACKAGE_JSON)

    return sorted(found)


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


@dataclass
class BackupSet:
    """Manifests discovered before deploy and, unless skipped, their backups."""

    files: List[Path] = field(default_factory=list)
    skipped: bool = False

    @classmethod
    def create(cls, files: Sequence[Path], *, skip: bool = False) -> "BackupSet":
        backups = cls(files=list(files), skipped=skip)
        if skip:
            print("ℹ️ CI mode: package.json backups skipped")
            return backups

        for f in backups.files:
            try:
                shutil.copy2(f, backup_path_for(f))
            except OSError as e:
                warn_pending_backups(backups)
                raise BuildError("backup", f"failed to back up {f}: {e}") from e
        print(f"💾 Backed up {len(backups.files)} package.json file(s)")
        return backups

    def pending(self) -> List[Path]:
        """Backup files that still exist on disk."""
        if self.skipped:
            return []
        return [b for b in (backup_path_for(f) for f in self.files) if b.exists()]

    def restore(self) -> List[Path]:
        """Move each existing backup back over its manifest."""
        if self.skipped:
            return []

        restored: List[Path] = []
        for f in self.files:
            bak = backup_path_for(f)
            if bak.exists():
                try:
                    os.replace(bak, f)
                except OSError as e:
                    raise BuildError("restore", f"failed to restore {f} from {bak}: {e}") from e
                restored.append(f)
        print(f"♻️ Restored {len(restored)} package.json file(s)")
        return restored


# ---------------------------------------------------------------------------
# Manifest edits
# ---------------------------------------------------------------------------


def _write_package_json(path: Path, data: Any) -> None:
    # Same shape as JSON.stringify(data, null, 2): no trailing newline.
    write_json_atomic(path, data, indent=2, sort_keys=False, trailing_newline=False)


def filter_patched_dependencies(
    patches: Mapping[str, Any],
    prefixes: Sequence[str],
) -> Dict[str, Any]:
    """Keep only entries whose key starts with one of *prefixes* (order preserved)."""
    keep = tuple(prefixes)
    return {k: v for k, v in patches.items() if k.startswith(keep)}


def apply_patch_allow_list(package_json_path: Path, prefixes: Sequence[str]) -> Optional[Dict[str, Any]]:
    """Rewrite ``pnpm.patchedDependencies`` in the root manifest.

    Returns the patches that were kept, or None if the manifest does not exist
    or has no patch section. Any IO or parse problem is fatal.
    """
    path = Path(package_json_path)
    if not path.exists():
        logger.info("No root manifest at %s; skipping patch cleanup", path)
        return None

    print("🩹 Performing selective patch cleanup...")
    try:
        data = read_json(path)
        kept: Optional[Dict[str, Any]] = None
        pnpm = data.get("pnpm") if isinstance(data, dict) else None
        if isinstance(pnpm, dict) and isinstance(pnpm.get("patchedDependencies"), dict):
            kept = filter_patched_dependencies(pnpm["patchedDependencies"], prefixes)
            pnpm["patchedDependencies"] = kept
        _write_package_json(path, data)
    except (OSError, ValueError, AttributeError) as e:
        raise BuildError("patch-cleanup", f"failed to clean up patches in {path}: {e}") from e

    print(f"✅ Kept backend patches: {', '.join(prefixes)}")
    if kept is not None:
        logger.info("Patches retained: %s", sorted(kept))
    return kept


def exclude_test_controller(cli_package_json: Path, exclude_glob: str) -> List[str]:
    """Append *exclude_glob* to the package's ``files`` list. Returns the new list."""
    path = Path(cli_package_json)
    try:
        data = read_json(path)
        files = data.setdefault("files", [])
        if not isinstance(files, list):
            raise ValueError(f"'files' must be a list, got {type(files).__name__}")
        files.append(exclude_glob)
        _write_package_json(path, data)
    except (OSError, ValueError, AttributeError) as e:
        raise BuildError("test-controller", f"failed to update {path}: {e}") from e

    print(f"  - Excluded test controller from {path}")
    return list(files)


def run_fe_trim(config: BuildConfig, runner: Runner) -> bool:
    """Run the frontend manifest trim script if the repo ships one."""
    script = config.root_dir / FE_TRIM_SCRIPT
    if not script.exists():
        logger.info("No frontend trim script at %s; skipping", script)
        return False

    cmd = fe_trim_command()
    try:
        res = runner(cmd, cwd=config.root_dir, env=config.subprocess_env, stream=config.verbose)
    except OSError as e:
        raise BuildError("fe-trim", f"could not start '{' '.join(cmd)}': {e}") from e
    if not res.ok:
        log_captured_output(res)
        raise BuildError("fe-trim", f"'{res.command_str}' exited with code {res.exit_code}")
    return True


def prepare_manifests(config: BuildConfig, runner: Runner) -> BackupSet:
    """Back up, trim and patch-filter manifests ahead of ``pnpm deploy``."""
    print("🔧 Performing pre-deploy cleanup on package.json files...")
    files = discover_package_manifests(config.root_dir, exclude_dirs=config.output_dirs)
    backups = BackupSet.create(files, skip=config.skip_backups)

    try:
        run_fe_trim(config, runner)
        apply_patch_allow_list(config.root_dir / PACKAGE_JSON, config.patches_to_keep)
    except BuildError:
        warn_pending_backups(backups)
        raise
    return backups


def describe_pending_backups(backups: BackupSet) -> Optional[str]:
    pending = backups.pending()
    if not pending:
        return None
    listed = "\n".join(f"  {p}" for p in pending)
    return f"{len(pending)} package.json backup(s) were not restored:\n{listed}"


def warn_pending_backups(backups: BackupSet) -> None:
    """Log the backups a failed run left behind so they can be moved back by hand."""
    note = describe_pending_backups(backups)
    if note:
        logger.warning(note)

