"""prune_deploy.domain.manifest

The build manifest written into every deployed output directory.

On-disk shape (field order is part of the contract)::

    {
      "buildTime": "2026-01-01T00:00:00.000Z",
      "artifactSize": "412.3M",
      "buildDuration": {
        "packageBuild": 310,
        "packageDeploy": 95,
        "total": 407
      }
    }

Durations are whole seconds. ``total`` is measured independently of the two
phases, so it is not required to equal their sum.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

BUILD_MANIFEST_FILENAME = "build-manifest.json"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""

    dt = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class BuildDurations:
    package_build: int
    package_deploy: int
    total: int

    def __post_init__(self) -> None:
        for name in ("package_build", "package_deploy", "total"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

    def to_dict(self) -> Dict[str, int]:
        return {
            "packageBuild": self.package_build,
            "packageDeploy": self.package_deploy,
            "total": self.total,
        }


@dataclass(frozen=True)
class BuildManifest:
    build_time: str
    artifact_size: str
    durations: BuildDurations

    @classmethod
    def create(
        cls,
        *,
        artifact_size: str,
        durations: BuildDurations,
        now: Optional[datetime] = None,
    ) -> "BuildManifest":
        return cls(build_time=utc_timestamp(now), artifact_size=artifact_size, durations=durations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buildTime": self.build_time,
            "artifactSize": self.artifact_size,
            "buildDuration": self.durations.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildManifest":
        dur = data.get("buildDuration") or {}
        return cls(
            build_time=str(data["buildTime"]),
            artifact_size=str(data["artifactSize"]),
            durations=BuildDurations(
                package_build=int(dur.get("packageBuild", 0)),
                package_deploy=int(dur.get("packageDeploy", 0)),
                total=int(dur.get("total", 0)),
            ),
        )
