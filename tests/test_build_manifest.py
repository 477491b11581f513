import json
import re
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from prune_deploy.domain.manifest import BuildDurations, BuildManifest, utc_timestamp
from prune_deploy.io.fs import read_json, write_json_atomic
from pipeline.steps.artifacts import write_build_manifest


class TestBuildManifest(unittest.TestCase):
    def test_schema_and_field_order(self) -> None:
        manifest = BuildManifest.create(
            artifact_size="1.5K",
            durations=BuildDurations(package_build=12, package_deploy=3, total=16),
            now=datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        )
        data = manifest.to_dict()

        self.assertEqual(["buildTime", "artifactSize", "buildDuration"], list(data))
        self.assertEqual("2026-01-02T03:04:05.678Z", data["buildTime"])
        self.assertEqual("1.5K", data["artifactSize"])
        self.assertEqual({"packageBuild": 12, "packageDeploy": 3, "total": 16}, data["buildDuration"])
        self.assertEqual(manifest, BuildManifest.from_dict(data))

    def test_durations_must_be_non_negative_integers(self) -> None:
        with self.assertRaises(ValueError):
            BuildDurations(package_build=-1, package_deploy=0, total=0)
        with self.assertRaises(ValueError):
            BuildDurations(package_build=0, package_deploy=1.5, total=2)  # type: ignore[arg-type]

    def test_total_is_not_tied_to_phase_sum(self) -> None:
        d = BuildDurations(package_build=10, package_deploy=10, total=5)
        self.assertEqual(5, d.total)

    def test_utc_timestamp_shape(self) -> None:
        self.assertRegex(utc_timestamp(), r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

    def test_write_build_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "compiled"
            manifest = BuildManifest.create(
                artifact_size="Unknown",
                durations=BuildDurations(package_build=0, package_deploy=0, total=0),
            )
            path = write_build_manifest(out, manifest)

            self.assertEqual(out / "build-manifest.json", path)
            text = path.read_text(encoding="utf-8")
            self.assertTrue(re.match(r'^\{\n  "buildTime": ', text))
            self.assertEqual(manifest.to_dict(), json.loads(text))


class TestAtomicJsonWrites(unittest.TestCase):
    def test_write_json_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_dir = Path(td) / "out"
            out_path = out_dir / "state.json"

            payload = {"z": 1, "a": True, "c": None, "nested": {"x": "ü"}}
            write_json_atomic(out_path, payload)

            self.assertEqual(payload, read_json(out_path))
            self.assertEqual(["z", "a", "c", "nested"], list(read_json(out_path)))
            self.assertIn("ü", out_path.read_text(encoding="utf-8"))
            self.assertEqual([], list(out_dir.glob("*.tmp")))

    def test_trailing_newline_is_optional(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "a.json"
            write_json_atomic(p, {"a": 1}, trailing_newline=False)
            self.assertEqual('{\n  "a": 1\n}', p.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
