from __future__ import annotations

import os
from pathlib import Path

import pytest

from pipeline.steps.sizing import UNKNOWN_SIZE, artifact_size_label, directory_size, format_size


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        (0, "0.0B"),
        (1023, "1023.0B"),
        (1024, "1.0K"),
        (1536, "1.5K"),
        (1280, "1.3K"),
        (2304, "2.3K"),
        (1048576, "1.0M"),
        (5 * 1024**3, "5.0G"),
        # G is the largest unit; no further division.
        (3 * 1024**4, "3072.0G"),
    ],
)
def test_format_size(num_bytes: int, expected: str) -> None:
    assert format_size(num_bytes) == expected


def test_directory_size_sums_nested_regular_files(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "b").mkdir()
    (tmp_path / "top.bin").write_bytes(b"x" * 100)
    (tmp_path / "a" / "mid.bin").write_bytes(b"x" * 200)
    (tmp_path / "a" / "b" / "deep.bin").write_bytes(b"x" * 300)

    assert directory_size(tmp_path) == 600


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_directory_size_ignores_symlinks(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "big.bin").write_bytes(b"x" * 4096)

    tree = tmp_path / "tree"
    tree.mkdir()
    (tree / "small.bin").write_bytes(b"x" * 10)
    try:
        (tree / "link_dir").symlink_to(outside, target_is_directory=True)
        (tree / "link_file").symlink_to(outside / "big.bin")
    except OSError:
        pytest.skip("cannot create symlinks here")

    assert directory_size(tree) == 10


def test_artifact_size_label_formats_existing_directory(tmp_path: Path) -> None:
    (tmp_path / "f.bin").write_bytes(b"x" * 1536)
    assert artifact_size_label(tmp_path) == "1.5K"


def test_artifact_size_label_is_unknown_for_missing_directory(tmp_path: Path) -> None:
    assert artifact_size_label(tmp_path / "does-not-exist") == UNKNOWN_SIZE
