from __future__ import annotations

from pathlib import Path

import pytest

from ctverify.fs import DirectoryFileProvider, MapFileProvider, join
from helpers import write


@pytest.mark.parametrize(
    "base_dir, path, want",
    [
        ("", "template.yaml", "template.yaml"),
        ("", "./a/../b.yaml", "b.yaml"),
        ("suites", "template.yaml", "suites/template.yaml"),
        ("suites/nested", "../objects/pod.yaml", "suites/objects/pod.yaml"),
    ],
)
def test_join(base_dir: str, path: str, want: str) -> None:
    assert join(base_dir, path) == want


def test_map_provider() -> None:
    fs = MapFileProvider({"a/b.yaml": "kind: X\n", "./c.yaml": b"raw"})
    assert fs.read("a/b.yaml") == b"kind: X\n"
    assert fs.read("a/./b.yaml") == b"kind: X\n"
    assert fs.read("c.yaml") == b"raw"

    with pytest.raises(FileNotFoundError):
        fs.read("missing.yaml")


def test_directory_provider(tmp_path: Path) -> None:
    write(tmp_path / "policies" / "template.yaml", "kind: ConstraintTemplate\n")
    fs = DirectoryFileProvider(tmp_path)

    assert fs.read("policies/template.yaml") == b"kind: ConstraintTemplate\n"
    with pytest.raises(FileNotFoundError):
        fs.read("policies/missing.yaml")
    # directories are not files
    with pytest.raises(FileNotFoundError):
        fs.read("policies")
