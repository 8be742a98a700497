"""
Read-only file providers.

The runner never touches the filesystem directly: templates, constraints
and objects are read through a provider keyed by POSIX-style paths.

A provider must raise FileNotFoundError for a missing path; the runner
records that error unchanged.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Mapping, Protocol


class FileProvider(Protocol):
    """Protocol for reading file contents by path."""

    def read(self, path: str) -> bytes:
        """
        Return the contents of `path`.

        Raises:
            FileNotFoundError: if the path does not exist.
        """
        ...


def join(base_dir: str, path: str) -> str:
    """Join a suite-relative path onto the base directory."""
    if not base_dir:
        return posixpath.normpath(path)
    return posixpath.normpath(posixpath.join(base_dir, path))


class DirectoryFileProvider:
    """
    Read files beneath a root directory.

    Example: DirectoryFileProvider(Path("suites")).read("tpl/template.yaml")
    reads suites/tpl/template.yaml.
    """

    def __init__(self, root: Path):
        self.root = root

    def read(self, path: str) -> bytes:
        target = self.root / path
        if not target.is_file():
            raise FileNotFoundError(f"file does not exist: {path}")
        return target.read_bytes()


class MapFileProvider:
    """In-memory provider, mostly for tests and embedding."""

    def __init__(self, files: Mapping[str, bytes | str] | None = None):
        self.files: dict[str, bytes] = {}
        for path, data in (files or {}).items():
            self.files[posixpath.normpath(path)] = data.encode("utf-8") if isinstance(data, str) else data

    def read(self, path: str) -> bytes:
        try:
            return self.files[posixpath.normpath(path)]
        except KeyError:
            raise FileNotFoundError(f"file does not exist: {path}") from None
