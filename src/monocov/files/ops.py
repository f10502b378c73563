"""Filesystem collaborator used by the aggregator.

Pure filesystem I/O behind a small protocol so the aggregator can run
against an in-memory tree in tests.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from monocov.core.errors import ReadError


class FileSystem(Protocol):
    """Discovery and read operations needed to aggregate coverage."""

    def exists(self, path: Path) -> bool: ...

    def find_files(self, root: Path, patterns: Sequence[str]) -> list[Path]:
        """Recursively list files under root whose name matches any pattern."""
        ...

    def read_text(self, path: Path) -> str:
        """Return file contents.

        Raises:
            ReadError: On any I/O or decoding failure.
        """
        ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def find_files(self, root: Path, patterns: Sequence[str]) -> list[Path]:
        """Walk root and return matching files, sorted for stable output.

        Symlinked directories are not followed.
        """
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for name in sorted(filenames):
                if any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns):
                    found.append(Path(dirpath) / name)
        return sorted(found)

    def read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError.from_os_error(str(path), e) from e
