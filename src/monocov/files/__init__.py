"""Filesystem access for coverage discovery."""

from monocov.files.ops import FileSystem, LocalFileSystem

__all__ = ["FileSystem", "LocalFileSystem"]
