"""Project id derivation from artifact locations.

A project id is a pure function of the artifact path relative to the
coverage root, so the same layout yields the same ids run after run and
current/base snapshots can be joined on them.

Examples (full path policy):
    coverage/apps/frontend/coverage-summary.json -> apps/frontend
    coverage/apps/frontend/lcov.info             -> apps/frontend
    coverage/lcov.info                           -> root

With ``depth=2``:
    coverage/apps/frontend/unit/lcov.info        -> apps/frontend
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from monocov.coverage.models import ROOT_PROJECT_ID


@dataclass(frozen=True, slots=True)
class NamingPolicy:
    """How artifact directories map to project ids.

    ``depth=None`` keeps the whole relative directory; an integer keeps only
    that many leading segments, so nested artifacts roll up into one project.
    """

    depth: int | None = None

    def __post_init__(self) -> None:
        if self.depth is not None and self.depth < 1:
            raise ValueError(f"depth must be >= 1, got {self.depth}")

    def project_id(self, artifact: Path, root: Path) -> str:
        return derive_project_id(artifact, root, depth=self.depth)


def derive_project_id(artifact: Path, root: Path, *, depth: int | None = None) -> str:
    """Strip the root prefix and the artifact filename from artifact.

    Raises:
        ValueError: If artifact is not located under root.
    """
    relative = artifact.relative_to(root)
    parts = [part for part in relative.parent.parts if part not in ("", ".")]
    if depth is not None:
        parts = parts[:depth]
    if not parts:
        return ROOT_PROJECT_ID
    return "/".join(parts)
