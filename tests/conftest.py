"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides helpers for building coverage trees on disk.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local monocov package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of monocov modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("monocov"):
        del sys.modules[module_name]


def istanbul_summary(
    lines: tuple[int, int],
    functions: tuple[int, int] = (0, 0),
    branches: tuple[int, int] = (0, 0),
    statements: tuple[int, int] | None = None,
) -> dict[str, Any]:
    """coverage-summary.json body from (covered, total) pairs."""

    def metric(pair: tuple[int, int]) -> dict[str, Any]:
        covered, total = pair
        pct: float | str = round(covered / total * 100, 2) if total else "Unknown"
        return {"total": total, "covered": covered, "skipped": 0, "pct": pct}

    total = {
        "lines": metric(lines),
        "functions": metric(functions),
        "branches": metric(branches),
    }
    if statements is not None:
        total["statements"] = metric(statements)
    return {"total": total}


def lcov_text(file: str, lines: tuple[int, int], functions: tuple[int, int] = (0, 0)) -> str:
    """Minimal LCOV tracefile for one source file using summary counters."""
    lh, lf = lines
    fnh, fnf = functions
    return (
        f"TN:\nSF:{file}\nFNF:{fnf}\nFNH:{fnh}\nLF:{lf}\nLH:{lh}\nBRF:0\nBRH:0\nend_of_record\n"
    )


@pytest.fixture
def write_summary(tmp_path: Path) -> Callable[..., Path]:
    """Write a coverage-summary.json under tmp_path/<root>/<relative>.

    Pass a raw body, or (covered, total) pairs as keyword arguments.
    """

    def _write(
        relative: str,
        body: dict[str, Any] | str | None = None,
        *,
        root: str = "coverage",
        **metrics: Any,
    ) -> Path:
        if body is None:
            body = istanbul_summary(**metrics)
        directory = tmp_path / root / relative
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "coverage-summary.json"
        path.write_text(body if isinstance(body, str) else json.dumps(body))
        return path

    return _write


@pytest.fixture
def write_lcov(tmp_path: Path) -> Callable[..., Path]:
    """Write an lcov.info under tmp_path/<root>/<relative>.

    Pass raw tracefile text, or file/(hit, found) pairs as keyword arguments.
    """

    def _write(
        relative: str,
        text: str | None = None,
        *,
        root: str = "coverage",
        file: str = "src/index.js",
        **counts: Any,
    ) -> Path:
        if text is None:
            text = lcov_text(file, **counts)
        directory = tmp_path / root / relative
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "lcov.info"
        path.write_text(text)
        return path

    return _write
