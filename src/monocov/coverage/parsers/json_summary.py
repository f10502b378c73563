"""Istanbul json-summary format parser.

Istanbul (used by Jest, Vitest, NYC) writes coverage-summary.json with the
``json-summary`` reporter:

{
  "total": {
    "lines": {"total": 100, "covered": 85, "skipped": 0, "pct": 85},
    "statements": {...},
    "functions": {...},
    "branches": {...}
  },
  "/abs/path/to/file.js": { ...same shape per file... }
}

Only ``total`` is consumed. Some producers write the metrics at the top level
without the ``total`` wrapper; that object is used as-is. Empty metrics carry
``"pct": "Unknown"`` in older Istanbul releases.
"""

import json
from typing import Any

from monocov.core.errors import ParseError
from monocov.coverage.metrics import percentage
from monocov.coverage.models import METRIC_NAMES, MetricStat, Summary

from .base import ParsedArtifact


def _count(raw: dict[str, Any], key: str, source: str) -> int:
    value = raw.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ParseError.malformed(source, f"{key} must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ParseError.malformed(source, f"{key} must be a whole number, got {value!r}")
        value = int(value)
    return value


def _metric(raw: Any, source: str) -> MetricStat:
    if raw is None:
        return MetricStat()
    if not isinstance(raw, dict):
        raise ParseError.malformed(source, f"metric must be an object, got {type(raw).__name__}")

    total = _count(raw, "total", source)
    covered = _count(raw, "covered", source)

    pct_raw = raw.get("pct")
    pct: float | None
    if "total" in raw and total == 0:
        pct = None
    elif isinstance(pct_raw, int | float) and not isinstance(pct_raw, bool):
        pct = float(pct_raw)
    else:
        # Missing or "Unknown"
        pct = percentage(covered, total)

    try:
        return MetricStat(total=total, covered=covered, pct=pct)
    except ValueError as e:
        raise ParseError.malformed(source, str(e)) from e


class JsonSummaryParser:
    """Parser for Istanbul coverage-summary.json files."""

    @property
    def format_id(self) -> str:
        return "json-summary"

    @property
    def filename(self) -> str:
        return "coverage-summary.json"

    def parse(self, text: str, *, source: str) -> ParsedArtifact:
        """Parse coverage-summary.json contents into a Summary."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError.malformed(source, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ParseError.malformed(source, "expected a JSON object")

        total = data.get("total", data)
        if not isinstance(total, dict):
            raise ParseError.malformed(source, "'total' must be an object")
        if not any(name in total for name in METRIC_NAMES):
            raise ParseError.malformed(source, "no coverage metrics found")

        summary = Summary(
            lines=_metric(total.get("lines"), source),
            functions=_metric(total.get("functions"), source),
            branches=_metric(total.get("branches"), source),
            statements=_metric(total["statements"], source) if "statements" in total else None,
        )
        return ParsedArtifact(format_id=self.format_id, summary=summary)
