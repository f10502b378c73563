"""LCOV format parser.

LCOV format is a plain text format with records like:
- SF:<source file path>
- DA:<line>,<hit count>
- BRDA:<line>,<block>,<branch>,<taken>
- FN:<line>,<name>
- FNDA:<hit count>,<name>
- LF:<lines found>
- LH:<lines hit>
- BRF:<branches found>
- BRH:<branches hit>
- FNF:<functions found>
- FNH:<functions hit>
- end_of_record

Used by: Jest/NYC ``lcov`` reporter, pytest-cov, cargo-llvm-cov, gcov, dart test

Each SF block becomes one LcovFileRecord. Summary counters (LF/LH, FNF/FNH,
BRF/BRH) win when present; otherwise they are derived from the detail lines.
A JSON array of already-parsed records (``[{"file": ..., "lines": {"found",
"hit"}, ...}]``) is accepted as well.
"""

import json
from collections.abc import Iterable
from typing import Any

from monocov.core.errors import ParseError
from monocov.coverage.models import (
    BranchDetail,
    FunctionDetail,
    LcovCounter,
    LcovFileRecord,
    LineDetail,
    MetricStat,
    Summary,
)

from .base import ParsedArtifact


def fold_records(records: Iterable[LcovFileRecord]) -> Summary:
    """Fold per-file records into one project Summary.

    found/hit are summed across files and the percentage is derived from the
    sums, so large files weigh more than small ones. LCOV has no statement
    concept: statements mirror lines.
    """
    lines_found = lines_hit = 0
    functions_found = functions_hit = 0
    branches_found = branches_hit = 0

    for record in records:
        lines_found += record.lines.found
        lines_hit += record.lines.hit
        functions_found += record.functions.found
        functions_hit += record.functions.hit
        branches_found += record.branches.found
        branches_hit += record.branches.hit

    lines = MetricStat.from_counts(lines_hit, lines_found)
    return Summary(
        lines=lines,
        functions=MetricStat.from_counts(functions_hit, functions_found),
        branches=MetricStat.from_counts(branches_hit, branches_found),
        statements=lines,
    )


class _FileBuilder:
    """Accumulates one SF block."""

    def __init__(self, file: str) -> None:
        self.file = file
        self.lines: dict[int, int] = {}
        self.branches: list[BranchDetail] = []
        self.fn_lines: dict[str, int] = {}  # name -> start line
        self.fn_hits: dict[str, int] = {}  # name -> hits
        self.counters: dict[str, int] = {}  # LF/LH/FNF/FNH/BRF/BRH

    def build(self) -> LcovFileRecord:
        line_details = tuple(LineDetail(line=n, hit=h) for n, h in sorted(self.lines.items()))
        fn_names = sorted(set(self.fn_lines) | set(self.fn_hits))
        fn_details = tuple(
            FunctionDetail(
                name=name,
                line=self.fn_lines.get(name, 0),
                hit=self.fn_hits.get(name, 0),
            )
            for name in fn_names
        )

        def counter(
            found_key: str, hit_key: str, details: tuple[Any, ...], hits: list[int]
        ) -> LcovCounter:
            found = self.counters.get(found_key, len(details))
            hit = self.counters.get(hit_key, sum(1 for h in hits if h > 0))
            return LcovCounter(found=found, hit=min(hit, found), details=details)

        return LcovFileRecord(
            file=self.file,
            lines=counter("LF", "LH", line_details, [d.hit for d in line_details]),
            functions=counter("FNF", "FNH", fn_details, [d.hit for d in fn_details]),
            branches=counter("BRF", "BRH", tuple(self.branches), [b.taken for b in self.branches]),
        )


_COUNTER_KEYS = ("LF", "LH", "FNF", "FNH", "BRF", "BRH")


def _parse_tracefile(text: str) -> list[LcovFileRecord]:
    records: list[LcovFileRecord] = []
    current: _FileBuilder | None = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith("SF:"):
            if current is not None:
                records.append(current.build())
            current = _FileBuilder(line[3:])
            continue

        if line == "end_of_record":
            if current is not None:
                records.append(current.build())
            current = None
            continue

        if current is None:
            # TN: and anything outside a block
            continue

        key, _, value = line.partition(":")

        if key == "DA":
            # Line data: DA:line,hits[,checksum]
            parts = value.split(",")
            if len(parts) >= 2:
                try:
                    # Handle '-' as 0 (some tools use this)
                    hits = 0 if parts[1] == "-" else int(parts[1])
                    line_num = int(parts[0])
                except ValueError:
                    continue
                current.lines[line_num] = current.lines.get(line_num, 0) + hits

        elif key == "BRDA":
            # Branch data: BRDA:line,block,branch,taken
            parts = value.split(",")
            if len(parts) >= 4:
                try:
                    # '-' means the branch was never evaluated
                    taken = 0 if parts[3] == "-" else int(parts[3])
                    current.branches.append(
                        BranchDetail(
                            line=int(parts[0]),
                            block=int(parts[1]),
                            branch=int(parts[2]),
                            taken=taken,
                        )
                    )
                except ValueError:
                    continue

        elif key == "FN":
            # Function definition: FN:line[,end_line],name; names may contain commas
            start, _, rest = value.partition(",")
            end, sep, name = rest.partition(",")
            if sep and end.isdigit():
                rest = name
            if not rest:
                continue
            try:
                current.fn_lines[rest] = int(start)
            except ValueError:
                continue

        elif key == "FNDA":
            # Function hits: FNDA:hits,name
            parts = value.split(",", 1)
            if len(parts) == 2:
                try:
                    current.fn_hits[parts[1]] = int(parts[0])
                except ValueError:
                    continue

        elif key in _COUNTER_KEYS:
            try:
                count = int(value)
            except ValueError:
                continue
            if count < 0:
                raise ValueError(f"negative {key} counter in {current.file}: {count}")
            current.counters[key] = count

    # Handle file without end_of_record
    if current is not None:
        records.append(current.build())

    return records


def _json_counter(raw: Any) -> LcovCounter:
    if not isinstance(raw, dict):
        return LcovCounter()
    found = raw.get("found", 0)
    hit = raw.get("hit", 0)
    if not isinstance(found, int) or not isinstance(hit, int) or found < 0 or hit < 0:
        raise ValueError(f"found/hit must be non-negative integers, got {found!r}/{hit!r}")
    details = raw.get("details") or ()
    if not isinstance(details, list | tuple):
        raise ValueError(f"details must be a list, got {type(details).__name__}")
    return LcovCounter(found=found, hit=min(hit, found), details=tuple(details))


def _records_from_json(data: Any) -> list[LcovFileRecord]:
    if not isinstance(data, list):
        raise ValueError("expected a list of file records")
    records = []
    for entry in data:
        if not isinstance(entry, dict) or "file" not in entry:
            raise ValueError("file record without 'file'")
        records.append(
            LcovFileRecord(
                file=str(entry["file"]),
                lines=_json_counter(entry.get("lines")),
                functions=_json_counter(entry.get("functions")),
                branches=_json_counter(entry.get("branches")),
            )
        )
    return records


class LcovParser:
    """Parser for LCOV tracefiles."""

    @property
    def format_id(self) -> str:
        return "lcov"

    @property
    def filename(self) -> str:
        return "lcov.info"

    def parse(self, text: str, *, source: str) -> ParsedArtifact:
        """Parse an LCOV tracefile (or its JSON record list) into a Summary."""
        if text.lstrip().startswith("["):
            try:
                records = _records_from_json(json.loads(text))
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                raise ParseError.malformed(source, f"invalid LCOV record list: {e}") from e
        else:
            try:
                records = _parse_tracefile(text)
            except ValueError as e:
                raise ParseError.malformed(source, str(e)) from e

        if not records:
            raise ParseError.malformed(source, "no LCOV file records (SF:) found")

        records.sort(key=lambda r: r.file)
        try:
            summary = fold_records(records)
        except (TypeError, ValueError) as e:
            raise ParseError.malformed(source, f"inconsistent LCOV counts: {e}") from e
        return ParsedArtifact(
            format_id=self.format_id,
            summary=summary,
            raw_detail=tuple(records),
        )
