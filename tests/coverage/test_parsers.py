"""Tests for coverage artifact parsers."""

import json

import pytest

from monocov.core.errors import ParseError
from monocov.coverage.models import LcovCounter, LcovFileRecord, MetricStat
from monocov.coverage.parsers import (
    ARTIFACT_FILENAMES,
    JsonSummaryParser,
    LcovParser,
    fold_records,
    parse_artifact,
)

# =============================================================================
# Istanbul json-summary
# =============================================================================


class TestJsonSummaryParser:
    parser = JsonSummaryParser()

    def test_parse_total_wrapper(self) -> None:
        text = json.dumps(
            {
                "total": {
                    "lines": {"total": 50, "covered": 45, "skipped": 0, "pct": 90},
                    "functions": {"total": 10, "covered": 8, "skipped": 0, "pct": 80},
                    "branches": {"total": 20, "covered": 15, "skipped": 0, "pct": 75},
                    "statements": {"total": 60, "covered": 54, "skipped": 0, "pct": 90},
                },
                "/repo/src/a.js": {"lines": {"total": 1, "covered": 1, "pct": 100}},
            }
        )

        result = self.parser.parse(text, source="coverage-summary.json")

        assert result.format_id == "json-summary"
        assert result.raw_detail is None
        assert result.summary.lines == MetricStat(total=50, covered=45, pct=90.0)
        assert result.summary.functions.pct == 80.0
        assert result.summary.branches.pct == 75.0
        assert result.summary.statements == MetricStat(total=60, covered=54, pct=90.0)

    def test_parse_bare_metrics(self) -> None:
        text = json.dumps({"lines": {"total": 4, "covered": 1, "pct": 25}})

        result = self.parser.parse(text, source="x")

        assert result.summary.lines.pct == 25.0
        assert result.summary.functions == MetricStat()
        assert result.summary.statements is None

    def test_producer_pct_is_kept(self) -> None:
        # 2/3 would be 66.666..., the producer rounded it
        text = json.dumps({"total": {"lines": {"total": 3, "covered": 2, "pct": 66.67}}})
        assert self.parser.parse(text, source="x").summary.lines.pct == 66.67

    def test_unknown_pct_is_computed(self) -> None:
        text = json.dumps({"total": {"lines": {"total": 8, "covered": 2, "pct": "Unknown"}}})
        assert self.parser.parse(text, source="x").summary.lines.pct == 25.0

    def test_zero_total_is_no_data(self) -> None:
        text = json.dumps({"total": {"branches": {"total": 0, "covered": 0, "pct": 100}}})
        assert self.parser.parse(text, source="x").summary.branches.pct is None

    def test_pct_only_metric(self) -> None:
        text = json.dumps({"total": {"lines": {"pct": 42.5}}})
        stat = self.parser.parse(text, source="x").summary.lines
        assert stat == MetricStat(total=0, covered=0, pct=42.5)

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            json.dumps({"total": []}),
            json.dumps({"total": {"foo": 1}}),
            json.dumps({"total": {"lines": "90%"}}),
            json.dumps({"total": {"lines": {"total": "ten", "covered": 1}}}),
            json.dumps({"total": {"lines": {"total": 10, "covered": 1.5}}}),
            json.dumps({"total": {"lines": {"total": 10, "covered": 20}}}),
            json.dumps({"total": {"lines": {"total": 10, "covered": 5, "pct": 150}}}),
        ],
    )
    def test_malformed_raises(self, text: str) -> None:
        with pytest.raises(ParseError):
            self.parser.parse(text, source="bad.json")


# =============================================================================
# LCOV
# =============================================================================

LCOV_SAMPLE = """TN:
SF:src/app.js
FN:1,main
FN:10,helper
FNDA:3,main
FNDA:0,helper
DA:1,3
DA:2,3
DA:10,0
DA:11,0
BRDA:2,0,0,3
BRDA:2,0,1,-
end_of_record
SF:src/util.js
DA:1,1
DA:2,1
LF:2
LH:2
end_of_record
"""


class TestLcovParser:
    parser = LcovParser()

    def test_parse_derives_counts_from_details(self) -> None:
        result = self.parser.parse(LCOV_SAMPLE, source="lcov.info")

        assert result.format_id == "lcov"
        app = result.raw_detail[0] if result.raw_detail else None
        assert app is not None
        assert app.file == "src/app.js"
        assert (app.lines.found, app.lines.hit) == (4, 2)
        assert (app.functions.found, app.functions.hit) == (2, 1)
        assert (app.branches.found, app.branches.hit) == (2, 1)
        assert [f.name for f in app.functions.details] == ["helper", "main"]

    def test_summary_folds_files(self) -> None:
        summary = self.parser.parse(LCOV_SAMPLE, source="lcov.info").summary

        assert summary.lines == MetricStat(total=6, covered=4, pct=4 / 6 * 100)
        assert summary.functions.pct == 50.0
        assert summary.branches.pct == 50.0
        assert summary.statements == summary.lines

    def test_counters_override_details(self) -> None:
        text = "SF:a.js\nDA:1,1\nLF:10\nLH:7\nend_of_record\n"
        record = self.parser.parse(text, source="x").raw_detail
        assert record is not None
        assert (record[0].lines.found, record[0].lines.hit) == (10, 7)

    def test_missing_end_of_record(self) -> None:
        result = self.parser.parse("SF:a.js\nDA:1,0\nDA:2,1", source="x")
        assert result.summary.lines.pct == 50.0

    def test_records_sorted_by_file(self) -> None:
        text = "SF:z.js\nLF:1\nLH:1\nend_of_record\nSF:a.js\nLF:1\nLH:0\nend_of_record\n"
        detail = self.parser.parse(text, source="x").raw_detail
        assert detail is not None
        assert [r.file for r in detail] == ["a.js", "z.js"]

    def test_json_record_list(self) -> None:
        text = json.dumps(
            [
                {
                    "file": "src/a.ts",
                    "lines": {"found": 50, "hit": 45, "details": []},
                    "functions": {"found": 10, "hit": 8, "details": []},
                    "branches": {"found": 20, "hit": 15, "details": []},
                }
            ]
        )

        result = self.parser.parse(text, source="lcov.info")

        assert result.summary.lines.pct == 90.0
        assert result.summary.functions.pct == 80.0
        assert result.summary.branches.pct == 75.0

    def test_no_functions_is_no_data(self) -> None:
        summary = self.parser.parse("SF:a.js\nDA:1,1\nend_of_record\n", source="x").summary
        assert summary.functions.pct is None
        assert summary.branches.pct is None

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "TN:\n",
            "just some text",
            "[1, 2]",
            json.dumps([{"lines": {"found": 1, "hit": 1}}]),
            json.dumps([{"file": "a", "lines": {"found": -1, "hit": 0}}]),
            json.dumps([{"file": "a", "lines": {"found": 1, "hit": 1, "details": 5}}]),
            "SF:a.js\nLF:-5\nLH:-5\nend_of_record\n",
            "SF:a.js\nDA:1,1\nLH:-1\nend_of_record\n",
        ],
    )
    def test_malformed_raises(self, text: str) -> None:
        with pytest.raises(ParseError):
            self.parser.parse(text, source="lcov.info")

    def test_function_name_with_commas(self) -> None:
        text = (
            "SF:a.cpp\n"
            "FN:3,pair<int, int> make()\n"
            "FN:10,14,std::map<K, V>::at\n"
            "FNDA:1,pair<int, int> make()\n"
            "FNDA:0,std::map<K, V>::at\n"
            "end_of_record\n"
        )

        detail = self.parser.parse(text, source="x").raw_detail

        assert detail is not None
        functions = detail[0].functions
        assert (functions.found, functions.hit) == (2, 1)
        assert {(f.name, f.line) for f in functions.details} == {
            ("pair<int, int> make()", 3),
            ("std::map<K, V>::at", 10),
        }


class TestFoldRecords:
    def test_weights_by_size(self) -> None:
        records = [
            LcovFileRecord(file="big", lines=LcovCounter(found=90, hit=90)),
            LcovFileRecord(file="small", lines=LcovCounter(found=10, hit=0)),
        ]
        assert fold_records(records).lines.pct == 90.0

    def test_empty(self) -> None:
        summary = fold_records([])
        assert summary.lines.pct is None
        assert summary.statements == summary.lines


# =============================================================================
# Format resolution
# =============================================================================


class TestParseArtifact:
    def test_artifact_filenames(self) -> None:
        assert ARTIFACT_FILENAMES == ("coverage-summary.json", "lcov.info")

    def test_json_summary_first(self) -> None:
        text = json.dumps({"total": {"lines": {"total": 2, "covered": 1, "pct": 50}}})
        assert parse_artifact(text, source="x").format_id == "json-summary"

    def test_falls_back_to_lcov(self) -> None:
        assert parse_artifact("SF:a\nLF:2\nLH:1\n", source="x").format_id == "lcov"

    def test_neither_format(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_artifact("<coverage/>", source="cov.xml")

        reason = exc_info.value.details["reason"]
        assert "json-summary" in reason
        assert "lcov" in reason

    def test_forced_format(self) -> None:
        with pytest.raises(ParseError):
            parse_artifact("SF:a\nLF:2\nLH:1\n", source="x", format_id="json-summary")

    def test_unknown_forced_format(self) -> None:
        with pytest.raises(ParseError, match="unknown coverage format"):
            parse_artifact("{}", source="x", format_id="cobertura")
