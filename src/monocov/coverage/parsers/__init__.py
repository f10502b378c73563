"""Coverage parser registry and format resolution.

This module provides:
- PARSER_REGISTRY: All available parsers, in resolution order
- ARTIFACT_FILENAMES: File names discovered under a coverage root
- parse_artifact: Parse contents as json-summary, else LCOV, else fail
"""

from collections.abc import Sequence

from monocov.core.errors import ParseError

from .base import ArtifactParser, ParsedArtifact
from .json_summary import JsonSummaryParser
from .lcov import LcovParser, fold_records

# Resolution order: the structured JSON format first, LCOV text last
PARSER_REGISTRY: Sequence[ArtifactParser] = (
    JsonSummaryParser(),
    LcovParser(),
)

PARSER_BY_FORMAT: dict[str, ArtifactParser] = {p.format_id: p for p in PARSER_REGISTRY}

ARTIFACT_FILENAMES: tuple[str, ...] = tuple(p.filename for p in PARSER_REGISTRY)

__all__ = [
    "ARTIFACT_FILENAMES",
    "PARSER_BY_FORMAT",
    "PARSER_REGISTRY",
    "ArtifactParser",
    "JsonSummaryParser",
    "LcovParser",
    "ParsedArtifact",
    "fold_records",
    "parse_artifact",
]


def parse_artifact(text: str, *, source: str, format_id: str | None = None) -> ParsedArtifact:
    """Parse artifact contents into a tagged ParsedArtifact.

    Args:
        text: Raw artifact contents.
        source: Artifact path, for error messages.
        format_id: Force a specific format instead of trying each in turn.

    Returns:
        ParsedArtifact from the first parser that accepts the contents.

    Raises:
        ParseError: If the format is unknown or no parser accepts the contents.
    """
    if format_id:
        parser = PARSER_BY_FORMAT.get(format_id)
        if not parser:
            valid = ", ".join(sorted(PARSER_BY_FORMAT))
            raise ParseError.malformed(
                source, f"unknown coverage format {format_id!r}; valid formats: {valid}"
            )
        return parser.parse(text, source=source)

    reasons: list[str] = []
    for parser in PARSER_REGISTRY:
        try:
            return parser.parse(text, source=source)
        except ParseError as e:
            reasons.append(f"{parser.format_id}: {e.details.get('reason', e.message)}")

    raise ParseError.malformed(source, "; ".join(reasons))
