"""Coverage artifact parser protocol."""

from dataclasses import dataclass
from typing import Protocol

from monocov.coverage.models import LcovFileRecord, Summary


@dataclass(frozen=True, slots=True)
class ParsedArtifact:
    """Result of parsing one artifact, tagged with the format that accepted it."""

    format_id: str
    summary: Summary
    raw_detail: tuple[LcovFileRecord, ...] | None = None


class ArtifactParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one artifact format and converts it to the unified
    Summary model.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'json-summary', 'lcov')."""
        ...

    @property
    def filename(self) -> str:
        """Artifact file name searched for under a coverage root."""
        ...

    def parse(self, text: str, *, source: str) -> ParsedArtifact:
        """Parse artifact contents into the unified model.

        Args:
            text: Raw artifact contents.
            source: Artifact path, used in error messages only.

        Returns:
            ParsedArtifact carrying the project Summary.

        Raises:
            ParseError: If the contents are not in this parser's format.
        """
        ...
