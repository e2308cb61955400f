"""Per-word correction outcomes and the diagnostics built from them.

``CorrectionResult`` is a plain dataclass produced on every lookup, while
``Diagnostic`` is validated with Pydantic because it is the record that leaves
the engine (log lines, CSV and Markdown reports).
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator


@dataclass(frozen=True)
class CorrectionResult:
    """Outcome of a dictionary query for a single word.

    When ``matched`` is false ``suggestion`` repeats the original word.
    """

    original: str
    suggestion: str
    matched: bool


class Diagnostic(BaseModel):
    """One misspelled word found inside an accepted identifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Location is copied verbatim from the identifier provider.
    file: str
    line: int
    misspelled_word: str
    suggestion: str
    identifier_name: str

    @field_validator("misspelled_word", "suggestion", "identifier_name")
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("diagnostic text fields must not be empty")
        return value

    def format_line(self) -> str:
        """Render the fixed single-line output format."""
        return (
            f'{self.file}:{self.line} "{self.misspelled_word}" '
            f"should be {self.suggestion} in {self.identifier_name}"
        )

    def __str__(self) -> str:
        return self.format_line()
