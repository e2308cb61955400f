"""Scan configuration shared by the CLI and the scan orchestrator."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, field_validator


def split_ignore_words(values: str | Iterable[str] | None) -> frozenset[str]:
    """Normalise comma-separated or iterable ignore words to lowercase."""

    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]

    words: set[str] = set()
    for value in values:
        if value is None:
            continue
        for part in str(value).split(","):
            cleaned = part.strip().lower()
            if cleaned:
                words.add(cleaned)
    return frozenset(words)


class ScanConfiguration(BaseModel):
    """Options controlling a single scan.

    If ``functions_only``, ``constants_only`` and ``variables_only`` are all
    false every identifier kind is scanned.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ignore_words: frozenset[str] = frozenset()
    include_tests: bool = True
    functions_only: bool = False
    constants_only: bool = False
    variables_only: bool = False
    fail_on_findings: bool = False

    @field_validator("ignore_words", mode="before")
    def _normalise_ignore_words(cls, value: object) -> frozenset[str]:
        if value is None or isinstance(value, str):
            return split_ignore_words(value)
        if isinstance(value, Iterable):
            return split_ignore_words(value)
        raise ValueError("ignore_words must be a string or an iterable of strings")

    @property
    def scans_all_kinds(self) -> bool:
        return not (self.functions_only or self.constants_only or self.variables_only)
