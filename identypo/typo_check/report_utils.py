"""Utilities for generating identifier typo reports.

This module centralises the Markdown and CSV report builders used by the
``--report`` option. Keeping this logic separate from the scan makes it easy
to test independently; the builders never reorder diagnostics within a file.
"""

from __future__ import annotations

from typing import Iterable

from identypo.models import Diagnostic

CSV_HEADERS = [
    "File",
    "Line",
    "Word",
    "Suggestion",
    "Identifier",
]


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|")


def _group_by_file(diagnostics: Iterable[Diagnostic]) -> dict[str, list[Diagnostic]]:
    # dict preserves first-seen file order, which follows scan order.
    files: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        files.setdefault(diagnostic.file, []).append(diagnostic)
    return files


def build_report_markdown(diagnostics: Iterable[Diagnostic]) -> str:
    """Convert the recorded diagnostics into Markdown output."""

    diagnostic_list = list(diagnostics)
    by_file = _group_by_file(diagnostic_list)

    word_totals: dict[str, int] = {}
    for diagnostic in diagnostic_list:
        key = diagnostic.misspelled_word.lower()
        word_totals[key] = word_totals.get(key, 0) + 1

    lines: list[str] = []
    lines.append("# Identifier Typo Report")
    lines.append("")
    lines.append(f"- Files with findings: {len(by_file)}")
    lines.append(f"- Total findings: {len(diagnostic_list)}")

    lines.append("")
    lines.append("## Totals by Word")
    if word_totals:
        for word in sorted(word_totals):
            lines.append(f"- {word}: {word_totals[word]} occurrence(s)")
    else:
        lines.append("- No misspellings found.")

    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## File Details")
    if not by_file:
        lines.append("")
        lines.append("_No findings._")
        return "\n".join(lines)

    for filename, file_diagnostics in by_file.items():
        lines.append("")
        lines.append(f"### {filename}")
        lines.append("")
        lines.append(f"Found {len(file_diagnostics)} finding(s).")
        lines.append("")
        lines.append("| Line | Word | Suggestion | Identifier |")
        lines.append("| --- | --- | --- | --- |")
        for diagnostic in file_diagnostics:
            lines.append(
                f"| {diagnostic.line} | {_escape_cell(diagnostic.misspelled_word)} "
                f"| {_escape_cell(diagnostic.suggestion)} "
                f"| `{_escape_cell(diagnostic.identifier_name)}` |"
            )

    return "\n".join(lines)


def build_report_csv(diagnostics: Iterable[Diagnostic]) -> list[list[str]]:
    """Convert the recorded diagnostics into CSV data.

    Returns a list of rows, where each row is a list of string values.
    The first row contains the column headers.
    """

    rows: list[list[str]] = [list(CSV_HEADERS)]
    for diagnostic in diagnostics:
        rows.append([
            diagnostic.file,
            str(diagnostic.line),
            diagnostic.misspelled_word,
            diagnostic.suggestion,
            diagnostic.identifier_name,
        ])
    return rows
