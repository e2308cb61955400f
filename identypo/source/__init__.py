"""Identifier providers: locate Python sources and extract their names."""

from __future__ import annotations

from .python_identifiers import collect_identifiers, extract_identifiers, parse_source_file
from .targets import is_test_file, resolve_targets

__all__ = [
    "collect_identifiers",
    "extract_identifiers",
    "is_test_file",
    "parse_source_file",
    "resolve_targets",
]
