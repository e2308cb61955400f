"""Dataclass representing one identifier occurrence in a source file."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import IdentifierKind


@dataclass(frozen=True)
class Identifier:
    """A single syntactic occurrence of a name.

    The same declared name used at several sites yields several instances.
    """

    name: str
    kind: IdentifierKind
    file: str
    line: int
