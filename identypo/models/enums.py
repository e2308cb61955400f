"""Enumerations shared by the identifier scanner."""

from __future__ import annotations

from enum import Enum


class IdentifierKind(str, Enum):
    """Syntactic classification of an identifier.

    OTHER covers package names, labels, type declarations and anything the
    provider could not resolve to a function, variable or constant.
    """

    FUNCTION = "FUNCTION"
    VARIABLE = "VARIABLE"
    CONSTANT = "CONSTANT"
    OTHER = "OTHER"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
