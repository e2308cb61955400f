"""identypo: find misspelled words inside source-code identifiers."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "models",
    "source",
    "typo_check",
]
