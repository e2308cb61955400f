"""Public model exports for the project.

Keep the :mod:`identypo` namespace clean: tests and other modules should import
``from identypo.models import Identifier, IdentifierKind``.
"""

from __future__ import annotations

from .config import ScanConfiguration
from .diagnostic import CorrectionResult, Diagnostic
from .enums import IdentifierKind
from .identifier import Identifier

__all__ = [
    "CorrectionResult",
    "Diagnostic",
    "Identifier",
    "IdentifierKind",
    "ScanConfiguration",
]
