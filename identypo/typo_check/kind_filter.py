"""Decide which identifier kinds take part in a scan."""

from __future__ import annotations

from identypo.models import IdentifierKind, ScanConfiguration


def accepts(kind: IdentifierKind, config: ScanConfiguration) -> bool:
    """Return True when identifiers of ``kind`` should be checked.

    With no ``*_only`` flag set every kind is accepted. Otherwise each active
    flag admits its own kind and OTHER is always rejected.
    """

    if config.scans_all_kinds:
        return True
    if kind == IdentifierKind.FUNCTION:
        return config.functions_only
    if kind == IdentifierKind.VARIABLE:
        return config.variables_only
    if kind == IdentifierKind.CONSTANT:
        return config.constants_only
    # Packages, labels, type declarations and unresolved names have no flag.
    return False
