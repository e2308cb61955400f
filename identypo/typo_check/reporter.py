"""Ordered diagnostic reporting.

Each recorded diagnostic is written immediately to the module logger in the
fixed ``<file>:<line> "<word>" should be <suggestion> in <identifier>`` format
and kept in recording order for report builders.
"""

from __future__ import annotations

import logging

from identypo.models import Diagnostic

LOGGER = logging.getLogger(__name__)


class DiagnosticReporter:
    """Collects diagnostics in the order they are recorded."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER
        self._diagnostics: list[Diagnostic] = []

    def record(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)
        self.logger.info("%s", diagnostic.format_line())

    def has_findings(self) -> bool:
        return bool(self._diagnostics)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)
