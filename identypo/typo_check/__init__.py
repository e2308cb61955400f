"""Identifier typo check package exports.

This package exposes the key helpers used by other parts of the project
so callers can import from ``identypo.typo_check``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .corrector import Corrector, DictionaryCorrections, load_corrections_file
    from .corrections_config import DEFAULT_CORRECTIONS
    from .kind_filter import accepts
    from .language_tool_manager import LanguageToolCorrections, LanguageToolManager
    from .report_utils import build_report_csv, build_report_markdown
    from .reporter import DiagnosticReporter
    from .segmenter import segment
    from .spell_checker import SpellCheckerCorrections
    from .typo_check import (
        build_correction_source,
        build_corrector,
        check_for_identifier_typos,
        main,
        scan,
    )

__all__ = [
    "accepts",
    "build_correction_source",
    "build_corrector",
    "build_report_csv",
    "build_report_markdown",
    "check_for_identifier_typos",
    "Corrector",
    "DEFAULT_CORRECTIONS",
    "DiagnosticReporter",
    "DictionaryCorrections",
    "LanguageToolCorrections",
    "LanguageToolManager",
    "load_corrections_file",
    "main",
    "scan",
    "segment",
    "SpellCheckerCorrections",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "accepts": (".kind_filter", "accepts"),
    "build_correction_source": (".typo_check", "build_correction_source"),
    "build_corrector": (".typo_check", "build_corrector"),
    "build_report_csv": (".report_utils", "build_report_csv"),
    "build_report_markdown": (".report_utils", "build_report_markdown"),
    "check_for_identifier_typos": (".typo_check", "check_for_identifier_typos"),
    "Corrector": (".corrector", "Corrector"),
    "DEFAULT_CORRECTIONS": (".corrections_config", "DEFAULT_CORRECTIONS"),
    "DiagnosticReporter": (".reporter", "DiagnosticReporter"),
    "DictionaryCorrections": (".corrector", "DictionaryCorrections"),
    "LanguageToolCorrections": (".language_tool_manager", "LanguageToolCorrections"),
    "LanguageToolManager": (".language_tool_manager", "LanguageToolManager"),
    "load_corrections_file": (".corrector", "load_corrections_file"),
    "main": (".typo_check", "main"),
    "scan": (".typo_check", "scan"),
    "segment": (".segmenter", "segment"),
    "SpellCheckerCorrections": (".spell_checker", "SpellCheckerCorrections"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    Importing the package stays cheap; ``language_tool_python`` and
    ``spellchecker`` are only loaded once their correction backend is built.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(f"identypo.typo_check{module_name}")
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
