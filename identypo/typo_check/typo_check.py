"""Identifier typo checks for Python source trees.

This module drives the scan: it resolves the command-line targets to Python
files, extracts their identifiers, filters them by kind, splits each name into
words, looks every word up in the correction dictionary and reports each
misspelling in input order. ``main`` wires the pipeline to the command line.
"""

from __future__ import annotations

import argparse
import csv
import logging
import os
import sys
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from identypo.errors import CorrectionBackendError, IdentypoError
from identypo.models import Diagnostic, Identifier, ScanConfiguration
from identypo.models.config import split_ignore_words
from identypo.source import collect_identifiers, resolve_targets

from .corrector import CorrectionSource, Corrector, DictionaryCorrections, load_corrections_file
from .kind_filter import accepts
from .reporter import DiagnosticReporter
from .report_utils import build_report_csv, build_report_markdown
from .segmenter import segment

LOGGER = logging.getLogger(__name__)

BACKEND_DICTIONARY = "dictionary"
BACKEND_LANGUAGETOOL = "languagetool"
BACKEND_SPELLCHECKER = "spellchecker"
BACKENDS = (BACKEND_DICTIONARY, BACKEND_SPELLCHECKER, BACKEND_LANGUAGETOOL)
DEFAULT_LANGUAGE = "en-US"

ENV_IGNORE = "IDENTYPO_IGNORE"
ENV_BACKEND = "IDENTYPO_BACKEND"
ENV_LANGUAGE = "IDENTYPO_LANGUAGE"


def build_correction_source(
    backend: str = BACKEND_DICTIONARY,
    *,
    dictionaries: Sequence[Path] = (),
    language: str = DEFAULT_LANGUAGE,
    ignored_words: Iterable[str] | None = None,
) -> CorrectionSource:
    """Create the correction source for ``backend``.

    Args:
            backend: ``dictionary`` (codespell corpus), ``spellchecker`` or ``languagetool``
            dictionaries: Extra ``misspelling->correction`` files merged into the codespell table
            language: LanguageTool language code (its prefix selects the pyspellchecker language)
            ignored_words: Words registered as custom spellings with LanguageTool

    The LanguageTool and pyspellchecker modules are only imported when their
    backend is requested.
    """

    if backend == BACKEND_DICTIONARY:
        source = DictionaryCorrections()
        for path in dictionaries:
            source.update(load_corrections_file(path))
        LOGGER.debug("Using dictionary backend with %d rule(s)", len(source))
        return source

    if backend == BACKEND_SPELLCHECKER:
        from .spell_checker import SpellCheckerCorrections

        LOGGER.debug("Using pyspellchecker backend (language: %s)", language)
        try:
            return SpellCheckerCorrections(language=language)
        except ValueError as exc:
            raise CorrectionBackendError(f"could not load pyspellchecker dictionary: {exc}") from exc

    if backend == BACKEND_LANGUAGETOOL:
        from language_tool_python.utils import LanguageToolError

        from .language_tool_manager import LanguageToolCorrections, LanguageToolManager

        manager = LanguageToolManager(
            ignored_words=ignored_words,
            language=language,
            logger=LOGGER,
        )
        LOGGER.debug("Using LanguageTool backend (language: %s)", language)
        try:
            tool = manager.build_tool()
        except LanguageToolError as exc:
            raise CorrectionBackendError(f"could not start LanguageTool: {exc}") from exc
        return LanguageToolCorrections(tool)

    raise ValueError(f"Unknown correction backend: {backend!r}")


def build_corrector(
    config: ScanConfiguration, source: CorrectionSource | None = None
) -> Corrector:
    """Return a compiled corrector with the configured words suppressed."""

    corrector = Corrector(source)
    corrector.suppress(sorted(config.ignore_words))
    corrector.compile()
    return corrector


def scan(
    identifiers: Iterable[Identifier],
    config: ScanConfiguration,
    *,
    source: CorrectionSource | None = None,
    reporter: DiagnosticReporter | None = None,
) -> bool:
    """Check ``identifiers`` in order and report every misspelled word.

    Returns True when at least one diagnostic was recorded.
    """

    corrector = build_corrector(config, source)
    reporter = reporter if reporter is not None else DiagnosticReporter()

    checked = 0
    for identifier in identifiers:
        if not accepts(identifier.kind, config):
            continue
        checked += 1
        for word in segment(identifier.name):
            result = corrector.lookup(word)
            if not result.matched:
                continue
            reporter.record(
                Diagnostic(
                    file=identifier.file,
                    line=identifier.line,
                    misspelled_word=result.original,
                    suggestion=result.suggestion,
                    identifier_name=identifier.name,
                )
            )

    LOGGER.debug("Checked %d identifier(s); %d finding(s)", checked, len(reporter))
    return reporter.has_findings()


def check_for_identifier_typos(
    targets: Sequence[str] | None,
    config: ScanConfiguration,
    *,
    source: CorrectionSource | None = None,
    reporter: DiagnosticReporter | None = None,
) -> bool:
    """Resolve ``targets``, extract their identifiers and scan them.

    Every file is parsed before scanning starts, so a target that cannot be
    resolved or parsed raises :class:`~identypo.errors.TargetResolutionError`
    without any diagnostic being emitted.
    """

    files = resolve_targets(targets, include_tests=config.include_tests)
    identifiers = collect_identifiers(files)
    return scan(identifiers, config, source=source, reporter=reporter)


def write_reports(diagnostics: Iterable[Diagnostic], report_path: Path) -> Path:
    """Write the Markdown report to ``report_path`` and a CSV beside it."""

    diagnostic_list = list(diagnostics)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(build_report_markdown(diagnostic_list), encoding="utf-8")

    csv_path = report_path.with_suffix(".csv")
    with csv_path.open("w", encoding="utf-8", newline="") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerows(build_report_csv(diagnostic_list))

    LOGGER.debug("Reports written to %s and %s", report_path, csv_path)
    return report_path


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "t", "true", "yes", "y"}:
        return True
    if lowered in {"0", "f", "false", "no", "n"}:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


# Switches that also accept the "-name=BOOL" form.
_SWITCH_OPTIONS = frozenset(
    {
        "-functions",
        "--functions",
        "-constants",
        "--constants",
        "-variables",
        "--variables",
        "-set_exit_status",
        "--set-exit-status",
    }
)


def _expand_switches(arguments: list[str]) -> list[str]:
    """Rewrite ``-functions=true`` as ``-functions`` and drop ``-functions=false``."""

    expanded: list[str] = []
    for index, argument in enumerate(arguments):
        if argument == "--":
            expanded.extend(arguments[index:])
            break
        name, separator, value = argument.partition("=")
        if separator and name in _SWITCH_OPTIONS:
            if _parse_bool(value):
                expanded.append(name)
            continue
        expanded.append(argument)
    return expanded


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="identypo",
        description="Find misspelled words inside Python identifiers.",
        epilog=(
            "By default every identifier is checked (functions, calls, variables, "
            "constants, classes, imports). -functions, -constants and -variables "
            "restrict the scan to those kinds."
        ),
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help="Files, directories, dotted module names or 'path/...' for a recursive scan "
        "(default: current directory)",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        dest="ignore",
        metavar="WORDS",
        help='Comma separated words whose corrections are ignored (e.g. -i "nto,creater"); '
        f"merged with ${ENV_IGNORE}",
    )
    parser.add_argument(
        "-tests",
        "--tests",
        type=_parse_bool,
        default=True,
        metavar="BOOL",
        help="Include test files (test_*.py, *_test.py, conftest.py) found in directories (default: true)",
    )
    parser.add_argument(
        "-functions",
        "--functions",
        action="store_true",
        help="Check function declarations only (also -functions=BOOL)",
    )
    parser.add_argument(
        "-constants",
        "--constants",
        action="store_true",
        help="Check constants only",
    )
    parser.add_argument(
        "-variables",
        "--variables",
        action="store_true",
        help="Check variables only",
    )
    parser.add_argument(
        "-set_exit_status",
        "--set-exit-status",
        dest="set_exit_status",
        action="store_true",
        help="Exit with status 1 if any typo is found (also -set_exit_status=BOOL)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help=f"Correction backend (default: ${ENV_BACKEND} or {BACKEND_DICTIONARY})",
    )
    parser.add_argument(
        "--language",
        default=None,
        help=f"LanguageTool language code (default: ${ENV_LANGUAGE} or {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--dictionary",
        action="append",
        type=Path,
        dest="dictionaries",
        default=[],
        metavar="PATH",
        help="Extra 'misspelling->correction' file for the dictionary backend (repeatable)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Also write a Markdown report to this path and a CSV next to it",
    )
    parser.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Load environment defaults from this file (default: .env in the working directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    arguments = list(argv) if argv is not None else sys.argv[1:]
    try:
        arguments = _expand_switches(arguments)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    return parser.parse_args(arguments)


def _load_environment(dotenv_path: Path | None) -> None:
    if dotenv_path is not None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)


def build_configuration(args: argparse.Namespace) -> ScanConfiguration:
    """Combine command-line flags with ``IDENTYPO_IGNORE``."""

    ignore_words = split_ignore_words(args.ignore) | split_ignore_words(
        os.environ.get(ENV_IGNORE)
    )
    return ScanConfiguration(
        ignore_words=ignore_words,
        include_tests=args.tests,
        functions_only=args.functions,
        constants_only=args.constants,
        variables_only=args.variables,
        fail_on_findings=args.set_exit_status,
    )


def _close_source(source: Any) -> None:
    if hasattr(source, "close"):
        source.close()


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    _load_environment(args.dotenv)

    backend = args.backend or os.environ.get(ENV_BACKEND) or BACKEND_DICTIONARY
    if backend not in BACKENDS:
        LOGGER.error("Unknown correction backend %r (expected one of: %s)", backend, ", ".join(BACKENDS))
        return 1
    language = args.language or os.environ.get(ENV_LANGUAGE) or DEFAULT_LANGUAGE

    config = build_configuration(args)
    reporter = DiagnosticReporter()

    try:
        source = build_correction_source(
            backend,
            dictionaries=args.dictionaries,
            language=language,
            ignored_words=config.ignore_words,
        )
        try:
            found = check_for_identifier_typos(
                args.targets, config, source=source, reporter=reporter
            )
        finally:
            _close_source(source)
    except IdentypoError as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.report is not None:
        write_reports(reporter.diagnostics, args.report)

    if config.fail_on_findings and found:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
