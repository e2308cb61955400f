"""Case-aware correction lookup with a suppressible rule set.

The corrector owns case handling and suppression only. The actual corpus is
provided by a :class:`CorrectionSource` such as :class:`DictionaryCorrections`
(codespell's misspelling dictionary plus optional files), the pyspellchecker
source in :mod:`identypo.typo_check.spell_checker` or the LanguageTool-backed
source in :mod:`identypo.typo_check.language_tool_manager`.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Iterable, Mapping, Protocol

from identypo.errors import CorrectorStateError, DictionaryFormatError
from identypo.models import CorrectionResult

from .corrections_config import CODESPELL_DICTIONARY, CODESPELL_PACKAGE, DEFAULT_CORRECTIONS

LOGGER = logging.getLogger(__name__)

_WORD_SPLIT_RE = re.compile(r"[-\s]+")


class CorrectionSource(Protocol):
    """Anything able to suggest a correction for a lowercase word."""

    def suggest(self, word: str) -> str | None:
        ...

    def remove_rules(self, words: Iterable[str]) -> None:
        ...


class DictionaryCorrections:
    """Correction source backed by an in-memory misspelling table.

    Without an explicit table the codespell corpus is loaded and
    :data:`DEFAULT_CORRECTIONS` is applied over it.
    """

    def __init__(self, corrections: Mapping[str, str] | None = None) -> None:
        if corrections is None:
            corrections = {**load_codespell_corrections(), **DEFAULT_CORRECTIONS}
        self._rules: dict[str, str] = {
            key.strip().lower(): value.strip().lower()
            for key, value in corrections.items()
            if key.strip() and value.strip()
        }

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._rules

    def update(self, corrections: Mapping[str, str]) -> None:
        for key, value in corrections.items():
            self._rules[key.strip().lower()] = value.strip().lower()

    def suggest(self, word: str) -> str | None:
        return self._rules.get(word)

    def remove_rules(self, words: Iterable[str]) -> None:
        for word in words:
            self._rules.pop(word.lower(), None)


def parse_corrections(
    lines: Iterable[str], origin: str, *, strict: bool = True
) -> dict[str, str]:
    """Parse ``misspelling->correction`` lines.

    Blank lines and lines starting with ``#`` are skipped. When several
    comma-separated corrections are listed the first one is used, which also
    drops the trailing reason codespell attaches to disabled entries. Malformed
    lines raise :class:`DictionaryFormatError` unless ``strict`` is false, in
    which case they are skipped.
    """

    corrections: dict[str, str] = {}
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        misspelling, separator, candidates = line.partition("->")
        misspelling = misspelling.strip()
        correction = next(
            (candidate.strip() for candidate in candidates.split(",") if candidate.strip()),
            "",
        )
        if not separator or not misspelling or not correction:
            if not strict:
                continue
            raise DictionaryFormatError(
                f"{origin}:{line_number}: expected 'misspelling->correction', got {line!r}"
            )
        corrections[misspelling.lower()] = correction.lower()
    return corrections


def load_corrections_file(path: Path) -> dict[str, str]:
    """Read a ``misspelling->correction`` table from ``path``."""

    with path.open("r", encoding="utf-8") as handle:
        corrections = parse_corrections(handle, str(path))

    LOGGER.debug("Loaded %d correction(s) from %s", len(corrections), path)
    return corrections


@lru_cache(maxsize=1)
def _codespell_corrections() -> dict[str, str]:
    dictionary = resources.files(CODESPELL_PACKAGE)
    for part in CODESPELL_DICTIONARY:
        dictionary = dictionary / part
    with dictionary.open("r", encoding="utf-8") as handle:
        corrections = parse_corrections(handle, "codespell dictionary", strict=False)

    LOGGER.debug("Loaded %d correction(s) from the codespell dictionary", len(corrections))
    return corrections


def load_codespell_corrections() -> dict[str, str]:
    """Return a copy of codespell's bundled misspelling table."""

    return dict(_codespell_corrections())


def restore_case(original: str, correction: str) -> str:
    """Return ``correction`` cased like ``original`` and joined as an identifier.

    Multi-word corrections are joined in camelCase, or in UPPER_SNAKE_CASE when
    the original word is entirely uppercase.
    """

    parts = [part for part in _WORD_SPLIT_RE.split(correction) if part]
    if not parts:
        return correction

    if len(original) > 1 and original.isupper():
        return "_".join(part.upper() for part in parts)

    head, *tail = parts
    joined = head + "".join(part[:1].upper() + part[1:] for part in tail)
    if original[:1].isupper():
        return joined[:1].upper() + joined[1:]
    return joined


class Corrector:
    """Case-insensitive lookup over a source whose rules can be suppressed.

    Call :meth:`suppress` any number of times, then :meth:`compile`; after
    compilation the rule set is frozen for the remainder of the scan.
    """

    def __init__(self, source: CorrectionSource | None = None) -> None:
        self.source = source if source is not None else DictionaryCorrections()
        self._suppressed: set[str] = set()
        self._compiled = False

    @property
    def compiled(self) -> bool:
        return self._compiled

    @property
    def suppressed(self) -> frozenset[str]:
        return frozenset(self._suppressed)

    def suppress(self, words: Iterable[str]) -> None:
        if self._compiled:
            raise CorrectorStateError("cannot suppress corrections after compile()")
        for word in words:
            cleaned = word.strip().lower()
            if cleaned:
                self._suppressed.add(cleaned)

    def compile(self) -> None:
        if self._compiled:
            return
        if self._suppressed:
            LOGGER.debug("Suppressing %d correction rule(s)", len(self._suppressed))
            self.source.remove_rules(sorted(self._suppressed))
        self._compiled = True

    def lookup(self, word: str) -> CorrectionResult:
        if not self._compiled:
            self.compile()

        folded = word.lower()
        if not folded or folded in self._suppressed:
            return CorrectionResult(original=word, suggestion=word, matched=False)

        correction = self.source.suggest(folded)
        if not correction or correction == folded:
            return CorrectionResult(original=word, suggestion=word, matched=False)

        return CorrectionResult(
            original=word,
            suggestion=restore_case(word, correction),
            matched=True,
        )
