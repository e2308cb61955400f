"""Correction source backed by pyspellchecker's word-frequency dictionary.

Unlike the codespell table, which only knows listed misspellings,
pyspellchecker flags any word missing from its frequency list and proposes the
most likely edit-distance candidate. Words are only checked once they pass
``unknown()``; short words and words with digits are skipped because inside
identifiers they are mostly abbreviations (``os``, ``cfg``, ``utf8``).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from spellchecker import SpellChecker

LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_WORD_LENGTH = 4


def spell_checker_language(language: str) -> str:
    """Map a LanguageTool style code such as ``en-US`` to pyspellchecker's ``en``."""

    return language.split("-")[0].strip().lower() or "en"


class SpellCheckerCorrections:
    """Correction source that asks pyspellchecker about one word at a time."""

    def __init__(
        self,
        checker: Any | None = None,
        *,
        language: str = "en",
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
    ) -> None:
        if checker is None:
            checker = SpellChecker(language=spell_checker_language(language))
        self.checker = checker
        self.min_word_length = min_word_length
        self._removed: set[str] = set()
        self._cache: dict[str, str | None] = {}

    def remove_rules(self, words: Iterable[str]) -> None:
        for word in words:
            self._removed.add(word.lower())

    def suggest(self, word: str) -> str | None:
        if word in self._removed:
            return None
        if len(word) < self.min_word_length or not word.isalpha():
            return None
        if word not in self._cache:
            self._cache[word] = self._query(word)
        return self._cache[word]

    def _query(self, word: str) -> str | None:
        if not self.checker.unknown([word]):
            return None
        candidate = self.checker.correction(word)
        if not candidate or candidate == word:
            LOGGER.debug("No spelling candidate for %r", word)
            return None
        return candidate.lower()
