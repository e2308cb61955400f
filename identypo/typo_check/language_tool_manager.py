"""LanguageTool setup helpers and the LanguageTool correction source.

This module centralises LanguageTool instantiation so that custom spellings
(suppressed words) and shared server configuration stay in one place, and
adapts a LanguageTool instance to the :class:`CorrectionSource` protocol used
by the corrector.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Iterable

import language_tool_python
from language_tool_python.utils import LanguageToolError

from identypo.errors import CorrectionBackendError

LOGGER = logging.getLogger(__name__)

# Identifier words are short; the timeout only guards a stalled local server.
_DEFAULT_CONFIG = {
    "requestLimitPeriodInSeconds": 60,
    "maxCheckTimeMillis": 10000,
}

# Rule issue type LanguageTool assigns to spelling matches.
MISSPELLING_ISSUE_TYPE = "misspelling"

# Transient errors that should trigger a retry
TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    OSError,
    # language_tool_python wraps connection-level failures in LanguageToolError.
    LanguageToolError,
)


def _retry_with_backoff(
    func: Any,
    func_arg: Any,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> Any:
    """Execute a function with exponential backoff retry logic.

    Args:
            func: The function to call (e.g., tool.check)
            func_arg: The argument to pass to func (e.g., a word)
            max_retries: Maximum number of retry attempts (total attempts = max_retries + 1)
            base_delay: Initial delay in seconds
            max_delay: Maximum delay in seconds

    Returns:
            The return value of func

    Raises:
            The last exception if all retries fail
    """
    for attempt in range(max_retries + 1):
        try:
            return func(func_arg)
        except TRANSIENT_ERRORS as exc:
            if attempt >= max_retries:
                LOGGER.error(
                    "LanguageTool lookup failed after %d attempt(s): %s",
                    attempt + 1,
                    exc,
                )
                raise

            delay = base_delay * (2**attempt)
            # Add a small random jitter to avoid a thundering herd
            delay = min(delay * random.uniform(0.75, 1.25), max_delay)

            LOGGER.warning(
                "LanguageTool lookup attempt %d failed (transient error: %s); "
                "retrying in %.1f second(s)...",
                attempt + 1,
                type(exc).__name__,
                delay,
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic completed without returning or raising")


class LanguageToolManager:
    """Factory class responsible for configuring LanguageTool instances."""

    def __init__(
        self,
        *,
        ignored_words: Iterable[str] | None = None,
        language: str = "en-US",
        config: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.language = language
        self.logger = logger or LOGGER
        self.config = dict(config) if config is not None else dict(_DEFAULT_CONFIG)
        self._ignored_words = self._prepare_ignored_words(ignored_words)

    @staticmethod
    def _prepare_ignored_words(words: Iterable[str] | None) -> tuple[str, ...]:
        if not words:
            return tuple()
        cleaned = {word.strip().lower() for word in words if word and word.strip()}
        return tuple(sorted(cleaned))

    @property
    def ignored_words(self) -> tuple[str, ...]:
        return self._ignored_words

    def build_tool(self) -> Any:
        """Build a LanguageTool instance for the configured language."""

        kwargs: dict[str, Any] = {}
        if self.config:
            kwargs["config"] = self.config
        if self._ignored_words:
            self.logger.debug(
                "Registering %d custom spelling(s) with LanguageTool",
                len(self._ignored_words),
            )
            kwargs["newSpellings"] = list(self._ignored_words)
            kwargs["new_spellings_persist"] = False

        try:
            return language_tool_python.LanguageTool(self.language, **kwargs)
        except TypeError:
            if "config" not in kwargs:
                raise
            # Older language_tool_python versions do not accept config.
            kwargs.pop("config")
            self.logger.debug(
                "LanguageTool does not accept 'config'; falling back to default constructor",
            )
            return language_tool_python.LanguageTool(self.language, **kwargs)


class LanguageToolCorrections:
    """Correction source that asks LanguageTool about one word at a time.

    Only ``misspelling`` matches that span the whole word count; the first
    replacement is taken as the suggestion. Answers are cached per word.
    """

    def __init__(self, tool: Any, *, max_retries: int = 3, base_delay: float = 1.0) -> None:
        self.tool = tool
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._removed: set[str] = set()
        self._cache: dict[str, str | None] = {}

    def remove_rules(self, words: Iterable[str]) -> None:
        for word in words:
            self._removed.add(word.lower())

    def suggest(self, word: str) -> str | None:
        if word in self._removed:
            return None
        if word not in self._cache:
            self._cache[word] = self._query(word)
        return self._cache[word]

    def _query(self, word: str) -> str | None:
        try:
            matches = _retry_with_backoff(
                self.tool.check,
                word,
                max_retries=self.max_retries,
                base_delay=self.base_delay,
            )
        except TRANSIENT_ERRORS as exc:
            raise CorrectionBackendError(
                f"LanguageTool could not check {word!r}: {exc}"
            ) from exc
        for match in matches or []:
            if getattr(match, "ruleIssueType", None) != MISSPELLING_ISSUE_TYPE:
                continue
            offset = int(getattr(match, "offset", 0) or 0)
            length = int(getattr(match, "errorLength", 0) or 0)
            if offset != 0 or length != len(word):
                continue
            replacements = list(getattr(match, "replacements", []) or [])
            if replacements:
                return str(replacements[0]).strip().lower() or None
        return None

    def close(self) -> None:
        if hasattr(self.tool, "close"):
            self.tool.close()
