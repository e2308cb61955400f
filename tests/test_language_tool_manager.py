from __future__ import annotations

import logging
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from language_tool_python.utils import LanguageToolError

import identypo.typo_check.language_tool_manager as ltm
from identypo.errors import CorrectionBackendError
from identypo.typo_check.typo_check import main

KNOWN_MISSPELLINGS = {
    "begining": ["beginning", "beginnings"],
    "succesful": ["successful"],
}


def _match(word: str, replacements: list[str], *, issue: str = "misspelling", offset: int = 0):
    return SimpleNamespace(
        ruleIssueType=issue,
        offset=offset,
        errorLength=len(word),
        replacements=replacements,
    )


class DummyTool:
    def __init__(self, matches_by_word: dict | None = None) -> None:
        self.matches_by_word = matches_by_word or {}
        self.calls: list[str] = []
        self.closed = False

    def check(self, text: str):
        self.calls.append(text)
        return self.matches_by_word.get(text, [])

    def close(self) -> None:
        self.closed = True


def test_build_tool_passes_config_and_spellings(monkeypatch) -> None:
    captured: dict = {}

    class DummyLanguageTool:
        def __init__(self, language, *args, **kwargs):
            captured["language"] = language
            captured["kwargs"] = kwargs

    monkeypatch.setattr(ltm.language_tool_python, "LanguageTool", DummyLanguageTool)

    manager = ltm.LanguageToolManager(ignored_words=["Nto", " creater ", ""], language="en-GB")
    tool = manager.build_tool()

    assert isinstance(tool, DummyLanguageTool)
    assert captured["language"] == "en-GB"
    assert captured["kwargs"]["config"]["maxCheckTimeMillis"] == 10000
    assert captured["kwargs"]["newSpellings"] == ["creater", "nto"]
    assert captured["kwargs"]["new_spellings_persist"] is False
    assert manager.ignored_words == ("creater", "nto")


def test_build_tool_without_ignored_words_skips_spellings(monkeypatch) -> None:
    captured: dict = {}

    class DummyLanguageTool:
        def __init__(self, language, *args, **kwargs):
            captured["kwargs"] = kwargs

    monkeypatch.setattr(ltm.language_tool_python, "LanguageTool", DummyLanguageTool)

    ltm.LanguageToolManager().build_tool()

    assert "newSpellings" not in captured["kwargs"]


def test_build_tool_falls_back_when_config_unsupported(monkeypatch) -> None:
    attempts: list[dict] = []

    class OldLanguageTool:
        def __init__(self, language, **kwargs):
            attempts.append(kwargs)
            if "config" in kwargs:
                raise TypeError("unexpected keyword argument 'config'")

    monkeypatch.setattr(ltm.language_tool_python, "LanguageTool", OldLanguageTool)

    tool = ltm.LanguageToolManager(ignored_words=["nto"]).build_tool()

    assert isinstance(tool, OldLanguageTool)
    assert len(attempts) == 2
    assert "config" not in attempts[1]
    assert attempts[1]["newSpellings"] == ["nto"]


def test_suggest_uses_whole_word_misspelling_matches() -> None:
    tool = DummyTool(
        {
            "begining": [_match("begining", ["beginning", "beginnings"])],
            "hte": [_match("hte", ["the"], issue="grammar")],
            "teh": [_match("teh", ["the"], offset=1)],
            "abc": [_match("abc", [])],
        }
    )
    corrections = ltm.LanguageToolCorrections(tool)

    assert corrections.suggest("begining") == "beginning"
    assert corrections.suggest("hte") is None
    assert corrections.suggest("teh") is None
    assert corrections.suggest("abc") is None
    assert corrections.suggest("beginning") is None


def test_suggest_caches_answers() -> None:
    tool = DummyTool({"begining": [_match("begining", ["Beginning"])]})
    corrections = ltm.LanguageToolCorrections(tool)

    assert corrections.suggest("begining") == "beginning"
    assert corrections.suggest("begining") == "beginning"
    assert tool.calls == ["begining"]


def test_removed_words_are_never_checked() -> None:
    tool = DummyTool({"begining": [_match("begining", ["beginning"])]})
    corrections = ltm.LanguageToolCorrections(tool)

    corrections.remove_rules(["Begining"])

    assert corrections.suggest("begining") is None
    assert tool.calls == []


def test_transient_errors_are_retried(monkeypatch, caplog) -> None:
    sleeps: list[float] = []
    monkeypatch.setattr(ltm.time, "sleep", sleeps.append)

    class FlakyTool(DummyTool):
        def check(self, text: str):
            self.calls.append(text)
            if len(self.calls) < 3:
                raise LanguageToolError("server unavailable")
            return [_match(text, ["beginning"])]

    tool = FlakyTool()
    corrections = ltm.LanguageToolCorrections(tool, base_delay=0.5)

    with caplog.at_level(logging.WARNING, logger="identypo.typo_check.language_tool_manager"):
        assert corrections.suggest("begining") == "beginning"

    assert len(tool.calls) == 3
    assert len(sleeps) == 2
    assert all(delay <= 30.0 for delay in sleeps)
    assert sum("retrying" in record.getMessage() for record in caplog.records) == 2


def test_exhausted_retries_raise_backend_error(monkeypatch) -> None:
    monkeypatch.setattr(ltm.time, "sleep", lambda _delay: None)

    class DownTool(DummyTool):
        def check(self, text: str):
            self.calls.append(text)
            raise ConnectionError("refused")

    tool = DownTool()
    corrections = ltm.LanguageToolCorrections(tool, max_retries=2)

    with pytest.raises(CorrectionBackendError):
        corrections.suggest("begining")
    assert len(tool.calls) == 3


def test_non_transient_errors_propagate() -> None:
    class BrokenTool(DummyTool):
        def check(self, text: str):
            raise KeyError(text)

    corrections = ltm.LanguageToolCorrections(BrokenTool())

    with pytest.raises(KeyError):
        corrections.suggest("begining")


def test_close_closes_tool() -> None:
    tool = DummyTool()
    ltm.LanguageToolCorrections(tool).close()
    assert tool.closed is True


def test_languagetool_backend_through_main(tmp_path: Path, monkeypatch, caplog) -> None:
    created: list = []

    class DummyLanguageTool(DummyTool):
        def __init__(self, language, **kwargs):
            super().__init__(
                {word: [_match(word, fixes)] for word, fixes in KNOWN_MISSPELLINGS.items()}
            )
            self.language = language
            self.kwargs = kwargs
            created.append(self)

    monkeypatch.setattr(ltm.language_tool_python, "LanguageTool", DummyLanguageTool)
    monkeypatch.delenv("IDENTYPO_BACKEND", raising=False)
    monkeypatch.delenv("IDENTYPO_IGNORE", raising=False)
    monkeypatch.delenv("IDENTYPO_LANGUAGE", raising=False)
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "module.py"
    source.write_text("BeginingState = 1\nsuccesful = True\n", encoding="utf-8")
    caplog.set_level(logging.INFO)

    exit_code = main(
        [
            "--backend",
            "languagetool",
            "--language",
            "en-GB",
            "-i",
            "succesful",
            "-set_exit_status",
            str(source),
        ]
    )

    assert exit_code == 1
    [tool] = created
    assert tool.language == "en-GB"
    assert tool.kwargs["newSpellings"] == ["succesful"]
    assert tool.closed is True
    assert "succesful" not in tool.calls
    messages = [
        record.getMessage()
        for record in caplog.records
        if record.name == "identypo.typo_check.reporter"
    ]
    assert messages == [f'{source}:1 "Begining" should be Beginning in BeginingState']


def test_languagetool_startup_failure_is_reported(tmp_path: Path, monkeypatch, caplog) -> None:
    class FailingLanguageTool:
        def __init__(self, language, **kwargs):
            raise LanguageToolError("java not found")

    monkeypatch.setattr(ltm.language_tool_python, "LanguageTool", FailingLanguageTool)
    monkeypatch.delenv("IDENTYPO_BACKEND", raising=False)
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "module.py"
    source.write_text("begining = 1\n", encoding="utf-8")
    caplog.set_level(logging.INFO)

    assert main(["--backend", "languagetool", str(source)]) == 1
    assert "java not found" in caplog.text
