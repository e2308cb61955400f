from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from identypo.errors import CorrectorStateError, DictionaryFormatError
from identypo.typo_check.corrections_config import DEFAULT_CORRECTIONS
from identypo.typo_check.corrector import (
    Corrector,
    DictionaryCorrections,
    load_codespell_corrections,
    load_corrections_file,
    parse_corrections,
    restore_case,
)


@pytest.mark.parametrize(
    ("word", "suggestion"),
    [
        ("begining", "beginning"),
        ("Begining", "Beginning"),
        ("BEGINING", "BEGINNING"),
        ("authorithy", "authority"),
        ("Propogate", "Propagate"),
        ("inital", "initial"),
    ],
)
def test_lookup_mirrors_original_case(word: str, suggestion: str) -> None:
    corrector = Corrector()
    corrector.compile()

    result = corrector.lookup(word)

    assert result.matched is True
    assert result.original == word
    assert result.suggestion == suggestion


@pytest.mark.parametrize(
    ("word", "suggestion"),
    [
        ("alltime", "allTime"),
        ("Alltime", "AllTime"),
        ("ALLTIME", "ALL_TIME"),
    ],
)
def test_multi_word_corrections_are_joined_as_identifiers(word: str, suggestion: str) -> None:
    result = Corrector().lookup(word)
    assert result.matched is True
    assert result.suggestion == suggestion


def test_unknown_word_is_not_matched() -> None:
    result = Corrector().lookup("Loop")
    assert result.matched is False
    assert result.suggestion == "Loop"


def test_empty_word_is_not_matched() -> None:
    assert Corrector().lookup("").matched is False


@pytest.mark.parametrize("query", ["propogate", "Propogate", "PROPOGATE", "pRoPoGaTe"])
def test_suppressed_word_never_matches(query: str) -> None:
    corrector = Corrector()
    corrector.suppress({"Propogate"})
    corrector.compile()

    assert corrector.lookup(query).matched is False
    assert corrector.lookup("begining").matched is True


def test_suppression_removes_rule_from_dictionary() -> None:
    source = DictionaryCorrections()
    assert "propogate" in source

    corrector = Corrector(source)
    corrector.suppress(["propogate", "nto"])
    corrector.compile()

    assert "propogate" not in source
    assert "nto" not in source
    assert corrector.suppressed == frozenset({"propogate", "nto"})


def test_suppress_after_compile_raises() -> None:
    corrector = Corrector()
    corrector.compile()
    with pytest.raises(CorrectorStateError):
        corrector.suppress(["begining"])


def test_lookup_compiles_implicitly() -> None:
    corrector = Corrector()
    assert corrector.compiled is False
    corrector.lookup("begining")
    assert corrector.compiled is True


def test_custom_dictionary_source() -> None:
    corrector = Corrector(DictionaryCorrections({"Colour": "Color"}))
    result = corrector.lookup("Colour")
    assert result.matched is True
    assert result.suggestion == "Color"
    assert corrector.lookup("begining").matched is False


def test_dictionary_update_adds_rules() -> None:
    source = DictionaryCorrections({})
    source.update({"Wrold": "world"})
    assert source.suggest("wrold") == "world"
    assert len(source) == 1


def test_restore_case_handles_spaces_and_hyphens() -> None:
    assert restore_case("setup", "set up") == "setUp"
    assert restore_case("Setup", "set-up") == "SetUp"
    assert restore_case("SETUP", "set up") == "SET_UP"
    assert restore_case("x", "y") == "y"


def test_load_corrections_file(tmp_path: Path) -> None:
    table = tmp_path / "extra.txt"
    table.write_text(
        "# project specific typos\n"
        "\n"
        "wrold->world\n"
        "  Recieve -> receive  \n",
        encoding="utf-8",
    )

    assert load_corrections_file(table) == {"wrold": "world", "recieve": "receive"}


def test_load_corrections_file_rejects_malformed_lines(tmp_path: Path) -> None:
    table = tmp_path / "broken.txt"
    table.write_text("wrold->world\nnot a rule\n", encoding="utf-8")

    with pytest.raises(DictionaryFormatError) as excinfo:
        load_corrections_file(table)
    assert "broken.txt:2" in str(excinfo.value)


@pytest.mark.parametrize(
    ("word", "suggestion"),
    [
        ("paramter", "parameter"),
        ("Defualt", "Default"),
        ("LENGHT", "LENGTH"),
    ],
)
def test_default_source_uses_codespell_corpus(word: str, suggestion: str) -> None:
    assert word.lower() not in DEFAULT_CORRECTIONS

    result = Corrector().lookup(word)

    assert result.matched is True
    assert result.suggestion == suggestion


def test_codespell_corpus_is_loaded() -> None:
    corpus = load_codespell_corrections()

    assert len(corpus) > 10000
    assert corpus["paramter"] == "parameter"
    assert all(key == key.lower() and value == value.lower() for key, value in corpus.items())


def test_codespell_corpus_copy_is_independent() -> None:
    load_codespell_corrections().pop("paramter")
    assert "paramter" in load_codespell_corrections()


def test_builtin_corrections_take_precedence() -> None:
    source = DictionaryCorrections()
    for misspelling, correction in DEFAULT_CORRECTIONS.items():
        assert source.suggest(misspelling) == correction


def test_parse_corrections_takes_first_candidate() -> None:
    lines = [
        "aboce->above, abode,\n",
        "clas->class, disabled because of name clash in c++\n",
        "paramter->parameter\n",
    ]

    assert parse_corrections(lines, "inline") == {
        "aboce": "above",
        "clas": "class",
        "paramter": "parameter",
    }


def test_parse_corrections_lenient_mode_skips_bad_lines() -> None:
    lines = ["paramter->parameter\n", "garbage\n", "empty->,\n"]

    assert parse_corrections(lines, "inline", strict=False) == {"paramter": "parameter"}
    with pytest.raises(DictionaryFormatError) as excinfo:
        parse_corrections(lines, "inline")
    assert "inline:2" in str(excinfo.value)
