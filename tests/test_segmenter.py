from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from identypo.typo_check.segmenter import segment


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("authorithyLoop", ["authorithy", "Loop"]),
        ("FooBeginingBar", ["Foo", "Begining", "Bar"]),
        ("fooBegining", ["foo", "Begining"]),
        ("begining", ["begining"]),
        ("Begining", ["Begining"]),
        ("HTTPServer", ["HTTP", "Server"]),
        ("parseHTTP", ["parse", "HTTP"]),
        ("PDFLoader", ["PDF", "Loader"]),
        ("BEGINING_COUNT", ["BEGINING", "COUNT"]),
        ("snake_case_name", ["snake", "case", "name"]),
        ("version2Name", ["version", "2", "Name"]),
        ("__init__", ["init"]),
        ("os.path", ["os", "path"]),
        ("café_begining", ["café", "begining"]),
    ],
)
def test_segment_splits_on_boundaries(name: str, expected: list[str]) -> None:
    assert segment(name) == expected


@pytest.mark.parametrize("name", ["", "x", "X", "_", "__"])
def test_segment_without_words_returns_name(name: str) -> None:
    assert segment(name) == [name]


def test_segment_is_repeatable() -> None:
    names = ["FooBeginingBar", "HTTPServer", "snake_case", "a1B2c3"]
    first = [segment(name) for name in names]
    second = [segment(name) for name in reversed(names)]
    assert first == list(reversed(second))


def test_segment_preserves_every_character_of_words() -> None:
    name = "getHTTPResponseCode2XX"
    assert "".join(segment(name)) == name
    assert segment(name) == ["get", "HTTP", "Response", "Code", "2", "XX"]
