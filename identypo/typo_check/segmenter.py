"""Split identifier names into their constituent words.

Words are delimited by case transitions, letter/digit boundaries and any
non-alphanumeric separator. An uppercase run that is followed by a lowercase
continuation hands its last capital to the next word, so ``HTTPServer``
becomes ``HTTP`` and ``Server``.
"""

from __future__ import annotations

_LOWER = 1
_UPPER = 2
_DIGIT = 3
_OTHER = 4


def _char_class(char: str) -> int:
    if char.isupper():
        return _UPPER
    if char.isdigit():
        return _DIGIT
    # Uncased letters (e.g. CJK) stay inside the surrounding word.
    if char.islower() or char.isalpha():
        return _LOWER
    return _OTHER


def _split_runs(name: str) -> list[list[str]]:
    runs: list[list[str]] = []
    last_class: int | None = None
    for char in name:
        char_class = _char_class(char)
        if char_class == last_class:
            runs[-1].append(char)
        else:
            runs.append([char])
        last_class = char_class
    return runs


def segment(name: str) -> list[str]:
    """Return the words of ``name`` in left-to-right order.

    Separators are not emitted. A name without any alphanumeric word, including
    the empty string, segments to itself.
    """

    runs = _split_runs(name)

    for index in range(len(runs) - 1):
        current, following = runs[index], runs[index + 1]
        if (
            current
            and _char_class(current[0]) == _UPPER
            and _char_class(following[0]) == _LOWER
        ):
            following.insert(0, current.pop())

    words = ["".join(run) for run in runs if run and _char_class(run[0]) != _OTHER]
    return words or [name]
