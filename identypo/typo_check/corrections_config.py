"""Corrections layered over the codespell corpus.

The default dictionary is codespell's bundled ``dictionary.txt``. Entries here
are applied on top of it: they pin the suggestion for misspellings whose first
codespell candidate is ambiguous, and add a few identifier-specific typos the
corpus does not carry. Keys are lowercase misspellings, values the lowercase
correct spelling. Values containing a hyphen are rejoined in identifier style
by the corrector (``alltime`` becomes ``allTime``).
"""

CODESPELL_PACKAGE = "codespell_lib"
CODESPELL_DICTIONARY = ("data", "dictionary.txt")

DEFAULT_CORRECTIONS = {
    "acheivement": "achievement",
    "alltime": "all-time",
    "authorithy": "authority",
    "begining": "beginning",
    "creater": "creator",
    "inital": "initial",
    "nto": "not",
    "propogate": "propagate",
    "recieve": "receive",
    "seperate": "separate",
    "succesful": "successful",
}
