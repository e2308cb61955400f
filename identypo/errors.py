"""Exception hierarchy for identypo."""

from __future__ import annotations


class IdentypoError(Exception):
    """Base class for errors reported to the command-line user."""


class TargetResolutionError(IdentypoError):
    """A scan target could not be located, read or parsed."""


class DictionaryFormatError(IdentypoError):
    """A corrections file contains a malformed entry."""


class CorrectorStateError(IdentypoError):
    """The corrector was asked to change after it was compiled."""


class CorrectionBackendError(IdentypoError):
    """The correction backend could not be started or stopped answering."""
