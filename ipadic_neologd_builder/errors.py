"""
Exceptions raised while compiling a dictionary.

Every failure aborts the whole compilation pass. The output directory
should be treated as invalid until a later build succeeds.
"""


class DictionaryBuildError(Exception):
    """Base class for all compilation failures."""


class DictionaryIOError(DictionaryBuildError):
    """Raised when an input can't be read or an output can't be written."""


class ParseError(DictionaryBuildError):
    """Raised when a line or field has the wrong shape or a bad number."""


class ContentError(DictionaryBuildError):
    """Raised when required data is missing or inconsistent."""


class SerializeError(DictionaryBuildError):
    """Raised when a value can't be encoded into its binary layout."""


class IndexBuildError(DictionaryBuildError):
    """Raised when the surface-form index can't be constructed."""
