"""Exception hierarchy."""

from __future__ import annotations


class OutlineError(Exception):
    """Base class for docoutline errors."""


class SymbolSourceError(OutlineError):
    """Raised by a symbol source that could not produce symbols."""


class TextStoreError(OutlineError):
    """Raised when a text store cannot read or apply an edit."""


class DocumentNotFoundError(TextStoreError):
    """Raised when a document is not present in the store."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Document '{uri}' not found")
        self.uri = uri


class StaleDocumentError(TextStoreError):
    """Raised when an edit was computed against an outdated snapshot."""

    def __init__(self, uri: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Document '{uri}' changed (expected version {expected}, found {actual})"
        )
        self.uri = uri
        self.expected = expected
        self.actual = actual
