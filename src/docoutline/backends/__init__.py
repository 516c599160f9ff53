"""Text stores the outline core reads from and edits through."""

from __future__ import annotations

from docoutline.backends.filesystem import FilesystemTextStore
from docoutline.backends.memory import InMemoryTextStore
from docoutline.backends.protocol import AsyncTextStoreMixin, EditResult, TextStoreProtocol

__all__ = [
    "AsyncTextStoreMixin",
    "EditResult",
    "FilesystemTextStore",
    "InMemoryTextStore",
    "TextStoreProtocol",
]
