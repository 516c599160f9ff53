"""Protocol definitions for pluggable text stores.

A text store is the host's document storage. The outline core only needs to read an
immutable snapshot and to apply a single :class:`~docoutline.models.LineEdit` atomically:
either the whole edit lands or the document is left untouched.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

from docoutline.models.document import LineEdit, TextDocument


@dataclass
class EditResult:
    """Result from edit operations."""

    error: str | None = None
    uri: str | None = None
    version: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TextStoreProtocol(ABC):
    """Protocol for document text storage."""

    @abstractmethod
    def get(self, uri: str) -> TextDocument:
        """Return the current snapshot of ``uri``.

        Raises:
            DocumentNotFoundError: If the store has no such document.
        """

    @abstractmethod
    def apply_edit(self, uri: str, edit: LineEdit, expected_version: int) -> EditResult:
        """Apply ``edit`` atomically if the document is still at ``expected_version``.

        Raises:
            DocumentNotFoundError: If the store has no such document.
            StaleDocumentError: If the document changed since the snapshot was taken.
        """


class AsyncTextStoreMixin:
    """Async wrappers running the synchronous store methods off the event loop."""

    async def aget(self, uri: str) -> TextDocument:
        return await asyncio.to_thread(self.get, uri)  # type: ignore[attr-defined]

    async def aapply_edit(self, uri: str, edit: LineEdit, expected_version: int) -> EditResult:
        return await asyncio.to_thread(self.apply_edit, uri, edit, expected_version)  # type: ignore[attr-defined]
