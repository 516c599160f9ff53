"""InMemoryTextStore: documents held as immutable snapshots in a dict."""

from __future__ import annotations

import threading

from docoutline.backends.protocol import AsyncTextStoreMixin, EditResult, TextStoreProtocol
from docoutline.errors import DocumentNotFoundError, StaleDocumentError
from docoutline.logging import get_logger
from docoutline.models.document import LineEdit, TextDocument, apply_line_edit

logger = get_logger(__name__)


class InMemoryTextStore(AsyncTextStoreMixin, TextStoreProtocol):
    """Text store keeping every document in memory.

    Edits replace the stored snapshot with a single assignment, so readers never observe a
    half-applied edit.
    """

    def __init__(self) -> None:
        self._docs: dict[str, TextDocument] = {}
        self._lock = threading.Lock()

    def open(self, uri: str, text: str, type_tag: str = "plaintext") -> TextDocument:
        """Add or replace a document, bumping its version."""

        with self._lock:
            previous = self._docs.get(uri)
            version = previous.version + 1 if previous is not None else 1
            doc = TextDocument(uri=uri, type_tag=type_tag, text=text, version=version)
            self._docs[uri] = doc
            return doc

    def close(self, uri: str) -> None:
        with self._lock:
            self._docs.pop(uri, None)

    def get(self, uri: str) -> TextDocument:
        try:
            return self._docs[uri]
        except KeyError:
            raise DocumentNotFoundError(uri) from None

    def apply_edit(self, uri: str, edit: LineEdit, expected_version: int) -> EditResult:
        with self._lock:
            current = self.get(uri)
            if current.version != expected_version:
                raise StaleDocumentError(uri, expected_version, current.version)
            try:
                text = apply_line_edit(current, edit)
            except ValueError as e:
                return EditResult(error=f"Error editing '{uri}': {e}")
            updated = current.model_copy(update={"text": text, "version": current.version + 1})
            self._docs[uri] = updated
        logger.debug("Applied edit to %s (version %d)", uri, updated.version)
        return EditResult(uri=uri, version=updated.version)
