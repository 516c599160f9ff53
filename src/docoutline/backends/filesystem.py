"""FilesystemTextStore: read and rewrite documents directly on disk."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from docoutline.backends.protocol import AsyncTextStoreMixin, EditResult, TextStoreProtocol
from docoutline.errors import DocumentNotFoundError, StaleDocumentError
from docoutline.logging import get_logger
from docoutline.models.document import LineEdit, TextDocument, apply_line_edit

logger = get_logger(__name__)


class FilesystemTextStore(AsyncTextStoreMixin, TextStoreProtocol):
    """Text store backed by files.

    A document's version is its modification time in nanoseconds; an edit is refused if
    the file changed after the snapshot was read. Edits are written to a temporary file in
    the same directory and moved into place with ``os.replace``, so a failed write never
    leaves a truncated document behind.
    """

    def __init__(
        self,
        root_dir: str | Path | None = None,
        virtual_mode: bool = False,
        suffix_type_tags: dict[str, str] | None = None,
        default_type_tag: str = "plaintext",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize filesystem store.

        Args:
            root_dir: Optional root directory for relative uris.
            virtual_mode: If True, treat uris as virtual paths confined to root_dir.
            suffix_type_tags: File suffix to document type tag mapping.
            default_type_tag: Type tag for unknown suffixes.
            encoding: Text encoding of the documents.
        """
        self.cwd = Path(root_dir).resolve() if root_dir else Path.cwd()
        self.virtual_mode = virtual_mode
        self.suffix_type_tags = dict(suffix_type_tags or {".md": "markdown"})
        self.default_type_tag = default_type_tag
        self.encoding = encoding

    def _resolve_path(self, key: str) -> Path:
        """Resolve a document uri with security checks."""
        if self.virtual_mode:
            vpath = key if key.startswith("/") else "/" + key
            if ".." in vpath or vpath.startswith("~"):
                raise ValueError("Path traversal not allowed")
            full = (self.cwd / vpath.lstrip("/")).resolve()
            try:
                full.relative_to(self.cwd)
            except ValueError:
                raise ValueError(f"Path {full} outside root directory {self.cwd}") from None
            return full

        path = Path(key)
        if path.is_absolute():
            return path
        return (self.cwd / path).resolve()

    def type_tag_for(self, path: Path) -> str:
        return self.suffix_type_tags.get(path.suffix.lower(), self.default_type_tag)

    def _read(self, uri: str, path: Path) -> TextDocument:
        if not path.exists() or not path.is_file():
            raise DocumentNotFoundError(uri)
        fd = os.open(path, os.O_RDONLY | getattr(os, "O_NOFOLLOW", 0))
        # newline="" keeps \r\n and \r terminators intact
        with os.fdopen(fd, "r", encoding=self.encoding, newline="") as f:
            text = f.read()
        return TextDocument(
            uri=uri,
            type_tag=self.type_tag_for(path),
            text=text,
            version=path.stat().st_mtime_ns,
        )

    def get(self, uri: str) -> TextDocument:
        return self._read(uri, self._resolve_path(uri))

    def apply_edit(self, uri: str, edit: LineEdit, expected_version: int) -> EditResult:
        """Rewrite the file with ``edit`` applied, atomically."""
        path = self._resolve_path(uri)
        current = self._read(uri, path)
        if current.version != expected_version:
            raise StaleDocumentError(uri, expected_version, current.version)

        try:
            text = apply_line_edit(current, edit)
        except ValueError as e:
            return EditResult(error=f"Error editing '{uri}': {e}")

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(text)
            os.chmod(tmp_name, path.stat().st_mode & 0o777)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, UnicodeEncodeError) as e:
            return EditResult(error=f"Error writing '{uri}': {e}")
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)

        version = path.stat().st_mtime_ns
        logger.debug("Rewrote %s", path)
        return EditResult(uri=uri, version=version)
