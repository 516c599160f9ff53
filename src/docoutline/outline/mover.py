"""Section mover: relocate a whole section as one atomic text edit.

A section is an outline node's full content range, its heading plus everything nested
under it. Moving one deletes those lines and re-inserts them verbatim at a line boundary,
both halves applied by the text store as a single edit.

The mover never touches a dispatcher's committed outline. It builds its own outline from
the exact snapshot it edits, so its line numbers always match the text, and the caller
refreshes afterwards.

Headings are moved verbatim: a level-2 heading stays level 2 wherever it lands.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from docoutline.backends.protocol import AsyncTextStoreMixin
from docoutline.logging import document_context, get_logger, log_exception
from docoutline.models.document import LineEdit, TextDocument
from docoutline.models.outline import Forest
from docoutline.outline.locator import find_by_header, first_node_at_or_after

__all__ = ["MoveResult", "SectionMover"]

logger = get_logger(__name__)

OutlineFor = Callable[[TextDocument], Awaitable[Forest]]


@dataclass(frozen=True)
class MoveResult:
    """Result of a section move.

    Attributes
    ----------
    success
        Whether the document now has the section at its destination.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """

    success: bool
    message: str
    details: dict[str, Any] | None = None


class SectionMover:
    """Moves sections of documents held in a text store.

    Only one move per document may be pending; a second request for the same document is
    refused rather than queued, since it would be computed against line numbers the first
    move is about to change.
    """

    def __init__(self, store: AsyncTextStoreMixin, outline_for: OutlineFor) -> None:
        """Initialize the mover.

        Args:
            store: Text store the edits are applied through.
            outline_for: Builds an outline for a snapshot (not committed anywhere).
        """
        self._store = store
        self._outline_for = outline_for
        self._in_progress: set[str] = set()

    def is_moving(self, uri: str) -> bool:
        return uri in self._in_progress

    async def move_section(self, uri: str, source_start_line: int, target_line: int) -> MoveResult:
        """Move the section whose heading starts at ``source_start_line`` before ``target_line``.

        Never raises: every failure, including storage errors, is reported in the result and
        leaves the document untouched.
        """

        if uri in self._in_progress:
            logger.warning("Move FAIL: move already in progress uri=%s", uri)
            return MoveResult(False, "A move is already in progress for this document.", {"uri": uri})

        self._in_progress.add(uri)
        try:
            with document_context(uri=uri):
                return await self._move(uri, source_start_line, target_line)
        except Exception as e:
            log_exception(logger, "Move FAIL: edit not applied", uri=uri, source=source_start_line)
            return MoveResult(False, f"Move failed: {e}", {"uri": uri, "error": type(e).__name__})
        finally:
            self._in_progress.discard(uri)

    async def _move(self, uri: str, source_start_line: int, target_line: int) -> MoveResult:
        logger.info("Move: source=%d target=%d", source_start_line, target_line)
        snapshot = await self._store.aget(uri)
        forest = await self._outline_for(snapshot)

        source = find_by_header(forest, source_start_line)
        if source is None:
            logger.warning("Move FAIL: no section at line %d", source_start_line)
            return MoveResult(
                False,
                f"No section starts at line {source_start_line}.",
                {"source_line": source_start_line},
            )

        span = source.content_range
        details: dict[str, Any] = {
            "label": source.label,
            "source_range": [span.start, span.end],
            "source_level": source.level,
        }

        if target_line == source_start_line:
            logger.info("Move noop: target is the section itself")
            return MoveResult(True, "Section already at target.", {**details, "changed": False})

        if span.contains(target_line):
            logger.warning("Move FAIL: target %d inside section %s", target_line, span)
            return MoveResult(False, "Cannot move a section into itself.", {**details, "target_line": target_line})

        line_count = snapshot.line_count
        anchor = None
        if target_line >= line_count:
            destination = line_count
        else:
            anchor = first_node_at_or_after(forest, max(target_line, 0))
            destination = anchor.content_range.start if anchor is not None else line_count
        details["destination_line"] = destination

        if destination in (span.start, span.end + 1):
            logger.info("Move noop: destination %d adjoins the section", destination)
            return MoveResult(True, "Section already at target.", {**details, "changed": False})

        insert_at = destination - span.line_count if destination > span.end else destination
        edit = LineEdit(delete=span, insert_at=insert_at, text=snapshot.slice_lines(span))

        if anchor is not None:
            details["anchor_level"] = anchor.level
            if anchor.level != source.level:
                logger.warning(
                    "Moved heading keeps level %d before a level %d heading", source.level, anchor.level
                )

        result = await self._store.aapply_edit(uri, edit, snapshot.version)
        if not result.ok:
            logger.warning("Move FAIL: %s", result.error)
            return MoveResult(False, result.error or "Edit rejected.", details)

        logger.info("Move OK: %r lines %s -> %d", source.label, span, destination)
        return MoveResult(
            True,
            f"Moved section '{source.label}'.",
            {**details, "changed": True, "inserted_at": insert_at, "version": result.version},
        )
