"""Editor-facing session wiring the dispatcher, mover and text store together.

The host forwards its notifications (active document changed, text changed, cursor moved)
to the session and implements :class:`EditorHost` to receive reveal/select requests and
status messages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from docoutline.backends.memory import InMemoryTextStore
from docoutline.backends.protocol import AsyncTextStoreMixin
from docoutline.config import Settings
from docoutline.errors import DocumentNotFoundError
from docoutline.events import OutlineEvent, OutlineEventType
from docoutline.logging import get_logger
from docoutline.models.outline import OutlineNode
from docoutline.models.symbol import LineRange
from docoutline.outline.dispatcher import OutlineDispatcher
from docoutline.outline.mover import MoveResult, SectionMover
from docoutline.providers.registry import ProviderRegistry

logger = get_logger(__name__)


class EditorHost(ABC):
    """Capabilities the session needs from the editor."""

    @abstractmethod
    def reveal(self, span: LineRange, *, select: bool = False) -> None:
        """Scroll to ``span``; select it when ``select`` is set."""

    @abstractmethod
    def set_status(self, message: str | None) -> None:
        """Show (or clear) a short status message next to the outline."""


class NullEditorHost(EditorHost):
    """Host that records the last requests; used headless and in tests."""

    def __init__(self) -> None:
        self.revealed: LineRange | None = None
        self.selected: bool = False
        self.status: str | None = None

    def reveal(self, span: LineRange, *, select: bool = False) -> None:
        self.revealed = span
        self.selected = select

    def set_status(self, message: str | None) -> None:
        self.status = message


class OutlineSession:
    """One outline view: its dispatcher, mover and active document."""

    def __init__(
        self,
        store: AsyncTextStoreMixin | None = None,
        host: EditorHost | None = None,
        registry: ProviderRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store if store is not None else InMemoryTextStore()
        self.host = host or NullEditorHost()
        self.dispatcher = OutlineDispatcher(registry or ProviderRegistry(self.settings), self.settings)
        self.mover = SectionMover(self.store, self.dispatcher.build)
        self._active_uri: str | None = None

    @property
    def active_uri(self) -> str | None:
        return self._active_uri

    # ------------------------------------------------------------------
    # Host notifications
    # ------------------------------------------------------------------

    async def on_active_document_changed(self, uri: str | None) -> bool:
        """Switch the outline to ``uri`` (None when no editor is active).

        Returns:
            bool: True if the new document has outline symbols.
        """

        self._active_uri = uri
        if uri is None:
            self.host.set_status("No editor active")
            await self.dispatcher.refresh(None)
            return False

        try:
            document = await self.store.aget(uri)
        except DocumentNotFoundError:
            logger.warning("Active document %s not in store", uri)
            await self.dispatcher.refresh(None)
            return False

        has_symbols = await self.dispatcher.refresh_with_retry(document)
        if has_symbols:
            self.host.set_status(None)
        else:
            self.host.set_status(f"No outline symbols for {document.type_tag}")
        return has_symbols

    async def on_document_changed(self, uri: str) -> bool:
        """Refresh after an edit to ``uri``; ignored unless it is the active document."""

        if uri != self._active_uri:
            return False
        document = await self.store.aget(uri)
        return await self.dispatcher.refresh(document)

    def on_cursor_moved(self, line: int) -> OutlineNode | None:
        """Sync the outline selection to the cursor; returns the node to highlight."""

        node = self.dispatcher.find_item_at_line(line)
        if node is None:
            logger.debug("No outline item at line %d", line)
        return node

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def goto_item(self, line: int) -> None:
        """Put the cursor on ``line``."""

        self.host.reveal(LineRange.single(line))

    def select_item(self, line: int) -> OutlineNode | None:
        """Select the whole section containing ``line``."""

        node = self.dispatcher.find_item_at_line(line)
        if node is not None:
            self.host.reveal(node.content_range, select=True)
        return node

    async def move_section(self, source_start_line: int, target_line: int) -> MoveResult:
        """Move a section of the active document, then refresh the outline."""

        uri = self._active_uri
        if uri is None:
            return MoveResult(False, "No active document.")

        result = await self.mover.move_section(uri, source_start_line, target_line)
        self.dispatcher.notify(
            OutlineEvent(
                event_type=OutlineEventType.MOVED if result.success else OutlineEventType.MOVE_FAILED,
                uri=uri,
                generation=self.dispatcher.generation,
                root_count=len(self.dispatcher.forest.roots),
                metadata={"source": source_start_line, "target": target_line, "message": result.message},
            )
        )
        if result.success and (result.details or {}).get("changed"):
            await self.on_document_changed(uri)
        return result

    def close(self) -> None:
        self.dispatcher.close()
