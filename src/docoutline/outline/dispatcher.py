"""Provider dispatcher: owns the active provider pair and the committed outline.

Refreshes are not serialized by locks. Each refresh is stamped with a generation number
when it is dispatched and its forest is committed only if no newer refresh has been
dispatched in the meantime; superseded results are dropped at commit time. The committed
forest has a single writer (the commit step below); readers get whatever forest is current
and must re-resolve nodes by line after each change.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from docoutline.config import Settings
from docoutline.events import OutlineEvent, OutlineEventType
from docoutline.logging import document_context, generation_context, get_logger, log_exception
from docoutline.models.document import TextDocument
from docoutline.models.outline import Forest, OutlineNode
from docoutline.models.symbol import Symbol
from docoutline.outline.builder import build_forest
from docoutline.outline.locator import locate
from docoutline.providers.registry import ProviderPair, ProviderRegistry

logger = get_logger(__name__)

Listener = Callable[[OutlineEvent], None]


def _release(waiter: asyncio.Future[bool]) -> None:
    if not waiter.done():
        waiter.set_result(True)


class OutlineDispatcher:
    """Builds and caches the outline of the active document."""

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Provider table; defaults to the built-in markdown/generic table.
            settings: Runtime settings.
        """
        self._settings = settings or Settings()
        self._registry = registry or ProviderRegistry(self._settings)
        self._pair: ProviderPair | None = None
        self._cached_type: str | None = None
        self._document: TextDocument | None = None
        self._forest = Forest()
        self._generation = 0
        self._listeners: list[Listener] = []
        self._retry_handle: asyncio.TimerHandle | None = None
        self._retry_waiter: asyncio.Future[bool] | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def forest(self) -> Forest:
        return self._forest

    @property
    def root_items(self) -> list[OutlineNode]:
        return list(self._forest.roots)

    @property
    def current_document(self) -> TextDocument | None:
        return self._document

    @property
    def active_type(self) -> str | None:
        return self._cached_type

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def retry_pending(self) -> bool:
        return self._retry_waiter is not None and not self._retry_waiter.done()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def find_item_at_line(self, line: int) -> OutlineNode | None:
        """Innermost node of the committed outline containing ``line``."""

        return locate(self._forest, line)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _activate(self, type_tag: str) -> ProviderPair:
        if self._pair is None or type_tag != self._cached_type:
            logger.info("Switching provider for type: %s", type_tag)
            self._pair = self._registry.create(type_tag)
            self._cached_type = type_tag
        return self._pair

    async def _collect(self, pair: ProviderPair, document: TextDocument) -> tuple[list[Symbol], bool]:
        """Symbols for ``document`` and whether the analyzer failed."""

        failed = False
        try:
            symbols = pair.strategy.apply(await pair.source.symbols(document))
        except Exception:
            log_exception(logger, "Symbol source failed", type_tag=document.type_tag)
            symbols, failed = [], True

        if not symbols and pair.fallback is not None:
            symbols = pair.fallback(document.text)
            logger.debug("Fallback scanner produced %d symbols", len(symbols))
        return symbols, failed

    async def build(self, document: TextDocument) -> Forest:
        """Build an outline for ``document`` without committing it."""

        if self._pair is not None and document.type_tag == self._cached_type:
            pair = self._pair
        else:
            pair = self._registry.create(document.type_tag)
        symbols, _ = await self._collect(pair, document)
        return build_forest(symbols, document.line_count, uri=document.uri, version=document.version)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self, document: TextDocument | None = None) -> bool:
        """Rebuild the outline for ``document``, or clear it when ``document`` is None.

        Returns:
            bool: True if this refresh's result was committed.
        """

        self._generation += 1
        generation = self._generation

        if document is None:
            self.cancel_pending_retry()
            self._document = None
            self._pair = None
            self._cached_type = None
            self._forest = Forest()
            with generation_context(generation):
                logger.debug("Outline cleared")
            self._notify(
                OutlineEvent(
                    event_type=OutlineEventType.CHANGED,
                    generation=generation,
                    root_count=0,
                    metadata={"cleared": True},
                )
            )
            return True

        with document_context(uri=document.uri, generation=generation):
            pair = self._activate(document.type_tag)
            symbols, failed = await self._collect(pair, document)

            if generation != self._generation:
                logger.debug("Discarding stale refresh (latest is %d)", self._generation)
                return False

            if (
                failed
                and not symbols
                and self._forest
                and self._document is not None
                and self._document.uri == document.uri
            ):
                logger.info("Keeping last outline after symbol source failure")
                return False

            forest = build_forest(symbols, document.line_count, uri=document.uri, version=document.version)
            self._document = document
            self._forest = forest

        self._notify(
            OutlineEvent(
                event_type=OutlineEventType.CHANGED,
                uri=document.uri,
                generation=generation,
                root_count=len(forest.roots),
                metadata={
                    "type_tag": document.type_tag,
                    "version": document.version,
                    "skipped": len(forest.skipped),
                },
            )
        )
        return True

    async def refresh_with_retry(self, document: TextDocument) -> bool:
        """Refresh, and retry once if the analyzer was not ready yet.

        If the first refresh leaves the outline empty, waits out the rest of
        ``analyzer_ready_budget_s`` on a timer and refreshes again, unless another refresh was
        dispatched during the wait: the snapshot held here is then older than the committed
        outline and is not rebuilt. The wait is cancelled by
        :meth:`cancel_pending_retry`, by the next ``refresh_with_retry`` and by clearing the
        outline.

        Returns:
            bool: True if the outline has at least one root afterwards.
        """

        self.cancel_pending_retry()
        loop = asyncio.get_running_loop()
        started = loop.time()

        # refresh stamps its generation before its first await
        dispatched = self._generation + 1
        await self.refresh(document)
        if self._generation != dispatched or self._forest:
            return bool(self._forest)

        remaining = self._settings.analyzer_ready_budget_s - (loop.time() - started)
        if remaining <= 0:
            return False

        waiter: asyncio.Future[bool] = loop.create_future()
        self._retry_waiter = waiter
        self._retry_handle = loop.call_later(remaining, _release, waiter)
        try:
            proceed = await waiter
        finally:
            if self._retry_waiter is waiter:
                self._retry_waiter = None
                self._retry_handle = None

        if not proceed:
            logger.debug("Retry for %s cancelled", document.uri)
            return False

        if self._generation != dispatched:
            with generation_context(self._generation):
                logger.debug("Skipping retry for %s: superseded by a newer refresh", document.uri)
            return bool(self._forest)

        await self.refresh(document)
        return bool(self._forest)

    def cancel_pending_retry(self) -> None:
        """Cancel a scheduled retry, if any."""

        if self._retry_handle is not None:
            self._retry_handle.cancel()
        if self._retry_waiter is not None and not self._retry_waiter.done():
            self._retry_waiter.set_result(False)
        self._retry_handle = None
        self._retry_waiter = None

    def close(self) -> None:
        self.cancel_pending_retry()
        self._listeners.clear()

    def notify(self, event: OutlineEvent) -> None:
        """Deliver an externally produced event (e.g. a move outcome) to listeners."""

        self._notify(event)

    def _notify(self, event: OutlineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log_exception(logger, "Outline listener failed", event_type=event.event_type.value)
