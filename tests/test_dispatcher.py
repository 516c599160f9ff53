"""Tests for the provider dispatcher."""

from __future__ import annotations

import asyncio

import pytest

from docoutline.config import Settings
from docoutline.errors import SymbolSourceError
from docoutline.events import OutlineEvent, OutlineEventType
from docoutline.models.document import TextDocument
from docoutline.models.symbol import LineRange, Symbol, SymbolKind
from docoutline.outline.dispatcher import OutlineDispatcher
from docoutline.providers.registry import ProviderPair, ProviderRegistry
from docoutline.providers.sources import CallableSymbolSource, NestedSymbolSource, StaticSymbolSource

from conftest import SAMPLE_TEXT, make_symbol

MD_DOC = TextDocument(uri="notes.md", type_tag="markdown", text=SAMPLE_TEXT)
PY_DOC = TextDocument(uri="mod.py", type_tag="python", text="class A:\n    def f(self):\n        pass\n")


def _labels(dispatcher: OutlineDispatcher) -> list[str]:
    return [n.label for n in dispatcher.root_items]


@pytest.mark.asyncio
async def test_refresh_markdown_uses_fallback_scanner() -> None:
    """It should fall back to the markdown scanner when no analyzer reports symbols."""

    events: list[OutlineEvent] = []
    dispatcher = OutlineDispatcher()
    dispatcher.add_listener(events.append)

    assert await dispatcher.refresh(MD_DOC)

    assert _labels(dispatcher) == ["A", "D"]
    assert dispatcher.active_type == "markdown"
    assert dispatcher.find_item_at_line(12).label == "C"
    assert dispatcher.find_item_at_line(25) is None
    assert [e.event_type for e in events] == [OutlineEventType.CHANGED]
    assert events[0].root_count == 2
    assert events[0].uri == "notes.md"


@pytest.mark.asyncio
async def test_refresh_none_clears_outline() -> None:
    """It should drop the forest and active provider when no document is active."""

    events: list[OutlineEvent] = []
    dispatcher = OutlineDispatcher()
    await dispatcher.refresh(MD_DOC)
    dispatcher.add_listener(events.append)

    await dispatcher.refresh(None)

    assert dispatcher.root_items == []
    assert dispatcher.active_type is None
    assert dispatcher.current_document is None
    assert [(e.event_type, e.root_count, e.metadata) for e in events] == [
        (OutlineEventType.CHANGED, 0, {"cleared": True})
    ]


@pytest.mark.asyncio
async def test_refresh_switches_provider_with_document_type() -> None:
    """It should instantiate a new provider pair when the type tag changes."""

    created: list[str] = []
    registry = ProviderRegistry()

    def python_pair() -> ProviderPair:
        created.append("python")
        return ProviderPair(source=StaticSymbolSource([make_symbol("A", 1, 0, SymbolKind.CLASS)]))

    registry.register("python", python_pair)
    assert registry.has_custom("python")
    assert not registry.has_custom("plaintext")
    dispatcher = OutlineDispatcher(registry)

    await dispatcher.refresh(PY_DOC)
    await dispatcher.refresh(PY_DOC)
    assert created == ["python"]
    assert _labels(dispatcher) == ["A"]

    await dispatcher.refresh(MD_DOC)
    assert dispatcher.active_type == "markdown"
    assert _labels(dispatcher) == ["A", "D"]

    await dispatcher.refresh(PY_DOC)
    assert created == ["python", "python"]


@pytest.mark.asyncio
async def test_unknown_type_without_analyzer_is_empty() -> None:
    """It should produce an empty outline for types with neither analyzer nor fallback."""

    dispatcher = OutlineDispatcher()

    assert await dispatcher.refresh(TextDocument(uri="x.txt", text="# not markdown\n"))

    assert dispatcher.root_items == []
    assert dispatcher.forest.end_insertion_line == 1


@pytest.mark.asyncio
async def test_analyzer_symbols_go_through_markdown_strategy() -> None:
    """It should prefer analyzer symbols and normalize their labels and levels."""

    registry = ProviderRegistry()
    registry.register_source(
        "markdown",
        lambda: StaticSymbolSource(
            [
                Symbol(name="Title", kind=SymbolKind.FILE, level=1, header_range=LineRange.single(0)),
                Symbol(name="### Deep", kind=SymbolKind.STRING, level=1, header_range=LineRange.single(3)),
            ]
        ),
    )
    dispatcher = OutlineDispatcher(registry)

    await dispatcher.refresh(MD_DOC)

    [root] = dispatcher.root_items
    assert root.label == "Title"
    assert [(c.label, c.level) for c in root.children] == [("Deep", 3)]


@pytest.mark.asyncio
async def test_nested_source_is_flattened() -> None:
    """It should build the same outline from a natively nested analyzer."""

    tree = [make_symbol("A", 9, 0).model_copy(update={"children": [make_symbol("f", 9, 1)]})]
    registry = ProviderRegistry()
    registry.register_source("python", lambda: NestedSymbolSource(StaticSymbolSource(tree)))
    dispatcher = OutlineDispatcher(registry)

    await dispatcher.refresh(PY_DOC)

    [root] = dispatcher.root_items
    assert (root.label, root.level) == ("A", 1)
    assert [(c.label, c.level) for c in root.children] == [("f", 2)]


@pytest.mark.asyncio
async def test_stale_refresh_is_discarded() -> None:
    """It should only commit the result of the latest dispatched refresh."""

    gate = asyncio.Event()

    async def symbols(doc: TextDocument) -> list[Symbol]:
        if doc.uri == "slow.py":
            await gate.wait()
            return [make_symbol("slow", 1, 0)]
        return [make_symbol("fast", 1, 0)]

    registry = ProviderRegistry()
    registry.register_source("python", lambda: CallableSymbolSource(symbols))
    dispatcher = OutlineDispatcher(registry)
    events: list[OutlineEvent] = []
    dispatcher.add_listener(events.append)

    slow = asyncio.create_task(dispatcher.refresh(PY_DOC.model_copy(update={"uri": "slow.py"})))
    await asyncio.sleep(0)
    assert await dispatcher.refresh(PY_DOC)
    gate.set()

    assert await slow is False
    assert _labels(dispatcher) == ["fast"]
    assert dispatcher.current_document.uri == "mod.py"
    assert len(events) == 1


@pytest.mark.asyncio
async def test_source_failure_keeps_last_outline() -> None:
    """It should keep the previous outline when the analyzer errors."""

    calls = 0

    def symbols(doc: TextDocument) -> list[Symbol]:
        nonlocal calls
        calls += 1
        if calls > 1:
            raise RuntimeError("analyzer crashed")
        return [make_symbol("A", 1, 0)]

    registry = ProviderRegistry()
    registry.register_source("python", lambda: CallableSymbolSource(symbols))
    dispatcher = OutlineDispatcher(registry)
    await dispatcher.refresh(PY_DOC)

    assert await dispatcher.refresh(PY_DOC) is False
    assert _labels(dispatcher) == ["A"]


@pytest.mark.asyncio
async def test_listener_errors_do_not_break_refresh() -> None:
    """It should log and continue when a listener raises."""

    def broken(event: OutlineEvent) -> None:
        raise ValueError("boom")

    seen: list[OutlineEvent] = []
    dispatcher = OutlineDispatcher()
    dispatcher.add_listener(broken)
    dispatcher.add_listener(seen.append)

    assert await dispatcher.refresh(MD_DOC)
    assert len(seen) == 1

    dispatcher.remove_listener(seen.append)
    await dispatcher.refresh(MD_DOC)
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_refresh_with_retry_waits_for_analyzer() -> None:
    """It should retry once after the ready budget when the first build is empty."""

    calls = 0

    def symbols(doc: TextDocument) -> list[Symbol]:
        nonlocal calls
        calls += 1
        return [] if calls == 1 else [make_symbol("A", 1, 0)]

    registry = ProviderRegistry()
    registry.register_source("python", lambda: CallableSymbolSource(symbols))
    dispatcher = OutlineDispatcher(registry, Settings(analyzer_ready_budget_s=0.05))

    assert await dispatcher.refresh_with_retry(PY_DOC)
    assert calls == 2
    assert _labels(dispatcher) == ["A"]


@pytest.mark.asyncio
async def test_refresh_with_retry_gives_up_after_one_retry() -> None:
    """It should accept an empty outline after the single retry."""

    calls = 0

    def symbols(doc: TextDocument) -> list[Symbol]:
        nonlocal calls
        calls += 1
        return []

    registry = ProviderRegistry()
    registry.register_source("python", lambda: CallableSymbolSource(symbols))
    dispatcher = OutlineDispatcher(registry, Settings(analyzer_ready_budget_s=0.02))

    assert await dispatcher.refresh_with_retry(PY_DOC) is False
    assert calls == 2


@pytest.mark.asyncio
async def test_pending_retry_can_be_cancelled() -> None:
    """It should stop waiting and skip the retry once cancelled."""

    calls = 0

    def symbols(doc: TextDocument) -> list[Symbol]:
        nonlocal calls
        calls += 1
        return []

    registry = ProviderRegistry()
    registry.register_source("python", lambda: CallableSymbolSource(symbols))
    dispatcher = OutlineDispatcher(registry, Settings(analyzer_ready_budget_s=5.0))

    task = asyncio.create_task(dispatcher.refresh_with_retry(PY_DOC))
    for _ in range(100):
        if dispatcher.retry_pending:
            break
        await asyncio.sleep(0)
    assert dispatcher.retry_pending

    dispatcher.cancel_pending_retry()

    assert await asyncio.wait_for(task, timeout=1.0) is False
    assert calls == 1
    assert not dispatcher.retry_pending


@pytest.mark.asyncio
async def test_callable_source_wraps_analyzer_errors() -> None:
    """It should report analyzer crashes as SymbolSourceError."""

    async def crash(doc: TextDocument) -> list[Symbol]:
        raise RuntimeError("analyzer crashed")

    with pytest.raises(SymbolSourceError):
        await CallableSymbolSource(crash).symbols(PY_DOC)


@pytest.mark.asyncio
async def test_retry_skipped_when_newer_refresh_committed() -> None:
    """It should not rebuild an older snapshot over an outline committed during the wait."""

    dispatcher = OutlineDispatcher(settings=Settings(analyzer_ready_budget_s=0.2))
    draft = TextDocument(uri="notes.md", type_tag="markdown", text="no headings yet\n", version=1)
    edited = TextDocument(uri="notes.md", type_tag="markdown", text="# Title\n", version=2)

    task = asyncio.create_task(dispatcher.refresh_with_retry(draft))
    for _ in range(100):
        if dispatcher.retry_pending:
            break
        await asyncio.sleep(0)
    assert dispatcher.retry_pending

    assert await dispatcher.refresh(edited)
    assert _labels(dispatcher) == ["Title"]

    assert await asyncio.wait_for(task, timeout=2.0) is True
    assert dispatcher.current_document is not None
    assert dispatcher.current_document.version == 2
    assert _labels(dispatcher) == ["Title"]
