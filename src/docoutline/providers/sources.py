"""Symbol sources.

A symbol source stands in for a per-document-type analyzer: given a document snapshot it
returns that document's structural symbols in document order, or an empty list when no
analyzer is ready.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence

from docoutline.errors import SymbolSourceError
from docoutline.models.document import TextDocument
from docoutline.models.symbol import Symbol

SymbolFunc = Callable[[TextDocument], "Sequence[Symbol] | Awaitable[Sequence[Symbol]]"]


class SymbolSource(ABC):
    """Protocol for analyzers producing symbols for a document."""

    @abstractmethod
    async def symbols(self, document: TextDocument) -> list[Symbol]:
        """Return the document's symbols ordered by position."""


class NullSymbolSource(SymbolSource):
    """Source for document types without an analyzer; always empty."""

    async def symbols(self, document: TextDocument) -> list[Symbol]:
        return []


class StaticSymbolSource(SymbolSource):
    """Source returning a fixed list, regardless of the document."""

    def __init__(self, symbols: Sequence[Symbol]) -> None:
        self._symbols = list(symbols)

    async def symbols(self, document: TextDocument) -> list[Symbol]:
        return list(self._symbols)


class CallableSymbolSource(SymbolSource):
    """Adapt a plain or async function into a symbol source."""

    def __init__(self, func: SymbolFunc) -> None:
        self._func = func

    async def symbols(self, document: TextDocument) -> list[Symbol]:
        try:
            result = self._func(document)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise SymbolSourceError(f"Analyzer failed for {document.uri}: {e}") from e
        return list(result)


class NestedSymbolSource(SymbolSource):
    """Flatten a source whose symbols form a native tree (level = depth)."""

    def __init__(self, inner: SymbolSource) -> None:
        self._inner = inner

    async def symbols(self, document: TextDocument) -> list[Symbol]:
        from docoutline.outline.builder import flatten_symbols

        return list(flatten_symbols(await self._inner.symbols(document)))
