"""Shared fixtures: a 20-line markdown document with headings at lines 0, 5, 10 and 15."""

from __future__ import annotations

import pytest

from docoutline.backends.memory import InMemoryTextStore
from docoutline.models.symbol import LineRange, Symbol, SymbolKind

SAMPLE_LINES = [
    "# A", "a1", "a2", "a3", "a4",
    "## B", "b1", "b2", "b3", "b4",
    "### C", "c1", "c2", "c3", "c4",
    "# D", "d1", "d2", "d3", "d4",
]
SAMPLE_TEXT = "\n".join(SAMPLE_LINES) + "\n"
DOC_URI = "notes.md"


def make_symbol(name: str, level: int, line: int, kind: SymbolKind = SymbolKind.STRING) -> Symbol:
    return Symbol(name=name, kind=kind, level=level, header_range=LineRange.single(line))


@pytest.fixture
def sample_symbols() -> list[Symbol]:
    return [
        make_symbol("A", 1, 0),
        make_symbol("B", 2, 5),
        make_symbol("C", 3, 10),
        make_symbol("D", 1, 15),
    ]


@pytest.fixture
def store() -> InMemoryTextStore:
    store = InMemoryTextStore()
    store.open(DOC_URI, SAMPLE_TEXT, "markdown")
    return store
