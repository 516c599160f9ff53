"""Tests for line -> outline node resolution."""

from __future__ import annotations

import pytest

from docoutline.models.symbol import Symbol
from docoutline.outline.builder import build_forest
from docoutline.outline.locator import find_by_header, first_node_at_or_after, locate

from conftest import make_symbol


@pytest.mark.parametrize(
    ("line", "expected"),
    [(12, "C"), (6, "B"), (16, "D"), (3, "A"), (0, "A"), (10, "C"), (14, "C"), (15, "D"), (19, "D")],
)
def test_locate_innermost_section(sample_symbols: list[Symbol], line: int, expected: str) -> None:
    """It should return the deepest section whose range contains the line."""

    forest = build_forest(sample_symbols, 20)

    node = locate(forest, line)
    assert node is not None
    assert node.label == expected


def test_locate_outside_any_section(sample_symbols: list[Symbol]) -> None:
    """It should return None past the document and before the first heading."""

    assert locate(build_forest(sample_symbols, 20), 25) is None

    preamble = build_forest([make_symbol("Title", 1, 3)], 6)
    assert locate(preamble, 1) is None
    assert locate(preamble, 4).label == "Title"


def test_find_by_header_requires_exact_header_line(sample_symbols: list[Symbol]) -> None:
    """It should only match a node whose heading starts on the given line."""

    forest = build_forest(sample_symbols, 20)

    assert find_by_header(forest, 10).label == "C"
    assert find_by_header(forest, 5).label == "B"
    assert find_by_header(forest, 11) is None
    assert find_by_header(forest, 1) is None


def test_first_node_at_or_after_walks_document_order(sample_symbols: list[Symbol]) -> None:
    """It should pick the nearest heading at or below the line, at any depth."""

    forest = build_forest(sample_symbols, 20)

    assert first_node_at_or_after(forest, 0).label == "A"
    assert first_node_at_or_after(forest, 6).label == "C"
    assert first_node_at_or_after(forest, 11).label == "D"
    assert first_node_at_or_after(forest, 16) is None
