"""Tests for the markdown fallback scanner and label strategy."""

from __future__ import annotations

from docoutline.models.symbol import LineRange, Symbol, SymbolKind
from docoutline.providers.markdown import (
    MARKDOWN_STRATEGY,
    normalize_markdown_label,
    parse_markdown_headings,
    resolve_markdown_level,
)
from docoutline.providers.strategy import GENERIC_STRATEGY

from conftest import SAMPLE_TEXT


def test_parse_headings_level_from_marker_run() -> None:
    """It should read the level from the number of leading # characters."""

    symbols = parse_markdown_headings(SAMPLE_TEXT)

    assert [(s.name, s.level, s.header_range.start) for s in symbols] == [
        ("A", 1, 0),
        ("B", 2, 5),
        ("C", 3, 10),
        ("D", 1, 15),
    ]
    assert symbols[0].kind == SymbolKind.FILE
    assert symbols[1].kind == SymbolKind.STRING


def test_parse_headings_requires_whitespace_and_six_markers_max() -> None:
    """It should ignore #tags, seven-marker runs and empty headings."""

    text = "#tag\n####### too deep\n#\n###### six  \n"

    symbols = parse_markdown_headings(text)

    assert [(s.name, s.level) for s in symbols] == [("six", 6)]


def test_parse_headings_skips_fenced_code() -> None:
    """It should not treat comment lines inside code fences as headings."""

    text = "# Real\n```bash\n# not a heading\n~~~\n# still code\n```\n## After\n"

    assert [s.name for s in parse_markdown_headings(text)] == ["Real", "After"]
    assert [s.name for s in parse_markdown_headings(text, skip_code_fences=False)] == [
        "Real",
        "not a heading",
        "still code",
        "After",
    ]


def test_parse_headings_nested_fence_stays_open() -> None:
    """It should only close a fence on a bare run at least as long as the opener."""

    text = "# Guide\n````markdown\n```python\n# inner\n```\n## also inner\n````\n## After\n"

    assert [s.name for s in parse_markdown_headings(text)] == ["Guide", "After"]


def test_parse_headings_respects_max_level() -> None:
    """It should drop headings deeper than the configured maximum."""

    assert [s.name for s in parse_markdown_headings("# a\n### c\n", max_level=2)] == ["a"]


def test_markdown_strategy_normalizes_analyzer_symbols() -> None:
    """It should strip markers from names and derive levels from kind and marker."""

    assert normalize_markdown_label("### Install ") == "Install"
    assert normalize_markdown_label(" Plain ") == "Plain"
    assert resolve_markdown_level(SymbolKind.FILE, "Title") == 1
    assert resolve_markdown_level(SymbolKind.STRING, "### Deep") == 3
    assert resolve_markdown_level(SymbolKind.STRING, "no marker") == 2
    assert resolve_markdown_level(SymbolKind.CLASS, "Foo") is None

    [symbol] = MARKDOWN_STRATEGY.apply(
        [Symbol(name="## Usage", kind=SymbolKind.STRING, level=1, header_range=LineRange.single(4))]
    )
    assert (symbol.name, symbol.level) == ("Usage", 2)


def test_generic_strategy_keeps_source_levels() -> None:
    """It should only trim labels for types without a dedicated strategy."""

    [symbol] = GENERIC_STRATEGY.apply(
        [Symbol(name=" run ", kind=SymbolKind.FUNCTION, level=3, header_range=LineRange.single(0))]
    )

    assert (symbol.name, symbol.level) == ("run", 3)
