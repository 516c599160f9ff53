"""Markdown heading support.

Provides the fallback lexical scanner used when no markdown analyzer reports symbols, and
the label/level strategy for symbols coming from one. The scanner's rule: a line starting
with a run of one to six ``#`` followed by whitespace and text is a heading whose level is
the length of the run.
"""

from __future__ import annotations

import re

from docoutline.models.symbol import LineRange, Symbol, SymbolKind
from docoutline.models.document import split_lines
from docoutline.providers.strategy import LabelStrategy

# Regex for ATX-style headings: # Heading, ## Heading, etc.
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")

# Regex for fenced code block markers: ``` or ~~~
CODE_FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")

_MARKER_PREFIX = re.compile(r"^#{1,6}\s+(.+)$")
_MARKER_RUN = re.compile(r"^(#{1,6})\s")


def parse_markdown_headings(text: str, *, skip_code_fences: bool = True, max_level: int = 6) -> list[Symbol]:
    """Scan markdown text for ATX headings.

    Args:
        text: Raw document text.
        skip_code_fences: Ignore heading-looking lines inside fenced code blocks.
        max_level: Deepest heading level recognised.

    Returns:
        Heading symbols ordered by line.
    """

    symbols: list[Symbol] = []
    fence: str | None = None

    for line_num, raw in enumerate(split_lines(text)):
        line = raw.rstrip("\r\n")

        if skip_code_fences:
            fence_match = CODE_FENCE_PATTERN.match(line)
            if fence_match:
                marker = fence_match.group(1)
                if fence is None:
                    fence = marker
                elif (
                    marker[0] == fence[0]
                    and len(marker) >= len(fence)
                    and not line[fence_match.end() :].strip()
                ):
                    # closing fences are bare and at least as long as the opener
                    fence = None
                continue
            if fence is not None:
                continue

        match = HEADING_PATTERN.match(line)
        if not match:
            continue
        level = len(match.group(1))
        if level > max_level:
            continue
        symbols.append(
            Symbol(
                name=match.group(2),
                kind=SymbolKind.FILE if level == 1 else SymbolKind.STRING,
                level=level,
                header_range=LineRange.single(line_num),
            )
        )

    return symbols


def normalize_markdown_label(raw_name: str) -> str:
    """Drop the ``#`` marker some analyzers leave in heading names."""

    match = _MARKER_PREFIX.match(raw_name)
    return match.group(1).strip() if match else raw_name.strip()


def resolve_markdown_level(kind: SymbolKind, name: str) -> int | None:
    """Heading level from an analyzer symbol.

    Analyzers report H1 as a file symbol and H2-H6 as string symbols whose name still
    carries the marker.
    """

    if kind == SymbolKind.FILE:
        return 1
    if kind == SymbolKind.STRING:
        match = _MARKER_RUN.match(name)
        return len(match.group(1)) if match else 2
    return None


MARKDOWN_STRATEGY = LabelStrategy(
    name="markdown",
    normalize_label=normalize_markdown_label,
    resolve_level=resolve_markdown_level,
)
