"""Hierarchy builder: flat leveled symbols -> outline forest.

The builder is source-agnostic. Flat heading-style sources feed their symbols directly;
sources that already produce a nested tree are flattened in pre-order first (see
:func:`flatten_symbols`), with each symbol's level set to its depth.

A single pass keeps an explicit stack of open nodes. A node's content range stays open
until a symbol at the same or a shallower level arrives (the node then ends on the line
before that symbol's header) or the stream ends (the node then runs to the last line of
the document).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import cast

from docoutline.logging import get_logger
from docoutline.models.outline import BuildDiagnostic, Forest, OutlineNode
from docoutline.models.symbol import LineRange, Symbol

logger = get_logger(__name__)


def flatten_symbols(symbols: Iterable[Symbol], depth: int = 1) -> Iterator[Symbol]:
    """Pre-order flatten a native symbol tree, replacing each level with its depth."""

    for symbol in symbols:
        yield symbol.model_copy(update={"level": depth, "children": []})
        if symbol.children:
            yield from flatten_symbols(symbol.children, depth + 1)


def iter_nodes(forest: Forest) -> Iterator[OutlineNode]:
    """Pre-order traversal of every node in ``forest``."""

    return forest.walk()


def _reject_reason(level: int, header: LineRange | None, line_count: int, last_header_end: int) -> str | None:
    if header is None:
        return "missing header range"
    if level <= 0:
        return f"non-positive level {level}"
    if header.start >= line_count:
        return f"header line {header.start} outside document of {line_count} lines"
    if header.end >= line_count:
        return f"header {header} runs past the end of a document of {line_count} lines"
    if header.start <= last_header_end:
        return f"header line {header.start} out of document order"
    return None


def _close(node: OutlineNode, end: int) -> None:
    node.content_range = LineRange(start=node.header_range.start, end=max(end, node.header_range.end))


def build_forest(
    symbols: Iterable[Symbol],
    line_count: int,
    *,
    uri: str | None = None,
    version: int | None = None,
) -> Forest:
    """Build an outline forest from symbols ordered by document position.

    Malformed symbols are skipped and recorded in ``Forest.skipped``; the build always
    completes.

    Args:
        symbols: Symbols in document order, each carrying its level.
        line_count: Number of lines in the document the symbols were taken from.
        uri: Identifier of the document snapshot, recorded on the forest.
        version: Version of the document snapshot, recorded on the forest.

    Returns:
        Forest: Root nodes with finalized content ranges.
    """

    forest = Forest(line_count=line_count, uri=uri, version=version)
    stack: list[OutlineNode] = []
    last_header_end = -1

    for index, symbol in enumerate(symbols):
        reason = _reject_reason(symbol.level, symbol.header_range, line_count, last_header_end)
        if reason is not None:
            logger.warning("Skipping symbol %d (%r): %s", index, symbol.name, reason)
            forest.skipped.append(BuildDiagnostic(index=index, name=symbol.name, reason=reason))
            continue

        header = cast(LineRange, symbol.header_range)
        while stack and stack[-1].level >= symbol.level:
            _close(stack.pop(), header.start - 1)

        node = OutlineNode(
            label=symbol.name,
            level=symbol.level,
            header_range=header,
            content_range=header,
            kind=symbol.kind,
        )
        if stack:
            stack[-1].add_child(node)
        else:
            forest.roots.append(node)
        stack.append(node)
        last_header_end = header.end

    while stack:
        _close(stack.pop(), line_count - 1)

    logger.debug(
        "Built outline: roots=%d skipped=%d lines=%d", len(forest.roots), len(forest.skipped), line_count
    )
    return forest
