"""Line locator: map a line to the innermost outline node containing it."""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from docoutline.models.outline import Forest, OutlineNode


def _containing(nodes: Sequence[OutlineNode], line: int) -> OutlineNode | None:
    # Siblings are disjoint and ordered, so the candidate is the last one starting at or before line.
    starts = [node.content_range.start for node in nodes]
    idx = bisect.bisect_right(starts, line) - 1
    if idx < 0:
        return None
    node = nodes[idx]
    return node if node.content_range.contains(line) else None


def locate(forest: Forest, line: int) -> OutlineNode | None:
    """Return the deepest node whose content range contains ``line``.

    Lines before the first heading, or past the end of the last root, resolve to ``None``.
    """

    node = _containing(forest.roots, line)
    if node is None:
        return None
    while True:
        child = _containing(node.children, line)
        if child is None:
            return node
        node = child


def find_by_header(forest: Forest, line: int) -> OutlineNode | None:
    """Return the node whose header starts exactly at ``line``."""

    node = locate(forest, line)
    while node is not None and node.header_range.start != line:
        node = node.parent
    return node


def first_node_at_or_after(forest: Forest, line: int) -> OutlineNode | None:
    """Return the first node, in document order, whose header starts at or after ``line``."""

    for node in forest.walk():
        if node.header_range.start >= line:
            return node
    return None
