"""Outline hierarchy engine: builder, locator, mover and dispatcher."""

from __future__ import annotations

from docoutline.outline.builder import build_forest, flatten_symbols, iter_nodes
from docoutline.outline.locator import find_by_header, first_node_at_or_after, locate
from docoutline.outline.mover import MoveResult, SectionMover
from docoutline.outline.dispatcher import OutlineDispatcher

__all__ = [
    "MoveResult",
    "OutlineDispatcher",
    "SectionMover",
    "build_forest",
    "find_by_header",
    "first_node_at_or_after",
    "flatten_symbols",
    "iter_nodes",
    "locate",
]
