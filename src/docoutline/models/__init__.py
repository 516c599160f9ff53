"""Data models used across the project."""

from __future__ import annotations

from docoutline.models.document import LineEdit, TextDocument, apply_line_edit, split_lines
from docoutline.models.outline import BuildDiagnostic, Forest, OutlineNode
from docoutline.models.symbol import LineRange, Symbol, SymbolKind

__all__ = [
    "BuildDiagnostic",
    "Forest",
    "LineEdit",
    "LineRange",
    "OutlineNode",
    "Symbol",
    "SymbolKind",
    "TextDocument",
    "apply_line_edit",
    "split_lines",
]
