"""Symbol sources, fallback scanners and per-type strategies."""

from __future__ import annotations

from docoutline.providers.markdown import MARKDOWN_STRATEGY, parse_markdown_headings
from docoutline.providers.registry import FallbackParser, ProviderPair, ProviderRegistry
from docoutline.providers.sources import (
    CallableSymbolSource,
    NestedSymbolSource,
    NullSymbolSource,
    StaticSymbolSource,
    SymbolSource,
)
from docoutline.providers.strategy import GENERIC_STRATEGY, LabelStrategy

__all__ = [
    "CallableSymbolSource",
    "FallbackParser",
    "GENERIC_STRATEGY",
    "LabelStrategy",
    "MARKDOWN_STRATEGY",
    "NestedSymbolSource",
    "NullSymbolSource",
    "ProviderPair",
    "ProviderRegistry",
    "StaticSymbolSource",
    "SymbolSource",
    "parse_markdown_headings",
]
