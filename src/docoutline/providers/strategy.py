"""Per-document-type label and level strategies."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from docoutline.models.symbol import Symbol, SymbolKind

NormalizeLabel = Callable[[str], str]
ResolveLevel = Callable[[SymbolKind, str], "int | None"]


@dataclass(frozen=True)
class LabelStrategy:
    """Pair of pluggable functions applied to every symbol of a document type.

    ``resolve_level`` returns ``None`` to keep the level the source reported.
    """

    name: str
    normalize_label: NormalizeLabel
    resolve_level: ResolveLevel

    def apply(self, symbols: Iterable[Symbol]) -> list[Symbol]:
        result: list[Symbol] = []
        for symbol in symbols:
            level = self.resolve_level(symbol.kind, symbol.name)
            result.append(
                symbol.model_copy(
                    update={
                        "name": self.normalize_label(symbol.name),
                        "level": symbol.level if level is None else level,
                    }
                )
            )
        return result


def _keep_level(kind: SymbolKind, name: str) -> int | None:
    return None


GENERIC_STRATEGY = LabelStrategy(name="generic", normalize_label=str.strip, resolve_level=_keep_level)
