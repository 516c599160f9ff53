"""Document type -> provider pair table."""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass

from docoutline.config import Settings
from docoutline.logging import get_logger
from docoutline.models.symbol import Symbol
from docoutline.providers.markdown import MARKDOWN_STRATEGY, parse_markdown_headings
from docoutline.providers.sources import NullSymbolSource, SymbolSource
from docoutline.providers.strategy import GENERIC_STRATEGY, LabelStrategy

logger = get_logger(__name__)

FallbackParser = Callable[[str], list[Symbol]]


@dataclass
class ProviderPair:
    """The symbol source, optional fallback scanner and strategy for one document type."""

    source: SymbolSource
    fallback: FallbackParser | None = None
    strategy: LabelStrategy = GENERIC_STRATEGY


ProviderFactory = Callable[[], ProviderPair]


class ProviderRegistry:
    """Maps document type tags to provider pair factories.

    Unknown type tags get the generic pair: no analyzer, no fallback, labels stripped and
    source levels kept.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self._factories: dict[str, ProviderFactory] = {}
        for tag in self._settings.markdown_type_tags:
            self._factories[tag] = self.markdown_pair

    def markdown_pair(self, source: SymbolSource | None = None) -> ProviderPair:
        """Provider pair for markdown-like documents."""

        fallback = functools.partial(
            parse_markdown_headings,
            skip_code_fences=self._settings.fallback_skip_code_fences,
            max_level=self._settings.max_heading_level,
        )
        return ProviderPair(
            source=source or NullSymbolSource(),
            fallback=fallback,
            strategy=MARKDOWN_STRATEGY,
        )

    def generic_pair(self) -> ProviderPair:
        return ProviderPair(source=NullSymbolSource())

    def register(self, type_tag: str, factory: ProviderFactory) -> None:
        """Register (or replace) the factory for ``type_tag``."""

        logger.debug("Registering provider for type %s", type_tag)
        self._factories[type_tag] = factory

    def register_source(self, type_tag: str, source_factory: Callable[[], SymbolSource]) -> None:
        """Attach an analyzer to ``type_tag``, keeping its default fallback and strategy."""

        if type_tag in self._settings.markdown_type_tags:
            self.register(type_tag, lambda: self.markdown_pair(source_factory()))
        else:
            self.register(type_tag, lambda: ProviderPair(source=source_factory()))

    def has_custom(self, type_tag: str) -> bool:
        return type_tag in self._factories

    def create(self, type_tag: str) -> ProviderPair:
        """Instantiate a fresh provider pair for ``type_tag``."""

        factory = self._factories.get(type_tag)
        return factory() if factory is not None else self.generic_pair()
