"""Symbol models.

Symbols are produced by analyzers (or the fallback scanners) and are read-only to the
outline core. ``level`` and ``header_range`` are unconstrained here: malformed
symbols must reach the hierarchy builder so they can be reported rather than rejected at
construction time.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SymbolKind(str, Enum):
    """Structural symbol categories reported by analyzers."""

    FILE = "file"
    MODULE = "module"
    NAMESPACE = "namespace"
    PACKAGE = "package"
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    ENUM = "enum"
    INTERFACE = "interface"
    FUNCTION = "function"
    VARIABLE = "variable"
    CONSTANT = "constant"
    STRING = "string"
    KEY = "key"
    OBJECT = "object"
    STRUCT = "struct"
    NULL = "null"


class LineRange(BaseModel):
    """Inclusive, zero-based span of lines."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "LineRange":
        if self.end < self.start:
            raise ValueError(f"range end {self.end} precedes start {self.start}")
        return self

    @classmethod
    def single(cls, line: int) -> "LineRange":
        """Range covering exactly one line."""

        return cls(start=line, end=line)

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end

    def encloses(self, other: "LineRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"[{self.start},{self.end}]"


class Symbol(BaseModel):
    """A structural declaration detected in a document.

    ``children`` is only populated by sources whose symbols form a native tree; such
    trees are flattened in pre-order before building.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: SymbolKind = SymbolKind.STRING
    level: int = 1
    header_range: LineRange | None = None
    children: list["Symbol"] = Field(default_factory=list)
