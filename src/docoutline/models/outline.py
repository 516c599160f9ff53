"""Outline tree models.

An outline is a forest of :class:`OutlineNode` built for exactly one document snapshot.
Forests are rebuilt wholesale on every refresh, so nodes carry no identity across rebuilds:
callers holding on to a node must re-resolve it by line number after the next refresh.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field

from docoutline.models.symbol import LineRange, SymbolKind


@dataclass(eq=False)
class OutlineNode:
    """A node in the outline with its header and owned content span."""

    label: str
    level: int
    header_range: LineRange
    content_range: LineRange
    kind: SymbolKind = SymbolKind.STRING
    children: list[OutlineNode] = field(default_factory=list)
    _parent: weakref.ReferenceType[OutlineNode] | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def parent(self) -> OutlineNode | None:
        """Enclosing node, or ``None`` for roots."""

        return self._parent() if self._parent is not None else None

    def add_child(self, child: OutlineNode) -> None:
        child._parent = weakref.ref(self)
        self.children.append(child)

    @property
    def start_line(self) -> int:
        return self.header_range.start

    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def walk(self) -> Iterator[OutlineNode]:
        """Yield this node and its descendants in document order."""

        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class BuildDiagnostic:
    """A symbol the hierarchy builder had to skip."""

    index: int
    name: str
    reason: str


@dataclass
class Forest:
    """Ordered root nodes for one document snapshot."""

    roots: list[OutlineNode] = field(default_factory=list)
    line_count: int = 0
    uri: str | None = None
    version: int | None = None
    skipped: list[BuildDiagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[OutlineNode]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    def __bool__(self) -> bool:
        return bool(self.roots)

    def walk(self) -> Iterator[OutlineNode]:
        """Pre-order traversal over every node."""

        for root in self.roots:
            yield from root.walk()

    @property
    def end_insertion_line(self) -> int:
        """Line immediately after the last root's content (end-of-document drop point)."""

        if not self.roots:
            return self.line_count
        return self.roots[-1].content_range.end + 1
