from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(eq=False)
class Node:
    """
    One entry of the hierarchy.

    ``all_children`` is fixed at construction. ``visible_children`` is derived
    from the ``expanded`` flag, so a node shows either all of its children or
    none of them.
    """

    id: int
    name: str
    depth: int = 0
    data: Dict[str, Any] = field(default_factory=dict)
    all_children: Tuple["Node", ...] = ()
    expanded: bool = True
    x: Optional[float] = None
    y: Optional[float] = None
    x0: Optional[float] = None
    y0: Optional[float] = None
    parent: Optional["Node"] = field(default=None, repr=False)

    @property
    def visible_children(self) -> Tuple["Node", ...]:
        return self.all_children if self.expanded else ()

    @property
    def has_hidden_children(self) -> bool:
        return bool(self.all_children) and not self.expanded

    def is_leaf(self) -> bool:
        return not self.all_children

    def is_root(self) -> bool:
        return self.parent is None

    def traverse(self) -> Iterator["Node"]:
        """Pre-order over the full subtree, ignoring collapse state."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.all_children))

    def traverse_visible(self) -> Iterator["Node"]:
        """Pre-order over the subtree, following visible children only."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.visible_children))

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def previous_position(self) -> Optional[Tuple[float, float]]:
        if self.x0 is None or self.y0 is None:
            return None
        return (self.x0, self.y0)

    def __repr__(self):
        return f"Node({self.id}, '{self.name}')"


@dataclass(frozen=True, eq=False)
class Link:
    """Edge from a parent to one of its visible children."""

    source: Node
    target: Node

    @property
    def id(self) -> int:
        # a node has a single parent, so the child id is unique among links
        return self.target.id

    def __repr__(self):
        return f"Link({self.source.id} -> {self.target.id})"
