"""
Tidy-tree layout for the collapsible tree.

Positions every visible node: depth maps to one axis with a fixed spacing per
level, the spread axis is computed with the Buchheim/Walker linear-time
variant of the Reingold-Tilford algorithm. Adjacent nodes are kept apart by a
separation policy that distinguishes siblings from cousins. The layout is
recomputed from scratch over the visible set on every toggle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from collapsibletree.exceptions import InvariantViolationError
from collapsibletree.node import Node

logger = logging.getLogger(__name__)

ORIENTATIONS = ("vertical", "horizontal")

Separation = Callable[[Node, Node], float]


@dataclass(frozen=True)
class SeparationPolicy:
    """Spacing units between two adjacent nodes at the same depth."""

    sibling: float = 2.0
    cousin: float = 3.0

    def __call__(self, a: Node, b: Node) -> float:
        return self.sibling if a.parent is b.parent else self.cousin


@dataclass(frozen=True)
class LayoutExtent:
    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class LayoutResult:
    positions: Dict[int, Tuple[float, float]]
    extent: LayoutExtent


class _WalkerNode:
    """Scratch record for one node during the two layout walks."""

    __slots__ = (
        "node",
        "parent",
        "children",
        "index",
        "A",
        "a",
        "z",
        "m",
        "c",
        "s",
        "t",
        "x",
    )

    def __init__(self, node: Optional[Node], index: int):
        self.node = node
        self.parent: Optional[_WalkerNode] = None
        self.children: List[_WalkerNode] = []
        self.index = index
        self.A: Optional[_WalkerNode] = None  # default ancestor
        self.a: _WalkerNode = self  # ancestor
        self.z = 0.0  # prelim
        self.m = 0.0  # mod
        self.c = 0.0  # change
        self.s = 0.0  # shift
        self.t: Optional[_WalkerNode] = None  # thread
        self.x = 0.0


class TreeLayoutEngine:
    """
    Computes coordinates for the visible part of a hierarchy.

    Args:
        node_size: (spread, depth) distance units. Spread is multiplied by the
                   separation value between neighbours, depth by the level.
        separation: Callable returning spacing units for two adjacent nodes.
        orientation: 'vertical' (depth grows along y) or 'horizontal'.
    """

    def __init__(
        self,
        node_size: Tuple[float, float] = (25.0, 200.0),
        separation: Optional[Separation] = None,
        orientation: str = "vertical",
    ):
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown orientation: {orientation}")
        self.node_size = node_size
        self.separation = separation if separation is not None else SeparationPolicy()
        self.orientation = orientation

    def layout(self, visible: Sequence[Node]) -> LayoutResult:
        """
        Lay out a pre-ordered sequence of visible nodes. The first node is the
        root of the drawing. Pure: the nodes are not modified.
        """
        if not visible:
            raise ValueError("Cannot lay out an empty node sequence")
        root = visible[0]
        walker_root, preorder = _build_walker_tree(root)
        if len(preorder) != len(visible):
            raise InvariantViolationError(
                f"Visible sequence has {len(visible)} nodes but the visible "
                f"subtree of {root!r} has {len(preorder)}"
            )

        for v in _postorder(walker_root):
            self._first_walk(v)
        walker_root.parent.m = -walker_root.z
        for v in preorder:
            _second_walk(v)

        dx, dy = self.node_size
        positions: Dict[int, Tuple[float, float]] = {}
        for v in preorder:
            spread = v.x * dx
            depth = (v.node.depth - root.depth) * dy
            if self.orientation == "vertical":
                positions[v.node.id] = (spread, depth)
            else:
                positions[v.node.id] = (depth, spread)

        extent = compute_extent(positions.values())
        logger.debug(
            "Laid out %d nodes, extent x=[%.1f, %.1f] y=[%.1f, %.1f]",
            len(positions),
            extent.left,
            extent.right,
            extent.top,
            extent.bottom,
        )
        return LayoutResult(positions=positions, extent=extent)

    def apply(self, visible: Sequence[Node]) -> LayoutResult:
        """Run :meth:`layout` and write ``x``/``y`` onto the nodes."""
        result = self.layout(visible)
        for node in visible:
            node.x, node.y = result.positions[node.id]
        return result

    def _first_walk(self, v: _WalkerNode) -> None:
        siblings = v.parent.children
        w = siblings[v.index - 1] if v.index else None
        if v.children:
            _execute_shifts(v)
            midpoint = (v.children[0].z + v.children[-1].z) / 2
            if w is not None:
                v.z = w.z + self.separation(v.node, w.node)
                v.m = v.z - midpoint
            else:
                v.z = midpoint
        elif w is not None:
            v.z = w.z + self.separation(v.node, w.node)
        v.parent.A = self._apportion(v, w, v.parent.A or siblings[0])

    def _apportion(
        self, v: _WalkerNode, w: Optional[_WalkerNode], ancestor: _WalkerNode
    ) -> _WalkerNode:
        """Push the subtree of ``v`` right until it clears its left siblings."""
        if w is None:
            return ancestor
        vip = vop = v
        vim = w
        vom = vip.parent.children[0]
        sip = vip.m
        sop = vop.m
        sim = vim.m
        som = vom.m
        vim = _next_right(vim)
        vip = _next_left(vip)
        while vim is not None and vip is not None:
            vom = _next_left(vom)
            vop = _next_right(vop)
            vop.a = v
            shift = vim.z + sim - vip.z - sip + self.separation(vim.node, vip.node)
            if shift > 0:
                _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
                sip += shift
                sop += shift
            sim += vim.m
            sip += vip.m
            som += vom.m
            sop += vop.m
            vim = _next_right(vim)
            vip = _next_left(vip)
        if vim is not None and _next_right(vop) is None:
            vop.t = vim
            vop.m += sim - sop
        if vip is not None and _next_left(vom) is None:
            vom.t = vip
            vom.m += sip - som
            ancestor = v
        return ancestor


def compute_extent(positions: Iterable[Tuple[float, float]]) -> LayoutExtent:
    """Bounding box of a collection of (x, y) positions."""
    xs = []
    ys = []
    for x, y in positions:
        xs.append(x)
        ys.append(y)
    if not xs:
        return LayoutExtent(0.0, 0.0, 0.0, 0.0)
    return LayoutExtent(left=min(xs), right=max(xs), top=min(ys), bottom=max(ys))


def _build_walker_tree(root: Node) -> Tuple[_WalkerNode, List[_WalkerNode]]:
    """Mirror the visible subtree; returns the root and all nodes in pre-order."""
    walker_root = _WalkerNode(root, 0)
    preorder = []
    stack = [walker_root]
    while stack:
        v = stack.pop()
        preorder.append(v)
        v.children = [
            _WalkerNode(child, i) for i, child in enumerate(v.node.visible_children)
        ]
        for child in v.children:
            child.parent = v
        stack.extend(reversed(v.children))
    sentinel = _WalkerNode(None, 0)
    sentinel.children = [walker_root]
    walker_root.parent = sentinel
    return walker_root, preorder


def _postorder(root: _WalkerNode) -> List[_WalkerNode]:
    """Children before parents, left siblings before right siblings."""
    order = []
    stack = [root]
    while stack:
        v = stack.pop()
        order.append(v)
        stack.extend(v.children)
    order.reverse()
    return order


def _second_walk(v: _WalkerNode) -> None:
    v.x = v.z + v.parent.m
    v.m += v.parent.m


def _next_left(v: _WalkerNode) -> Optional[_WalkerNode]:
    return v.children[0] if v.children else v.t


def _next_right(v: _WalkerNode) -> Optional[_WalkerNode]:
    return v.children[-1] if v.children else v.t


def _move_subtree(wm: _WalkerNode, wp: _WalkerNode, shift: float) -> None:
    change = shift / (wp.index - wm.index)
    wp.c -= change
    wp.s += shift
    wm.c += change
    wp.z += shift
    wp.m += shift


def _execute_shifts(v: _WalkerNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.z += shift
        w.m += shift
        change += w.c
        shift += w.s + change


def _next_ancestor(
    vim: _WalkerNode, v: _WalkerNode, ancestor: _WalkerNode
) -> _WalkerNode:
    return vim.a if vim.a.parent is v.parent else ancestor
