"""
Hierarchy model for the collapsible tree.

Wraps a nested record dataset (``{"name": ..., "children": [...]}``) into a
tree of :class:`~collapsibletree.node.Node` objects. Ids are assigned once in
pre-order and are the only key used to match nodes between two renders.
Collapsing hides a subtree, it never deletes nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from collapsibletree.exceptions import (
    DuplicateNodeIdError,
    HierarchyConstructionError,
    MissingNodeReferenceError,
    UnknownNodeError,
)
from collapsibletree.node import Link, Node

logger = logging.getLogger(__name__)

NodeRef = Union[Node, int]


class HierarchyModel:
    """Owns the node set and the expand/collapse flag of every node."""

    def __init__(self, root: Node, nodes: Sequence[Node]):
        self.root = root
        self._nodes: List[Node] = list(nodes)
        self._by_id: Dict[int, Node] = {}
        for node in self._nodes:
            if node.id in self._by_id:
                raise DuplicateNodeIdError(
                    f"Node id {node.id} assigned to both "
                    f"{self._by_id[node.id].name!r} and {node.name!r}"
                )
            self._by_id[node.id] = node
        if root.id not in self._by_id or self._by_id[root.id] is not root:
            raise HierarchyConstructionError("Root node is not part of the node set")

    @classmethod
    def from_data(
        cls, data: Mapping[str, Any], initial_depth: Optional[int] = None
    ) -> "HierarchyModel":
        """
        Build the hierarchy from a nested record.

        Args:
            data: Root record. Every record needs a string ``name`` and may hold
                  an ordered ``children`` list plus arbitrary payload fields.
            initial_depth: Nodes at this depth or deeper start collapsed.
                           ``None`` expands every node.

        Returns:
            The constructed HierarchyModel.

        Raises:
            HierarchyConstructionError: If a record is malformed.
        """
        nodes: List[Node] = []
        children_of: Dict[int, List[Node]] = {}
        stack = [(data, None, 0, "root", frozenset())]
        while stack:
            record, parent, depth, path, ancestors = stack.pop()
            if id(record) in ancestors:
                raise HierarchyConstructionError(
                    f"Record at {path} contains itself; the data is not a tree"
                )
            children = _validate_record(record, path)
            ancestors = ancestors | {id(record)}
            node = Node(
                id=len(nodes),
                name=record["name"],
                depth=depth,
                data={k: v for k, v in record.items() if k != "children"},
            )
            node.parent = parent
            if parent is not None:
                children_of[parent.id].append(node)
            children_of[node.id] = []
            nodes.append(node)
            for index in range(len(children) - 1, -1, -1):
                stack.append(
                    (
                        children[index],
                        node,
                        depth + 1,
                        f"{path}.children[{index}]",
                        ancestors,
                    )
                )

        for node in nodes:
            node.all_children = tuple(children_of[node.id])
            node.expanded = initial_depth is None or node.depth < initial_depth

        model = cls(nodes[0], nodes)
        logger.debug(
            "Built hierarchy with %d nodes, %d visible",
            len(model),
            len(model.visible_descendants()),
        )
        return model

    # ------------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def get(self, node_id: int) -> Node:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def resolve(self, ref: NodeRef) -> Node:
        if isinstance(ref, Node):
            if self._by_id.get(ref.id) is not ref:
                raise UnknownNodeError(ref.id)
            return ref
        return self.get(ref)

    def descendants(self) -> List[Node]:
        """All nodes in pre-order, regardless of collapse state."""
        return list(self._nodes)

    # ------------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------------

    def toggle(self, ref: NodeRef) -> "HierarchyModel":
        """Flip the expand/collapse flag of a node. Leaves are left untouched."""
        node = self.resolve(ref)
        if node.is_leaf():
            logger.debug("Toggle on leaf %r ignored", node)
            return self
        node.expanded = not node.expanded
        logger.info("%s %r", "Expanded" if node.expanded else "Collapsed", node)
        return self

    def visible_descendants(self) -> List[Node]:
        return list(self.root.traverse_visible())

    def visible_links(self, visible: Optional[Sequence[Node]] = None) -> List[Link]:
        """One link per visible non-root node, in pre-order of the child."""
        if visible is None:
            visible = self.visible_descendants()
        visible_ids = {node.id for node in visible}
        links = []
        for node in visible:
            if node is self.root:
                continue
            parent = node.parent
            if parent is None or parent.id not in visible_ids:
                MissingNodeReferenceError.raise_for_link(parent or node, node)
            links.append(Link(parent, node))
        return links

    def commit(self) -> None:
        """Make the current coordinates of all visible nodes the new baseline."""
        for node in self.visible_descendants():
            node.x0 = node.x
            node.y0 = node.y


def _validate_record(record: Any, path: str) -> List[Any]:
    if not isinstance(record, Mapping):
        raise HierarchyConstructionError(
            f"Record at {path} must be a mapping, got {type(record).__name__}"
        )
    name = record.get("name")
    if not isinstance(name, str):
        raise HierarchyConstructionError(f"Record at {path} needs a string 'name'")
    children = record.get("children")
    if children is None:
        return []
    if not isinstance(children, (list, tuple)):
        raise HierarchyConstructionError(
            f"'children' of {path} must be a list, got {type(children).__name__}"
        )
    return list(children)
