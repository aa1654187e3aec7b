"""
Custom exceptions for the collapsible tree package.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, NoReturn

if TYPE_CHECKING:
    from collapsibletree.node import Node


class CollapsibleTreeError(Exception):
    """Base exception for collapsible tree errors."""

    pass


class HierarchyConstructionError(CollapsibleTreeError, ValueError):
    """Raised when the input dataset cannot be turned into a hierarchy."""

    pass


class DuplicateNodeIdError(HierarchyConstructionError):
    """Raised when two nodes end up with the same id."""

    pass


class UnknownNodeError(CollapsibleTreeError, KeyError):
    """Raised when a node id is not part of the hierarchy."""

    def __init__(self, node_id: object):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"No node with id {self.node_id!r} in the hierarchy"


class InvariantViolationError(CollapsibleTreeError):
    """Raised when an internal invariant does not hold. Not recoverable."""

    pass


class MissingNodeReferenceError(InvariantViolationError):
    """Raised when a link endpoint is not in the visible node set."""

    @staticmethod
    def raise_for_link(parent: Node, child: Node) -> NoReturn:
        """
        Raises a MissingNodeReferenceError for a parent/child edge whose
        parent is not visible.

        Args:
            parent: The parent endpoint that could not be found
            child: The visible child whose link is broken

        Raises:
            MissingNodeReferenceError: Always
        """
        raise MissingNodeReferenceError(
            f"Link {parent.id} -> {child.id} references parent {parent.name!r} "
            f"which is not in the visible set."
        )


class ReconciliationError(InvariantViolationError):
    """Raised when entering/persisting/exiting partitions overlap or miss ids."""

    @staticmethod
    def raise_overlap(kind: str, ids: Iterable[int]) -> NoReturn:
        raise ReconciliationError(
            f"{kind} partitions are not disjoint, shared ids: {sorted(ids)}"
        )

    @staticmethod
    def raise_missing(kind: str, ids: Iterable[int]) -> NoReturn:
        raise ReconciliationError(
            f"{kind} partitions do not cover ids: {sorted(ids)}"
        )


class RenderHaltedError(CollapsibleTreeError):
    """Raised for any update after an invariant violation stopped rendering."""

    pass
