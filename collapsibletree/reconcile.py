"""
Reconciliation between two successive renders of the tree.

The previous render is described by a :class:`RenderSnapshot` (what is on
screen, with committed coordinates). The new render is the freshly laid out
visible node/link set. Elements are matched by node id (links by the id of
their child endpoint) and classified as entering, persisting or exiting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from collapsibletree.exceptions import MissingNodeReferenceError, ReconciliationError
from collapsibletree.node import Link, Node

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
ViewBox = Tuple[float, float, float, float]


class Phase(Enum):
    ENTER = "enter"
    UPDATE = "update"
    EXIT = "exit"


@dataclass(frozen=True)
class RenderedNode:
    id: int
    name: str
    depth: int
    x: float
    y: float
    has_hidden_children: bool = False

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class RenderedLink:
    id: int
    source_id: int
    source: Point
    target: Point


@dataclass
class RenderSnapshot:
    """Committed state of the drawing after the last completed transition."""

    nodes: Dict[int, RenderedNode] = field(default_factory=dict)
    links: Dict[int, RenderedLink] = field(default_factory=dict)
    viewbox: Optional[ViewBox] = None

    @classmethod
    def from_visible(
        cls,
        nodes: Sequence[Node],
        links: Sequence[Link],
        viewbox: Optional[ViewBox] = None,
    ) -> "RenderSnapshot":
        return cls(
            nodes={
                n.id: RenderedNode(
                    n.id, n.name, n.depth, n.x, n.y, n.has_hidden_children
                )
                for n in nodes
            },
            links={
                link.id: RenderedLink(
                    link.id, link.source.id, link.source.position, link.target.position
                )
                for link in links
            },
            viewbox=viewbox,
        )

    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self) -> dict:
        return {
            "nodes": [
                {
                    "id": n.id,
                    "name": n.name,
                    "depth": n.depth,
                    "x": n.x,
                    "y": n.y,
                    "collapsed": n.has_hidden_children,
                }
                for n in self.nodes.values()
            ],
            "links": [
                {"id": link.id, "source": link.source_id, "target": link.id}
                for link in self.links.values()
            ],
            "viewBox": list(self.viewbox) if self.viewbox is not None else None,
        }


@dataclass(frozen=True)
class NodeChange:
    id: int
    name: str
    depth: int
    phase: Phase
    start: Point
    end: Point
    start_opacity: float
    end_opacity: float
    has_hidden_children: bool = False


@dataclass(frozen=True)
class LinkChange:
    id: int
    source_id: int
    phase: Phase
    start: Tuple[Point, Point]
    end: Tuple[Point, Point]
    start_opacity: float
    end_opacity: float


C = TypeVar("C", NodeChange, LinkChange)


@dataclass
class ChangeSet(Generic[C]):
    """Entering, persisting and exiting elements of one kind."""

    entering: List[C] = field(default_factory=list)
    persisting: List[C] = field(default_factory=list)
    exiting: List[C] = field(default_factory=list)

    def __iter__(self):
        yield from self.entering
        yield from self.persisting
        yield from self.exiting

    def __len__(self) -> int:
        return len(self.entering) + len(self.persisting) + len(self.exiting)

    def ids(self, phase: Phase) -> List[int]:
        bucket = {
            Phase.ENTER: self.entering,
            Phase.UPDATE: self.persisting,
            Phase.EXIT: self.exiting,
        }[phase]
        return [change.id for change in bucket]

    def summary(self) -> Dict[str, List[int]]:
        return {
            "entering": self.ids(Phase.ENTER),
            "persisting": self.ids(Phase.UPDATE),
            "exiting": self.ids(Phase.EXIT),
        }


@dataclass
class Transition:
    """Everything needed to animate one toggle and commit its result."""

    trigger_id: int
    nodes: ChangeSet[NodeChange]
    links: ChangeSet[LinkChange]
    target: RenderSnapshot
    viewbox_start: Optional[ViewBox] = None
    viewbox_end: Optional[ViewBox] = None

    def summary(self) -> dict:
        return {
            "trigger": self.trigger_id,
            "nodes": self.nodes.summary(),
            "links": self.links.summary(),
        }


class Reconciler:
    """Diffs the previous render against a newly laid out visible set."""

    def reconcile(
        self,
        previous: RenderSnapshot,
        nodes: Sequence[Node],
        links: Sequence[Link],
        trigger: Node,
        viewbox: Optional[ViewBox] = None,
    ) -> Transition:
        """
        Classify nodes and links as entering, persisting or exiting.

        Entering elements start at the trigger's previous position, exiting
        elements move to the trigger's new position.

        Args:
            previous: Snapshot of the last committed render.
            nodes: Visible nodes in pre-order, with fresh ``x``/``y``.
            links: Visible links, in pre-order of their child endpoint.
            trigger: The node whose click caused this update.
            viewbox: Viewport fitted to the new layout.

        Returns:
            A Transition holding both change sets and the snapshot to commit.
        """
        origin = _origin_of(trigger)
        destination = trigger.position
        current_ids = {n.id for n in nodes}

        node_changes: ChangeSet[NodeChange] = ChangeSet()
        for node in nodes:
            before = previous.nodes.get(node.id)
            if before is None:
                node_changes.entering.append(
                    NodeChange(
                        node.id, node.name, node.depth, Phase.ENTER,
                        origin, node.position, 0.0, 1.0, node.has_hidden_children,
                    )
                )
            else:
                node_changes.persisting.append(
                    NodeChange(
                        node.id, node.name, node.depth, Phase.UPDATE,
                        before.position, node.position, 1.0, 1.0,
                        node.has_hidden_children,
                    )
                )
        for node_id, before in previous.nodes.items():
            if node_id not in current_ids:
                node_changes.exiting.append(
                    NodeChange(
                        node_id, before.name, before.depth, Phase.EXIT,
                        before.position, destination, 1.0, 0.0,
                        before.has_hidden_children,
                    )
                )

        link_changes: ChangeSet[LinkChange] = ChangeSet()
        current_link_ids = set()
        for link in links:
            if link.source.id not in current_ids or link.target.id not in current_ids:
                MissingNodeReferenceError.raise_for_link(link.source, link.target)
            current_link_ids.add(link.id)
            end = (link.source.position, link.target.position)
            before_link = previous.links.get(link.id)
            if before_link is None:
                link_changes.entering.append(
                    LinkChange(
                        link.id, link.source.id, Phase.ENTER,
                        (origin, origin), end, 0.0, 1.0,
                    )
                )
            else:
                link_changes.persisting.append(
                    LinkChange(
                        link.id, link.source.id, Phase.UPDATE,
                        (before_link.source, before_link.target), end, 1.0, 1.0,
                    )
                )
        for link_id, before_link in previous.links.items():
            if link_id not in current_link_ids:
                link_changes.exiting.append(
                    LinkChange(
                        link_id, before_link.source_id, Phase.EXIT,
                        (before_link.source, before_link.target),
                        (destination, destination), 1.0, 0.0,
                    )
                )

        _check_partitions("node", node_changes, current_ids, set(previous.nodes))
        _check_partitions("link", link_changes, current_link_ids, set(previous.links))
        logger.debug(
            "Reconciled toggle of %d: nodes +%d ~%d -%d, links +%d ~%d -%d",
            trigger.id,
            len(node_changes.entering),
            len(node_changes.persisting),
            len(node_changes.exiting),
            len(link_changes.entering),
            len(link_changes.persisting),
            len(link_changes.exiting),
        )
        return Transition(
            trigger_id=trigger.id,
            nodes=node_changes,
            links=link_changes,
            target=RenderSnapshot.from_visible(nodes, links, viewbox),
            viewbox_start=previous.viewbox if previous.viewbox is not None else viewbox,
            viewbox_end=viewbox,
        )


def _origin_of(trigger: Node) -> Point:
    # first render: the trigger has no committed position yet
    previous = trigger.previous_position
    return previous if previous is not None else trigger.position


def _check_partitions(kind: str, changes: ChangeSet, current: set, previous: set) -> None:
    entering = set(changes.ids(Phase.ENTER))
    persisting = set(changes.ids(Phase.UPDATE))
    exiting = set(changes.ids(Phase.EXIT))
    total = len(changes.entering) + len(changes.persisting) + len(changes.exiting)
    if total != len(entering | persisting | exiting):
        overlap = (entering & persisting) | (entering & exiting) | (persisting & exiting)
        ReconciliationError.raise_overlap(kind, overlap)
    missing = (current | previous) - (entering | persisting | exiting)
    if missing:
        ReconciliationError.raise_missing(kind, missing)
