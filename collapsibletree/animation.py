"""
Animated transitions between two layouts.

A :class:`~collapsibletree.reconcile.Transition` is sampled into frames
(positions and opacities of every element at an eased time ``t``) and pushed
to a scene. All three partitions move concurrently over the same duration.
When the last frame has been drawn, exiting elements are removed from the
scene and the new coordinates are committed as the next baseline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence

import numpy as np

from collapsibletree.exceptions import InvariantViolationError
from collapsibletree.reconcile import (
    LinkChange,
    NodeChange,
    Phase,
    Point,
    RenderSnapshot,
    Transition,
    ViewBox,
)

if TYPE_CHECKING:
    from collapsibletree.hierarchy import HierarchyModel
    from collapsibletree.scene import Scene

logger = logging.getLogger(__name__)

Easing = Callable[[np.ndarray], np.ndarray]


def ease_cubic_in_out(t):
    """Symmetric cubic easing, slow at both ends."""
    t = np.asarray(t, dtype=float) * 2
    return np.where(t <= 1, t**3, (t - 2) ** 3 + 2) / 2


def ease_linear(t):
    return np.asarray(t, dtype=float)


@dataclass(frozen=True)
class NodeState:
    id: int
    name: str
    depth: int
    x: float
    y: float
    opacity: float
    phase: Phase
    has_hidden_children: bool = False


@dataclass(frozen=True)
class LinkState:
    id: int
    source_id: int
    source: Point
    target: Point
    opacity: float
    phase: Phase


@dataclass
class Frame:
    index: int
    t: float
    nodes: List[NodeState] = field(default_factory=list)
    links: List[LinkState] = field(default_factory=list)
    viewbox: Optional[ViewBox] = None

    @property
    def is_last(self) -> bool:
        return self.t >= 1.0


class AnimationController:
    """
    Drives transitions on a scene.

    Args:
        scene: Rendering collaborator receiving frames and removals.
        duration_ms: Length of every transition.
        fps: Sampling rate of the interpolation.
        realtime: Sleep between frames. Disable to render all frames at once.
        easing: Maps linear time in [0, 1] to eased progress.
        sleep: Awaitable used to wait between frames.
    """

    def __init__(
        self,
        scene: "Scene",
        duration_ms: float = 250,
        fps: int = 60,
        realtime: bool = True,
        easing: Easing = ease_cubic_in_out,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.scene = scene
        self.duration_ms = duration_ms
        self.fps = fps
        self.realtime = realtime
        self.easing = easing
        self._sleep = sleep
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def frame_count(self) -> int:
        """Number of interpolation steps; frames are this plus the start frame."""
        return max(1, int(round(self.duration_ms / 1000.0 * self.fps)))

    def frames(self, transition: Transition) -> List[Frame]:
        """Sample the whole transition. Pure."""
        times = np.linspace(0.0, 1.0, self.frame_count + 1)
        progress = self.easing(times)

        node_changes = list(transition.nodes)
        link_changes = list(transition.links)
        node_xy, node_alpha = _interpolate_nodes(node_changes, progress)
        link_xy, link_alpha = _interpolate_links(link_changes, progress)
        viewboxes = _interpolate_viewbox(
            transition.viewbox_start, transition.viewbox_end, progress
        )

        frames = []
        for k, t in enumerate(times):
            frames.append(
                Frame(
                    index=k,
                    t=float(t),
                    nodes=[
                        NodeState(
                            c.id,
                            c.name,
                            c.depth,
                            float(node_xy[k, i, 0]),
                            float(node_xy[k, i, 1]),
                            float(node_alpha[k, i]),
                            c.phase,
                            c.has_hidden_children,
                        )
                        for i, c in enumerate(node_changes)
                    ],
                    links=[
                        LinkState(
                            c.id,
                            c.source_id,
                            (float(link_xy[k, i, 0]), float(link_xy[k, i, 1])),
                            (float(link_xy[k, i, 2]), float(link_xy[k, i, 3])),
                            float(link_alpha[k, i]),
                            c.phase,
                        )
                        for i, c in enumerate(link_changes)
                    ],
                    viewbox=viewboxes[k] if viewboxes is not None else None,
                )
            )
        return frames

    async def animate(
        self, transition: Transition, model: "HierarchyModel"
    ) -> RenderSnapshot:
        """
        Play the transition on the scene, then remove exiting elements and
        commit ``x0 = x, y0 = y`` for all visible nodes.

        Returns:
            The snapshot that is now on screen.
        """
        if self._in_flight:
            raise InvariantViolationError(
                "A transition is already in flight; toggles must be serialized"
            )
        self._in_flight = True
        try:
            frames = self.frames(transition)
            interval = self.duration_ms / 1000.0 / self.frame_count
            for frame in frames:
                self.scene.draw(frame)
                if self.realtime and not frame.is_last:
                    await self._sleep(interval)
            self.scene.remove(
                transition.nodes.ids(Phase.EXIT), transition.links.ids(Phase.EXIT)
            )
            model.commit()
            logger.debug(
                "Committed transition for node %d after %d frames",
                transition.trigger_id,
                len(frames),
            )
        finally:
            self._in_flight = False
        return transition.target


def _interpolate_nodes(changes: Sequence[NodeChange], progress: np.ndarray):
    start = np.array([c.start for c in changes], dtype=float).reshape(-1, 2)
    end = np.array([c.end for c in changes], dtype=float).reshape(-1, 2)
    alpha0 = np.array([c.start_opacity for c in changes], dtype=float)
    alpha1 = np.array([c.end_opacity for c in changes], dtype=float)
    p = progress[:, None]
    xy = start[None, :, :] * (1 - p[:, :, None]) + end[None, :, :] * p[:, :, None]
    alpha = alpha0[None, :] * (1 - p) + alpha1[None, :] * p
    return xy, alpha


def _interpolate_links(changes: Sequence[LinkChange], progress: np.ndarray):
    # (source x, source y, target x, target y) per link
    start = np.array(
        [(*c.start[0], *c.start[1]) for c in changes], dtype=float
    ).reshape(-1, 4)
    end = np.array([(*c.end[0], *c.end[1]) for c in changes], dtype=float).reshape(
        -1, 4
    )
    alpha0 = np.array([c.start_opacity for c in changes], dtype=float)
    alpha1 = np.array([c.end_opacity for c in changes], dtype=float)
    p = progress[:, None]
    xy = start[None, :, :] * (1 - p[:, :, None]) + end[None, :, :] * p[:, :, None]
    alpha = alpha0[None, :] * (1 - p) + alpha1[None, :] * p
    return xy, alpha


def _interpolate_viewbox(
    start: Optional[ViewBox], end: Optional[ViewBox], progress: np.ndarray
) -> Optional[List[ViewBox]]:
    if end is None:
        return None
    a = np.array(start if start is not None else end, dtype=float)
    b = np.array(end, dtype=float)
    p = progress[:, None]
    boxes = a[None, :] * (1 - p) + b[None, :] * p
    return [tuple(float(v) for v in box) for box in boxes]
