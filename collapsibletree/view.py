"""
The interactive tree view.

``TreeView`` is the mutable context of one drawing: the hierarchy model, the
last committed render and the configuration. A click toggles one node and
runs a full update cycle (layout, reconciliation, animated transition,
commit). Cycles never overlap: a click that arrives while a transition is
in flight is queued or ignored depending on ``TreeConfig.reentrant_policy``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from collapsibletree.animation import AnimationController
from collapsibletree.config import TreeConfig
from collapsibletree.exceptions import InvariantViolationError, RenderHaltedError
from collapsibletree.hierarchy import HierarchyModel, NodeRef
from collapsibletree.layout import LayoutExtent, SeparationPolicy, TreeLayoutEngine
from collapsibletree.reconcile import Reconciler, RenderSnapshot, Transition, ViewBox
from collapsibletree.scene import Scene, SvgScene

logger = logging.getLogger(__name__)


class TreeView:
    """
    One interactive drawing.

    Any exception inside an update cycle halts the view: the toggle has been
    applied but not committed, so later calls raise ``RenderHaltedError``.
    The transition lock is recreated per event loop; a view must not be
    clicked from two loops at the same time.
    """

    def __init__(
        self,
        model: HierarchyModel,
        scene: Scene,
        config: Optional[TreeConfig] = None,
    ):
        self.model = model
        self.scene = scene
        self.config = config or TreeConfig()
        self.layout_engine = TreeLayoutEngine(
            node_size=self.config.node_size,
            separation=SeparationPolicy(
                self.config.sibling_separation, self.config.cousin_separation
            ),
            orientation=self.config.orientation,
        )
        self.reconciler = Reconciler()
        self.controller = AnimationController(
            scene,
            duration_ms=self.config.duration_ms,
            fps=self.config.fps,
            realtime=self.config.realtime,
        )
        self.snapshot = RenderSnapshot()
        self.extent: Optional[LayoutExtent] = None
        self.last_transition: Optional[Transition] = None
        self.halted = False
        self._mounted = False
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @classmethod
    def from_data(
        cls,
        data: Mapping[str, Any],
        scene: Optional[Scene] = None,
        config: Optional[TreeConfig] = None,
    ) -> "TreeView":
        config = config or TreeConfig()
        model = HierarchyModel.from_data(data, initial_depth=config.initial_depth)
        return cls(model, scene if scene is not None else SvgScene(), config)

    @property
    def busy(self) -> bool:
        return self._lock is not None and self._lock.locked()

    async def render(self) -> Transition:
        """Mount the scene and draw the initial tree, growing out of the root."""
        self._check_halted()
        async with self._transition_lock():
            if not self._mounted:
                self.scene.mount(self.config)
                self._mounted = True
            return await self._update(self.model.root)

    async def click(self, ref: NodeRef) -> Optional[Transition]:
        """
        Toggle a node and animate the result.

        Returns:
            The played transition, or None if the click was ignored because
            another transition was still running.
        """
        self._check_halted()
        node = self.model.resolve(ref)
        if self.busy and self.config.reentrant_policy == "ignore":
            logger.debug("Ignoring click on %r during transition", node)
            return None
        if not self._mounted:
            await self.render()
        async with self._transition_lock():
            self._check_halted()
            self.model.toggle(node)
            return await self._update(node)

    def prepare(self, trigger: NodeRef) -> Transition:
        """Lay out the visible tree and diff it against the committed render."""
        trigger = self.model.resolve(trigger)
        visible = self.model.visible_descendants()
        result = self.layout_engine.apply(visible)
        self.extent = result.extent
        links = self.model.visible_links(visible)
        return self.reconciler.reconcile(
            self.snapshot, visible, links, trigger, self.viewbox_for(result.extent)
        )

    def viewbox_for(self, extent: LayoutExtent) -> ViewBox:
        """Viewport fitted to the current tree extent plus margins."""
        margin = self.config.margin
        # the scene shifts nodes by dy along the depth axis
        if self.config.orientation == "horizontal":
            dx, dy = self.config.dy, 0
        else:
            dx, dy = 0, self.config.dy
        width = extent.width + margin.left + margin.right + dx
        height = max(
            self.config.height,
            extent.height + margin.top + margin.bottom + dy,
        )
        return (extent.left - margin.left, extent.top - margin.top, width, height)

    async def _update(self, trigger) -> Transition:
        try:
            transition = self.prepare(trigger)
            self.snapshot = await self.controller.animate(transition, self.model)
        except Exception as e:
            # the toggle is applied and the scene may hold a half-drawn frame
            self.halted = True
            if isinstance(e, InvariantViolationError):
                kind = "invariant violation"
            else:
                kind = "failed update cycle"
            logger.error("Rendering halted after %s", kind, exc_info=True)
            raise
        self.last_transition = transition
        return transition

    def _transition_lock(self) -> asyncio.Lock:
        # asyncio locks bind to the loop that first waits on them
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _check_halted(self) -> None:
        if self.halted:
            raise RenderHaltedError(
                "Rendering was halted after an internal error; rebuild the view"
            )
