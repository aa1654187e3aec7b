"""
Rendering collaborators for the collapsible tree.

A :class:`Scene` receives animation frames and removal requests; it never
computes layout or diffs. :class:`SvgScene` keeps an SVG element per node and
link keyed by node id, so an element persists across frames and transitions.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from collapsibletree.animation import Frame
from collapsibletree.config import TreeConfig
from collapsibletree.svg import (
    LINK_STROKE_COLOR,
    LINK_STROKE_OPACITY,
    LINK_STROKE_WIDTH,
    add_node_marker,
    add_svg_group,
    add_svg_path,
    fmt,
    format_viewbox,
    get_svg_root,
    link_path_horizontal,
    link_path_vertical,
    update_node_marker,
)

logger = logging.getLogger(__name__)


class Scene(ABC):
    """Drawing surface contract used by the animation controller."""

    @abstractmethod
    def mount(self, config: TreeConfig) -> None:
        """Create the surface sized by the configured width, height and margin."""

    @abstractmethod
    def draw(self, frame: Frame) -> None:
        """Create or update every element listed in the frame."""

    @abstractmethod
    def remove(self, node_ids: Iterable[int], link_ids: Iterable[int]) -> None:
        """Drop elements from the rendered set."""


class SvgScene(Scene):
    """
    SVG scene graph built with ElementTree.

    Args:
        record_frames: Keep a serialized copy of the SVG after every frame.
    """

    def __init__(self, record_frames: bool = False):
        self.record_frames = record_frames
        self.recorded: List[str] = []
        self.root: Optional[ET.Element] = None
        self._links_group: Optional[ET.Element] = None
        self._nodes_group: Optional[ET.Element] = None
        self._nodes: Dict[int, ET.Element] = {}
        self._links: Dict[int, ET.Element] = {}
        self._dy = 0.0
        self._vertical = True

    def mount(self, config: TreeConfig) -> None:
        margin = config.margin
        self.root = get_svg_root(
            config.width,
            config.height,
            (-margin.left, -margin.top, config.width, config.height),
            font=config.font,
        )
        self._links_group = add_svg_group(
            self.root,
            {
                "class": "links",
                "fill": "none",
                "stroke": LINK_STROKE_COLOR,
                "stroke-opacity": LINK_STROKE_OPACITY,
                "stroke-width": LINK_STROKE_WIDTH,
            },
        )
        self._nodes_group = add_svg_group(
            self.root,
            {"class": "nodes", "cursor": "pointer", "pointer-events": "all"},
        )
        self._nodes.clear()
        self._links.clear()
        self.recorded.clear()
        self._dy = config.dy
        self._vertical = config.orientation == "vertical"
        logger.debug("Mounted SVG scene %sx%s", config.width, config.height)

    @property
    def node_ids(self) -> List[int]:
        return list(self._nodes)

    @property
    def link_ids(self) -> List[int]:
        return list(self._links)

    def node_element(self, node_id: int) -> ET.Element:
        return self._nodes[node_id]

    def link_element(self, link_id: int) -> ET.Element:
        return self._links[link_id]

    def draw(self, frame: Frame) -> None:
        self._require_mounted()
        if frame.viewbox is not None:
            self.root.set("viewBox", format_viewbox(frame.viewbox))

        for link in frame.links:
            path = self._links.get(link.id)
            if path is None:
                path = add_svg_path(self._links_group, {"data-link-id": str(link.id)})
                self._links[link.id] = path
            path.set("d", self._link_path(link.source, link.target))
            path.set("opacity", fmt(link.opacity))

        for node in frame.nodes:
            group = self._nodes.get(node.id)
            if group is None:
                group = add_node_marker(
                    self._nodes_group,
                    node.id,
                    node.name,
                    node.depth,
                    node.has_hidden_children,
                )
                self._nodes[node.id] = group
            x, y = self._offset(node.x, node.y)
            update_node_marker(group, x, y, node.opacity, node.has_hidden_children)

        if self.record_frames:
            self.recorded.append(self.to_string())

    def remove(self, node_ids: Iterable[int], link_ids: Iterable[int]) -> None:
        self._require_mounted()
        for node_id in node_ids:
            group = self._nodes.pop(node_id, None)
            if group is not None:
                self._nodes_group.remove(group)
        for link_id in link_ids:
            path = self._links.pop(link_id, None)
            if path is not None:
                self._links_group.remove(path)

    def to_string(self) -> str:
        self._require_mounted()
        return ET.tostring(self.root, encoding="unicode")

    def take_recorded(self) -> List[str]:
        frames = self.recorded
        self.recorded = []
        return frames

    def _offset(self, x: float, y: float):
        if self._vertical:
            return x, y + self._dy
        return x + self._dy, y

    def _link_path(self, source, target) -> str:
        source = self._offset(*source)
        target = self._offset(*target)
        if self._vertical:
            return link_path_vertical(source, target)
        return link_path_horizontal(source, target)

    def _require_mounted(self) -> None:
        if self.root is None:
            raise RuntimeError("Scene is not mounted; call mount() first")
