"""Holds the process-wide tree view and runs update cycles for requests."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Dict, Mapping, Optional

from flask import Flask, current_app

from collapsibletree.config import TreeConfig
from collapsibletree.sample_data import TREE_DATA
from collapsibletree.scene import SvgScene
from collapsibletree.view import TreeView

logger = logging.getLogger(__name__)

EXTENSION_KEY = "collapsible_tree"


class TreeViewService:
    """
    Wraps a :class:`TreeView` for the synchronous request handlers.

    Frames are rendered without sleeping and returned to the browser, which
    plays them back. Requests are serialized so one update cycle commits
    before the next toggle is applied.
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        config: Optional[TreeConfig] = None,
    ):
        config = (config or TreeConfig.from_env()).with_overrides(realtime=False)
        self.scene = SvgScene(record_frames=True)
        self.view = TreeView.from_data(
            data if data is not None else TREE_DATA, self.scene, config
        )
        self._guard = threading.Lock()
        with self._guard:
            asyncio.run(self.view.render())
            self.scene.take_recorded()
        logger.info("Tree view ready with %d nodes", len(self.view.model))

    @property
    def config(self) -> TreeConfig:
        return self.view.config

    def state(self) -> Dict[str, Any]:
        with self._guard:
            return {
                "snapshot": self.view.snapshot.to_dict(),
                "svg": self.scene.to_string(),
                "durationMs": self.config.duration_ms,
            }

    def toggle(self, node_id: int) -> Dict[str, Any]:
        with self._guard:
            transition = asyncio.run(self.view.click(node_id))
            frames = self.scene.take_recorded()
            return {
                "transition": transition.summary() if transition else None,
                "frames": frames,
                "svg": self.scene.to_string(),
                "snapshot": self.view.snapshot.to_dict(),
                "durationMs": self.config.duration_ms,
            }


def init_tree_view_service(
    app: Flask,
    data: Optional[Mapping[str, Any]] = None,
    config: Optional[TreeConfig] = None,
) -> TreeViewService:
    service = TreeViewService(data, config)
    app.extensions[EXTENSION_KEY] = service
    return service


def get_tree_view_service() -> TreeViewService:
    return current_app.extensions[EXTENSION_KEY]
