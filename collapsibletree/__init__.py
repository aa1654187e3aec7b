"""Collapsible tree diagram: hierarchy, tidy layout, reconciliation and animation."""

from collapsibletree.config import Margin, TreeConfig
from collapsibletree.hierarchy import HierarchyModel
from collapsibletree.layout import SeparationPolicy, TreeLayoutEngine
from collapsibletree.node import Link, Node
from collapsibletree.reconcile import Reconciler, RenderSnapshot, Transition
from collapsibletree.animation import AnimationController
from collapsibletree.scene import Scene, SvgScene
from collapsibletree.view import TreeView

__all__ = [
    "AnimationController",
    "HierarchyModel",
    "Link",
    "Margin",
    "Node",
    "Reconciler",
    "RenderSnapshot",
    "Scene",
    "SeparationPolicy",
    "SvgScene",
    "Transition",
    "TreeConfig",
    "TreeLayoutEngine",
    "TreeView",
    "transition_figure",
]


def __getattr__(name):
    # plotly is only imported when the figure export is used
    if name == "transition_figure":
        from .plotly_figure import transition_figure

        return transition_figure
    raise AttributeError(name)
