"""Configuration for the collapsible tree view."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Tuple

ENV_PREFIX = "COLLAPSIBLE_TREE_"

REENTRANT_POLICIES = ("queue", "ignore")


@dataclass(frozen=True)
class Margin:
    top: float = 10
    right: float = 120
    bottom: float = 10
    left: float = 40


@dataclass(frozen=True)
class TreeConfig:
    """
    Drawing surface and animation settings.

    Node size is derived from the canvas: 5% of the width between adjacent
    nodes and 20% of the height between depth levels.
    """

    width: float = 500
    height: float = 1000
    dy: float = 10
    margin: Margin = field(default_factory=Margin)
    duration_ms: float = 250
    fps: int = 60
    sibling_separation: float = 2.0
    cousin_separation: float = 3.0
    orientation: str = "vertical"
    initial_depth: Optional[int] = 1
    reentrant_policy: str = "queue"
    realtime: bool = True
    font: str = "11px sans-serif"

    def __post_init__(self):
        if self.reentrant_policy not in REENTRANT_POLICIES:
            raise ValueError(
                f"Unknown reentrant policy: {self.reentrant_policy}. "
                f"Expected one of {REENTRANT_POLICIES}"
            )
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be non-negative")
        if self.fps <= 0:
            raise ValueError("fps must be positive")
        if self.initial_depth is not None and self.initial_depth < 1:
            raise ValueError("initial_depth must be >= 1 or None")

    @property
    def node_size(self) -> Tuple[float, float]:
        return (0.05 * self.width, 0.2 * self.height)

    def with_overrides(self, **overrides) -> "TreeConfig":
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ=None) -> "TreeConfig":
        """Build a config from ``COLLAPSIBLE_TREE_*`` environment variables."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            if f.name == "margin":
                continue
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            overrides[f.name] = _coerce(f.name, raw)
        return cls(**overrides)


def _coerce(name: str, raw: str):
    if name in ("orientation", "reentrant_policy", "font"):
        return raw
    if name == "realtime":
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if name == "initial_depth":
        return None if raw.strip().lower() in ("", "none", "all") else int(raw)
    if name == "fps":
        return int(raw)
    return float(raw)
