"""Request handling helpers."""
from __future__ import annotations

from typing import Any, Dict


def parse_node_id(raw: str) -> int:
    """Parses a node id from the URL; ids are non-negative integers."""
    try:
        node_id = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid node id: {raw!r}") from None
    if node_id < 0:
        raise ValueError(f"Invalid node id: {raw!r}")
    return node_id


def fail(status_code: int, message: str) -> Dict[str, Any]:
    """Short error JSON body."""
    return {
        "error": message,
        "status": status_code,
    }
