"""
Webapp services package.

This package provides services for the Flask application:
- logging_config: Application logging configuration
- tree_view_service: The shared tree view and its update cycles
"""

from webapp.services.logging_config import configure_logging
from webapp.services.tree_view_service import (
    TreeViewService,
    get_tree_view_service,
    init_tree_view_service,
)

__all__ = [
    "configure_logging",
    "TreeViewService",
    "get_tree_view_service",
    "init_tree_view_service",
]
