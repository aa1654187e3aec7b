# --------------------------------------------------------------
#  routes.py
# --------------------------------------------------------------
from __future__ import annotations

from logging import Logger
from typing import Any, Tuple, Union

from flask import Blueprint, Response, current_app, jsonify

from collapsibletree.exceptions import RenderHaltedError, UnknownNodeError
from webapp.routes.helpers import fail, parse_node_id
from webapp.services.tree_view_service import get_tree_view_service

bp = Blueprint("main", __name__)


@bp.route("/")
def index() -> Response:
    """Serve the single page that plays transitions in the browser."""
    return current_app.send_static_file("index.html")


@bp.route("/about")
def about() -> Response:
    """Simple health-check / about endpoint."""
    return jsonify({"about": "Collapsible tree backend. Click a node to toggle it."})


@bp.route("/api/tree", methods=["GET"])
def tree() -> Response:
    """Committed snapshot and current SVG."""
    return jsonify(get_tree_view_service().state())


@bp.route("/api/toggle/<node_id>", methods=["POST"])
def toggle(node_id: str) -> Union[Response, Tuple[Any, int]]:
    log: Logger = current_app.logger
    try:
        parsed = parse_node_id(node_id)
        log.info("[toggle] POST /api/toggle/%s", parsed)
        payload = get_tree_view_service().toggle(parsed)
        if payload["transition"] is not None:
            nodes = payload["transition"]["nodes"]
            log.info(
                f"[toggle] node {parsed}: {len(nodes['entering'])} entering, "
                f"{len(nodes['exiting'])} exiting, {len(payload['frames'])} frames"
            )
        return jsonify(payload)

    except UnknownNodeError as e:
        log.warning(f"[toggle] Unknown node: {e}")
        return jsonify(fail(404, str(e))), 404

    except ValueError as e:
        log.warning(f"[toggle] Bad request: {e}")
        return jsonify(fail(400, str(e))), 400

    except RenderHaltedError as e:
        log.error(f"[toggle] Rendering halted: {e}")
        return jsonify(fail(500, str(e))), 500


@bp.errorhandler(Exception)
def global_error(exc: Exception):  # Flask passes the exception instance in
    current_app.logger.error("[global] Unhandled exception", exc_info=True)
    return jsonify(fail(500, str(exc))), 500
