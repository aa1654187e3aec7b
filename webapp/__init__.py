"""Flask front end for the collapsible tree."""

from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from collapsibletree.config import TreeConfig

from .config import Config
from .routes.routes import bp as main_bp
from .services.logging_config import configure_logging
from .services.tree_view_service import init_tree_view_service

__all__ = ["create_app"]


def create_app(
    overrides: Optional[Mapping[str, Any]] = None,
    tree_data: Optional[Mapping[str, Any]] = None,
    tree_config: Optional[TreeConfig] = None,
) -> Flask:
    """Build the Flask application.

    Args:
        overrides: Flask config values applied on top of :class:`Config`.
        tree_data: Root record to display; the bundled sample when omitted.
        tree_config: Drawing configuration; read from the environment when
                     omitted.
    """
    app = Flask(__name__, static_folder="static")
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    try:
        CORS(app, origins=app.config["CORS_ORIGINS"])
        app.logger.info("[INIT] Rendering initial tree...")
        init_tree_view_service(app, tree_data, tree_config)
        app.register_blueprint(main_bp)
    except Exception as e:
        app.logger.error(f"[INIT ERROR] Failed to create app: {e}", exc_info=True)
        raise

    app.logger.info("[INIT] Flask app creation complete")
    return app
