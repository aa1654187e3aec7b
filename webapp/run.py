"""Development server for the collapsible tree page."""

import argparse
import logging
import sys

from webapp import create_app

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the collapsible tree")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    overrides = {}
    if args.debug:
        overrides["DEBUG"] = True

    try:
        app = create_app(overrides)
    except Exception as e:
        logger.error("[STARTUP] Could not build the app: %s", e)
        return 1

    debug_mode = bool(app.config.get("DEBUG", False))
    app.logger.info(
        "[STARTUP] Serving tree on http://%s:%s (debug=%s)",
        args.host,
        args.port,
        debug_mode,
    )
    # the tree view lives in this process; the reloader would build a second one
    app.run(host=args.host, port=args.port, debug=debug_mode, use_reloader=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
