# --------------------------------------------------------------
#  logging_config.py
# --------------------------------------------------------------
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from flask import Flask

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_TAG = "_collapsible_tree_handler"


def _tagged(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _build_handlers(app: Flask) -> List[logging.Handler]:
    log_dir = Path(app.config["LOG_DIR"])
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / app.config["LOG_FILE_NAME"]

    # transitions log every toggle, so the file is capped at 1 MB x 3
    file_handler = RotatingFileHandler(
        log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, "%H:%M:%S"))

    return [_tagged(file_handler), _tagged(console_handler)]


def _replace_handlers(logger: logging.Logger, handlers: List[logging.Handler]) -> None:
    for old in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)


def configure_logging(app: Flask) -> None:
    """Send the app, ``collapsibletree`` and ``webapp`` logs to a rotating
    file in ``LOG_DIR`` and to the console.

    Calling it again (a second app in the same process) swaps the handlers
    instead of stacking them.
    """
    handlers = _build_handlers(app)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    _replace_handlers(root_logger, handlers)

    _replace_handlers(app.logger, handlers)
    app.logger.setLevel(logging.DEBUG)
    app.logger.propagate = False

    logging.getLogger("collapsibletree").setLevel(
        app.config.get("TREE_LOG_LEVEL", "DEBUG")
    )
    logging.getLogger("webapp").setLevel(logging.DEBUG)

    app.logger.info("Logging configured. Log file: %s", handlers[0].baseFilename)
