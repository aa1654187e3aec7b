"""Configuration for the Flask application."""

import os
from pathlib import Path


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    # level of the collapsibletree loggers inside the file log
    TREE_LOG_LEVEL = os.environ.get("TREE_LOG_LEVEL", "DEBUG")
    LOG_DIR = Path(os.environ.get("LOG_DIR", "logs"))
    LOG_FILE_NAME = "collapsible_tree.log"
