# File: deluge_bridge/__init__.py
"""Deluge download client bridge for media-management applications."""

import logging

from flask import Flask

from .config import Config
from .extensions import download_client, limiter
from .routes import main_bp


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure a Flask application instance."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Validate critical configuration
    config_class.validate(app.logger)

    # Log level priority:
    # 1. Configured LOG_LEVEL (if set in env)
    # 2. Gunicorn Logger Level (if running in Gunicorn)
    # 3. Default (INFO)
    configured_level = app.config.get("LOG_LEVEL")

    # Gunicorn creates its own logger ('gunicorn.error'); without its handlers,
    # application logs might not appear in the container stdout/stderr.
    gunicorn_logger = logging.getLogger("gunicorn.error")
    if gunicorn_logger.handlers:
        app.logger.handlers = gunicorn_logger.handlers
        # Sync level to match Gunicorn (unless overridden by config)
        if configured_level is not None:
            app.logger.setLevel(configured_level)
        else:
            app.logger.setLevel(gunicorn_logger.level)
    else:
        # Local/Dev mode or non-Gunicorn runner
        app.logger.setLevel(configured_level if configured_level is not None else logging.INFO)

    # Initialize Extensions
    limiter.init_app(app)
    download_client.init_app(app)

    # HEALTH CHECK: Verify the Deluge connection at startup.
    # We do NOT block startup, as the app should remain accessible for debugging.
    if not download_client.verify_credentials():
        app.logger.warning("Startup Check: Deluge is NOT connected. Downloads will fail until resolved.")

    # Register Blueprints
    app.register_blueprint(main_bp)

    return app
