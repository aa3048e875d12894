# File: deluge_bridge/config.py
"""Configuration module."""

import logging
import os

from deluge_bridge.clients.models import DelugePriority
from deluge_bridge.constants import CLIENT_TYPE, DEFAULT_CATEGORY, DEFAULT_DELUGE_PORT
from deluge_bridge.remote_path import parse_mappings


def _parse_env_int(key: str, default: int) -> int:
    """Parse an integer environment variable safely.

    Handles cases where values might be passed as float strings (e.g., "3.0")
    by container orchestrators.

    Args:
        key: The environment variable key.
        default: The default value if missing or invalid.

    Returns:
        int: The parsed integer.
    """
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(float(raw.strip()))
    except (ValueError, TypeError):
        return default


def _parse_env_bool(key: str, default: bool = False) -> bool:
    """Parse a boolean environment variable safely.

    Supports '1', 'true', 'yes', 'on' (case-insensitive) as True.

    Args:
        key: The environment variable key.
        default: The default value if missing.

    Returns:
        bool: The parsed boolean.
    """
    val = os.getenv(key)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Centralized configuration for the Flask application.

    Loads settings from environment variables with safe defaults.
    """

    # Core Flask Config
    # nosec B105: Default key is intentional for development; validation logic handles warning user.
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-this-to-a-secure-random-key")
    FLASK_DEBUG: bool = _parse_env_bool("FLASK_DEBUG", False)
    TESTING: bool = _parse_env_bool("TESTING", False)

    # Local server binding (used by app.py in development)
    LISTEN_HOST: str = os.getenv("LISTEN_HOST", "127.0.0.1")
    LISTEN_PORT: int = _parse_env_int("LISTEN_PORT", 5079)

    # Deluge Connection
    DELUGE_HOST: str | None = os.getenv("DELUGE_HOST")
    DELUGE_PORT: int = _parse_env_int("DELUGE_PORT", DEFAULT_DELUGE_PORT)
    DELUGE_URL: str | None = os.getenv("DELUGE_URL")
    DELUGE_URL_BASE: str = os.getenv("DELUGE_URL_BASE", "")
    DELUGE_USE_SSL: bool = _parse_env_bool("DELUGE_USE_SSL", False)
    DELUGE_PASSWORD: str = os.getenv("DELUGE_PASSWORD", "deluge")
    DOWNLOAD_CLIENT_NAME: str = os.getenv("DOWNLOAD_CLIENT_NAME", CLIENT_TYPE)

    # Categorization and Queueing
    DELUGE_CATEGORY: str = os.getenv("DELUGE_CATEGORY", DEFAULT_CATEGORY)
    DELUGE_IMPORTED_CATEGORY: str = os.getenv("DELUGE_IMPORTED_CATEGORY", "")
    DELUGE_RECENT_PRIORITY: str = os.getenv("DELUGE_RECENT_PRIORITY", "last")
    DELUGE_OLDER_PRIORITY: str = os.getenv("DELUGE_OLDER_PRIORITY", "last")
    DELUGE_ADD_PAUSED: bool = _parse_env_bool("DELUGE_ADD_PAUSED", False)

    # Remote Path Mappings: "host|remote|local;host|remote|local"
    REMOTE_PATH_MAPPINGS: str = os.getenv("REMOTE_PATH_MAPPINGS", "")

    # Logging
    # We allow LOG_LEVEL to be None if unset to support Gunicorn level inheritance in __init__.py.
    _log_level_env: str | None = os.getenv("LOG_LEVEL")
    LOG_LEVEL_STR: str = _log_level_env.upper() if _log_level_env else "INFO"
    # Logic: If Env is set, resolve it (defaulting to INFO if invalid string). If not set, leave as None.
    LOG_LEVEL: int | None = getattr(logging, LOG_LEVEL_STR, logging.INFO) if _log_level_env else None

    @classmethod
    def validate(cls, logger: logging.Logger) -> None:
        """Validate critical configuration at startup."""
        # nosec B105
        if cls.SECRET_KEY == "change-this-to-a-secure-random-key":  # noqa: S105
            if cls.FLASK_DEBUG or cls.TESTING:
                logger.warning(
                    "WARNING: You are using the default insecure SECRET_KEY. "
                    "This is acceptable for development/testing but UNSAFE for production."
                )
            else:
                logger.critical(
                    "CRITICAL SECURITY ERROR: You are running in PRODUCTION with the default insecure SECRET_KEY."
                )
                raise ValueError(
                    "Application refused to start: Change SECRET_KEY in your .env file for production deployment."
                )

        # Validate LOG_LEVEL
        # Only validate if the user actually tried to set it
        if cls._log_level_env and not hasattr(logging, cls.LOG_LEVEL_STR):
            logger.warning(
                f"Configuration Warning: Invalid LOG_LEVEL '{cls.LOG_LEVEL_STR}' provided. Defaulting to INFO."
            )

        # Validate DELUGE_PORT
        if not 0 < cls.DELUGE_PORT < 65536:  # noqa: PLR2004
            logger.critical(f"Configuration Error: Invalid DELUGE_PORT '{cls.DELUGE_PORT}'.")
            raise ValueError(f"Invalid DELUGE_PORT '{cls.DELUGE_PORT}'.")

        # Validate queue priorities
        for key in ("DELUGE_RECENT_PRIORITY", "DELUGE_OLDER_PRIORITY"):
            value = getattr(cls, key)
            try:
                DelugePriority.parse(value)
            except ValueError:
                logger.critical(f"Configuration Error: Invalid {key} '{value}'. Must be 'first' or 'last'.")
                raise

        # Validate REMOTE_PATH_MAPPINGS
        try:
            mappings = parse_mappings(cls.REMOTE_PATH_MAPPINGS)
        except ValueError as e:
            logger.critical(f"Configuration Error: {e}")
            raise
        if mappings:
            logger.info(f"Loaded {len(mappings)} remote path mapping(s).")

        if cls.DELUGE_IMPORTED_CATEGORY and cls.DELUGE_IMPORTED_CATEGORY == cls.DELUGE_CATEGORY:
            logger.warning("DELUGE_IMPORTED_CATEGORY equals DELUGE_CATEGORY; post-import labeling is disabled.")
