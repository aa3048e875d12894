# File: tests/conftest.py
"""Global pytest fixtures and configuration for the test suite.

This module defines the 'World' in which tests run, including the Flask application
instance, test clients, and global configuration overrides.
"""

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from flask import Flask
from flask.testing import FlaskClient

from deluge_bridge import create_app
from deluge_bridge.config import Config
from deluge_bridge.extensions import download_client


class TestConfig(Config):
    """Test configuration with overrides.

    Passed to create_app to ensure extensions (like Flask-Limiter)
    pick up settings during their init_app() phase.
    """

    TESTING = True
    SECRET_KEY = "test-secret-key"
    RATELIMIT_ENABLED = False

    # Prevent real connections in config
    DELUGE_HOST = "mock_localhost"
    DELUGE_CATEGORY = "readarr"
    DELUGE_IMPORTED_CATEGORY = ""
    REMOTE_PATH_MAPPINGS = ""


@pytest.fixture(autouse=True)
def mock_startup_check() -> Iterator[None]:
    """Keep create_app() from contacting a real Deluge during the startup check."""
    with patch.object(download_client, "verify_credentials", return_value=True):
        yield


@pytest.fixture
def app() -> Iterator[Flask]:
    """Create the 'World' for the tests: A Flask application instance."""
    app = create_app(TestConfig)
    with app.app_context():
        yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """The observer within the world: A test client to make requests."""
    return app.test_client()
