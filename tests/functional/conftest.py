# File: tests/functional/conftest.py
"""Fixtures specific to Functional (Integration) tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def mock_client() -> Generator[MagicMock]:
    """Replace the download client used by the routes.

    Functional tests exercise the full request stack (via test_client), so any
    route would otherwise try to reach a real Deluge daemon.
    """
    with patch("deluge_bridge.routes.download_client") as mock:
        mock.get_items.return_value = []
        mock.run_validation.return_value = []
        yield mock
