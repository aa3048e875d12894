"""Shared fixtures for client tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from deluge_bridge.clients.base import TorrentClientProxy
from deluge_bridge.clients.models import ClientSettings, DelugeTorrentState, RawTorrentRecord


@pytest.fixture
def settings() -> ClientSettings:
    """Settings for a remote Deluge with a category configured."""
    return ClientSettings(host="deluge.lan", port=8112, password="secret", category="readarr")


@pytest.fixture
def proxy() -> MagicMock:
    """A fake proxy honouring the TorrentClientProxy interface."""
    return MagicMock(spec=TorrentClientProxy)


@pytest.fixture
def make_torrent() -> Callable[..., RawTorrentRecord]:
    """Factory for raw torrent records with sensible defaults."""

    def _make(**overrides: Any) -> RawTorrentRecord:
        fields: dict[str, Any] = {
            "hash": "abc123def456",
            "name": "Some.Book.2024",
            "download_path": "/downloads",
            "size": 1000,
            "bytes_downloaded": 400,
            "eta": 120,
            "ratio": 0.5,
            "stop_at_ratio": False,
            "stop_ratio": 2.0,
            "is_auto_managed": True,
            "state": DelugeTorrentState.DOWNLOADING,
            "is_finished": False,
        }
        fields.update(overrides)
        return RawTorrentRecord(**fields)

    return _make
