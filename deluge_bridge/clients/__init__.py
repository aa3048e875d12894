# File: deluge_bridge/clients/__init__.py
"""Download clients package."""

from .base import TorrentClientProxy
from .deluge import Deluge
from .manager import DownloadClientManager
from .models import DownloadItem, DownloadItemStatus, RemoteRelease, SeedConfiguration
from .proxy import DelugeProxy

__all__ = [
    "Deluge",
    "DelugeProxy",
    "DownloadClientManager",
    "DownloadItem",
    "DownloadItemStatus",
    "RemoteRelease",
    "SeedConfiguration",
    "TorrentClientProxy",
]
