# File: deluge_bridge/clients/base.py
"""Base classes for torrent daemon proxies."""

from abc import ABC, abstractmethod
from typing import Any

from .models import ClientSettings, LabelOptions, RawTorrentRecord, SeedConfiguration


class TorrentClientProxy(ABC):
    """Abstract capability interface for the remote torrent daemon.

    Every operation is a blocking round-trip. Implementations own the session,
    authentication and transport; callers pass the settings of the client
    they are talking to on every call.
    """

    @abstractmethod
    def get_version(self, settings: ClientSettings) -> str:
        """Return the daemon version."""
        pass  # pragma: no cover

    @abstractmethod
    def get_config(self, settings: ClientSettings) -> dict[str, Any]:
        """Return the daemon's core configuration."""
        pass  # pragma: no cover

    @abstractmethod
    def get_torrents(self, settings: ClientSettings) -> list[RawTorrentRecord]:
        """List every torrent known to the daemon."""
        pass  # pragma: no cover

    @abstractmethod
    def get_torrents_by_label(self, label: str, settings: ClientSettings) -> list[RawTorrentRecord]:
        """List the torrents carrying the given label."""
        pass  # pragma: no cover

    @abstractmethod
    def add_torrent_from_magnet(self, magnet_link: str, settings: ClientSettings) -> str | None:
        """Add a magnet link and return the resulting hash, if any."""
        pass  # pragma: no cover

    @abstractmethod
    def add_torrent_from_file(self, filename: str, file_content: bytes, settings: ClientSettings) -> str | None:
        """Add a .torrent file and return the resulting hash, if any."""
        pass  # pragma: no cover

    @abstractmethod
    def set_torrent_seeding_configuration(
        self, torrent_hash: str, seed_configuration: SeedConfiguration | None, settings: ClientSettings
    ) -> None:
        """Apply a seeding goal to a torrent."""
        pass  # pragma: no cover

    @abstractmethod
    def set_torrent_label(self, torrent_hash: str, label: str, settings: ClientSettings) -> None:
        """Assign a label to a torrent.

        Raises:
            DownloadClientUnavailableError: If the label could not be applied.
        """
        pass  # pragma: no cover

    @abstractmethod
    def move_torrent_to_top_in_queue(self, torrent_hash: str, settings: ClientSettings) -> None:
        """Move a torrent to the top of the daemon's queue."""
        pass  # pragma: no cover

    @abstractmethod
    def remove_torrent(self, torrent_hash: str, delete_data: bool, settings: ClientSettings) -> None:
        """Remove a torrent, optionally deleting its data."""
        pass  # pragma: no cover

    @abstractmethod
    def get_label_options(self, settings: ClientSettings) -> LabelOptions | None:
        """Return the options of the configured category label, if it exists."""
        pass  # pragma: no cover

    @abstractmethod
    def get_enabled_plugins(self, settings: ClientSettings) -> list[str]:
        """List the daemon's enabled plugins."""
        pass  # pragma: no cover

    @abstractmethod
    def get_available_labels(self, settings: ClientSettings) -> list[str]:
        """List the labels known to the Label plugin."""
        pass  # pragma: no cover

    @abstractmethod
    def add_label(self, label: str, settings: ClientSettings) -> None:
        """Create a label."""
        pass  # pragma: no cover
