# File: deluge_bridge/clients/submission.py
"""Submission of new torrents to Deluge."""

import logging
from collections.abc import Callable

from deluge_bridge.errors import DownloadClientError

from .base import TorrentClientProxy
from .models import ClientSettings, DelugePriority, RemoteRelease

logger = logging.getLogger(__name__)


class SubmissionWorkflow:
    """Adds torrents and applies seeding, label and queue settings to them.

    Both entry points share the post-submission steps; errors from any step
    propagate to the caller.
    """

    def __init__(self, proxy: TorrentClientProxy, settings: ClientSettings) -> None:
        """Initialize the workflow.

        Args:
            proxy: The daemon proxy.
            settings: Settings of the client receiving the torrents.
        """
        self.proxy = proxy
        self.settings = settings

    def add_from_magnet(self, release: RemoteRelease, magnet_link: str) -> str:
        """Add a magnet link and return the download id (uppercase hash).

        Raises:
            DownloadClientError: If Deluge did not return a hash.
        """
        return self._submit(
            release,
            lambda: self.proxy.add_torrent_from_magnet(magnet_link, self.settings),
            f"Deluge failed to add magnet {magnet_link}",
        )

    def add_from_file(self, release: RemoteRelease, filename: str, file_content: bytes) -> str:
        """Add a .torrent file and return the download id (uppercase hash).

        Raises:
            DownloadClientError: If Deluge did not return a hash.
        """
        return self._submit(
            release,
            lambda: self.proxy.add_torrent_from_file(filename, file_content, self.settings),
            f"Deluge failed to add torrent {filename}",
        )

    def _submit(self, release: RemoteRelease, submit: Callable[[], str | None], rejection: str) -> str:
        actual_hash = submit()
        if not actual_hash or not actual_hash.strip():
            raise DownloadClientError(rejection)

        logger.info(f"Added '{release.title}' to Deluge as {actual_hash}")

        self.proxy.set_torrent_seeding_configuration(actual_hash, release.seed_configuration, self.settings)

        if self.settings.category:
            self.proxy.set_torrent_label(actual_hash, self.settings.category, self.settings)

        if self.settings.priority_for(release) == DelugePriority.FIRST:
            logger.debug(f"Moving {actual_hash} to the top of the Deluge queue")
            self.proxy.move_torrent_to_top_in_queue(actual_hash, self.settings)

        return actual_hash.upper()
