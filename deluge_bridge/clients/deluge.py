# File: deluge_bridge/clients/deluge.py
"""Download client adapter for Deluge."""

import logging

from deluge_bridge.errors import DownloadClientUnavailableError
from deluge_bridge.remote_path import RemotePathMapper, os_path

from .base import TorrentClientProxy
from .items import fetch_torrents, project_all
from .models import (
    ClientSettings,
    DownloadClientInfo,
    DownloadItem,
    LabelResult,
    RemoteRelease,
    ValidationFailure,
)
from .submission import SubmissionWorkflow
from .validation import run_validation

logger = logging.getLogger(__name__)


def try_set_label(proxy: TorrentClientProxy, torrent_hash: str, label: str, settings: ClientSettings) -> LabelResult:
    """Apply a label, reporting an unavailable daemon as a soft failure."""
    try:
        proxy.set_torrent_label(torrent_hash, label, settings)
    except DownloadClientUnavailableError as e:
        return LabelResult(applied=False, message=e.message)
    return LabelResult(applied=True)


class Deluge:
    """Adapter exposing a Deluge daemon as a generic download client.

    Holds no state between calls besides its collaborators; every operation
    is a fresh round-trip through the proxy.
    """

    def __init__(
        self,
        proxy: TorrentClientProxy,
        settings: ClientSettings,
        path_mapper: RemotePathMapper | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            proxy: The daemon proxy.
            settings: Settings of this client.
            path_mapper: Remote-to-local path mapper. Defaults to no mappings.
        """
        self.proxy = proxy
        self.settings = settings
        self.path_mapper = path_mapper or RemotePathMapper()

    @property
    def name(self) -> str:
        return self.settings.name

    def get_items(self) -> list[DownloadItem]:
        """Poll the daemon and project its torrents into download items."""
        torrents = fetch_torrents(self.proxy, self.settings)
        return project_all(torrents, self.settings, self.path_mapper.remap_remote_to_local)

    def add_from_magnet(self, release: RemoteRelease, magnet_link: str) -> str:
        """Add a magnet link. Returns the download id."""
        return SubmissionWorkflow(self.proxy, self.settings).add_from_magnet(release, magnet_link)

    def add_from_file(self, release: RemoteRelease, filename: str, file_content: bytes) -> str:
        """Add a .torrent file. Returns the download id."""
        return SubmissionWorkflow(self.proxy, self.settings).add_from_file(release, filename, file_content)

    def remove_item(self, download_id: str, delete_data: bool) -> None:
        """Remove a torrent, optionally with its data."""
        logger.info(f"Removing {download_id} from Deluge (delete data: {delete_data})")
        self.proxy.remove_torrent(download_id.lower(), delete_data, self.settings)

    def mark_item_as_imported(self, download_id: str, title: str) -> LabelResult | None:
        """Move an imported torrent to the post-import label.

        Returns:
            The labeling outcome, or None when no post-import label applies.
        """
        imported_category = self.settings.imported_category
        if not imported_category or imported_category == self.settings.category:
            return None

        result = try_set_label(self.proxy, download_id.lower(), imported_category, self.settings)
        if not result.applied:
            logger.warning(
                f'Failed to set torrent post-import label "{imported_category}" for {title} in Deluge. '
                "Does the label exist?"
            )
        return result

    def get_status(self) -> DownloadClientInfo:
        """Report where Deluge puts finished downloads."""
        config = self.proxy.get_config(self.settings)
        label = self.proxy.get_label_options(self.settings)

        if label is not None and label.apply_move_completed and label.move_completed:
            # The category label's own completed path overrides the global one.
            destination = label.move_completed_path
        elif config.get("move_completed", False) is True:
            destination = config.get("move_completed_path") or ""
        else:
            destination = config.get("download_location") or ""

        output_root_folders = []
        if destination:
            output_root_folders.append(self.path_mapper.remap_remote_to_local(self.settings.host, os_path(destination)))
        return DownloadClientInfo(is_localhost=self.settings.is_localhost, output_root_folders=output_root_folders)

    def test(self) -> list[ValidationFailure]:
        """Validate the configuration against the live daemon."""
        return run_validation(self.proxy, self.settings)
