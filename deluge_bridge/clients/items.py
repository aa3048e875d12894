# File: deluge_bridge/clients/items.py
"""Projection of raw Deluge torrents into download items."""

import logging
from collections.abc import Callable, Iterable
from pathlib import PurePath

from .base import TorrentClientProxy
from .models import ClientSettings, DownloadClientItemClientInfo, DownloadItem, RawTorrentRecord
from .status import can_be_removed, classify, eta_to_remaining_time

logger = logging.getLogger(__name__)

RemapFunc = Callable[[str, str], PurePath]


def fetch_torrents(proxy: TorrentClientProxy, settings: ClientSettings) -> list[RawTorrentRecord]:
    """Fetch the torrents this client is responsible for.

    With a category configured only torrents carrying that label are listed,
    so torrents of other applications sharing the daemon stay hidden.
    """
    if settings.category:
        return proxy.get_torrents_by_label(settings.category, settings)
    return proxy.get_torrents(settings)


def project(
    torrent: RawTorrentRecord,
    settings: ClientSettings,
    remap: RemapFunc,
    client_info: DownloadClientItemClientInfo | None = None,
) -> DownloadItem | None:
    """Build a download item from a raw torrent record.

    Args:
        torrent: The record reported by the daemon.
        settings: Settings of the client that reported it.
        remap: Maps (host, remote path) to a local path.
        client_info: Descriptor of the producing client.

    Returns:
        The download item, or None when the record has no usable hash.
    """
    if not torrent.hash or not torrent.hash.strip():
        return None

    status, message = classify(torrent, settings.name)
    removable = can_be_removed(torrent)

    # Deluge's save_path is the container directory; the torrent's content lives under its name.
    output_path = remap(settings.host, torrent.download_path) / torrent.name

    return DownloadItem(
        download_id=torrent.hash.upper(),
        title=torrent.name,
        category=settings.category,
        output_path=output_path,
        remaining_size=torrent.size - torrent.bytes_downloaded,
        total_size=torrent.size,
        remaining_time=eta_to_remaining_time(torrent.eta, torrent.name),
        seed_ratio=torrent.ratio,
        status=status,
        client_info=client_info or DownloadClientItemClientInfo.from_settings(settings),
        message=message,
        can_be_removed=removable,
        can_move_files=removable,
    )


def project_all(
    torrents: Iterable[RawTorrentRecord],
    settings: ClientSettings,
    remap: RemapFunc,
) -> list[DownloadItem]:
    """Project every record, skipping those without a hash."""
    client_info = DownloadClientItemClientInfo.from_settings(settings)
    items: list[DownloadItem] = []
    for torrent in torrents:
        item = project(torrent, settings, remap, client_info)
        if item is None:
            logger.debug(f"Skipping torrent without hash: {torrent.name!r}")
            continue
        items.append(item)
    return items
