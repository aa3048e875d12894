# File: deluge_bridge/clients/status.py
"""Classification of raw Deluge torrent state into download item status."""

import logging
from collections.abc import Callable
from datetime import timedelta

from deluge_bridge.constants import CLIENT_TYPE, MAX_REMAINING_TIME

from .models import DelugeTorrentState, DownloadItemStatus, RawTorrentRecord

logger = logging.getLogger(__name__)

# Ordered rules, first match wins. Raw states overlap (a torrent can be both
# finished and checking), so the order is part of the contract.
STATUS_RULES: list[tuple[Callable[[RawTorrentRecord], bool], DownloadItemStatus]] = [
    (lambda t: t.state is DelugeTorrentState.ERROR, DownloadItemStatus.WARNING),
    (lambda t: t.is_finished and t.state is not DelugeTorrentState.CHECKING, DownloadItemStatus.COMPLETED),
    (lambda t: t.state is DelugeTorrentState.QUEUED, DownloadItemStatus.QUEUED),
    (lambda t: t.state is DelugeTorrentState.PAUSED, DownloadItemStatus.PAUSED),
]


def classify(torrent: RawTorrentRecord, client_name: str = CLIENT_TYPE) -> tuple[DownloadItemStatus, str | None]:
    """Map a raw torrent record to a (status, message) pair.

    Args:
        torrent: The record reported by the daemon.
        client_name: Name used in the warning message.

    Returns:
        The normalized status and an optional message for the user.
    """
    for matches, status in STATUS_RULES:
        if matches(torrent):
            if status is DownloadItemStatus.WARNING:
                return status, f"{client_name} is reporting an error"
            return status, None
    return DownloadItemStatus.DOWNLOADING, None


def can_be_removed(torrent: RawTorrentRecord) -> bool:
    """Check whether Deluge itself paused the torrent after meeting its seed ratio.

    Only then can the files be removed or moved without cutting seeding short.
    """
    return (
        torrent.is_auto_managed
        and torrent.stop_at_ratio
        and torrent.ratio >= torrent.stop_ratio
        and torrent.state is DelugeTorrentState.PAUSED
    )


def eta_to_remaining_time(eta: int | float, name: str = "") -> timedelta:
    """Convert an ETA in seconds, clamping values that do not fit a duration."""
    try:
        remaining: timedelta | None = timedelta(seconds=eta)
    except OverflowError:
        remaining = None

    if remaining is None or remaining > MAX_REMAINING_TIME:
        logger.debug(f"ETA for {name} is too long: {eta}")
        return MAX_REMAINING_TIME
    return remaining
