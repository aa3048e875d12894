# File: deluge_bridge/constants.py
"""Application constants and configuration defaults."""

from datetime import timedelta
from typing import Final

# --- Client Identity ---
CLIENT_TYPE: Final[str] = "Deluge"
TORRENT_PROTOCOL: Final[str] = "torrent"

# --- Deluge Connection Defaults ---
DEFAULT_DELUGE_PORT: Final[int] = 8112
DEFAULT_CATEGORY: Final[str] = "readarr"
LOCALHOST_NAMES: Final[frozenset[str]] = frozenset({"127.0.0.1", "localhost"})

# --- Deluge Plugins ---
LABEL_PLUGIN: Final[str] = "Label"

# --- Release Recency ---
# A release is "recent" when any of its release dates falls inside this window.
RECENT_RELEASE_DAYS: Final[int] = 14

# --- Remaining Time ---
# Largest remaining time carried by a download item: a signed 64-bit count of
# 100 ns ticks, the duration range of the consuming media application.
MAX_REMAINING_TIME: Final[timedelta] = timedelta(microseconds=(2**63 - 1) // 10)

# Fields requested from web.update_ui for every torrent.
TORRENT_FIELDS: Final[list[str]] = [
    "hash",
    "name",
    "state",
    "progress",
    "eta",
    "message",
    "is_finished",
    "save_path",
    "total_size",
    "total_done",
    "time_added",
    "active_time",
    "ratio",
    "is_auto_managed",
    "stop_at_ratio",
    "remove_at_ratio",
    "stop_ratio",
]
