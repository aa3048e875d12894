# File: deluge_bridge/clients/models.py
"""Data models shared by the download client adapter."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum, IntEnum
from pathlib import PurePath
from typing import Any

from deluge_bridge.constants import CLIENT_TYPE, LOCALHOST_NAMES, RECENT_RELEASE_DAYS, TORRENT_PROTOCOL


class DelugeTorrentState(Enum):
    """Lifecycle state reported by the Deluge daemon."""

    QUEUED = "Queued"
    CHECKING = "Checking"
    DOWNLOADING = "Downloading"
    PAUSED = "Paused"
    ERROR = "Error"
    SEEDING = "Seeding"
    ALLOCATING = "Allocating"
    MOVING = "Moving"
    ACTIVE = "Active"
    UNKNOWN = "Unknown"

    @classmethod
    def from_raw(cls, value: Any) -> "DelugeTorrentState":
        """Parse a raw state string, mapping anything unrecognized to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class DownloadItemStatus(Enum):
    """Client-agnostic status of a download item."""

    QUEUED = "Queued"
    PAUSED = "Paused"
    DOWNLOADING = "Downloading"
    COMPLETED = "Completed"
    FAILED = "Failed"
    WARNING = "Warning"


class DelugePriority(IntEnum):
    """Queue placement for newly added torrents."""

    LAST = 0
    FIRST = 1

    @classmethod
    def parse(cls, value: str | int) -> "DelugePriority":
        """Parse 'first'/'last' (case-insensitive) or the integer value.

        Raises:
            ValueError: If the value is not a known priority.
        """
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            if name.isdigit():
                return cls(int(name))
            raise ValueError(f"Unknown Deluge priority '{value}'")
        return cls(value)


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class RawTorrentRecord:
    """A torrent as reported by the daemon. Read-only to the adapter."""

    hash: str | None
    name: str
    download_path: str
    size: int
    bytes_downloaded: int
    eta: int
    ratio: float
    stop_at_ratio: bool
    stop_ratio: float
    is_auto_managed: bool
    state: DelugeTorrentState
    is_finished: bool
    message: str | None = None

    @classmethod
    def from_rpc(cls, data: dict[str, Any], torrent_id: str | None = None) -> "RawTorrentRecord":
        """Build a record from a web.update_ui torrent dictionary.

        Args:
            data: The torrent's field dictionary.
            torrent_id: The dictionary key, used when the 'hash' field is absent.
        """
        return cls(
            hash=data.get("hash", torrent_id),
            name=data.get("name") or "",
            download_path=data.get("save_path") or "",
            size=_as_int(data.get("total_size")),
            bytes_downloaded=_as_int(data.get("total_done")),
            eta=_as_int(data.get("eta")),
            ratio=_as_float(data.get("ratio")),
            stop_at_ratio=bool(data.get("stop_at_ratio", False)),
            stop_ratio=_as_float(data.get("stop_ratio")),
            is_auto_managed=bool(data.get("is_auto_managed", False)),
            state=DelugeTorrentState.from_raw(data.get("state")),
            is_finished=bool(data.get("is_finished", False)),
            message=data.get("message") or None,
        )


@dataclass(frozen=True)
class SeedConfiguration:
    """Seeding goal attached to a release."""

    ratio: float | None = None
    seed_time: timedelta | None = None


@dataclass(frozen=True)
class RemoteRelease:
    """Release metadata handed over by the application when grabbing."""

    title: str
    release_dates: list[date] = field(default_factory=list)
    seed_configuration: SeedConfiguration | None = None

    def is_recent(self, today: date | None = None) -> bool:
        """Check whether any release date falls inside the recent window."""
        today = today or date.today()
        cutoff = today - timedelta(days=RECENT_RELEASE_DAYS)
        return any(released >= cutoff for released in self.release_dates)


@dataclass(frozen=True)
class ClientSettings:
    """Connection and behaviour settings for one configured Deluge client."""

    host: str = "localhost"
    port: int = 8112
    use_ssl: bool = False
    url_base: str = ""
    password: str = "deluge"
    category: str | None = None
    imported_category: str | None = None
    recent_priority: DelugePriority = DelugePriority.LAST
    older_priority: DelugePriority = DelugePriority.LAST
    add_paused: bool = False
    name: str = CLIENT_TYPE

    @property
    def url(self) -> str:
        """Full URL of the Deluge web UI."""
        scheme = "https" if self.use_ssl else "http"
        base = self.url_base.strip("/")
        suffix = f"/{base}" if base else ""
        return f"{scheme}://{self.host}:{self.port}{suffix}"

    @property
    def is_localhost(self) -> bool:
        """True when the daemon runs on this machine."""
        return self.host in LOCALHOST_NAMES

    def priority_for(self, release: RemoteRelease) -> DelugePriority:
        """Queue priority configured for the release's recency class."""
        return self.recent_priority if release.is_recent() else self.older_priority


@dataclass(frozen=True)
class DownloadClientItemClientInfo:
    """Describes which client produced a download item."""

    name: str
    type: str = CLIENT_TYPE
    protocol: str = TORRENT_PROTOCOL

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "DownloadClientItemClientInfo":
        return cls(name=settings.name)


@dataclass(frozen=True)
class DownloadItem:
    """Client-agnostic projection of one torrent, rebuilt on every poll."""

    download_id: str
    title: str
    category: str | None
    output_path: PurePath
    remaining_size: int
    total_size: int
    remaining_time: timedelta
    seed_ratio: float
    status: DownloadItemStatus
    client_info: DownloadClientItemClientInfo
    message: str | None = None
    can_be_removed: bool = False
    can_move_files: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "download_id": self.download_id,
            "title": self.title,
            "category": self.category,
            "output_path": str(self.output_path),
            "remaining_size": self.remaining_size,
            "total_size": self.total_size,
            "remaining_time": self.remaining_time.total_seconds(),
            "seed_ratio": self.seed_ratio,
            "status": self.status.value,
            "message": self.message,
            "can_be_removed": self.can_be_removed,
            "can_move_files": self.can_move_files,
            "client": {
                "name": self.client_info.name,
                "type": self.client_info.type,
                "protocol": self.client_info.protocol,
            },
        }


@dataclass(frozen=True)
class LabelOptions:
    """Per-label options from the Deluge Label plugin."""

    apply_move_completed: bool = False
    move_completed: bool = False
    move_completed_path: str = ""

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> "LabelOptions":
        return cls(
            apply_move_completed=bool(data.get("apply_move_completed", False)),
            move_completed=bool(data.get("move_completed", False)),
            move_completed_path=data.get("move_completed_path") or "",
        )


@dataclass(frozen=True)
class DownloadClientInfo:
    """Result of a status check: where finished downloads end up."""

    is_localhost: bool
    output_root_folders: list[PurePath] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_localhost": self.is_localhost,
            "output_root_folders": [str(folder) for folder in self.output_root_folders],
        }


@dataclass(frozen=True)
class ValidationFailure:
    """A field-scoped problem found while testing a client configuration."""

    property_name: str
    message: str
    detailed_description: str | None = None
    is_warning: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_name": self.property_name,
            "message": self.message,
            "detailed_description": self.detailed_description,
            "is_warning": self.is_warning,
        }


@dataclass(frozen=True)
class LabelResult:
    """Outcome of a best-effort labeling call."""

    applied: bool
    message: str | None = None
