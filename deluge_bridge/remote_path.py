# File: deluge_bridge/remote_path.py
"""Remote path mappings between the download client's filesystem and ours."""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath, PureWindowsPath

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")


def os_path(path: str) -> PurePath:
    """Build a pure path with the flavour the path string was written in.

    The download client may run on another OS than this application, so the
    flavour is inferred from the string rather than from the local platform.
    """
    if _WINDOWS_DRIVE.match(path) or path.startswith("\\\\") or ("\\" in path and "/" not in path):
        return PureWindowsPath(path)
    return PurePosixPath(path)


@dataclass(frozen=True)
class RemotePathMapping:
    """Maps a path prefix on a download client host to a local prefix."""

    host: str
    remote_path: str
    local_path: str

    def matches(self, host: str, path: PurePath) -> bool:
        if self.host.lower() != host.lower():
            return False
        remote = os_path(self.remote_path)
        return type(remote) is type(path) and (path == remote or remote in path.parents)

    def apply(self, path: PurePath) -> PurePath:
        relative = path.relative_to(os_path(self.remote_path))
        return os_path(self.local_path).joinpath(*relative.parts)


def parse_mappings(raw: str | None) -> list[RemotePathMapping]:
    """Parse 'host|remote|local' entries separated by ';'.

    Raises:
        ValueError: If an entry does not have exactly three non-empty parts.
    """
    mappings: list[RemotePathMapping] = []
    if not raw:
        return mappings

    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = [part.strip() for part in entry.split("|")]
        if len(parts) != 3 or not all(parts):  # noqa: PLR2004
            raise ValueError(f"Invalid remote path mapping '{entry}'. Expected 'host|remote|local'.")
        mappings.append(RemotePathMapping(*parts))
    return mappings


class RemotePathMapper:
    """Remaps paths reported by a download client into local paths."""

    def __init__(self, mappings: list[RemotePathMapping] | None = None) -> None:
        """Initialize with the configured mappings (most specific first wins)."""
        # Longest remote prefix first so nested mappings take precedence.
        self.mappings = sorted(mappings or [], key=lambda m: len(m.remote_path), reverse=True)

    def remap_remote_to_local(self, host: str, remote_path: str | PurePath) -> PurePath:
        """Translate a remote path reported by the client on `host`.

        Paths without a matching mapping are returned unchanged.
        """
        path = remote_path if isinstance(remote_path, PurePath) else os_path(remote_path)
        if not str(remote_path):
            return path

        for mapping in self.mappings:
            if mapping.matches(host, path):
                local = mapping.apply(path)
                logger.debug(f"Remapped remote path {path} to {local} for host {host}")
                return local
        return path
