# File: deluge_bridge/clients/manager.py
"""DownloadClientManager wiring the Deluge adapter into the Flask application."""

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeVar
from urllib.parse import urlparse

from flask import Flask

from deluge_bridge.constants import CLIENT_TYPE, DEFAULT_CATEGORY, DEFAULT_DELUGE_PORT
from deluge_bridge.errors import DownloadClientAuthenticationError, DownloadClientUnavailableError
from deluge_bridge.remote_path import RemotePathMapper, parse_mappings

from .deluge import Deluge
from .models import (
    ClientSettings,
    DelugePriority,
    DownloadClientInfo,
    DownloadItem,
    LabelResult,
    RemoteRelease,
    ValidationFailure,
)
from .proxy import DelugeProxy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClientLocal(threading.local):
    """Thread-local storage for proxies with strict typing."""

    def __init__(self) -> None:
        """Initialize thread-local attributes."""
        super().__init__()
        self.proxy: DelugeProxy | None = None


def build_settings(config: Mapping[str, Any]) -> ClientSettings:
    """Build ClientSettings from the Flask configuration.

    DELUGE_URL, when present, overrides host, port, SSL and URL base.

    Raises:
        ValueError: If a priority or port value is invalid.
    """
    host = config.get("DELUGE_HOST") or "localhost"
    port = int(config.get("DELUGE_PORT") or DEFAULT_DELUGE_PORT)
    use_ssl = bool(config.get("DELUGE_USE_SSL", False))
    url_base = config.get("DELUGE_URL_BASE") or ""

    deluge_url = config.get("DELUGE_URL")
    if deluge_url:
        try:
            parsed = urlparse(deluge_url)
            host = parsed.hostname or host
            port = parsed.port or port
            if parsed.scheme:
                use_ssl = parsed.scheme == "https"
            url_base = parsed.path.strip("/") or url_base
        except ValueError as e:
            logger.warning(f"Failed to parse DELUGE_URL: {e}. Using raw config values.")

    return ClientSettings(
        host=host,
        port=port,
        use_ssl=use_ssl,
        url_base=url_base,
        password=config.get("DELUGE_PASSWORD") or "",
        category=config.get("DELUGE_CATEGORY", DEFAULT_CATEGORY) or None,
        imported_category=config.get("DELUGE_IMPORTED_CATEGORY") or None,
        recent_priority=DelugePriority.parse(config.get("DELUGE_RECENT_PRIORITY") or "last"),
        older_priority=DelugePriority.parse(config.get("DELUGE_OLDER_PRIORITY") or "last"),
        add_paused=bool(config.get("DELUGE_ADD_PAUSED", False)),
        name=config.get("DOWNLOAD_CLIENT_NAME") or CLIENT_TYPE,
    )


class DownloadClientManager:
    """Owns the configured Deluge client and forwards application calls to it.

    Calls are never retried here. When the daemon is unreachable or rejects
    the session, this thread's proxy is dropped so the next call reconnects.
    """

    def __init__(self) -> None:
        """Initialize the DownloadClientManager state."""
        self.settings = ClientSettings()
        self.path_mapper = RemotePathMapper()

        # Thread-local storage for proxy instances
        self._local = ClientLocal()

    def init_app(self, app: Flask) -> None:
        """Initialize the manager with configuration from the Flask app."""
        self.settings = build_settings(app.config)
        self.path_mapper = RemotePathMapper(parse_mappings(app.config.get("REMOTE_PATH_MAPPINGS")))

        if not app.config.get("DELUGE_HOST") and not app.config.get("DELUGE_URL"):
            logger.warning("DELUGE_HOST missing. Defaulting Deluge to localhost.")

        # Reset thread local
        self._local = ClientLocal()

    def _get_proxy(self) -> DelugeProxy:
        """Return the thread-local proxy, creating it if needed."""
        if self._local.proxy is None:
            self._local.proxy = DelugeProxy()
        return self._local.proxy

    def _force_disconnect(self) -> None:
        """Drop the current proxy to force a fresh login on the next call."""
        if self._local.proxy is not None:
            self._local.proxy.reset()
        self._local.proxy = None

    def _client(self) -> Deluge:
        return Deluge(self._get_proxy(), self.settings, self.path_mapper)

    def _call(self, operation: Callable[[Deluge], T]) -> T:
        try:
            return operation(self._client())
        except (DownloadClientUnavailableError, DownloadClientAuthenticationError) as e:
            logger.warning(f"Deluge call failed ({e}). Resetting connection.")
            self._force_disconnect()
            raise

    def verify_credentials(self) -> bool:
        """Verify that Deluge is reachable with the configured credentials."""
        try:
            version = self._call(lambda client: client.proxy.get_version(client.settings))
        except Exception as e:
            logger.warning(f"Could not connect to Deluge at {self.settings.url}: {e}")
            return False
        logger.info(f"Successfully connected to Deluge {version} at {self.settings.url}")
        return True

    def get_items(self) -> list[DownloadItem]:
        """Return the current download items."""
        return self._call(lambda client: client.get_items())

    def add_from_magnet(self, release: RemoteRelease, magnet_link: str) -> str:
        """Add a magnet link and return its download id."""
        return self._call(lambda client: client.add_from_magnet(release, magnet_link))

    def add_from_file(self, release: RemoteRelease, filename: str, file_content: bytes) -> str:
        """Add a .torrent file and return its download id."""
        return self._call(lambda client: client.add_from_file(release, filename, file_content))

    def remove_item(self, download_id: str, delete_data: bool = False) -> None:
        """Remove a torrent by download id."""
        self._call(lambda client: client.remove_item(download_id, delete_data))

    def mark_item_as_imported(self, download_id: str, title: str) -> LabelResult | None:
        """Apply the post-import label to an imported torrent."""
        return self._call(lambda client: client.mark_item_as_imported(download_id, title))

    def get_status(self) -> DownloadClientInfo:
        """Return where Deluge stores finished downloads."""
        return self._call(lambda client: client.get_status())

    def run_validation(self) -> list[ValidationFailure]:
        """Run the client self-test."""
        failures = self._client().test()
        if failures:
            # A failed test may leave a half-initialized session behind.
            self._force_disconnect()
        return failures
