# File: deluge_bridge/clients/proxy.py
"""Proxy for the Deluge Web JSON-RPC API."""

import base64
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from http.client import RemoteDisconnected
from typing import Any

import niquests
from deluge_web_client import DelugeWebClient
from deluge_web_client.exceptions import (
    DelugeWebClientConnectionError,
    DelugeWebClientError,
    DelugeWebClientTimeoutError,
)

from deluge_bridge.constants import TORRENT_FIELDS
from deluge_bridge.errors import (
    DownloadClientAuthenticationError,
    DownloadClientError,
    DownloadClientTransportError,
    DownloadClientUnavailableError,
    TransportFailure,
)

from .base import TorrentClientProxy
from .models import ClientSettings, LabelOptions, RawTorrentRecord, SeedConfiguration

logger = logging.getLogger(__name__)

# JSON-RPC error code Deluge uses for an expired or missing web session.
NOT_AUTHENTICATED_CODE = 1

# Error text DelugeWebClient.login() reports when auth.login returned False.
LOGIN_FAILED = "Login failed"

_CLOSED_CONNECTION_ERRORS = (RemoteDisconnected, ConnectionResetError, ConnectionAbortedError, BrokenPipeError)


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error and every exception nested in it.

    deluge-web-client raises its own errors from the niquests exception, and
    niquests in turn nests the socket level error as an argument or cause.
    """
    pending: list[BaseException] = [error]
    seen: set[int] = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)


def _classify_transport_failure(error: DelugeWebClientConnectionError) -> TransportFailure:
    """Work out which network-layer failure a library connection error stands for."""
    chain = list(_error_chain(error))
    if any(isinstance(e, niquests.exceptions.SSLError) for e in chain):
        return TransportFailure.SECURE_CHANNEL_FAILURE
    if any(isinstance(e, _CLOSED_CONNECTION_ERRORS) for e in chain):
        return TransportFailure.CONNECTION_CLOSED
    if any(isinstance(e, niquests.exceptions.ConnectionError) for e in chain):
        return TransportFailure.CONNECT_FAILURE
    return TransportFailure.OTHER


@contextmanager
def _translate_errors(method: str) -> Iterator[None]:
    """Translate deluge-web-client exceptions into the application's error types."""
    try:
        yield
    except DelugeWebClientTimeoutError as e:
        raise DownloadClientTransportError(f"Deluge request '{method}' timed out: {e}") from e
    except DelugeWebClientConnectionError as e:
        raise DownloadClientTransportError(f"Unable to connect to Deluge: {e}", _classify_transport_failure(e)) from e
    except DelugeWebClientError as e:
        raise DownloadClientError(f"Deluge call '{method}' failed: {e}") from e
    except ValueError as e:
        # Raised by DelugeWebClient for a URL it cannot use.
        raise DownloadClientError(f"Invalid Deluge URL: {e}") from e


def _error_details(error: Any) -> tuple[int | None, str]:
    """Extract (code, message) from a JSON-RPC error payload."""
    if isinstance(error, dict):
        return error.get("code"), str(error.get("message", error))
    return None, str(error)


class DelugeProxy(TorrentClientProxy):
    """TorrentClientProxy implementation backed by deluge-web-client.

    One logged-in DelugeWebClient is kept per web UI URL. Instances are not
    thread-safe; the DownloadClientManager keeps one proxy per thread.
    """

    def __init__(self) -> None:
        """Initialize the proxy with no open sessions."""
        self._clients: dict[str, DelugeWebClient] = {}

    def _get_client(self, settings: ClientSettings) -> DelugeWebClient:
        client = self._clients.get(settings.url)
        if client is not None:
            return client

        logger.debug(f"Logging in to Deluge at {settings.url}")
        with _translate_errors("auth.login"):
            client = DelugeWebClient(url=settings.url, password=settings.password)
            response = client.login()

        if not response.result:
            client.close_session()
            if response.error == LOGIN_FAILED:
                raise DownloadClientAuthenticationError("Failed to login to Deluge: wrong password")
            raise DownloadClientUnavailableError(f"Deluge web UI is not connected to a daemon: {response.error}")

        self._clients[settings.url] = client
        return client

    def _drop_client(self, url: str) -> None:
        client = self._clients.pop(url, None)
        if client is not None:
            client.close_session()

    def reset(self) -> None:
        """Drop every cached session so the next call logs in again."""
        for url in list(self._clients):
            self._drop_client(url)

    def _call(self, settings: ClientSettings, method: str, *params: Any) -> Any:
        client = self._get_client(settings)
        payload: dict[str, Any] = {"method": method, "params": list(params)}
        logger.debug(f"Deluge RPC call: {method}")

        # RPC errors come back in the response so an expired session can be told apart.
        with _translate_errors(method):
            response = client.execute_call(payload, handle_error=False)

        if response.error:
            code, message = _error_details(response.error)
            if code == NOT_AUTHENTICATED_CODE:
                self._drop_client(settings.url)
                raise DownloadClientAuthenticationError(f"Deluge session is not authenticated: {message}")
            raise DownloadClientError(f"Deluge RPC '{method}' failed: {message}")
        return response.result

    def get_version(self, settings: ClientSettings) -> str:
        """Return the daemon version."""
        return str(self._call(settings, "daemon.info"))

    def get_config(self, settings: ClientSettings) -> dict[str, Any]:
        """Return the daemon's core configuration."""
        return self._call(settings, "core.get_config") or {}

    def _update_ui(self, settings: ClientSettings, filter_dict: dict[str, Any]) -> list[RawTorrentRecord]:
        result = self._call(settings, "web.update_ui", TORRENT_FIELDS, filter_dict)
        if not isinstance(result, dict):
            logger.warning(f"Deluge returned unexpected data type: {type(result)}")
            return []

        torrents = result.get("torrents") or {}
        return [
            RawTorrentRecord.from_rpc(data, torrent_id)
            for torrent_id, data in torrents.items()
            if isinstance(data, dict)
        ]

    def get_torrents(self, settings: ClientSettings) -> list[RawTorrentRecord]:
        """List every torrent known to the daemon."""
        return self._update_ui(settings, {})

    def get_torrents_by_label(self, label: str, settings: ClientSettings) -> list[RawTorrentRecord]:
        """List the torrents carrying the given label."""
        return self._update_ui(settings, {"label": label})

    def add_torrent_from_magnet(self, magnet_link: str, settings: ClientSettings) -> str | None:
        """Add a magnet link and return the resulting hash, if any."""
        options = {"add_paused": settings.add_paused}
        return self._call(settings, "core.add_torrent_magnet", magnet_link, options)

    def add_torrent_from_file(self, filename: str, file_content: bytes, settings: ClientSettings) -> str | None:
        """Add a .torrent file and return the resulting hash, if any."""
        options = {"add_paused": settings.add_paused}
        encoded = base64.b64encode(file_content).decode("ascii")
        return self._call(settings, "core.add_torrent_file", filename, encoded, options)

    def set_torrent_seeding_configuration(
        self, torrent_hash: str, seed_configuration: SeedConfiguration | None, settings: ClientSettings
    ) -> None:
        """Apply a seeding goal to a torrent.

        Deluge only understands ratio limits; a seed time goal is left to the
        application's own seeding checks.
        """
        if seed_configuration is None:
            return

        if seed_configuration.seed_time is not None:
            logger.debug(f"Deluge does not support seed time limits, ignoring for {torrent_hash}")

        if seed_configuration.ratio is None:
            return

        options = {"stop_at_ratio": True, "stop_ratio": seed_configuration.ratio}
        self._call(settings, "core.set_torrent_options", [torrent_hash], options)

    def set_torrent_label(self, torrent_hash: str, label: str, settings: ClientSettings) -> None:
        """Assign a label to a torrent.

        Raises:
            DownloadClientUnavailableError: If Deluge refused the label (e.g. it does not exist).
        """
        try:
            self._call(settings, "label.set_torrent", torrent_hash, label)
        except (DownloadClientUnavailableError, DownloadClientAuthenticationError):
            raise
        except DownloadClientError as e:
            raise DownloadClientUnavailableError(f"Unable to set label '{label}' on {torrent_hash}: {e.message}") from e

    def move_torrent_to_top_in_queue(self, torrent_hash: str, settings: ClientSettings) -> None:
        """Move a torrent to the top of the daemon's queue."""
        self._call(settings, "core.queue_top", [torrent_hash])

    def remove_torrent(self, torrent_hash: str, delete_data: bool, settings: ClientSettings) -> None:
        """Remove a torrent, optionally deleting its data."""
        self._call(settings, "core.remove_torrent", torrent_hash, delete_data)

    def get_label_options(self, settings: ClientSettings) -> LabelOptions | None:
        """Return the options of the configured category label, if it exists."""
        if not settings.category:
            return None

        try:
            result = self._call(settings, "label.get_options", settings.category)
        except (DownloadClientUnavailableError, DownloadClientAuthenticationError):
            raise
        except DownloadClientError as e:
            logger.debug(f"No label options for '{settings.category}': {e.message}")
            return None

        if not isinstance(result, dict):
            return None
        return LabelOptions.from_rpc(result)

    def get_enabled_plugins(self, settings: ClientSettings) -> list[str]:
        """List the daemon's enabled plugins."""
        return list(self._call(settings, "core.get_enabled_plugins") or [])

    def get_available_labels(self, settings: ClientSettings) -> list[str]:
        """List the labels known to the Label plugin."""
        return list(self._call(settings, "label.get_labels") or [])

    def add_label(self, label: str, settings: ClientSettings) -> None:
        """Create a label."""
        self._call(settings, "label.add", label)
