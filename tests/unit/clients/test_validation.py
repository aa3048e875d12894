"""Unit tests for the Deluge client self-test."""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import niquests
import pytest

from deluge_bridge.clients.models import ClientSettings, ValidationFailure
from deluge_bridge.clients.proxy import DelugeProxy
from deluge_bridge.clients.validation import (
    LABEL_CONFIGURATION_FAILED,
    check_category,
    check_connection,
    check_torrent_listing,
    run_validation,
)
from deluge_bridge.errors import (
    DownloadClientAuthenticationError,
    DownloadClientError,
    DownloadClientTransportError,
    TransportFailure,
)


@pytest.fixture
def healthy(proxy: MagicMock) -> MagicMock:
    """A proxy for a reachable daemon with the Label plugin and the category label."""
    proxy.get_version.return_value = "2.1.1"
    proxy.get_enabled_plugins.return_value = ["Label"]
    proxy.get_available_labels.return_value = ["readarr"]
    proxy.get_torrents.return_value = []
    return proxy


def test_healthy_daemon_passes(healthy: MagicMock, settings: ClientSettings) -> None:
    """No failures means the client is usable."""
    assert run_validation(healthy, settings) == []
    healthy.add_label.assert_not_called()


def test_secure_channel_failure_stops_pipeline(proxy: MagicMock, settings: ClientSettings) -> None:
    """A failed TLS handshake yields exactly one UseSsl failure and later stages never run."""
    proxy.get_version.side_effect = DownloadClientTransportError(
        "SSL handshake failed", TransportFailure.SECURE_CHANNEL_FAILURE
    )

    failures = run_validation(proxy, settings)

    assert len(failures) == 1
    assert failures[0].property_name == "UseSsl"
    assert failures[0].message == "Unable to connect through SSL"
    assert failures[0].is_warning is False
    proxy.get_enabled_plugins.assert_not_called()
    proxy.get_available_labels.assert_not_called()
    proxy.get_torrents.assert_not_called()


@pytest.mark.parametrize(
    ("error", "field", "message"),
    [
        (DownloadClientAuthenticationError("bad password"), "Password", "Authentication failed"),
        (
            DownloadClientTransportError("refused", TransportFailure.CONNECT_FAILURE),
            "Host",
            "Unable to connect",
        ),
        (
            DownloadClientTransportError("closed", TransportFailure.CONNECTION_CLOSED),
            "UseSsl",
            "Verify SSL settings",
        ),
        (
            DownloadClientTransportError("read timed out", TransportFailure.OTHER),
            "",
            "Unknown exception: read timed out",
        ),
        (RuntimeError("boom"), "Host", "Unable to connect to Deluge"),
    ],
)
def test_connection_errors_map_to_fields(
    proxy: MagicMock, settings: ClientSettings, error: Exception, field: str, message: str
) -> None:
    """Each class of connection error is reported against the relevant setting."""
    proxy.get_version.side_effect = error

    failure = check_connection(proxy, settings)

    assert failure is not None
    assert failure.property_name == field
    assert failure.message == message


def test_generic_connection_error_keeps_detail(proxy: MagicMock, settings: ClientSettings) -> None:
    """The underlying error text is surfaced as the detailed description."""
    proxy.get_version.side_effect = DownloadClientError("Deluge RPC 'daemon.info' failed: nope")

    failure = check_connection(proxy, settings)

    assert failure == ValidationFailure(
        "Host", "Unable to connect to Deluge", "Deluge RPC 'daemon.info' failed: nope"
    )


def test_category_skipped_without_categories(proxy: MagicMock, settings: ClientSettings) -> None:
    """Stage two is a no-op when no labels are configured."""
    unlabeled = replace(settings, category=None, imported_category=None)

    assert check_category(proxy, unlabeled) is None
    proxy.get_enabled_plugins.assert_not_called()


def test_label_plugin_missing(healthy: MagicMock, settings: ClientSettings) -> None:
    """Categories need the Label plugin."""
    healthy.get_enabled_plugins.return_value = ["Scheduler"]

    failure = check_category(healthy, settings)

    assert failure is not None
    assert failure.property_name == "MusicCategory"
    assert failure.message == "Label plugin not activated"
    healthy.add_label.assert_not_called()


def test_missing_label_is_created(healthy: MagicMock, settings: ClientSettings) -> None:
    """A missing category label is added and confirmed by re-fetching the list."""
    healthy.get_available_labels.side_effect = [[], ["Books"]]
    books = replace(settings, category="Books")

    assert check_category(healthy, books) is None

    healthy.add_label.assert_called_once_with("Books", books)
    assert healthy.get_available_labels.call_count == 2


def test_label_creation_not_confirmed(healthy: MagicMock, settings: ClientSettings) -> None:
    """A label that still is not listed after adding fails the category field."""
    healthy.get_available_labels.side_effect = [[], []]
    books = replace(settings, category="Books")

    failure = check_category(healthy, books)

    assert failure is not None
    assert failure.property_name == "MusicCategory"
    assert failure.message == LABEL_CONFIGURATION_FAILED


def test_imported_label_created(healthy: MagicMock, settings: ClientSettings) -> None:
    """The post-import label is provisioned like the category label."""
    healthy.get_available_labels.side_effect = [["readarr"], ["readarr", "imported"]]
    with_imported = replace(settings, imported_category="imported")

    assert check_category(healthy, with_imported) is None
    healthy.add_label.assert_called_once_with("imported", with_imported)


def test_imported_label_failure_names_its_field(healthy: MagicMock, settings: ClientSettings) -> None:
    """A post-import label failure points at the imported category setting."""
    healthy.get_available_labels.side_effect = [["readarr"], ["readarr"]]
    with_imported = replace(settings, imported_category="imported")

    failure = check_category(healthy, with_imported)

    assert failure is not None
    assert failure.property_name == "MusicImportedCategory"
    assert failure.message == LABEL_CONFIGURATION_FAILED


def test_listing_failure(proxy: MagicMock, settings: ClientSettings) -> None:
    """A daemon that cannot list torrents is reported generically."""
    proxy.get_torrents.side_effect = DownloadClientError("Deluge RPC 'web.update_ui' failed: oops")

    failure = check_torrent_listing(proxy, settings)

    assert failure is not None
    assert failure.property_name == ""
    assert failure.message.startswith("Failed to get the list of torrents:")


def test_later_stages_collect_failures(healthy: MagicMock, settings: ClientSettings) -> None:
    """After a good connection, every follow-up stage runs and reports."""
    healthy.get_enabled_plugins.return_value = []
    healthy.get_torrents.side_effect = DownloadClientError("listing broke")

    failures = run_validation(healthy, settings)

    assert [f.message for f in failures] == [
        "Label plugin not activated",
        "Failed to get the list of torrents: listing broke",
    ]


def test_stage_exception_is_collected(healthy: MagicMock, settings: ClientSettings) -> None:
    """An unexpected error inside a stage aborts only that stage."""
    healthy.get_enabled_plugins.side_effect = RuntimeError("plugin list exploded")

    failures = run_validation(healthy, settings)

    assert len(failures) == 1
    assert failures[0].message == "Test was aborted due to an error: plugin list exploded"
    healthy.get_torrents.assert_called_once_with(settings)


def test_warning_from_connection_stage_continues(proxy: MagicMock, settings: ClientSettings) -> None:
    """Only a hard connection failure stops the pipeline."""
    warning = ValidationFailure("Host", "Slow response", is_warning=True)
    listing = MagicMock(return_value=None)

    with (
        patch("deluge_bridge.clients.validation.CONNECTION_STAGE", MagicMock(return_value=warning)),
        patch("deluge_bridge.clients.validation.FOLLOW_UP_STAGES", [listing]),
    ):
        failures = run_validation(proxy, settings)

    assert failures == [warning]
    listing.assert_called_once_with(proxy, settings)


@pytest.mark.parametrize(
    ("error", "field", "message"),
    [
        (niquests.exceptions.SSLError("certificate verify failed"), "UseSsl", "Unable to connect through SSL"),
        (niquests.exceptions.ConnectionError("Connection refused"), "Host", "Unable to connect"),
    ],
)
def test_connection_stage_through_web_client(
    settings: ClientSettings, error: Exception, field: str, message: str
) -> None:
    """Transport failures raised inside deluge-web-client reach the right setting, not the password."""
    with patch("niquests.Session.post", side_effect=error):
        failure = check_connection(DelugeProxy(), settings)

    assert failure is not None
    assert failure.property_name == field
    assert failure.message == message
