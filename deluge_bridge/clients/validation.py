# File: deluge_bridge/clients/validation.py
"""Self-test of a configured Deluge client."""

import logging
from collections.abc import Callable

from deluge_bridge.constants import LABEL_PLUGIN
from deluge_bridge.errors import DownloadClientAuthenticationError, DownloadClientTransportError, TransportFailure

from .base import TorrentClientProxy
from .models import ClientSettings, ValidationFailure

logger = logging.getLogger(__name__)

Stage = Callable[[TorrentClientProxy, ClientSettings], ValidationFailure | None]

LABEL_CONFIGURATION_FAILED = "Configuration of label failed"

_TRANSPORT_FAILURES: dict[TransportFailure, ValidationFailure] = {
    TransportFailure.CONNECT_FAILURE: ValidationFailure(
        "Host", "Unable to connect", "Please verify the hostname and port."
    ),
    TransportFailure.CONNECTION_CLOSED: ValidationFailure(
        "UseSsl", "Verify SSL settings", "Please verify your SSL configuration on both Deluge and this application."
    ),
    TransportFailure.SECURE_CHANNEL_FAILURE: ValidationFailure(
        "UseSsl",
        "Unable to connect through SSL",
        "Unable to connect to Deluge using SSL. Please try to configure both this application and Deluge "
        "to not use SSL.",
    ),
}


def check_connection(proxy: TorrentClientProxy, settings: ClientSettings) -> ValidationFailure | None:
    """Stage 1: reach the daemon and authenticate."""
    try:
        proxy.get_version(settings)
    except DownloadClientAuthenticationError:
        logger.error("Unable to authenticate", exc_info=True)
        return ValidationFailure("Password", "Authentication failed")
    except DownloadClientTransportError as e:
        logger.error("Unable to test connection", exc_info=True)
        known = _TRANSPORT_FAILURES.get(e.failure)
        if known is not None:
            return known
        return ValidationFailure("", f"Unknown exception: {e.message}")
    except Exception as e:
        logger.error("Failed to test connection", exc_info=True)
        return ValidationFailure("Host", "Unable to connect to Deluge", str(e))
    return None


def _ensure_label(
    proxy: TorrentClientProxy, settings: ClientSettings, label: str, labels: list[str], field: str
) -> tuple[list[str], ValidationFailure | None]:
    if label in labels:
        return labels, None

    logger.info(f"Creating Deluge label '{label}'")
    proxy.add_label(label, settings)
    labels = proxy.get_available_labels(settings)
    if label not in labels:
        return labels, ValidationFailure(field, LABEL_CONFIGURATION_FAILED, "Unable to add the label to Deluge.")
    return labels, None


def check_category(proxy: TorrentClientProxy, settings: ClientSettings) -> ValidationFailure | None:
    """Stage 2: check the Label plugin and provision the configured labels."""
    if not settings.category and not settings.imported_category:
        return None

    if LABEL_PLUGIN not in proxy.get_enabled_plugins(settings):
        return ValidationFailure(
            "MusicCategory",
            "Label plugin not activated",
            "You must have the Label plugin enabled in Deluge to use categories.",
        )

    labels = proxy.get_available_labels(settings)
    for label, field in ((settings.category, "MusicCategory"), (settings.imported_category, "MusicImportedCategory")):
        if not label:
            continue
        labels, failure = _ensure_label(proxy, settings, label, labels, field)
        if failure is not None:
            return failure
    return None


def check_torrent_listing(proxy: TorrentClientProxy, settings: ClientSettings) -> ValidationFailure | None:
    """Stage 3: list torrents."""
    try:
        proxy.get_torrents(settings)
    except Exception as e:
        logger.error("Unable to get torrents", exc_info=True)
        return ValidationFailure("", f"Failed to get the list of torrents: {e}")
    return None


# Stages after the first only run when the connection test passed.
CONNECTION_STAGE: Stage = check_connection
FOLLOW_UP_STAGES: list[Stage] = [check_category, check_torrent_listing]


def _run_stage(stage: Stage, proxy: TorrentClientProxy, settings: ClientSettings) -> ValidationFailure | None:
    try:
        return stage(proxy, settings)
    except Exception as e:
        logger.error(f"Test stage {getattr(stage, '__name__', stage)} aborted", exc_info=True)
        return ValidationFailure("", f"Test was aborted due to an error: {e}")


def run_validation(proxy: TorrentClientProxy, settings: ClientSettings) -> list[ValidationFailure]:
    """Run the self-test and collect failures instead of raising.

    An empty list means the client is usable.
    """
    failures: list[ValidationFailure] = []

    failure = _run_stage(CONNECTION_STAGE, proxy, settings)
    if failure is not None:
        failures.append(failure)
        if not failure.is_warning:
            return failures

    for stage in FOLLOW_UP_STAGES:
        failure = _run_stage(stage, proxy, settings)
        if failure is not None:
            failures.append(failure)
    return failures
