# File: deluge_bridge/routes.py
"""Routes module exposing the download client to the media application."""

import logging
from datetime import date, timedelta
from typing import Any

from flask import Blueprint, Response, jsonify, request

from .clients.models import RemoteRelease, SeedConfiguration
from .errors import AppError, InvalidRequestError
from .extensions import download_client, limiter

logger = logging.getLogger(__name__)

# Create the Blueprint
main_bp = Blueprint("main", __name__)


@main_bp.errorhandler(AppError)
def handle_app_error(error: AppError) -> tuple[Response, int]:
    """Render application errors as JSON with their status code."""
    logger.error(f"Request failed: {error.message}")
    return jsonify({"message": error.message}), error.status_code


def _parse_release(data: Any) -> RemoteRelease:
    """Build a RemoteRelease from request fields.

    Raises:
        InvalidRequestError: If the title is missing or a field is malformed.
    """
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise InvalidRequestError("Invalid request: Title missing")

    raw_dates = data.get("release_dates") or []
    if isinstance(raw_dates, str):
        raw_dates = [d for d in raw_dates.split(",") if d.strip()]
    try:
        release_dates = [date.fromisoformat(str(d).strip()) for d in raw_dates]
    except ValueError as e:
        raise InvalidRequestError(f"Invalid release date: {e}") from e

    seed_ratio = data.get("seed_ratio")
    seed_time = data.get("seed_time_minutes")
    try:
        seed_configuration = SeedConfiguration(
            ratio=float(seed_ratio) if seed_ratio not in (None, "") else None,
            seed_time=timedelta(minutes=float(seed_time)) if seed_time not in (None, "") else None,
        )
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"Invalid seed configuration: {e}") from e

    return RemoteRelease(title=title.strip(), release_dates=release_dates, seed_configuration=seed_configuration)


@main_bp.route("/health")
def health() -> Response:
    """Perform a health check.

    Returns:
        Response: A JSON response with status "ok".
    """
    return jsonify({"status": "ok"})


@main_bp.route("/api/items")
@limiter.limit("120 per minute")
def list_items() -> Response:
    """List the download items managed by this client."""
    items = download_client.get_items()
    logger.debug(f"Retrieved {len(items)} download items.")
    return jsonify([item.to_dict() for item in items])


@main_bp.route("/api/items/magnet", methods=["POST"])
@limiter.limit("60 per minute")
def add_magnet() -> tuple[Response, int]:
    """Send a magnet link to Deluge.

    JSON Body:
        title (str): Release title.
        magnet (str): Magnet URI.
        release_dates (list[str]): Optional ISO dates used for queue priority.
        seed_ratio (float): Optional ratio goal.

    Returns:
        Response: JSON with the new download id.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid JSON format")

    magnet = data.get("magnet")
    if not isinstance(magnet, str) or not magnet.startswith("magnet:"):
        raise InvalidRequestError("Invalid request: Magnet link missing")

    release = _parse_release(data)
    download_id = download_client.add_from_magnet(release, magnet)
    logger.info(f"Successfully sent '{release.title}' to Deluge")
    return jsonify({"id": download_id}), 201


@main_bp.route("/api/items/file", methods=["POST"])
@limiter.limit("60 per minute")
def add_file() -> tuple[Response, int]:
    """Upload a .torrent file to Deluge.

    Multipart form with a 'file' part plus the same fields as the magnet endpoint.
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise InvalidRequestError("Invalid request: Torrent file missing")

    content = upload.read()
    if not content:
        raise InvalidRequestError("Invalid request: Torrent file is empty")

    release = _parse_release(request.form)
    download_id = download_client.add_from_file(release, upload.filename, content)
    logger.info(f"Successfully sent '{release.title}' to Deluge")
    return jsonify({"id": download_id}), 201


@main_bp.route("/api/items/<download_id>", methods=["DELETE"])
def remove_item(download_id: str) -> Response:
    """Remove a torrent, optionally with its data (?delete_data=true)."""
    delete_data = request.args.get("delete_data", "").lower() in ("1", "true", "yes", "on")
    download_client.remove_item(download_id, delete_data)
    return jsonify({"message": "Torrent removed successfully."})


@main_bp.route("/api/items/<download_id>/imported", methods=["POST"])
def mark_imported(download_id: str) -> Response:
    """Apply the post-import label to an imported torrent."""
    data = request.get_json(silent=True) or {}
    title = data.get("title") if isinstance(data, dict) else None
    result = download_client.mark_item_as_imported(download_id, title or download_id)

    if result is None:
        return jsonify({"labeled": False, "message": "No post-import category configured."})
    return jsonify({"labeled": result.applied, "message": result.message})


@main_bp.route("/api/status")
def client_status() -> Response:
    """Report whether Deluge is local and where it stores finished downloads."""
    return jsonify(download_client.get_status().to_dict())


@main_bp.route("/api/test", methods=["POST"])
@limiter.limit("10 per minute")
def run_client_test() -> tuple[Response, int]:
    """Run the client self-test.

    Returns:
        Response: The list of failures; 422 when any of them is an error.
    """
    failures = download_client.run_validation()
    status_code = 422 if any(not f.is_warning for f in failures) else 200
    return jsonify([f.to_dict() for f in failures]), status_code
