"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration and invokes the monitor.

Notified-state lives in the monitor for as long as the instance stays warm,
which matches the "lives for the session, reset on logout" lifecycle.
"""

import logging
import os
import json
from typing import Any

import functions_framework
from flask import Request

from src.core.config import validate_coordinates
from src.orchestrator import FavoriteTeamMonitor
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


ACTIONS = ("check", "location", "clear", "reset")

_monitor: FavoriteTeamMonitor | None = None


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("PUSH_WEBHOOK_URL"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _get_monitor() -> FavoriteTeamMonitor:
    """Get the process-wide monitor, creating it on first use."""
    global _monitor
    if _monitor is None:
        _monitor = FavoriteTeamMonitor(_get_config())
    return _monitor


def _parse_coordinates(
    body: dict[str, Any],
    strict: bool = True,
) -> tuple[float, float]:
    """Read latitude/longitude from a request body.

    Args:
        body: Parsed JSON request body
        strict: Also reject NaN and out-of-range values

    Raises:
        ValueError: If either is missing, not a number, or (strict) invalid
    """
    try:
        latitude, longitude = float(body["latitude"]), float(body["longitude"])
    except (KeyError, TypeError) as e:
        raise ValueError("latitude and longitude are required numbers") from e

    if strict:
        errors = validate_coordinates(latitude, longitude, "location")
        if errors:
            raise ValueError("; ".join(e.message for e in errors))

    return latitude, longitude


def handle_request(monitor: FavoriteTeamMonitor, body: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Dispatch one request body to the monitor.

    Args:
        monitor: Monitor holding the user sessions
        body: Parsed JSON request body

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    action = body.get("action", "check")
    user_id = body.get("user_id")

    if action not in ACTIONS:
        return {"status": "error", "message": f"Unknown action: {action}"}, 400

    if not user_id:
        return {"status": "error", "message": "user_id is required"}, 400

    if action == "reset":
        monitor.end_session(user_id)
        return {"status": "success", "user_id": user_id}, 200

    if action == "clear":
        event_id = body.get("event_id")
        if not event_id:
            return {"status": "error", "message": "event_id is required"}, 400
        response = monitor.clear_event_notifications(user_id, event_id)
        return {
            "status": "success",
            "user_id": user_id,
            "event_id": event_id,
            "cancelled": bool(response and response.success),
        }, 200

    try:
        latitude, longitude = _parse_coordinates(
            body, strict=monitor.config.strict_coordinates
        )
    except ValueError as e:
        return {"status": "error", "message": str(e)}, 400

    if action == "location":
        result = monitor.on_location_changed(user_id, latitude, longitude)
    else:
        result = monitor.check_favorite_team_events(user_id, latitude, longitude)

    response = {
        "status": "success" if result.success else "partial_failure",
        "summary": result.summary,
        "user_id": user_id,
        "events_checked": result.events_checked,
        "notifications": [
            {"kind": c.kind, "event_id": c.event_id} for c in result.commands
        ],
        "deliveries_sent": result.deliveries_sent,
        "deliveries_failed": result.deliveries_failed,
    }

    if result.skipped_reason:
        response["skipped_reason"] = result.skipped_reason

    if result.errors:
        response["errors"] = result.errors

    status_code = 200 if result.success else 207  # 207 = Multi-Status
    return response, status_code


@functions_framework.http
def favorite_team_monitor(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function entry point.

    Called by the mobile app on location updates and event list refreshes.

    JSON body:
        action: "check" (default), "location", "clear" or "reset"
        user_id: User the request is for
        latitude, longitude: Current location (check/location)
        event_id: Event to forget (clear)

    Args:
        request: Flask request object

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    try:
        body = request.get_json(silent=True) or {}
        return handle_request(_get_monitor(), body)

    except Exception as e:
        logger.exception("Unexpected error in favorite team monitor")
        return {
            "status": "error",
            "message": str(e),
        }, 500


# For local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) != 4:
        print("Usage: python -m src.main USER_ID LATITUDE LONGITUDE")
        sys.exit(1)

    response, status = handle_request(
        _get_monitor(),
        {
            "action": "check",
            "user_id": sys.argv[1],
            "latitude": sys.argv[2],
            "longitude": sys.argv[3],
        },
    )
    print(f"\nResponse ({status}):")
    print(json.dumps(response, indent=2))
