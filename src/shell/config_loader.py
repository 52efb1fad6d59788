"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in src/core/config.py to avoid information
leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _resolve_value(value: Any) -> Any:
    """Resolve a ``${ENV_VAR}`` placeholder from the environment.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place (validate_config warns on it).

    Args:
        value: Value to resolve

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any) -> bool:
    """Parse YAML/env booleans ("true", "1", True, ...)."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    radii = data.get("radii", {})
    firestore_data = data.get("firestore", {})
    push_data = data.get("push", {})

    # An unresolved placeholder falls back to the default database
    database = _resolve_value(firestore_data.get("database"))
    if isinstance(database, str) and database.startswith("${"):
        database = None

    return Config(
        nearby_radius_km=float(radii.get("nearby_km", defaults.nearby_radius_km)),
        proximity_radius_meters=float(
            radii.get("proximity_meters", defaults.proximity_radius_meters)
        ),
        firestore_database=database or None,
        events_collection=firestore_data.get(
            "events_collection", defaults.events_collection
        ),
        users_collection=firestore_data.get(
            "users_collection", defaults.users_collection
        ),
        push_webhook_url=_resolve_value(push_data.get("webhook_url", "")),
        push_timeout_seconds=int(
            push_data.get("timeout_seconds", defaults.push_timeout_seconds)
        ),
        skip_past_events=_parse_bool(
            data.get("skip_past_events", defaults.skip_past_events)
        ),
        display_timezone=data.get("display_timezone", defaults.display_timezone),
        strict_coordinates=_parse_bool(
            data.get("strict_coordinates", defaults.strict_coordinates)
        ),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: nearby=%.1fkm, proximity=%.0fm, database=%s",
        config.nearby_radius_km,
        config.proximity_radius_meters,
        config.firestore_database or "(default)",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        PUSH_WEBHOOK_URL: Push gateway endpoint
        PUSH_TIMEOUT_SECONDS: Push gateway timeout
        FIRESTORE_DATABASE: Firestore database name
        NEARBY_RADIUS_KM: Nearby tier radius
        PROXIMITY_RADIUS_METERS: Proximity tier radius
        SKIP_PAST_EVENTS: Drop events dated before today
        DISPLAY_TIMEZONE: Zone notification times are shown in
        STRICT_COORDINATES: Reject invalid request coordinates

    Returns:
        Config object from environment
    """
    defaults = Config()

    webhook_url = os.environ.get("PUSH_WEBHOOK_URL", "")
    if not webhook_url:
        logger.warning("PUSH_WEBHOOK_URL not set")

    return Config(
        nearby_radius_km=float(
            os.environ.get("NEARBY_RADIUS_KM", defaults.nearby_radius_km)
        ),
        proximity_radius_meters=float(
            os.environ.get("PROXIMITY_RADIUS_METERS", defaults.proximity_radius_meters)
        ),
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
        push_webhook_url=webhook_url,
        push_timeout_seconds=int(
            os.environ.get("PUSH_TIMEOUT_SECONDS", defaults.push_timeout_seconds)
        ),
        skip_past_events=_parse_bool(os.environ.get("SKIP_PAST_EVENTS", "false")),
        display_timezone=os.environ.get("DISPLAY_TIMEZONE", defaults.display_timezone),
        strict_coordinates=_parse_bool(os.environ.get("STRICT_COORDINATES", "true")),
    )
