"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

import math
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.core.formatter import DEFAULT_DISPLAY_TIMEZONE
from src.core.geo import NEARBY_RADIUS_KM, PROXIMITY_RADIUS_M


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        nearby_radius_km: Radius of the nearby tier
        proximity_radius_meters: Radius of the proximity tier
        firestore_database: Firestore database name (None for default)
        events_collection: Firestore collection holding events
        users_collection: Firestore collection holding user profiles
        push_webhook_url: Push gateway endpoint for notification delivery
        push_timeout_seconds: Timeout for push gateway requests
        skip_past_events: Drop events dated before today before evaluating
        display_timezone: IANA zone name notification times are shown in
        strict_coordinates: Reject out-of-range or NaN request coordinates
    """
    nearby_radius_km: float = NEARBY_RADIUS_KM
    proximity_radius_meters: float = PROXIMITY_RADIUS_M
    firestore_database: str | None = None
    events_collection: str = "events"
    users_collection: str = "users"
    push_webhook_url: str = ""
    push_timeout_seconds: int = 10
    skip_past_events: bool = False
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE
    strict_coordinates: bool = True


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function. The alert engine itself never calls this; it is offered
    to callers that want to reject bad locations up front.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if math.isnan(lat) or not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if math.isnan(lon) or not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.nearby_radius_km > 0:
        errors.append(ValidationError(
            field="nearby_radius_km",
            message=f"Nearby radius must be positive, got {config.nearby_radius_km}",
        ))

    if not config.proximity_radius_meters > 0:
        errors.append(ValidationError(
            field="proximity_radius_meters",
            message=f"Proximity radius must be positive, got {config.proximity_radius_meters}",
        ))

    if config.proximity_radius_meters > config.nearby_radius_km * 1000:
        errors.append(ValidationError(
            field="proximity_radius_meters",
            message=(
                f"Proximity radius ({config.proximity_radius_meters}m) is wider than "
                f"nearby radius ({config.nearby_radius_km}km)"
            ),
            severity="warning",
        ))

    if config.push_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="push_timeout_seconds",
            message=f"Timeout must be positive, got {config.push_timeout_seconds}",
        ))

    try:
        ZoneInfo(config.display_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(ValidationError(
            field="display_timezone",
            message=f"Unknown timezone: {config.display_timezone}",
        ))

    # Warn about missing webhook
    if not config.push_webhook_url or config.push_webhook_url.startswith("${"):
        errors.append(ValidationError(
            field="push_webhook_url",
            message="Push webhook URL not set (notifications will not be delivered)",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
