"""Message formatting - Pure functions.

This module formats notification commands into push payloads.
All functions are pure with no side effects.
"""

from datetime import datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from src.core.notifications import (
    NEARBY,
    PROXIMITY,
    NearbyNotification,
    NotificationCommand,
    ProximityNotification,
)


NEARBY_TITLE = "Your Team is Playing Nearby! 🏈"
PROXIMITY_TITLE = "You're Near Your Team's Event! 🎯"

# Vibration patterns (ms) carried in the payload for the mobile client
NEARBY_VIBRATE = [0, 400, 200, 400]
PROXIMITY_VIBRATE = [0, 200, 100, 200, 100, 200]

# Event times are stored in UTC and shown in the venue's zone
DEFAULT_DISPLAY_TIMEZONE = "Australia/Melbourne"
DISPLAY_TZ = ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)


def notification_tag(kind: str, event_id: str) -> str:
    """Stable tag so a client can replace or cancel a shown notification.

    Pure function.
    """
    return f"favorite_team_{kind}:{event_id}"


def format_matchup(home_team: str | None, away_team: str | None) -> str:
    """Format "Home vs Away", with placeholders for missing names.

    Pure function.
    """
    return f"{home_team or 'Team A'} vs {away_team or 'Team B'}"


def _to_display(value: datetime, tz: tzinfo) -> datetime:
    """Convert an aware datetime to the display zone. Naive values are kept."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz)


def format_date(value: datetime | None, tz: tzinfo = DISPLAY_TZ) -> str:
    """Format an event date as e.g. "Saturday, March 15"."""
    if value is None:
        return "TBA"
    value = _to_display(value, tz)
    return f"{value.strftime('%A, %B')} {value.day:02d}"


def format_time(value: datetime | None, tz: tzinfo = DISPLAY_TZ) -> str:
    """Format a time as e.g. "7:30 PM"."""
    if value is None:
        return "TBA"
    value = _to_display(value, tz)
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def format_nearby_message(
    command: NearbyNotification,
    tz: tzinfo = DISPLAY_TZ,
) -> dict[str, Any]:
    """Format a nearby command as a push payload.

    Pure function.

    Args:
        command: Nearby notification command
        tz: Zone the date and time are shown in

    Returns:
        Push payload dict
    """
    matchup = format_matchup(command.home_team, command.away_team)

    lines = [
        "🎯 Your favorite team has an event nearby!",
        "",
        f"🏈 {matchup}",
        f"📅 {format_date(command.event_date, tz)}",
        f"⏰ {format_time(command.check_in_time, tz)}",
        f"📍 {command.venue_name}",
        f"🏠 {command.venue_address}",
        f"📏 {command.distance_km:.1f} km away",
    ]

    return {
        "kind": NEARBY,
        "event_id": command.event_id,
        "tag": notification_tag(NEARBY, command.event_id),
        "title": NEARBY_TITLE,
        "text": f"{matchup} is happening nearby",
        "body": "\n".join(lines),
        "priority": "default",
        "vibrate": NEARBY_VIBRATE,
    }


def format_proximity_message(
    command: ProximityNotification,
    tz: tzinfo = DISPLAY_TZ,
) -> dict[str, Any]:
    """Format a proximity command as a push payload.

    Pure function.

    Args:
        command: Proximity notification command
        tz: Zone the time is shown in

    Returns:
        Push payload dict
    """
    matchup = format_matchup(command.home_team, command.away_team)

    lines = [
        "🚶 You're walking past your favorite team's event!",
        "",
        f"🏈 {matchup}",
        f"⏰ Starts at {format_time(command.check_in_time, tz)}",
        f"📍 {command.venue_name}",
        f"🏠 {command.venue_address}",
        f"📏 {command.distance_meters:.0f}m away - you're right here!",
    ]

    return {
        "kind": PROXIMITY,
        "event_id": command.event_id,
        "tag": notification_tag(PROXIMITY, command.event_id),
        "title": PROXIMITY_TITLE,
        "text": f"{matchup} is right here!",
        "body": "\n".join(lines),
        "priority": "high",
        "vibrate": PROXIMITY_VIBRATE,
    }


def format_notification(
    command: NotificationCommand,
    tz: tzinfo = DISPLAY_TZ,
) -> dict[str, Any]:
    """Format any notification command as a push payload.

    Pure function.
    """
    if isinstance(command, ProximityNotification):
        return format_proximity_message(command, tz)
    return format_nearby_message(command, tz)


def format_cancel_message(event_id: str) -> dict[str, Any]:
    """Format a request to withdraw both tiers' notifications for an event.

    Pure function.
    """
    return {
        "action": "cancel",
        "event_id": event_id,
        "tags": [
            notification_tag(NEARBY, event_id),
            notification_tag(PROXIMITY, event_id),
        ],
    }
