"""Event data models and parsing - Pure functions.

This module parses Firestore event documents into typed Event objects.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in degrees. Ranges are not validated."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Event:
    """Immutable watch-along event snapshot.

    Attributes:
        id: Firestore document ID
        home_team: Home team name (None when the event has no match details)
        away_team: Away team name (None when the event has no match details)
        location: Venue coordinates
        venue_name: Human-readable venue name
        venue_address: Street address of the venue
        date: Event date (UTC)
        check_in_time: When check-in opens (UTC)
        is_active: Whether the host still lists the event
    """
    id: str
    home_team: str | None
    away_team: str | None
    location: Coordinate
    venue_name: str = ""
    venue_address: str = ""
    date: datetime | None = None
    check_in_time: datetime | None = None
    is_active: bool = True

    @property
    def teams(self) -> tuple[str, ...]:
        """Return the team names present on this event."""
        return tuple(t for t in (self.home_team, self.away_team) if t is not None)


def _to_datetime(value: Any) -> datetime | None:
    """Normalise a Firestore timestamp value to an aware UTC datetime."""
    if value is None:
        return None

    # google.cloud.firestore returns DatetimeWithNanoseconds (a datetime)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    raise TypeError(f"Unsupported timestamp value: {value!r}")


def _team_name(value: Any) -> str | None:
    """Return a team name, rejecting non-string values."""
    if value is None or isinstance(value, str):
        return value
    raise TypeError(f"Team name must be a string, got {value!r}")


def parse_event(doc_id: str, data: dict[str, Any]) -> Event | None:
    """Parse a single Firestore event document into an Event.

    Pure function: takes raw dict, returns typed Event or None if invalid.

    Args:
        doc_id: Firestore document ID (used when the body has no id)
        data: Document body as returned by ``DocumentSnapshot.to_dict()``

    Returns:
        Event object or None if parsing fails
    """
    try:
        location = data.get("location") or {}
        if "latitude" not in location or "longitude" not in location:
            return None

        match = data.get("matchDetails") or {}

        return Event(
            id=data.get("id") or doc_id,
            home_team=_team_name(match.get("homeTeam")),
            away_team=_team_name(match.get("awayTeam")),
            location=Coordinate(
                latitude=float(location["latitude"]),
                longitude=float(location["longitude"]),
            ),
            venue_name=location.get("name", ""),
            venue_address=location.get("address", ""),
            date=_to_datetime(data.get("date")),
            check_in_time=_to_datetime(data.get("checkInTime")),
            is_active=bool(data.get("isActive", True)),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError):
        # Out-of-range timestamps raise OverflowError or OSError
        return None


def parse_events(documents: list[tuple[str, dict[str, Any]]]) -> list[Event]:
    """Parse (doc_id, data) pairs into Events, dropping invalid documents.

    Pure function. Input order is preserved.
    """
    events = []

    for doc_id, data in documents:
        event = parse_event(doc_id, data)
        if event is not None:
            events.append(event)

    return events


def filter_upcoming_events(events: list[Event], now: datetime) -> list[Event]:
    """Drop events dated before the start of ``now``'s day.

    Pure function. Events without a date are kept.

    Args:
        events: Events to filter
        now: Reference time (aware); its timezone defines "today"

    Returns:
        Events happening today or later
    """
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return [e for e in events if e.date is None or e.date >= start_of_today]
