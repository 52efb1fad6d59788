"""Notification commands - Pure data structures.

These are the commands the alert engine emits. Delivery is handled by the
imperative shell (see src/shell/push_client.py).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from src.core.event import Event


NEARBY = "nearby"
PROXIMITY = "proximity"


@dataclass(frozen=True)
class NearbyNotification:
    """Favorite team event within the nearby radius.

    Attributes:
        event_id: Event the alert is about
        home_team: Home team name
        away_team: Away team name
        venue_name: Venue name
        venue_address: Venue street address
        event_date: Event date
        check_in_time: Check-in opening time
        distance_km: Distance from the user in kilometres
    """
    event_id: str
    home_team: str | None
    away_team: str | None
    venue_name: str
    venue_address: str
    event_date: datetime | None
    check_in_time: datetime | None
    distance_km: float

    kind = NEARBY


@dataclass(frozen=True)
class ProximityNotification:
    """Favorite team event within the proximity radius.

    Attributes:
        event_id: Event the alert is about
        home_team: Home team name
        away_team: Away team name
        check_in_time: Check-in opening time
        venue_name: Venue name
        venue_address: Venue street address
        distance_meters: Distance from the user in metres
    """
    event_id: str
    home_team: str | None
    away_team: str | None
    check_in_time: datetime | None
    venue_name: str
    venue_address: str
    distance_meters: float

    kind = PROXIMITY


NotificationCommand = Union[NearbyNotification, ProximityNotification]


def make_nearby_notification(event: Event, distance_km: float) -> NearbyNotification:
    """Build a nearby command from an event snapshot.

    Pure function.
    """
    return NearbyNotification(
        event_id=event.id,
        home_team=event.home_team,
        away_team=event.away_team,
        venue_name=event.venue_name,
        venue_address=event.venue_address,
        event_date=event.date,
        check_in_time=event.check_in_time,
        distance_km=distance_km,
    )


def make_proximity_notification(
    event: Event,
    distance_meters: float,
) -> ProximityNotification:
    """Build a proximity command from an event snapshot.

    Pure function.
    """
    return ProximityNotification(
        event_id=event.id,
        home_team=event.home_team,
        away_team=event.away_team,
        check_in_time=event.check_in_time,
        venue_name=event.venue_name,
        venue_address=event.venue_address,
        distance_meters=distance_meters,
    )
