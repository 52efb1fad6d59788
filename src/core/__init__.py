"""Functional Core - No I/O.

This module contains all business logic:
- Event and user parsing
- Geo/distance calculations
- Favorite-team matching
- Notification state machine (duplicate suppression)
- Message formatting

Everything except the state machine is a pure function.
"""

from src.core.errors import EventFetchError, WatchMatesError
from src.core.event import Coordinate, Event, parse_event, parse_events
from src.core.geo import classify_nearby, classify_proximity, haversine_distance_meters
from src.core.matching import event_features_favorite_team
from src.core.notifications import NearbyNotification, ProximityNotification
from src.core.notification_state import NotificationRecord, NotificationStateMachine
from src.core.formatter import format_notification
from src.core.user import UserProfile, parse_user

__all__ = [
    # Errors
    "EventFetchError",
    "WatchMatesError",
    # Event
    "Coordinate",
    "Event",
    "parse_event",
    "parse_events",
    # Geo
    "classify_nearby",
    "classify_proximity",
    "haversine_distance_meters",
    # Matching
    "event_features_favorite_team",
    # Notifications
    "NearbyNotification",
    "ProximityNotification",
    "NotificationRecord",
    "NotificationStateMachine",
    # Formatter
    "format_notification",
    # User
    "UserProfile",
    "parse_user",
]
