"""Notification state machine - In-memory, no I/O.

Tracks, per event, whether the nearby and proximity alerts have already
fired this session, and decides which new alerts to emit.

Each tier moves independently from unnotified to notified, exactly once.
It only moves back via clear_event_notifications() or reset_notifications().
Unlike the rest of the core this module holds state, so it guards that state
with a lock: the check-then-set for each event must be atomic.
"""

import threading
from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from typing import Optional

from src.core.errors import EventFetchError
from src.core.event import Coordinate, Event
from src.core.geo import (
    NEARBY_RADIUS_KM,
    PROXIMITY_RADIUS_M,
    classify_nearby,
    classify_proximity,
    distance_to_event,
)
from src.core.matching import event_features_favorite_team
from src.core.notifications import (
    NotificationCommand,
    make_nearby_notification,
    make_proximity_notification,
)


@dataclass(frozen=True)
class NotificationRecord:
    """Notified flags for a single event.

    Attributes:
        event_id: Event the flags belong to
        nearby_notified: Nearby alert already fired this session
        proximity_notified: Proximity alert already fired this session
    """
    event_id: str
    nearby_notified: bool = False
    proximity_notified: bool = False


class NotificationStateMachine:
    """Per-session duplicate suppression for favorite team alerts.

    One instance is owned per user session by the host (see
    src/orchestrator.py). It holds two independent sets of event ids,
    one per tier.
    """

    def __init__(
        self,
        nearby_radius_km: float = NEARBY_RADIUS_KM,
        proximity_radius_meters: float = PROXIMITY_RADIUS_M,
        on_change: Optional[Callable[["NotificationStateMachine"], None]] = None,
    ) -> None:
        """Initialize with empty notified-state.

        Args:
            nearby_radius_km: Radius for the nearby tier
            proximity_radius_meters: Radius for the proximity tier
            on_change: Called (outside the lock) after any state mutation
        """
        self.nearby_radius_km = nearby_radius_km
        self.proximity_radius_meters = proximity_radius_meters
        self._on_change = on_change
        self._lock = threading.Lock()
        self._notified_events: set[str] = set()
        self._proximity_notified_events: set[str] = set()

    def check_favorite_team_events(
        self,
        user_id: str,
        favorite_teams: Collection[str],
        location: Coordinate,
        active_events: Iterable[Event],
    ) -> list[NotificationCommand]:
        """Evaluate active events and emit any alerts not yet sent.

        Args:
            user_id: User the evaluation is for
            favorite_teams: The user's favorite team names
            location: The user's current location
            active_events: Events to consider, processed in order

        Returns:
            Commands to deliver, in event order (nearby before proximity)

        Raises:
            EventFetchError: If iterating ``active_events`` fails. No state
                is changed in that case.
        """
        if not favorite_teams:
            return []

        events = self._materialise(user_id, active_events)

        commands: list[NotificationCommand] = []
        with self._lock:
            for event in events:
                if not event_features_favorite_team(event, favorite_teams):
                    continue

                distance_m = distance_to_event(location, event)

                nearby = classify_nearby(distance_m, self.nearby_radius_km)
                if nearby.is_nearby and event.id not in self._notified_events:
                    commands.append(make_nearby_notification(event, nearby.distance_km))
                    self._notified_events.add(event.id)

                # Not exclusive with the nearby tier: both can fire in one call
                proximity = classify_proximity(distance_m, self.proximity_radius_meters)
                if (
                    proximity.is_in_proximity
                    and event.id not in self._proximity_notified_events
                ):
                    commands.append(
                        make_proximity_notification(event, proximity.distance_meters)
                    )
                    self._proximity_notified_events.add(event.id)

        if commands:
            self._notify_change()

        return commands

    def on_location_changed(
        self,
        user_id: str,
        favorite_teams: Collection[str],
        new_location: Coordinate,
        active_events: Iterable[Event],
    ) -> list[NotificationCommand]:
        """Re-evaluate after the user moved. No debouncing is applied."""
        return self.check_favorite_team_events(
            user_id,
            favorite_teams,
            new_location,
            active_events,
        )

    def clear_event_notifications(self, event_id: str) -> None:
        """Forget both tiers for one event. Unknown ids are a no-op."""
        with self._lock:
            changed = (
                event_id in self._notified_events
                or event_id in self._proximity_notified_events
            )
            self._notified_events.discard(event_id)
            self._proximity_notified_events.discard(event_id)

        if changed:
            self._notify_change()

    def reset_notifications(self) -> None:
        """Forget all notified-state (logout, test setup)."""
        with self._lock:
            changed = bool(self._notified_events or self._proximity_notified_events)
            self._notified_events.clear()
            self._proximity_notified_events.clear()

        if changed:
            self._notify_change()

    def get_notified_event_ids(self) -> frozenset[str]:
        """Event ids that already received the nearby alert."""
        with self._lock:
            return frozenset(self._notified_events)

    def get_proximity_notified_event_ids(self) -> frozenset[str]:
        """Event ids that already received the proximity alert."""
        with self._lock:
            return frozenset(self._proximity_notified_events)

    def get_record(self, event_id: str) -> NotificationRecord:
        """Snapshot of both flags for one event."""
        with self._lock:
            return NotificationRecord(
                event_id=event_id,
                nearby_notified=event_id in self._notified_events,
                proximity_notified=event_id in self._proximity_notified_events,
            )

    def _materialise(self, user_id: str, active_events: Iterable[Event]) -> list[Event]:
        """Resolve the event iterable before any state is touched."""
        try:
            return list(active_events)
        except EventFetchError:
            raise
        except Exception as e:
            raise EventFetchError(
                f"Failed to load active events for user {user_id}: {e}"
            ) from e

    def _notify_change(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
