"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the functional core
and the I/O-performing shell components. It's the "glue" that makes the
application work, and the host that owns one NotificationStateMachine per
user session.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from src.core.config import Config
from src.core.errors import EventFetchError
from src.core.event import Coordinate, Event, filter_upcoming_events
from src.core.notification_state import NotificationStateMachine
from src.core.notifications import NotificationCommand
from src.shell.firestore_client import FirestoreClient, FirestoreConfig
from src.shell.push_client import PushClient, PushResponse


logger = logging.getLogger(__name__)


SKIP_USER_NOT_FOUND = "user_not_found"
SKIP_NO_FAVORITE_TEAMS = "no_favorite_teams"


@dataclass
class MonitorResult:
    """Result of one favorite team check for one user.

    Attributes:
        user_id: User the check ran for
        events_checked: Active events considered
        commands: Notification commands emitted
        deliveries_sent: Commands the push gateway accepted
        deliveries_failed: Commands the push gateway rejected
        skipped_reason: Why the check was a no-op (None if it ran)
        errors: Any errors that occurred
    """
    user_id: str
    events_checked: int = 0
    commands: list[NotificationCommand] = field(default_factory=list)
    deliveries_sent: int = 0
    deliveries_failed: int = 0
    skipped_reason: str | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if no critical errors occurred."""
        return len(self.errors) == 0

    @property
    def summary(self) -> str:
        """Human-readable summary of the check."""
        if self.skipped_reason:
            return f"Skipped user {self.user_id}: {self.skipped_reason}"
        return (
            f"Checked {self.events_checked} events for user {self.user_id}, "
            f"{len(self.commands)} notifications, "
            f"{self.deliveries_sent} delivered, "
            f"{self.deliveries_failed} failed"
        )


class FavoriteTeamMonitor:
    """Coordinates favorite team monitoring and alerting.

    This class wires together:
    - User directory (favorite teams, Firestore)
    - Event source (active events, Firestore)
    - Notification state machines (one per user session)
    - Push client (notification delivery)
    """

    def __init__(
        self,
        config: Config,
        firestore_client: FirestoreClient | None = None,
        push_client: PushClient | None = None,
        event_source: object | None = None,
        user_directory: object | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize monitor with configuration.

        Args:
            config: Application configuration
            firestore_client: Firestore client (created if not provided)
            push_client: Push client (created if not provided)
            event_source: Anything with get_all_active_events()
                (defaults to the Firestore client)
            user_directory: Anything with get_user(user_id)
                (defaults to the Firestore client)
            clock: Returns the current time (used for skip_past_events)
        """
        self.config = config
        self.firestore_client = firestore_client or FirestoreClient(
            FirestoreConfig(
                database=config.firestore_database,
                events_collection=config.events_collection,
                users_collection=config.users_collection,
            )
        )
        self.event_source = event_source or self.firestore_client
        self.user_directory = user_directory or self.firestore_client
        self.push_client = push_client or PushClient(
            webhook_url=config.push_webhook_url,
            timeout=config.push_timeout_seconds,
            display_timezone=ZoneInfo(config.display_timezone),
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._lock = threading.Lock()
        self._sessions: dict[str, NotificationStateMachine] = {}
        self._last_locations: dict[str, Coordinate] = {}

    @property
    def active_sessions(self) -> list[str]:
        """User ids with a live session."""
        with self._lock:
            return list(self._sessions)

    def session(self, user_id: str) -> NotificationStateMachine:
        """Get the user's state machine, starting a session if needed."""
        with self._lock:
            state = self._sessions.get(user_id)
            if state is None:
                logger.info("Starting notification session for user %s", user_id)
                state = NotificationStateMachine(
                    nearby_radius_km=self.config.nearby_radius_km,
                    proximity_radius_meters=self.config.proximity_radius_meters,
                )
                self._sessions[user_id] = state
            return state

    def _load_favorite_teams(self, user_id: str) -> tuple[tuple[str, ...], str | None]:
        """Look up the user's favorite teams.

        Returns:
            (favorite_teams, skipped_reason)
        """
        user = self.user_directory.get_user(user_id)

        if user is None:
            logger.warning("User %s not found, skipping favorite team check", user_id)
            return (), SKIP_USER_NOT_FOUND

        if not user.has_favorite_teams:
            logger.debug("User %s has no favorite teams configured", user_id)
            return (), SKIP_NO_FAVORITE_TEAMS

        return user.favorite_teams, None

    def _upcoming(self, events: list[Event]) -> list[Event]:
        """Apply skip_past_events; a no-op when it is off."""
        if not self.config.skip_past_events:
            return events
        return filter_upcoming_events(events, self._clock())

    def _fetch_events(self) -> list[Event]:
        """Fetch active events, dropping past ones if configured.

        Raises:
            EventFetchError: If the event source fails
        """
        events = self.event_source.get_all_active_events()

        if self.config.skip_past_events:
            upcoming = self._upcoming(events)
            logger.info(
                "Filtered to %d upcoming events (removed %d past events)",
                len(upcoming),
                len(events) - len(upcoming),
            )
            return upcoming

        return events

    def _deliver(self, user_id: str, result: MonitorResult) -> None:
        """Send every command in the result through the push client."""
        for command in result.commands:
            response = self.push_client.deliver(command, user_id=user_id)

            if response.success:
                result.deliveries_sent += 1
                logger.info(
                    "Sent %s notification for event %s to user %s",
                    command.kind,
                    command.event_id,
                    user_id,
                )
            else:
                # The flag stays set: at most one alert per tier per session
                result.deliveries_failed += 1
                logger.error(
                    "Failed to send %s notification for event %s to user %s: %s",
                    command.kind,
                    command.event_id,
                    user_id,
                    response.error,
                )

    def check_favorite_team_events(
        self,
        user_id: str,
        latitude: float,
        longitude: float,
    ) -> MonitorResult:
        """Run a complete favorite team check for a user.

        This is the main entry point that:
        1. Loads the user's favorite teams
        2. Fetches active events
        3. Evaluates them against the user's session state
        4. Delivers new notifications

        Args:
            user_id: User to check
            latitude: User's current latitude
            longitude: User's current longitude

        Returns:
            MonitorResult with details of what happened
        """
        location = Coordinate(latitude=latitude, longitude=longitude)
        with self._lock:
            self._last_locations[user_id] = location

        result = MonitorResult(user_id=user_id)

        # Step 1: Favorite teams (missing user or no teams is a no-op)
        favorite_teams, skipped_reason = self._load_favorite_teams(user_id)
        if skipped_reason:
            result.skipped_reason = skipped_reason
            return result

        # Step 2: Fetch events
        try:
            events = self._fetch_events()
        except EventFetchError as e:
            logger.error("Failed to get events for user %s: %s", user_id, e)
            result.errors.append(str(e))
            return result

        result.events_checked = len(events)
        logger.debug(
            "Checking %d events for user %s favorite teams: %s",
            len(events),
            user_id,
            list(favorite_teams),
        )

        # Step 3: Evaluate (state machine decides what is new)
        try:
            result.commands = self.session(user_id).check_favorite_team_events(
                user_id,
                favorite_teams,
                location,
                events,
            )
        except EventFetchError as e:
            logger.error("Failed to evaluate events for user %s: %s", user_id, e)
            result.errors.append(str(e))
            return result

        # Step 4: Deliver
        self._deliver(user_id, result)

        logger.info("Completed: %s", result.summary)
        return result

    def on_location_changed(
        self,
        user_id: str,
        latitude: float,
        longitude: float,
    ) -> MonitorResult:
        """Re-check favorite team events after the user moved."""
        logger.debug("Location changed for user %s: %s, %s", user_id, latitude, longitude)
        return self.check_favorite_team_events(user_id, latitude, longitude)

    def on_new_event_created(self, event: Event) -> list[MonitorResult]:
        """Evaluate a newly created event for every live session.

        Only sessions with a known last location are considered. Inactive
        events, and past events when skip_past_events is set, are ignored.

        Args:
            event: The event that was just created

        Returns:
            One MonitorResult per session evaluated
        """
        logger.info("New event created: %s", event.id)

        if not event.is_active:
            logger.info("Event %s is not active, skipping", event.id)
            return []

        if not self._upcoming([event]):
            logger.info("Event %s is in the past, skipping", event.id)
            return []

        with self._lock:
            targets = [
                (user_id, self._last_locations[user_id])
                for user_id in self._sessions
                if user_id in self._last_locations
            ]

        results = []
        for user_id, location in targets:
            result = MonitorResult(user_id=user_id, events_checked=1)

            favorite_teams, skipped_reason = self._load_favorite_teams(user_id)
            if skipped_reason:
                result.skipped_reason = skipped_reason
                results.append(result)
                continue

            result.commands = self.session(user_id).check_favorite_team_events(
                user_id,
                favorite_teams,
                location,
                [event],
            )
            self._deliver(user_id, result)
            results.append(result)

        return results

    def clear_event_notifications(self, user_id: str, event_id: str) -> PushResponse | None:
        """Forget an event's alerts for a user and withdraw shown notifications.

        Returns:
            The push gateway response, or None if the user has no session
        """
        with self._lock:
            state = self._sessions.get(user_id)

        if state is None:
            return None

        state.clear_event_notifications(event_id)
        return self.push_client.cancel(event_id, user_id=user_id)

    def reset_notifications(self, user_id: str) -> None:
        """Forget all of a user's notified-state, keeping the session."""
        with self._lock:
            state = self._sessions.get(user_id)

        if state is not None:
            state.reset_notifications()

    def end_session(self, user_id: str) -> None:
        """Reset and drop a user's session (logout)."""
        with self._lock:
            state = self._sessions.pop(user_id, None)
            self._last_locations.pop(user_id, None)

        if state is not None:
            state.reset_notifications()
            logger.info("Ended notification session for user %s", user_id)

    def get_notified_event_ids(self, user_id: str) -> frozenset[str]:
        """Event ids that received the nearby alert in the user's session."""
        with self._lock:
            state = self._sessions.get(user_id)
        return state.get_notified_event_ids() if state else frozenset()

    def get_proximity_notified_event_ids(self, user_id: str) -> frozenset[str]:
        """Event ids that received the proximity alert in the user's session."""
        with self._lock:
            state = self._sessions.get(user_id)
        return state.get_proximity_notified_event_ids() if state else frozenset()
