"""Firestore Client - Imperative Shell.

This module reads active events and user profiles from Google Cloud
Firestore. It is the EventSource and UserDirectory of the alert engine.

All I/O is contained here; parsing and matching logic is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

from google.cloud import firestore

from src.core.errors import EventFetchError
from src.core.event import Event, parse_events
from src.core.user import UserProfile, parse_user


logger = logging.getLogger(__name__)


# Default collection names, matching the mobile app's schema
DEFAULT_EVENTS_COLLECTION = "events"
DEFAULT_USERS_COLLECTION = "users"


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        events_collection: Collection holding event documents
        users_collection: Collection holding user documents
    """
    project_id: str | None = None
    database: str | None = None
    events_collection: str = DEFAULT_EVENTS_COLLECTION
    users_collection: str = DEFAULT_USERS_COLLECTION


class FirestoreClient:
    """Client for reading events and user profiles from Firestore.

    This is part of the imperative shell - it handles database I/O.

    Event documents:
    {
        "matchDetails": {"homeTeam": "...", "awayTeam": "..."},
        "location": {"name": "...", "address": "...", "latitude": 0.0, "longitude": 0.0},
        "date": <timestamp>,
        "checkInTime": <timestamp>,
        "isActive": true
    }

    User documents:
    {
        "username": "...",
        "teams": ["Richmond", ...]
    }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _active_events_query(self) -> Any:
        """Query for active events, soonest first."""
        return (
            self.client
            .collection(self.config.events_collection)
            .where(filter=firestore.FieldFilter("isActive", "==", True))
            .order_by("date", direction=firestore.Query.ASCENDING)
        )

    def get_all_active_events(self) -> list[Event]:
        """Fetch all active events.

        This method performs database I/O.

        Returns:
            Parsed events, soonest first. Malformed documents are skipped.

        Raises:
            EventFetchError: If the query fails
        """
        logger.info("Fetching active events from Firestore")

        try:
            documents = [
                (doc.id, doc.to_dict() or {})
                for doc in self._active_events_query().stream()
            ]
        except Exception as e:
            logger.error("Failed to fetch active events: %s", str(e))
            raise EventFetchError(f"Failed to fetch active events: {e}") from e

        events = parse_events(documents)

        skipped = len(documents) - len(events)
        if skipped:
            logger.warning("Skipped %d malformed event documents", skipped)

        logger.info("Fetched %d active events from Firestore", len(events))
        return events

    def get_user(self, user_id: str) -> UserProfile | None:
        """Fetch a user's profile.

        This method performs database I/O.

        Args:
            user_id: Firestore document ID of the user

        Returns:
            UserProfile, or None if the user does not exist or the lookup fails
        """
        logger.info("Fetching user %s from Firestore", user_id)

        try:
            doc = (
                self.client
                .collection(self.config.users_collection)
                .document(user_id)
                .get()
            )

            if not doc.exists:
                logger.info("User %s not found", user_id)
                return None

            return parse_user(doc.id, doc.to_dict() or {})

        except Exception as e:
            logger.error("Failed to fetch user %s: %s", user_id, str(e))
            # Treated as "not found" by the caller - no alerts, no crash
            return None
