"""User profile model - Pure functions."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UserProfile:
    """The slice of a user document the alert engine reads.

    Attributes:
        id: Firestore document ID (the user's UUID)
        username: Display username
        favorite_teams: Team names the user follows
    """
    id: str
    username: str = ""
    favorite_teams: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_favorite_teams(self) -> bool:
        return len(self.favorite_teams) > 0


def parse_user(doc_id: str, data: dict[str, Any]) -> UserProfile:
    """Parse a Firestore user document.

    Pure function. Non-string entries in ``teams`` are dropped.
    """
    teams = data.get("teams") or []
    return UserProfile(
        id=doc_id,
        username=data.get("username", ""),
        favorite_teams=tuple(t for t in teams if isinstance(t, str)),
    )
