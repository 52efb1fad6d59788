"""Favorite-team matching - Pure functions.

Decides whether an event is relevant to a user's favorite teams.
Matching is exact, case-insensitive equality on the full team name.
"""

from collections.abc import Collection, Iterable

from src.core.event import Event


def _normalise(name: str) -> str:
    return name.lower()


def event_features_favorite_team(
    event: Event,
    favorite_teams: Collection[str],
) -> bool:
    """Check if an event features any of the user's favorite teams.

    Pure function.

    Args:
        event: Event to check
        favorite_teams: Team names the user follows

    Returns:
        True if any favorite equals the home or away team (ignoring case)
    """
    if not favorite_teams:
        return False

    event_teams = {_normalise(team) for team in event.teams}
    if not event_teams:
        return False

    return any(_normalise(team) in event_teams for team in favorite_teams)


def filter_favorite_team_events(
    events: Iterable[Event],
    favorite_teams: Collection[str],
) -> list[Event]:
    """Filter events to those featuring a favorite team.

    Pure function. Returns an empty list without touching ``events`` when
    there are no favorites.
    """
    if not favorite_teams:
        return []

    return [e for e in events if event_features_favorite_team(e, favorite_teams)]
