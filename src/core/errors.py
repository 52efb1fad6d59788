"""Domain errors.

Expected conditions (user not found, no favorite teams) are not errors and
never raise. Only a failed event fetch is surfaced to the caller.
"""


class WatchMatesError(Exception):
    """Base class for all domain errors."""


class EventFetchError(WatchMatesError):
    """Raised when the active events could not be loaded.

    An evaluation that hits this error emits no commands and leaves the
    notified-state untouched.
    """
