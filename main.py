"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the src package.
"""

from src.main import favorite_team_monitor

__all__ = [
    "favorite_team_monitor",
]
