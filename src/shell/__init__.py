"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Firestore client (events and user profiles)
- Push gateway client (HTTP notification delivery)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.firestore_client import FirestoreClient, FirestoreConfig
from src.shell.push_client import PushClient, PushResponse
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FirestoreClient",
    "FirestoreConfig",
    "PushClient",
    "PushResponse",
    "load_config",
    "load_config_from_env",
]
