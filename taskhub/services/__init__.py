"""Store and persistence services."""

from .persistence import (
    DatabasePersister,
    InMemoryPersister,
    KeyValueHTTPPersister,
    Persister,
    build_persister_from_env,
)
from .store import TaskStore

__all__ = [
    "DatabasePersister",
    "InMemoryPersister",
    "KeyValueHTTPPersister",
    "Persister",
    "TaskStore",
    "build_persister_from_env",
]
