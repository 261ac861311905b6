# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from taskhub.main import create_app
from taskhub.services.persistence import InMemoryPersister
from taskhub.services.store import TaskStore


class FakeClock:
    """
    Deterministic clock: every call advances one second.

    Keeps ordering by updated_at reproducible regardless of timer resolution.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def persister() -> InMemoryPersister:
    return InMemoryPersister()


@pytest.fixture()
def store(persister: InMemoryPersister, clock: FakeClock) -> TaskStore:
    return TaskStore(persister=persister, clock=clock)


@pytest.fixture()
def client(store: TaskStore) -> TestClient:
    """HTTP client over an app wired to the in-memory store (startup hooks not run)."""
    return TestClient(create_app(store=store))
