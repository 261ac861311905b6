# tests/test_persistence.py

from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from taskhub.db.config import create_db_engine
from taskhub.services.persistence import (
    DatabasePersister,
    InMemoryPersister,
    KeyValueHTTPPersister,
    build_persister_from_env,
)
from taskhub.services.store import TaskStore


class FailingPersister:
    """Persister whose save always fails."""

    def __init__(self) -> None:
        self.attempts = 0

    def load(self):
        raise ConnectionError("storage offline")

    def save(self, snapshot):
        self.attempts += 1
        raise ConnectionError("storage offline")


def test_every_mutation_is_saved(store: TaskStore, persister: InMemoryPersister) -> None:
    project = store.create_project({"name": "Launch"})
    task = store.create_task({"title": "Write copy", "project_id": project["id"]})
    store.update_task(task["id"], {"status": "done"})
    store.list_tasks()
    store.get_project_summary(project["id"])

    assert persister.save_count == 3
    assert [p["id"] for p in persister.data["projects"]] == [project["id"]]
    assert persister.data["tasks"][0]["status"] == "done"


def test_failed_save_keeps_in_memory_change(clock) -> None:
    failing = FailingPersister()
    store = TaskStore(persister=failing, clock=clock)

    project = store.create_project({"name": "Launch"})

    assert failing.attempts == 1
    assert store.get_project(project["id"])["name"] == "Launch"


def test_failed_load_starts_empty(clock) -> None:
    store = TaskStore(persister=FailingPersister(), clock=clock)

    store.load_initial_state()

    assert store.stats()["projects_count"] == 0


def test_load_initial_state_restores_snapshot(clock) -> None:
    source = TaskStore(persister=InMemoryPersister(), clock=clock)
    project = source.create_project({"name": "Launch", "priority": "urgent"})
    parent = source.create_task({"title": "parent", "project_id": project["id"]})
    source.create_task({"title": "child", "project_id": project["id"], "parent_task_id": parent["id"]})

    restored = TaskStore(persister=InMemoryPersister(source.snapshot()), clock=clock)
    restored.load_initial_state()

    assert restored.snapshot() == source.snapshot()
    assert len(restored.get_task(parent["id"])["subtasks"]) == 1


def test_load_initial_state_skips_malformed_records(clock) -> None:
    snapshot = {
        "projects": [
            {"id": "p1", "name": "Good", "created_at": "2025-01-01T00:00:00Z", "updated_at": "2025-01-01T00:00:00Z"},
            {"id": "p2", "description": "no name"},
        ],
    }
    store = TaskStore(persister=InMemoryPersister(snapshot), clock=clock)

    store.load_initial_state()

    assert [p["id"] for p in store.list_projects()] == ["p1"]
    assert store.list_tasks() == []


def test_flush_saves_current_state(store: TaskStore, persister: InMemoryPersister) -> None:
    store.flush()

    assert persister.save_count == 1
    assert persister.data == {"projects": [], "tasks": []}


def test_database_persister_round_trip(clock) -> None:
    persister = DatabasePersister(create_db_engine("sqlite://"))
    assert persister.load() is None

    store = TaskStore(persister=persister, clock=clock)
    project = store.create_project({"name": "Launch"})
    store.create_task({"title": "Write copy", "project_id": project["id"]})
    store.update_project(project["id"], {"status": "in_progress"})

    restored = TaskStore(persister=persister, clock=clock)
    restored.load_initial_state()

    assert restored.snapshot() == store.snapshot()
    assert restored.get_project(project["id"])["status"] == "in_progress"


def test_key_value_http_persister() -> None:
    backing: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            for key, values in parse_qs(request.content.decode()).items():
                backing[key] = values[0]
            return httpx.Response(200)
        key = request.url.path.rsplit("/", 1)[-1]
        if key not in backing:
            return httpx.Response(404)
        return httpx.Response(200, text=backing[key])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    persister = KeyValueHTTPPersister("http://kv.test/db/", client=client)

    assert persister.load() is None

    persister.save({"projects": [{"id": "p1"}], "tasks": []})

    assert json.loads(backing["projects"]) == [{"id": "p1"}]
    assert persister.load() == {"projects": [{"id": "p1"}], "tasks": []}


def test_build_persister_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TASKHUB_PERSISTENCE", "memory")
    assert isinstance(build_persister_from_env(), InMemoryPersister)

    monkeypatch.setenv("TASKHUB_PERSISTENCE", "")
    monkeypatch.setenv("REPLIT_DB_URL", "http://kv.test/db")
    assert isinstance(build_persister_from_env(), KeyValueHTTPPersister)

    monkeypatch.delenv("REPLIT_DB_URL")
    monkeypatch.setenv("TASKHUB_PERSISTENCE", "database")
    monkeypatch.setattr("taskhub.db.config.engine", create_db_engine("sqlite://"))
    assert isinstance(build_persister_from_env(), DatabasePersister)

    monkeypatch.setenv("TASKHUB_PERSISTENCE", "kv")
    with pytest.raises(RuntimeError):
        build_persister_from_env()

    monkeypatch.setenv("TASKHUB_PERSISTENCE", "redis")
    with pytest.raises(RuntimeError):
        build_persister_from_env()
