"""
Snapshot persisters.

A persister is the store's only link to durable storage. It loads the
snapshot once at startup and saves the full snapshot after every mutation:

    {"projects": [...], "tasks": [...]}

Each collection is written as one JSON blob under its own key.
"""
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

import httpx
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, col, select

from taskhub.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = ("projects", "tasks")


class Persister(Protocol):
    """Load/save capability injected into the store."""

    def load(self) -> Optional[Dict[str, Any]]:
        ...

    def save(self, snapshot: Dict[str, Any]) -> None:
        ...


class InMemoryPersister:
    """Keeps the last saved snapshot in process memory."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Optional[Dict[str, Any]] = json.loads(json.dumps(initial)) if initial else None
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return json.loads(json.dumps(self.data)) if self.data else None

    def save(self, snapshot: Dict[str, Any]) -> None:
        self.data = json.loads(json.dumps(snapshot))
        self.save_count += 1


class DatabasePersister:
    """Stores each collection as a JSON blob row in the ``snapshot`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine
        SQLModel.metadata.create_all(engine, tables=[Snapshot.__table__])

    def load(self) -> Optional[Dict[str, Any]]:
        with Session(self.engine) as session:
            rows = session.exec(select(Snapshot).where(col(Snapshot.key).in_(SNAPSHOT_KEYS))).all()

        if not rows:
            return None

        snapshot: Dict[str, Any] = {}
        for row in rows:
            try:
                snapshot[row.key] = json.loads(row.value)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring undecodable snapshot key '{row.key}'")
        return snapshot or None

    def save(self, snapshot: Dict[str, Any]) -> None:
        now = datetime.now(timezone.utc)
        with Session(self.engine) as session:
            for key in SNAPSHOT_KEYS:
                if key not in snapshot:
                    continue
                session.merge(Snapshot(key=key, value=json.dumps(snapshot[key]), updated_at=now))
            session.commit()


class KeyValueHTTPPersister:
    """
    Replit-DB compatible HTTP key-value store.

    Protocol:
    - GET  {base_url}/{key}  -> raw value, 404 when missing
    - POST {base_url}        -> form-encoded ``key=value``
    """

    def __init__(self, base_url: str, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def load(self) -> Optional[Dict[str, Any]]:
        snapshot: Dict[str, Any] = {}
        for key in SNAPSHOT_KEYS:
            response = self.client.get(f"{self.base_url}/{key}")
            if response.status_code == 404:
                continue
            response.raise_for_status()
            if not response.text:
                continue
            try:
                snapshot[key] = json.loads(response.text)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring undecodable value for key '{key}'")
        return snapshot or None

    def save(self, snapshot: Dict[str, Any]) -> None:
        for key in SNAPSHOT_KEYS:
            if key not in snapshot:
                continue
            response = self.client.post(self.base_url, data={key: json.dumps(snapshot[key])})
            response.raise_for_status()

    def close(self) -> None:
        self.client.close()


def build_persister_from_env() -> Persister:
    """Select a persister from TASKHUB_PERSISTENCE / REPLIT_DB_URL / DATABASE_URL."""
    backend = os.environ.get("TASKHUB_PERSISTENCE", "").strip().lower()
    kv_url = os.environ.get("REPLIT_DB_URL")

    if backend == "memory":
        logger.info("Using in-memory persistence")
        return InMemoryPersister()

    if backend == "kv" or (not backend and kv_url):
        if not kv_url:
            raise RuntimeError("TASKHUB_PERSISTENCE=kv requires REPLIT_DB_URL")
        logger.info("Using HTTP key-value persistence")
        return KeyValueHTTPPersister(kv_url)

    if backend not in ("", "database"):
        raise RuntimeError(f"Unknown TASKHUB_PERSISTENCE backend: {backend}")

    from taskhub.db.config import engine

    logger.info("Using database persistence")
    return DatabasePersister(engine)
