"""Snapshot model: one serialized collection per key."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from datetime import datetime, timezone


class Snapshot(SQLModel, table=True):
    """Key-value blob holding a JSON-encoded collection ("projects" or "tasks")."""

    key: str = Field(primary_key=True, max_length=50)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
