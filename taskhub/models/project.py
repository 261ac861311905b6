"""Project model."""
from sqlmodel import SQLModel, Field
from typing import List, Optional
from uuid import uuid4

from taskhub.models.enums import DEFAULT_PRIORITY, DEFAULT_STATUS


class Project(SQLModel):
    """Top-level grouping entity with its own status and priority."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1)
    description: str = Field(default="")
    status: str = Field(default=DEFAULT_STATUS)
    priority: str = Field(default=DEFAULT_PRIORITY)
    due_date: Optional[str] = Field(default=None)  # ISO date string
    tags: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: str
