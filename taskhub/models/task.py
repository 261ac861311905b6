"""Task model."""
from sqlmodel import SQLModel, Field
from typing import List, Optional
from uuid import uuid4

from taskhub.models.enums import DEFAULT_PRIORITY, DEFAULT_STATUS


class Task(SQLModel):
    """Unit of work belonging to one project, optionally nested under a parent task."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str = Field(min_length=1)
    description: str = Field(default="")
    project_id: str
    status: str = Field(default=DEFAULT_STATUS)
    priority: str = Field(default=DEFAULT_PRIORITY)
    due_date: Optional[str] = Field(default=None)  # ISO date string
    assignee: Optional[str] = Field(default=None)
    tags: List[str] = Field(default_factory=list)
    parent_task_id: Optional[str] = Field(default=None)
    subtasks: List[str] = Field(default_factory=list)  # child task ids, insertion ordered
    created_at: str
    updated_at: str
