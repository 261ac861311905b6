"""Task request schemas for the REST API."""
from pydantic import BaseModel, Field
from typing import Optional, List

from taskhub.schemas.project import PRIORITY_PATTERN, STATUS_PATTERN


class TaskCreate(BaseModel):
    """Schema for creating a task."""
    title: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    description: Optional[str] = Field(None)
    status: Optional[str] = Field(default="todo", pattern=STATUS_PATTERN)
    priority: Optional[str] = Field(default="medium", pattern=PRIORITY_PATTERN)
    due_date: Optional[str] = Field(None)  # ISO date string
    assignee: Optional[str] = Field(None)
    tags: Optional[List[str]] = Field(None)
    parent_task_id: Optional[str] = Field(None)  # Parent task for subtasks


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only fields sent by the client are applied."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None)
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    due_date: Optional[str] = Field(None)  # ISO date string
    assignee: Optional[str] = Field(None)
    tags: Optional[List[str]] = Field(None)


class TaskMove(BaseModel):
    """Schema for moving a task to another project."""
    new_project_id: str = Field(..., min_length=1)
