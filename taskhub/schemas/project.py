"""Project request schemas for the REST API."""
from pydantic import BaseModel, Field
from typing import Optional, List

STATUS_PATTERN = r"^(todo|in_progress|done)$"
PRIORITY_PATTERN = r"^(low|medium|high|urgent)$"


class ProjectCreate(BaseModel):
    """Schema for creating a project."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = Field(None)
    status: Optional[str] = Field(default="todo", pattern=STATUS_PATTERN)
    priority: Optional[str] = Field(default="medium", pattern=PRIORITY_PATTERN)
    due_date: Optional[str] = Field(None)  # ISO date string
    tags: Optional[List[str]] = Field(None)


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Only fields sent by the client are applied."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None)
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    due_date: Optional[str] = Field(None)  # ISO date string
    tags: Optional[List[str]] = Field(None)
