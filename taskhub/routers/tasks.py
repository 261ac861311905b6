"""Task router for the REST API."""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, Dict, Any

from taskhub.schemas.task import TaskCreate, TaskMove, TaskUpdate
from taskhub.services.store import TaskStore
from taskhub.routers.dependencies import get_store

router = APIRouter(tags=["Tasks"])  # No prefix since main.py adds /api prefix


@router.get("/tasks", response_model=Dict[str, Any])
async def list_tasks(
    store: TaskStore = Depends(get_store),
    project_id: Optional[str] = Query(None, description="Filter by project ID"),
    status_filter: Optional[str] = Query("all", alias="status", description="Filter by status: all, todo, in_progress, done"),
    priority: Optional[str] = Query("all", description="Filter by priority: all, low, medium, high, urgent"),
):
    """List tasks with their project names, sorted by priority then due date."""
    tasks = store.list_tasks(project_id=project_id, status=status_filter, priority=priority)
    return {
        "tasks": tasks,
        "total": len(tasks),
        "last_modified": store.last_modified
    }


@router.post("/tasks", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    store: TaskStore = Depends(get_store),
):
    """Create a new task inside an existing project."""
    return {"task": store.create_task(task_data.model_dump(exclude_none=True))}


@router.get("/tasks/{task_id}", response_model=Dict[str, Any])
async def get_task(
    task_id: str,
    store: TaskStore = Depends(get_store),
):
    """Get a specific task by ID."""
    return {"task": store.get_task(task_id)}


@router.put("/tasks/{task_id}", response_model=Dict[str, Any])
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    store: TaskStore = Depends(get_store),
):
    """Update the fields present in the request body."""
    return {"task": store.update_task(task_id, task_data.model_dump(exclude_unset=True))}


@router.delete("/tasks/{task_id}", response_model=Dict[str, Any])
async def delete_task(
    task_id: str,
    store: TaskStore = Depends(get_store),
):
    """Delete a task."""
    return {"deleted": store.delete_task(task_id)}


@router.post("/tasks/{task_id}/move", response_model=Dict[str, Any])
async def move_task(
    task_id: str,
    move_data: TaskMove,
    store: TaskStore = Depends(get_store),
):
    """Move a task to a different project."""
    return store.move_task(task_id, move_data.new_project_id)
