"""Project router for the REST API."""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, Dict, Any

from taskhub.schemas.project import ProjectCreate, ProjectUpdate
from taskhub.services.store import TaskStore
from taskhub.routers.dependencies import get_store

router = APIRouter(tags=["Projects"])  # No prefix since main.py adds /api prefix


@router.get("/projects", response_model=Dict[str, Any])
async def list_projects(
    store: TaskStore = Depends(get_store),
    status_filter: Optional[str] = Query("all", alias="status", description="Filter by status: all, todo, in_progress, done"),
):
    """List projects with task counts, sorted by priority then due date."""
    projects = store.list_projects(status_filter)
    return {
        "projects": projects,
        "total": len(projects),
        "last_modified": store.last_modified
    }


@router.post("/projects", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    store: TaskStore = Depends(get_store),
):
    """Create a new project."""
    return {"project": store.create_project(project_data.model_dump(exclude_none=True))}


@router.get("/projects/{project_id}", response_model=Dict[str, Any])
async def get_project_summary(
    project_id: str,
    store: TaskStore = Depends(get_store),
):
    """Get a project with task statistics and recent tasks."""
    return {"summary": store.get_project_summary(project_id)}


@router.put("/projects/{project_id}", response_model=Dict[str, Any])
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    store: TaskStore = Depends(get_store),
):
    """Update the fields present in the request body."""
    return {"project": store.update_project(project_id, project_data.model_dump(exclude_unset=True))}


@router.delete("/projects/{project_id}", response_model=Dict[str, Any])
async def delete_project(
    project_id: str,
    store: TaskStore = Depends(get_store),
    delete_tasks: bool = Query(False, description="Also delete every task in the project"),
):
    """Delete a project, optionally with its tasks."""
    return {"deleted": store.delete_project(project_id, cascade=delete_tasks)}
