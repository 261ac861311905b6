"""Routers package for the REST and MCP surfaces."""

from .mcp import router as mcp_router
from .projects import router as projects_router
from .tasks import router as tasks_router

__all__ = ["mcp_router", "projects_router", "tasks_router"]
