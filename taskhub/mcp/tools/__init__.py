"""MCP tools, one per store operation."""

from taskhub.mcp.server import MCPServer
from taskhub.services.store import TaskStore

from .create_project import register_create_project_tool
from .create_task import register_create_task_tool
from .delete_project import register_delete_project_tool
from .delete_task import register_delete_task_tool
from .get_project_summary import register_get_project_summary_tool
from .get_task import register_get_task_tool
from .list_projects import register_list_projects_tool
from .list_tasks import register_list_tasks_tool
from .move_task import register_move_task_tool
from .update_project import register_update_project_tool
from .update_task import register_update_task_tool

TOOL_REGISTRARS = [
    register_list_projects_tool,
    register_create_project_tool,
    register_update_project_tool,
    register_delete_project_tool,
    register_list_tasks_tool,
    register_create_task_tool,
    register_update_task_tool,
    register_get_task_tool,
    register_delete_task_tool,
    register_move_task_tool,
    register_get_project_summary_tool,
]


def build_mcp_server(store: TaskStore) -> MCPServer:
    """Create an MCP server with every tool bound to ``store``."""
    server = MCPServer()
    for register in TOOL_REGISTRARS:
        register(server, store)
    return server


__all__ = ["build_mcp_server", "TOOL_REGISTRARS"]
