"""
Delete Project MCP Tool

Deletes a project and, when asked, every task inside it.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.services.store import TaskStore


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


class DeleteProjectTool(BaseMCPTool):
    """MCP Tool for deleting projects"""

    name = "delete_project"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Delete a project

        Args:
            id: Project ID (alias: project_id)
            delete_tasks: Also delete all tasks in this project (alias: cascade)

        Returns:
            The deleted project and any deleted tasks
        """
        project_id = self.require_id(kwargs, "id", "project_id")
        cascade = _as_bool(kwargs.get("delete_tasks", kwargs.get("cascade", False)))
        self.log_tool_invocation({"id": project_id, "delete_tasks": cascade})

        deleted = self.call_store(self.store.delete_project, project_id, cascade)
        name = deleted["project"]["name"]
        if cascade:
            message = f"Deleted project: {name} and {deleted['deleted_tasks_count']} tasks"
        else:
            message = f"Deleted project: {name}"
        return create_success_response(data={"deleted": deleted}, message=message)


def register_delete_project_tool(mcp_server, store: TaskStore):
    """Register delete_project tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="delete_project",
        description="Delete a project and optionally its tasks",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "ID of the project to delete"},
                "delete_tasks": {"type": "boolean", "default": False, "description": "Also delete all tasks in this project"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: DeleteProjectTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
