"""
List Tasks MCP Tool

Lists tasks filtered by project, status and priority, sorted by priority then
due date. Each task carries the name of its project.
"""

from typing import Dict, Any, Optional

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import ALL, PRIORITIES, STATUSES
from taskhub.services.store import TaskStore


class ListTasksTool(BaseMCPTool):
    """MCP Tool for listing tasks with filtering"""

    name = "list_tasks"

    async def execute(self, /, project_id: Optional[str] = None, status: Optional[str] = ALL,
                      priority: Optional[str] = ALL, **kwargs) -> Dict[str, Any]:
        """
        List tasks

        Args:
            project_id: Filter by project ID (optional)
            status: Filter by status ("all" for no filter)
            priority: Filter by priority ("all" for no filter)

        Returns:
            Array of task objects
        """
        self.log_tool_invocation({"project_id": project_id, "status": status, "priority": priority})

        tasks = self.call_store(self.store.list_tasks, project_id=project_id, status=status, priority=priority)
        return create_success_response(
            data={
                "tasks": tasks,
                "total": len(tasks),
                "last_modified": self.store.last_modified
            },
            message=f"Found {len(tasks)} task{'s' if len(tasks) != 1 else ''}"
        )


def register_list_tasks_tool(mcp_server, store: TaskStore):
    """Register list_tasks tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="list_tasks",
        description="List tasks, optionally filtered by project, status or priority",
        parameters={
            "type": "object",
            "properties": {
                "project_id": {"type": "string", "description": "Filter by project ID"},
                "status": {"type": "string", "enum": [*STATUSES, ALL], "default": ALL, "description": "Filter tasks by status"},
                "priority": {"type": "string", "enum": [*PRIORITIES, ALL], "default": ALL, "description": "Filter tasks by priority"}
            }
        },
        handler=lambda **kwargs: ListTasksTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
