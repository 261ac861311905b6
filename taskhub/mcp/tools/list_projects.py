"""
List Projects MCP Tool

Lists projects with per-status task counts, sorted by priority then due date.
"""

from typing import Dict, Any, Optional

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import ALL, STATUSES
from taskhub.services.store import TaskStore


class ListProjectsTool(BaseMCPTool):
    """MCP Tool for listing projects"""

    name = "list_projects"

    async def execute(self, /, status: Optional[str] = ALL, **kwargs) -> Dict[str, Any]:
        """
        List projects, optionally filtered by status

        Args:
            status: "todo", "in_progress", "done" or "all"

        Returns:
            Projects annotated with task_counts
        """
        self.log_tool_invocation({"status": status})

        projects = self.call_store(self.store.list_projects, status)
        return create_success_response(
            data={
                "projects": projects,
                "total": len(projects),
                "last_modified": self.store.last_modified
            },
            message=f"Found {len(projects)} project{'s' if len(projects) != 1 else ''}"
        )


def register_list_projects_tool(mcp_server, store: TaskStore):
    """Register list_projects tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="list_projects",
        description="List all projects, optionally filtered by status",
        parameters={
            "type": "object",
            "properties": {
                "status": {
                    "type": "string",
                    "enum": [*STATUSES, ALL],
                    "default": ALL,
                    "description": "Filter projects by status"
                }
            }
        },
        handler=lambda **kwargs: ListProjectsTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
