"""
Update Project MCP Tool

Merges the supplied fields into an existing project.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import PRIORITIES, STATUSES
from taskhub.services.store import TaskStore


class UpdateProjectTool(BaseMCPTool):
    """MCP Tool for updating projects"""

    name = "update_project"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Update an existing project; fields not supplied are left untouched

        Args:
            id: Project ID (alias: project_id)
            name, description, status, priority, due_date, tags: New values

        Returns:
            Updated project object
        """
        project_id = self.require_id(kwargs, "id", "project_id")
        fields = {k: v for k, v in kwargs.items() if k not in ("id", "project_id")}
        self.log_tool_invocation({"id": project_id, "fields": sorted(fields)})

        project = self.call_store(self.store.update_project, project_id, fields)
        return create_success_response(
            data={"project": project},
            message=f"Updated project: {project['name']}"
        )


def register_update_project_tool(mcp_server, store: TaskStore):
    """Register update_project tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="update_project",
        description="Update an existing project",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "ID of the project to update"},
                "name": {"type": "string", "description": "New project name"},
                "description": {"type": "string", "description": "New project description"},
                "status": {"type": "string", "enum": list(STATUSES), "description": "New project status"},
                "priority": {"type": "string", "enum": list(PRIORITIES), "description": "New project priority"},
                "due_date": {"type": "string", "format": "date", "description": "New due date"},
                "tags": {"type": "array", "items": {"type": "string"}, "description": "New array of tags"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: UpdateProjectTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
