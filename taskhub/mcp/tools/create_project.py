"""
Create Project MCP Tool

Creates a new project with defaulted optional fields.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import DEFAULT_PRIORITY, DEFAULT_STATUS, PRIORITIES, STATUSES
from taskhub.services.store import TaskStore


class CreateProjectTool(BaseMCPTool):
    """MCP Tool for creating projects"""

    name = "create_project"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Create a new project

        Args:
            name: Project name (required)
            description, status, priority, due_date, tags: Optional fields

        Returns:
            Created project object
        """
        self.log_tool_invocation({"name": kwargs.get("name")})

        project = self.call_store(self.store.create_project, kwargs)
        return create_success_response(
            data={"project": project},
            message=f"Created project: {project['name']}"
        )


def register_create_project_tool(mcp_server, store: TaskStore):
    """Register create_project tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="create_project",
        description="Create a new project",
        parameters={
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Project name"},
                "description": {"type": "string", "description": "Project description"},
                "status": {"type": "string", "enum": list(STATUSES), "default": DEFAULT_STATUS, "description": "Project status"},
                "priority": {"type": "string", "enum": list(PRIORITIES), "default": DEFAULT_PRIORITY, "description": "Project priority"},
                "due_date": {"type": "string", "format": "date", "description": "Due date in ISO format (optional)"},
                "tags": {"type": "array", "items": {"type": "string"}, "description": "Array of tags (optional)"}
            },
            "required": ["name"]
        },
        handler=lambda **kwargs: CreateProjectTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
