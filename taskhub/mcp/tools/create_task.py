"""
Create Task MCP Tool

Creates a new task inside an existing project, optionally as a subtask.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import DEFAULT_PRIORITY, DEFAULT_STATUS, PRIORITIES, STATUSES
from taskhub.services.store import TaskStore


class CreateTaskTool(BaseMCPTool):
    """MCP Tool for creating tasks"""

    name = "create_task"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Create a new task

        Args:
            title: Task title (required)
            project_id: Owning project (required, must exist)
            parent_task_id: Parent task for subtasks (optional)
            description, status, priority, due_date, assignee, tags: Optional fields

        Returns:
            Created task object
        """
        self.log_tool_invocation({"title": kwargs.get("title"), "project_id": kwargs.get("project_id")})

        task = self.call_store(self.store.create_task, kwargs)
        return create_success_response(
            data={"task": task},
            message=f"Created task: {task['title']} in project: {task['project_name']}"
        )


def register_create_task_tool(mcp_server, store: TaskStore):
    """Register create_task tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="create_task",
        description="Create a new task within a project",
        parameters={
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Task title"},
                "description": {"type": "string", "description": "Task description"},
                "project_id": {"type": "string", "description": "ID of the project this task belongs to"},
                "status": {"type": "string", "enum": list(STATUSES), "default": DEFAULT_STATUS, "description": "Task status"},
                "priority": {"type": "string", "enum": list(PRIORITIES), "default": DEFAULT_PRIORITY, "description": "Task priority"},
                "due_date": {"type": "string", "format": "date", "description": "Due date in ISO format (optional)"},
                "assignee": {"type": "string", "description": "Assignee (optional)"},
                "tags": {"type": "array", "items": {"type": "string"}, "description": "Array of tags (optional)"},
                "parent_task_id": {"type": "string", "description": "ID of parent task for subtasks"}
            },
            "required": ["title", "project_id"]
        },
        handler=lambda **kwargs: CreateTaskTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
