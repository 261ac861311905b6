"""
Update Task MCP Tool

Merges the supplied fields into an existing task.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.models.enums import PRIORITIES, STATUSES
from taskhub.services.store import TaskStore


class UpdateTaskTool(BaseMCPTool):
    """MCP Tool for updating tasks"""

    name = "update_task"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Update an existing task; fields not supplied are left untouched

        Args:
            id: Task ID (alias: task_id)
            title, description, status, priority, due_date, assignee, tags: New values

        Returns:
            Updated task object
        """
        task_id = self.require_id(kwargs, "id", "task_id")
        fields = {k: v for k, v in kwargs.items() if k not in ("id", "task_id")}
        self.log_tool_invocation({"id": task_id, "fields": sorted(fields)})

        task = self.call_store(self.store.update_task, task_id, fields)
        return create_success_response(
            data={"task": task},
            message=f"Updated task: {task['title']}"
        )


def register_update_task_tool(mcp_server, store: TaskStore):
    """Register update_task tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="update_task",
        description="Update an existing task",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "ID of the task to update"},
                "title": {"type": "string", "description": "New task title"},
                "description": {"type": "string", "description": "New task description"},
                "status": {"type": "string", "enum": list(STATUSES), "description": "New task status"},
                "priority": {"type": "string", "enum": list(PRIORITIES), "description": "New task priority"},
                "due_date": {"type": "string", "format": "date", "description": "New due date"},
                "assignee": {"type": "string", "description": "New assignee"},
                "tags": {"type": "array", "items": {"type": "string"}, "description": "New array of tags"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: UpdateTaskTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
