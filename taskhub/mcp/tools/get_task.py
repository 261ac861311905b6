"""
Get Task MCP Tool

Fetches one task with its subtasks expanded into full task objects.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.services.store import TaskStore


class GetTaskTool(BaseMCPTool):
    """MCP Tool for viewing a single task"""

    name = "get_task"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Get a task by ID

        Args:
            id: Task ID (alias: task_id)

        Returns:
            Task object whose subtasks are task objects rather than ids
        """
        task_id = self.require_id(kwargs, "id", "task_id")
        self.log_tool_invocation({"id": task_id})

        task = self.call_store(self.store.get_task, task_id, expand_subtasks=True)
        return create_success_response(
            data={"task": task},
            message=f"Task: {task['title']}"
        )


def register_get_task_tool(mcp_server, store: TaskStore):
    """Register get_task tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="get_task",
        description="Get a task with its subtasks",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "ID of the task"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: GetTaskTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
