"""
Delete Task MCP Tool

Permanently deletes a task and unlinks it from its parent.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.services.store import TaskStore


class DeleteTaskTool(BaseMCPTool):
    """MCP Tool for deleting tasks"""

    name = "delete_task"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Delete a task permanently

        Args:
            id: ID of task to delete (alias: task_id)

        Returns:
            The deleted task
        """
        task_id = self.require_id(kwargs, "id", "task_id")
        self.log_tool_invocation({"id": task_id})

        deleted = self.call_store(self.store.delete_task, task_id)
        return create_success_response(
            data={"deleted": deleted},
            message=f"Deleted task: {deleted['title']}"
        )


def register_delete_task_tool(mcp_server, store: TaskStore):
    """Register delete_task tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="delete_task",
        description="Delete a task",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "ID of the task to delete"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: DeleteTaskTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
