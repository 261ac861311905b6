"""
Move Task MCP Tool

Reassigns a task to a different existing project.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.services.store import TaskStore


class MoveTaskTool(BaseMCPTool):
    """MCP Tool for moving tasks between projects"""

    name = "move_task"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        task_id = self.require_id(kwargs, "task_id", "id")
        new_project_id = self.require_id(kwargs, "new_project_id", "project_id")
        self.log_tool_invocation({"task_id": task_id, "new_project_id": new_project_id})

        moved = self.call_store(self.store.move_task, task_id, new_project_id)
        task = moved["task"]
        return create_success_response(
            data=moved,
            message=(
                f"Moved task \"{task['title']}\" from \"{moved['previous_project']['name']}\" "
                f"to \"{task['project_name']}\""
            )
        )


def register_move_task_tool(mcp_server, store: TaskStore):
    """Register move_task tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="move_task",
        description="Move a task to a different project",
        parameters={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "ID of the task to move"},
                "new_project_id": {"type": "string", "description": "ID of the destination project"}
            },
            "required": ["task_id", "new_project_id"]
        },
        handler=lambda **kwargs: MoveTaskTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
