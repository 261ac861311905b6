"""
Project Summary MCP Tool

Reports task statistics, priority breakdown and recent activity for a project.
"""

from typing import Dict, Any

from taskhub.mcp.base_tool import BaseMCPTool, create_success_response
from taskhub.services.store import TaskStore


class GetProjectSummaryTool(BaseMCPTool):
    """MCP Tool for project summaries"""

    name = "get_project_summary"

    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        project_id = self.require_id(kwargs, "id", "project_id")
        self.log_tool_invocation({"id": project_id})

        summary = self.call_store(self.store.get_project_summary, project_id)
        stats = summary["statistics"]
        return create_success_response(
            data={"summary": summary},
            message=(
                f"Project: {summary['project']['name']} - {stats['completion_percentage']}% complete "
                f"({stats['done']}/{stats['total_tasks']} tasks done)"
            )
        )


def register_get_project_summary_tool(mcp_server, store: TaskStore):
    """Register get_project_summary tool with MCP server"""
    from taskhub.mcp.server import MCPTool

    tool = MCPTool(
        name="get_project_summary",
        description="Get a summary of a project including task statistics",
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Project ID"}
            },
            "required": ["id"]
        },
        handler=lambda **kwargs: GetProjectSummaryTool(store).execute(**kwargs)
    )

    mcp_server.register_tool(tool)
