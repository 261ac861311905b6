"""Request-scoped access to the objects created at application startup."""
from fastapi import Request

from taskhub.mcp.server import MCPServer
from taskhub.services.store import TaskStore


def get_store(request: Request) -> TaskStore:
    """Dependency for getting the application's TaskStore."""
    return request.app.state.store


def get_mcp_server(request: Request) -> MCPServer:
    """Dependency for getting the application's MCP server."""
    return request.app.state.mcp_server
