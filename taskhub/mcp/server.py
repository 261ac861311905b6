"""
MCP Server Implementation

This module implements the MCP (Model Context Protocol) server: a registry of
tools, one per store operation, and the JSON-RPC 2.0 dispatcher that exposes
them (initialize, tools/list, tools/call, ping).
"""

from typing import Dict, Any, Callable, Optional
from dataclasses import dataclass, field
from uuid import uuid4
import json
import logging

from taskhub import __version__
from taskhub.mcp.base_tool import MCPToolError

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "taskhub"

# JSON-RPC 2.0 error codes
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32004

TOOL_ERROR_CODES = {
    "VALIDATION_ERROR": INVALID_PARAMS,
    "NOT_FOUND": RESOURCE_NOT_FOUND,
}


@dataclass
class MCPTool:
    """MCP Tool definition"""
    name: str
    description: str
    parameters: Dict[str, Any]
    handler: Callable


@dataclass
class RPCReply:
    """JSON-RPC reply plus the HTTP framing the transport should use."""
    body: Optional[Dict[str, Any]]
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)


def _rpc_error(request_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def _rpc_result(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


class MCPServer:
    """
    MCP Server for Project and Task Management

    Provides tools that clients can invoke to interact with the store.
    """

    def __init__(self, name: str = SERVER_NAME):
        self.tools: Dict[str, MCPTool] = {}
        self.sessions: Dict[str, Dict[str, Any]] = {}
        self.name = name
        logger.info(f"Initializing MCP Server: {self.name}")

    def register_tool(self, tool: MCPTool):
        """Register a tool with the MCP server"""
        if tool.name in self.tools:
            logger.warning(f"Tool {tool.name} already registered, overwriting")

        self.tools[tool.name] = tool
        logger.debug(f"Registered MCP tool: {tool.name}")

    def has_tool(self, name: str) -> bool:
        return name in self.tools

    def get_tool(self, name: str) -> MCPTool:
        """Get a registered tool by name"""
        if name not in self.tools:
            raise ValueError(f"Tool {name} not found. Available tools: {list(self.tools.keys())}")
        return self.tools[name]

    def list_tools(self) -> list[str]:
        """List all registered tool names"""
        return list(self.tools.keys())

    async def invoke_tool(self, tool_name: str, /, **kwargs) -> Dict[str, Any]:
        """
        Invoke a tool with parameters

        Args:
            tool_name: Name of the tool to invoke
            **kwargs: Tool parameters

        Returns:
            Tool execution result

        Raises:
            ValueError: If tool not found
            MCPToolError: If the tool rejects the call
        """
        tool = self.get_tool(tool_name)

        logger.info(f"Invoking MCP tool: {tool_name}")

        try:
            result = await tool.handler(**kwargs)
            logger.info(f"Tool {tool_name} executed successfully")
            return result
        except MCPToolError as e:
            logger.info(f"Tool {tool_name} rejected call: {e.code} {e.message}")
            raise
        except Exception as e:
            logger.error(f"Tool {tool_name} failed: {str(e)}")
            raise

    def get_tool_schemas(self) -> list[Dict[str, Any]]:
        """Get MCP tool descriptors for all registered tools"""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.parameters
            }
            for tool in self.tools.values()
        ]

    async def handle_jsonrpc(self, message: Any) -> RPCReply:
        """
        Dispatch one JSON-RPC 2.0 message

        Messages without an ``id`` are notifications and get an empty 202 reply.
        """
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
            request_id = message.get("id") if isinstance(message, dict) else None
            return RPCReply(
                _rpc_error(request_id, INVALID_REQUEST, "Invalid Request - missing or invalid jsonrpc version"),
                status_code=400,
            )

        method = message.get("method")
        if not isinstance(method, str):
            return RPCReply(
                _rpc_error(message.get("id"), INVALID_REQUEST, "Invalid Request - missing method"),
                status_code=400,
            )

        if "id" not in message:
            logger.debug(f"Received notification: {method}")
            return RPCReply(None, status_code=202)

        request_id = message["id"]
        params = message.get("params") or {}

        try:
            if method == "initialize":
                return self._initialize(request_id, params)
            if method == "ping":
                return RPCReply(_rpc_result(request_id, {}))
            if method == "tools/list":
                return RPCReply(_rpc_result(request_id, {"tools": self.get_tool_schemas()}))
            if method == "tools/call":
                return RPCReply(await self._call_tool(request_id, params))
        except Exception:
            logger.exception(f"MCP request {method} failed")
            return RPCReply(_rpc_error(request_id, INTERNAL_ERROR, "Internal error"), status_code=500)

        return RPCReply(_rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}"))

    def _initialize(self, request_id: Any, params: Dict[str, Any]) -> RPCReply:
        session_id = str(uuid4())
        self.sessions[session_id] = {
            "capabilities": params.get("capabilities") or {},
            "clientInfo": params.get("clientInfo") or {},
        }
        logger.info(f"MCP session {session_id} initialized for {self.sessions[session_id]['clientInfo']}")

        result = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.name, "version": __version__},
        }
        return RPCReply(_rpc_result(request_id, result), headers={"Mcp-Session-Id": session_id})

    async def _call_tool(self, request_id: Any, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}

        if not isinstance(arguments, dict):
            return _rpc_error(request_id, INVALID_PARAMS, "Tool arguments must be an object")
        if not isinstance(name, str) or not self.has_tool(name):
            return _rpc_error(request_id, INVALID_PARAMS, f"Unknown tool: {name}")

        try:
            result = await self.invoke_tool(name, **arguments)
        except MCPToolError as e:
            code = TOOL_ERROR_CODES.get(e.code)
            if code is None:
                return _rpc_error(request_id, INTERNAL_ERROR, "Internal error")
            return _rpc_error(request_id, code, e.message, {"code": e.code, "details": e.details})

        data = result.get("data")
        text = result.get("message") or json.dumps(data)
        return _rpc_result(request_id, {
            "content": [{"type": "text", "text": text}],
            "structuredContent": data,
            "isError": False,
        })
