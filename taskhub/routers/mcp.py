"""
MCP Router

JSON-RPC 2.0 transport for the MCP server (`POST /mcp`, with a server-sent
event stream on `GET /mcp`), plus the older per-tool endpoints
(`POST /tools/{tool_name}`) kept for clients that predate the JSON-RPC
endpoint.
"""

import asyncio
import json
import logging
import time
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from taskhub.mcp.base_tool import MCPToolError, create_error_response
from taskhub.mcp.server import MCPServer, PROTOCOL_VERSION
from taskhub.routers.dependencies import get_mcp_server

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP"])

PARSE_ERROR = -32700
HEARTBEAT_INTERVAL = 30.0

TOOL_ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


@router.post("/mcp")
async def mcp_endpoint(request: Request, mcp_server: MCPServer = Depends(get_mcp_server)):
    """Handle one JSON-RPC 2.0 message."""
    headers = {"MCP-Protocol-Version": PROTOCOL_VERSION}
    try:
        message = await request.json()
    except json.JSONDecodeError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"jsonrpc": "2.0", "id": None, "error": {"code": PARSE_ERROR, "message": "Parse error"}},
            headers=headers,
        )

    reply = await mcp_server.handle_jsonrpc(message)
    headers.update(reply.headers)
    if reply.body is None:
        return Response(status_code=reply.status_code, headers=headers)
    return JSONResponse(status_code=reply.status_code, content=reply.body, headers=headers)


@router.get("/tools")
async def list_tools(mcp_server: MCPServer = Depends(get_mcp_server)):
    """List tool descriptors."""
    return {"tools": mcp_server.get_tool_schemas()}


@router.post("/tools/{tool_name}")
async def call_tool(tool_name: str, request: Request, mcp_server: MCPServer = Depends(get_mcp_server)):
    """Invoke a tool; the body is either {"arguments": {...}} or the bare arguments."""
    if not mcp_server.has_tool(tool_name):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": f"Unknown tool: {tool_name}"})

    body = await request.body()
    try:
        payload: Dict[str, Any] = json.loads(body) if body else {}
    except json.JSONDecodeError:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid JSON body"})

    arguments = payload.get("arguments", payload) if isinstance(payload, dict) else None
    if not isinstance(arguments, dict):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Tool arguments must be an object"})

    try:
        return await mcp_server.invoke_tool(tool_name, **arguments)
    except MCPToolError as e:
        status_code = TOOL_ERROR_STATUS.get(e.code)
        if status_code is None:
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal error"})
        return JSONResponse(status_code=status_code, content=create_error_response(e))
    except Exception:
        logger.exception(f"Tool {tool_name} failed")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal error"})


async def event_stream(request: Request, interval: float = HEARTBEAT_INTERVAL) -> AsyncIterator[str]:
    """Connection event, then a heartbeat comment every ``interval`` seconds until the client leaves."""
    connected = {"jsonrpc": "2.0", "method": "notifications/resources/updated"}
    yield f"data: {json.dumps(connected)}\n\n"

    while not await request.is_disconnected():
        await asyncio.sleep(interval)
        yield f": heartbeat {int(time.time() * 1000)}\n\n"

    logger.info("SSE client disconnected")


@router.get("/mcp")
async def mcp_stream(request: Request):
    """Server-sent event stream for server-initiated messages."""
    if "text/event-stream" not in request.headers.get("accept", ""):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Bad Request - Accept header must include text/event-stream for GET requests"},
        )

    return StreamingResponse(
        event_stream(request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "MCP-Protocol-Version": PROTOCOL_VERSION,
        },
    )
