"""
MCP stdio transport

Runs the JSON-RPC dispatcher over newline-delimited JSON: one message per
line on stdin, one reply per line on stdout. Notifications get no reply.
Logging must not write to stdout while this transport is active.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, TextIO

from taskhub.mcp.server import MCPServer

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700


def _write(stdout: TextIO, body: Dict[str, Any]) -> None:
    stdout.write(json.dumps(body) + "\n")
    stdout.flush()


async def serve_stdio(mcp_server: MCPServer, stdin: TextIO, stdout: TextIO) -> int:
    """
    Answer messages from ``stdin`` until end of input

    Returns:
        Number of messages handled, blank lines excluded
    """
    handled = 0
    logger.info(f"MCP server {mcp_server.name} running on stdio")

    while True:
        line = await asyncio.to_thread(stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue

        handled += 1
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Discarding unparseable stdio message")
            _write(stdout, {"jsonrpc": "2.0", "id": None, "error": {"code": PARSE_ERROR, "message": "Parse error"}})
            continue

        reply = await mcp_server.handle_jsonrpc(message)
        body: Optional[Dict[str, Any]] = reply.body
        if body is not None:
            _write(stdout, body)

    logger.info(f"stdio input closed after {handled} messages")
    return handled
