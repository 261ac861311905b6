"""taskhub - project and task tracking over MCP (JSON-RPC) and REST."""

__version__ = "2.0.0"
