"""
MCP (Model Context Protocol) Server Package

Exposes every store operation as an MCP tool over JSON-RPC 2.0.
"""
