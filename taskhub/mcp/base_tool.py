"""
MCP Base Tool Interface

Provides base functionality for all MCP tools including:
- Store error translation
- Argument alias resolution
- Audit logging
"""

from typing import Any, Callable, Dict, Optional
from abc import ABC, abstractmethod

from taskhub.errors import StoreError
from taskhub.services.store import TaskStore
from taskhub.utils.logger import get_logger

audit_logger = get_logger("taskhub.mcp.audit")


class MCPToolError(Exception):
    """Base exception for MCP tool errors"""
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BaseMCPTool(ABC):
    """
    Base class for all MCP tools

    Provides common functionality:
    - Access to the injected store
    - Error handling
    - Audit logging
    """

    name = ""

    def __init__(self, store: TaskStore):
        self.store = store

    def call_store(self, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run a store operation, translating typed store failures

        Raises:
            MCPToolError: With the store error's code (VALIDATION_ERROR, NOT_FOUND)
        """
        try:
            return operation(*args, **kwargs)
        except StoreError as e:
            audit_logger.warning("MCP tool failed", tool=self.name, code=e.code, error=e.message)
            raise MCPToolError(code=e.code, message=e.message, details=e.details)

    def require_id(self, params: Dict[str, Any], *names: str) -> str:
        """
        Return the first non-empty identifier among ``names``

        Raises:
            MCPToolError: If none of the names carries a string id
        """
        for name in names:
            value = params.get(name)
            if isinstance(value, str) and value:
                return value
        raise MCPToolError(
            code="VALIDATION_ERROR",
            message=f"{names[0]} is required",
            details={"field": names[0]}
        )

    def log_tool_invocation(self, params: Dict[str, Any]) -> None:
        """
        Log MCP tool invocation for audit trail

        Args:
            params: Tool parameters
        """
        audit_logger.info("MCP tool invocation", tool=self.name, params=params)

    @abstractmethod
    async def execute(self, /, **kwargs) -> Dict[str, Any]:
        """
        Execute the tool logic

        Must be implemented by subclasses

        Args:
            **kwargs: Tool-specific parameters

        Returns:
            Tool execution result
        """
        pass


def create_error_response(error: MCPToolError) -> Dict[str, Any]:
    """
    Create a standardized error response

    Args:
        error: The MCPToolError to convert

    Returns:
        Standardized error response dictionary
    """
    return {
        "success": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details
        }
    }


def create_success_response(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Create a standardized success response

    Args:
        data: The response data
        message: Optional success message

    Returns:
        Standardized success response dictionary
    """
    response = {
        "success": True,
        "data": data
    }

    if message:
        response["message"] = message

    return response
