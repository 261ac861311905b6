"""Typed failures raised by the task/project store."""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """Base exception for store errors"""

    code = "STORE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(StoreError):
    """A required field is missing or a field value is invalid."""

    code = "VALIDATION_ERROR"


class NotFoundError(StoreError):
    """A referenced project or task id does not resolve."""

    code = "NOT_FOUND"
