"""Domain and storage models."""

from .project import Project
from .snapshot import Snapshot
from .task import Task

__all__ = ["Project", "Snapshot", "Task"]
