"""Status and priority vocabularies shared by projects and tasks."""

STATUSES = ("todo", "in_progress", "done")
PRIORITIES = ("urgent", "high", "medium", "low")

DEFAULT_STATUS = "todo"
DEFAULT_PRIORITY = "medium"

# Filter value meaning "no filter on this axis"
ALL = "all"

_PRIORITY_RANK = {priority: rank for rank, priority in enumerate(PRIORITIES)}


def priority_rank(priority: str) -> int:
    """Total order over priorities: urgent < high < medium < low.

    Unknown values rank after every known priority.
    """
    return _PRIORITY_RANK.get(priority, len(PRIORITIES))
