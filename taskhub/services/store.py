"""In-memory task/project store.

The store owns two insertion-ordered maps (id -> entity) and is the only
place where projects and tasks are mutated. Every public operation runs under
a single re-entrant lock so that "referenced entity exists" checks and the
mutation that depends on them cannot interleave with another request.

After every mutation the full state is handed to the injected persister.
Persistence is best-effort: a failing save is logged and never undoes the
in-memory change.
"""
import logging
import math
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as SchemaError

from taskhub.errors import NotFoundError, ValidationError
from taskhub.models.enums import ALL, PRIORITIES, STATUSES, priority_rank
from taskhub.models.project import Project
from taskhub.models.task import Task
from taskhub.services.persistence import Persister

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT_NAME = "Unknown Project"
RECENT_TASKS_LIMIT = 5

PROJECT_FIELDS = ("name", "description", "status", "priority", "due_date", "tags")
TASK_FIELDS = ("title", "description", "status", "priority", "due_date", "assignee", "tags")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str) -> datetime:
    """Parse an ISO date or datetime string into a naive UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _sort_key(entity: Dict[str, Any]):
    """Priority rank first, then due date ascending with undated entities last."""
    due = entity.get("due_date")
    due_value = datetime.min
    if due:
        try:
            due_value = _parse_datetime(due)
        except ValueError:
            due = None
    return (priority_rank(entity.get("priority")), due is None, due_value)


def _updated_key(task: Task) -> datetime:
    try:
        return _parse_datetime(task.updated_at)
    except ValueError:
        return datetime.min


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_text(fields: Dict[str, Any], key: str) -> str:
    value = fields.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required and cannot be empty", {"field": key})
    return value.strip()


def _check_choice(value: Any, choices, key: str) -> str:
    if value not in choices:
        raise ValidationError(
            f"{key} must be one of: {', '.join(choices)}",
            {"field": key, "value": value},
        )
    return value


def _check_filter(value: Optional[str], choices, key: str) -> Optional[str]:
    if value is None or value == "" or value == ALL:
        return None
    return _check_choice(value, choices, key)


def _check_id(value: Any, key: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string", {"field": key})


def _check_optional_text(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string", {"field": key})
    return value


def _check_due_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("due_date must be an ISO date string", {"field": "due_date"})
    try:
        _parse_datetime(value)
    except ValueError:
        raise ValidationError(
            "Invalid due_date format. Use ISO format (YYYY-MM-DD).",
            {"field": "due_date", "value": value},
        )
    return value


def _check_tags(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise ValidationError("tags must be an array of strings", {"field": "tags"})
    return list(value)


def _clean(fields: Dict[str, Any], allowed) -> Dict[str, Any]:
    """Validate the present keys among ``allowed``; absent keys stay absent."""
    cleaned: Dict[str, Any] = {}
    for key in allowed:
        if key not in fields:
            continue
        value = fields[key]
        if key in ("name", "title"):
            cleaned[key] = _check_text(fields, key)
        elif key == "description":
            cleaned[key] = _check_optional_text(value, key) or ""
        elif key == "assignee":
            cleaned[key] = _check_optional_text(value, key)
        elif key == "status":
            cleaned[key] = _check_choice(value, STATUSES, key)
        elif key == "priority":
            cleaned[key] = _check_choice(value, PRIORITIES, key)
        elif key == "due_date":
            cleaned[key] = _check_due_date(value)
        elif key == "tags":
            cleaned[key] = _check_tags(value)
    return cleaned


class TaskStore:
    """Owner of the project and task collections."""

    def __init__(
        self,
        persister: Optional[Persister] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._projects: Dict[str, Project] = {}
        self._tasks: Dict[str, Task] = {}
        self._persister = persister
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self.last_modified = self._now()

    # ---- persistence hooks ----

    def load_initial_state(self) -> None:
        """Merge the persisted snapshot, if any, into the collections."""
        if self._persister is None:
            return
        try:
            snapshot = self._persister.load()
        except Exception as e:
            logger.warning(f"Failed to load persisted state: {str(e)}. Starting empty.")
            return
        if not snapshot:
            logger.info("No persisted state found")
            return

        with self._lock:
            for raw in snapshot.get("projects") or []:
                try:
                    project = Project.model_validate(raw)
                except SchemaError as e:
                    logger.warning(f"Skipping malformed project record: {e.error_count()} error(s)")
                    continue
                self._projects[project.id] = project
            for raw in snapshot.get("tasks") or []:
                try:
                    task = Task.model_validate(raw)
                except SchemaError as e:
                    logger.warning(f"Skipping malformed task record: {e.error_count()} error(s)")
                    continue
                self._tasks[task.id] = task
        logger.info(f"Loaded {len(self._projects)} projects and {len(self._tasks)} tasks")

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Serialize both collections."""
        with self._lock:
            return {
                "projects": [p.model_dump() for p in self._projects.values()],
                "tasks": [t.model_dump() for t in self._tasks.values()],
            }

    def flush(self) -> None:
        """Save the current state unconditionally (used on shutdown)."""
        if self._persister is None:
            return
        try:
            self._persister.save(self.snapshot())
        except Exception as e:
            logger.warning(f"Final flush failed: {str(e)}")

    def _persist(self) -> None:
        self.last_modified = self._now()
        if self._persister is None:
            return
        try:
            self._persister.save(self.snapshot())
        except Exception as e:
            logger.warning(f"Failed to persist state: {str(e)}. Change kept in memory only.")

    # ---- helpers ----

    def _now(self) -> str:
        return self._clock().isoformat()

    def _get_project(self, project_id: Optional[str]) -> Project:
        _check_id(project_id, "project_id")
        project = self._projects.get(project_id) if project_id else None
        if project is None:
            raise NotFoundError(f"Project {project_id} not found", {"project_id": project_id})
        return project

    def _get_task(self, task_id: Optional[str]) -> Task:
        _check_id(task_id, "task_id")
        task = self._tasks.get(task_id) if task_id else None
        if task is None:
            raise NotFoundError(f"Task {task_id} not found", {"task_id": task_id})
        return task

    def _task_view(self, task: Task) -> Dict[str, Any]:
        data = task.model_dump()
        project = self._projects.get(task.project_id)
        data["project_name"] = project.name if project else UNKNOWN_PROJECT_NAME
        return data

    def _task_counts(self, project_id: str) -> Dict[str, int]:
        counts = {"total": 0}
        counts.update({status: 0 for status in STATUSES})
        for task in self._tasks.values():
            if task.project_id != project_id:
                continue
            counts["total"] += 1
            if task.status in counts:
                counts[task.status] += 1
        return counts

    def _unlink_from_parent(self, task: Task) -> None:
        if not task.parent_task_id:
            return
        parent = self._tasks.get(task.parent_task_id)
        if parent is not None and task.id in parent.subtasks:
            parent.subtasks = [child for child in parent.subtasks if child != task.id]

    # ---- projects ----

    def create_project(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = _clean(fields, PROJECT_FIELDS)
        if "name" not in cleaned:
            _check_text(fields, "name")

        with self._lock:
            now = self._now()
            project = Project(created_at=now, updated_at=now, **cleaned)
            self._projects[project.id] = project
            logger.info(f"Created project {project.id} '{project.name}'")
            self._persist()
            return project.model_dump()

    def get_project(self, project_id: str) -> Dict[str, Any]:
        with self._lock:
            return self._get_project(project_id).model_dump()

    def list_projects(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        status = _check_filter(status, STATUSES, "status")
        with self._lock:
            result = []
            for project in self._projects.values():
                if status and project.status != status:
                    continue
                data = project.model_dump()
                data["task_counts"] = self._task_counts(project.id)
                result.append(data)
        return sorted(result, key=_sort_key)

    def update_project(self, project_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            project = self._get_project(project_id)
            cleaned = _clean(fields, PROJECT_FIELDS)
            for key, value in cleaned.items():
                setattr(project, key, value)
            project.updated_at = self._now()
            logger.info(f"Updated project {project.id} fields={sorted(cleaned)}")
            self._persist()
            return project.model_dump()

    def delete_project(self, project_id: str, cascade: bool = False) -> Dict[str, Any]:
        """Remove a project; with ``cascade`` also remove every task referencing it.

        Without ``cascade`` the project's tasks keep a dangling ``project_id``.
        """
        with self._lock:
            project = self._get_project(project_id)

            doomed = [t for t in self._tasks.values() if t.project_id == project.id] if cascade else []
            # views are taken while the project still resolves
            deleted_tasks = [self._task_view(task) for task in doomed]

            del self._projects[project.id]
            for task in doomed:
                del self._tasks[task.id]
            for task in doomed:
                self._unlink_from_parent(task)

            logger.info(
                f"Deleted project {project.id} cascade={cascade} "
                f"deleted_tasks={len(deleted_tasks)}"
            )
            self._persist()
            return {
                "project": project.model_dump(),
                "tasks": deleted_tasks,
                "deleted_tasks_count": len(deleted_tasks),
            }

    def get_project_summary(self, project_id: str) -> Dict[str, Any]:
        with self._lock:
            project = self._get_project(project_id)
            project_tasks = [t for t in self._tasks.values() if t.project_id == project.id]

            total = len(project_tasks)
            by_status = {status: 0 for status in STATUSES}
            by_priority = {priority: 0 for priority in PRIORITIES}
            for task in project_tasks:
                if task.status in by_status:
                    by_status[task.status] += 1
                if task.priority in by_priority:
                    by_priority[task.priority] += 1

            completion = _round_half_up(by_status["done"] / total * 100) if total else 0
            recent = sorted(project_tasks, key=_updated_key, reverse=True)[:RECENT_TASKS_LIMIT]

            return {
                "project": project.model_dump(),
                "statistics": {
                    "total_tasks": total,
                    **by_status,
                    "completion_percentage": completion,
                },
                "tasks_by_priority": by_priority,
                "recent_tasks": [self._task_view(t) for t in recent],
            }

    # ---- tasks ----

    def create_task(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a task inside an existing project.

        A ``parent_task_id`` that does not resolve is stored as given but the
        task is not linked into any parent's subtasks.
        """
        with self._lock:
            project = self._get_project(fields.get("project_id"))
            cleaned = _clean(fields, TASK_FIELDS)
            if "title" not in cleaned:
                _check_text(fields, "title")
            parent_task_id = _check_optional_text(fields.get("parent_task_id"), "parent_task_id") or None

            now = self._now()
            task = Task(
                project_id=project.id,
                parent_task_id=parent_task_id,
                created_at=now,
                updated_at=now,
                **cleaned,
            )
            self._tasks[task.id] = task

            if parent_task_id:
                parent = self._tasks.get(parent_task_id)
                if parent is not None and parent.id != task.id:
                    parent.subtasks.append(task.id)
                else:
                    logger.debug(f"Parent task {parent_task_id} not found; task {task.id} left unlinked")

            logger.info(f"Created task {task.id} '{task.title}' in project {project.id}")
            self._persist()
            return self._task_view(task)

    def get_task(self, task_id: str, expand_subtasks: bool = False) -> Dict[str, Any]:
        """Return one task; with ``expand_subtasks`` child ids become full task views.

        Child ids that no longer resolve are dropped from the expanded list.
        """
        with self._lock:
            task = self._get_task(task_id)
            view = self._task_view(task)
            if expand_subtasks:
                view["subtasks"] = [
                    self._task_view(self._tasks[child_id])
                    for child_id in task.subtasks
                    if child_id in self._tasks
                ]
            return view

    def list_tasks(
        self,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        status = _check_filter(status, STATUSES, "status")
        priority = _check_filter(priority, PRIORITIES, "priority")
        _check_id(project_id, "project_id")
        with self._lock:
            result = [
                self._task_view(task)
                for task in self._tasks.values()
                if (not project_id or task.project_id == project_id)
                and (not status or task.status == status)
                and (not priority or task.priority == priority)
            ]
        return sorted(result, key=_sort_key)

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            task = self._get_task(task_id)
            cleaned = _clean(fields, TASK_FIELDS)
            for key, value in cleaned.items():
                setattr(task, key, value)
            task.updated_at = self._now()
            logger.info(f"Updated task {task.id} fields={sorted(cleaned)}")
            self._persist()
            return self._task_view(task)

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        with self._lock:
            task = self._get_task(task_id)
            view = self._task_view(task)
            del self._tasks[task.id]
            self._unlink_from_parent(task)
            logger.info(f"Deleted task {task.id}")
            self._persist()
            return view

    def move_task(self, task_id: str, new_project_id: str) -> Dict[str, Any]:
        with self._lock:
            task = self._get_task(task_id)
            new_project = self._get_project(new_project_id)

            previous_project = self._projects.get(task.project_id)
            previous = {
                "id": task.project_id,
                "name": previous_project.name if previous_project else UNKNOWN_PROJECT_NAME,
            }
            task.project_id = new_project.id
            task.updated_at = self._now()
            logger.info(f"Moved task {task.id} from {previous['id']} to {new_project.id}")
            self._persist()
            return {"task": self._task_view(task), "previous_project": previous}

    # ---- service info ----

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "projects_count": len(self._projects),
                "tasks_count": len(self._tasks),
                "last_modified": self.last_modified,
            }
