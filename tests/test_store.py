# tests/test_store.py

from __future__ import annotations

import pytest

from taskhub.errors import NotFoundError, ValidationError
from taskhub.models.enums import priority_rank
from taskhub.services.persistence import InMemoryPersister
from taskhub.services.store import UNKNOWN_PROJECT_NAME, TaskStore


def _without_updated_at(entity: dict) -> dict:
    return {k: v for k, v in entity.items() if k != "updated_at"}


# ---- projects ----


def test_create_project_applies_defaults(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})

    assert project["name"] == "Launch"
    assert project["description"] == ""
    assert project["status"] == "todo"
    assert project["priority"] == "medium"
    assert project["due_date"] is None
    assert project["tags"] == []
    assert project["created_at"] == project["updated_at"]


@pytest.mark.parametrize("fields", [{}, {"name": ""}, {"name": "   "}, {"name": None}])
def test_create_project_requires_name(store: TaskStore, fields: dict) -> None:
    with pytest.raises(ValidationError):
        store.create_project(fields)
    assert store.list_projects() == []


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "P", "status": "blocked"},
        {"name": "P", "priority": "critical"},
        {"name": "P", "due_date": "next tuesday"},
        {"name": "P", "tags": "a,b"},
    ],
)
def test_create_project_rejects_invalid_fields(store: TaskStore, fields: dict) -> None:
    with pytest.raises(ValidationError):
        store.create_project(fields)


def test_ids_are_unique(store: TaskStore) -> None:
    project_ids = {store.create_project({"name": f"P{i}"})["id"] for i in range(20)}
    project_id = next(iter(project_ids))
    task_ids = {store.create_task({"title": f"T{i}", "project_id": project_id})["id"] for i in range(20)}

    assert len(project_ids) == 20
    assert len(task_ids) == 20
    assert not project_ids & task_ids


def test_list_projects_sorted_by_priority(store: TaskStore) -> None:
    for priority in ("low", "urgent", "medium"):
        store.create_project({"name": priority, "priority": priority})

    assert [p["priority"] for p in store.list_projects()] == ["urgent", "medium", "low"]


def test_list_projects_due_date_tiebreak(store: TaskStore) -> None:
    store.create_project({"name": "no-due-1", "priority": "high"})
    store.create_project({"name": "march", "priority": "high", "due_date": "2025-03-01"})
    store.create_project({"name": "no-due-2", "priority": "high"})
    store.create_project({"name": "january", "priority": "high", "due_date": "2025-01-15"})

    names = [p["name"] for p in store.list_projects()]
    assert names == ["january", "march", "no-due-1", "no-due-2"]


def test_list_projects_status_filter_and_task_counts(store: TaskStore) -> None:
    active = store.create_project({"name": "Active", "status": "in_progress"})
    store.create_project({"name": "Finished", "status": "done"})
    store.create_task({"title": "a", "project_id": active["id"]})
    store.create_task({"title": "b", "project_id": active["id"], "status": "done"})

    in_progress = store.list_projects("in_progress")
    assert [p["name"] for p in in_progress] == ["Active"]
    assert in_progress[0]["task_counts"] == {"total": 2, "todo": 1, "in_progress": 0, "done": 1}

    assert len(store.list_projects("all")) == 2
    assert len(store.list_projects(None)) == 2
    with pytest.raises(ValidationError):
        store.list_projects("archived")


def test_update_project_only_touches_supplied_fields(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch", "tags": ["q3"], "due_date": "2025-06-01"})

    updated = store.update_project(project["id"], {"status": "in_progress"})

    assert updated["status"] == "in_progress"
    assert updated["name"] == "Launch"
    assert updated["tags"] == ["q3"]
    assert updated["due_date"] == "2025-06-01"
    assert updated["updated_at"] > project["updated_at"]


def test_update_project_with_empty_partial_only_refreshes_updated_at(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch", "description": "go live", "priority": "high"})

    updated = store.update_project(project["id"], {})

    assert _without_updated_at(updated) == _without_updated_at(project)
    assert updated["updated_at"] != project["updated_at"]


def test_update_project_errors(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})

    with pytest.raises(NotFoundError):
        store.update_project("missing", {"name": "x"})
    with pytest.raises(ValidationError):
        store.update_project(project["id"], {"name": ""})
    assert store.get_project(project["id"])["name"] == "Launch"


def test_delete_project_cascade_removes_its_tasks(store: TaskStore) -> None:
    doomed = store.create_project({"name": "Doomed"})
    kept = store.create_project({"name": "Kept"})
    store.create_task({"title": "a", "project_id": doomed["id"]})
    store.create_task({"title": "b", "project_id": doomed["id"]})
    survivor = store.create_task({"title": "c", "project_id": kept["id"]})

    result = store.delete_project(doomed["id"], cascade=True)

    assert result["deleted_tasks_count"] == 2
    assert [t["project_name"] for t in result["tasks"]] == ["Doomed", "Doomed"]
    assert store.list_tasks(project_id=doomed["id"]) == []
    assert [t["id"] for t in store.list_tasks()] == [survivor["id"]]
    assert [p["id"] for p in store.list_projects()] == [kept["id"]]


def test_delete_project_cascade_unlinks_children_from_surviving_parents(store: TaskStore) -> None:
    doomed = store.create_project({"name": "Doomed"})
    kept = store.create_project({"name": "Kept"})
    parent = store.create_task({"title": "parent", "project_id": kept["id"]})
    store.create_task({"title": "child", "project_id": doomed["id"], "parent_task_id": parent["id"]})

    store.delete_project(doomed["id"], cascade=True)

    assert store.get_task(parent["id"])["subtasks"] == []


def test_delete_project_without_cascade_leaves_dangling_tasks(store: TaskStore) -> None:
    project = store.create_project({"name": "Gone"})
    task = store.create_task({"title": "orphan", "project_id": project["id"]})

    result = store.delete_project(project["id"], cascade=False)

    assert result["deleted_tasks_count"] == 0
    orphan = store.get_task(task["id"])
    assert orphan["project_id"] == project["id"]
    assert orphan["project_name"] == UNKNOWN_PROJECT_NAME


def test_delete_unknown_project(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.delete_project("missing", cascade=True)


# ---- tasks ----


def test_create_task_unknown_project_appends_nothing(store: TaskStore, persister: InMemoryPersister) -> None:
    with pytest.raises(NotFoundError):
        store.create_task({"title": "Write copy", "project_id": "missing"})

    assert store.list_tasks() == []
    assert persister.save_count == 0


def test_create_task_requires_title(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})

    with pytest.raises(ValidationError):
        store.create_task({"project_id": project["id"]})
    with pytest.raises(ValidationError):
        store.create_task({"title": "", "project_id": project["id"]})
    assert store.list_tasks() == []


def test_create_subtask_links_parent(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    parent = store.create_task({"title": "parent", "project_id": project["id"]})

    child = store.create_task({"title": "child", "project_id": project["id"], "parent_task_id": parent["id"]})

    assert child["parent_task_id"] == parent["id"]
    assert store.get_task(parent["id"])["subtasks"] == [child["id"]]


def test_create_task_with_unknown_parent_is_created_unlinked(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})

    task = store.create_task({"title": "stray", "project_id": project["id"], "parent_task_id": "missing"})

    assert task["parent_task_id"] == "missing"
    assert [t["id"] for t in store.list_tasks()] == [task["id"]]


def test_delete_task_removes_it_from_parent(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    parent = store.create_task({"title": "parent", "project_id": project["id"]})
    first = store.create_task({"title": "first", "project_id": project["id"], "parent_task_id": parent["id"]})
    second = store.create_task({"title": "second", "project_id": project["id"], "parent_task_id": parent["id"]})

    store.delete_task(first["id"])

    assert store.get_task(parent["id"])["subtasks"] == [second["id"]]


def test_delete_task_whose_parent_is_gone(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    parent = store.create_task({"title": "parent", "project_id": project["id"]})
    child = store.create_task({"title": "child", "project_id": project["id"], "parent_task_id": parent["id"]})

    store.delete_task(parent["id"])
    deleted = store.delete_task(child["id"])

    assert deleted["id"] == child["id"]
    assert store.list_tasks() == []


def test_delete_unknown_task(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.delete_task("missing")


def test_list_tasks_filters_and_sorting(store: TaskStore) -> None:
    alpha = store.create_project({"name": "Alpha"})
    beta = store.create_project({"name": "Beta"})
    store.create_task({"title": "low", "project_id": alpha["id"], "priority": "low"})
    store.create_task({"title": "urgent", "project_id": alpha["id"], "priority": "urgent", "status": "done"})
    store.create_task({"title": "beta-high", "project_id": beta["id"], "priority": "high"})

    assert [t["title"] for t in store.list_tasks()] == ["urgent", "beta-high", "low"]
    assert [t["title"] for t in store.list_tasks(project_id=alpha["id"])] == ["urgent", "low"]
    assert [t["title"] for t in store.list_tasks(status="done")] == ["urgent"]
    assert [t["title"] for t in store.list_tasks(priority="high")] == ["beta-high"]
    assert store.list_tasks(project_id=alpha["id"], priority="high") == []
    assert [t["project_name"] for t in store.list_tasks(project_id=beta["id"])] == ["Beta"]

    with pytest.raises(ValidationError):
        store.list_tasks(priority="critical")


def test_update_task_merges_and_keeps_other_fields(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    task = store.create_task({
        "title": "Write copy",
        "project_id": project["id"],
        "assignee": "sam",
        "tags": ["copy"],
    })

    updated = store.update_task(task["id"], {"status": "done", "project_id": "ignored"})

    assert updated["status"] == "done"
    assert updated["assignee"] == "sam"
    assert updated["tags"] == ["copy"]
    assert updated["project_id"] == project["id"]

    unchanged = store.update_task(task["id"], {})
    assert _without_updated_at(unchanged) == _without_updated_at(updated)

    cleared = store.update_task(task["id"], {"assignee": None})
    assert cleared["assignee"] is None

    with pytest.raises(NotFoundError):
        store.update_task("missing", {"status": "done"})


def test_move_task(store: TaskStore) -> None:
    source = store.create_project({"name": "Source"})
    target = store.create_project({"name": "Target"})
    task = store.create_task({"title": "t", "project_id": source["id"]})

    moved = store.move_task(task["id"], target["id"])

    assert moved["task"]["project_id"] == target["id"]
    assert moved["task"]["project_name"] == "Target"
    assert moved["previous_project"] == {"id": source["id"], "name": "Source"}
    assert moved["task"]["updated_at"] > task["updated_at"]
    assert store.list_tasks(project_id=source["id"]) == []


def test_move_task_to_unknown_project_leaves_task_unchanged(store: TaskStore) -> None:
    project = store.create_project({"name": "Source"})
    task = store.create_task({"title": "t", "project_id": project["id"]})

    with pytest.raises(NotFoundError):
        store.move_task(task["id"], "missing")
    with pytest.raises(NotFoundError):
        store.move_task("missing", project["id"])

    assert store.get_task(task["id"]) == task


# ---- summaries ----


def test_summary_of_empty_project(store: TaskStore) -> None:
    project = store.create_project({"name": "Empty"})

    summary = store.get_project_summary(project["id"])

    assert summary["statistics"]["total_tasks"] == 0
    assert summary["statistics"]["completion_percentage"] == 0
    assert summary["tasks_by_priority"] == {"urgent": 0, "high": 0, "medium": 0, "low": 0}
    assert summary["recent_tasks"] == []


def test_summary_counts_and_recent_tasks(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    tasks = [
        store.create_task({"title": f"t{i}", "project_id": project["id"], "priority": "high" if i < 2 else "low"})
        for i in range(8)
    ]
    store.update_task(tasks[0]["id"], {"status": "done"})
    store.update_task(tasks[1]["id"], {"status": "in_progress"})

    summary = store.get_project_summary(project["id"])
    stats = summary["statistics"]

    assert stats == {
        "total_tasks": 8,
        "todo": 6,
        "in_progress": 1,
        "done": 1,
        "completion_percentage": 13,
    }
    assert summary["tasks_by_priority"] == {"urgent": 0, "high": 2, "medium": 0, "low": 6}
    assert [t["title"] for t in summary["recent_tasks"]] == ["t1", "t0", "t7", "t6", "t5"]


def test_summary_unknown_project(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.get_project_summary("missing")


def test_launch_scenario(store: TaskStore) -> None:
    launch = store.create_project({"name": "Launch"})
    task = store.create_task({"title": "Write copy", "project_id": launch["id"]})

    tasks = store.list_tasks()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Write copy"
    assert tasks[0]["status"] == "todo"
    assert tasks[0]["priority"] == "medium"
    assert tasks[0]["project_id"] == launch["id"]
    assert tasks[0]["project_name"] == "Launch"

    store.update_task(task["id"], {"status": "done"})

    assert store.get_project_summary(launch["id"])["statistics"]["completion_percentage"] == 100


def test_priority_rank_total_order() -> None:
    assert sorted(["low", "urgent", "high", "medium"], key=priority_rank) == ["urgent", "high", "medium", "low"]
    assert priority_rank("bogus") > priority_rank("low")


@pytest.mark.parametrize("bad_id", [["a"], {"id": "a"}, 7])
def test_non_string_ids_raise_validation_error(store: TaskStore, persister: InMemoryPersister, bad_id) -> None:
    project = store.create_project({"name": "Launch"})
    task = store.create_task({"title": "Write copy", "project_id": project["id"]})
    saves = persister.save_count

    with pytest.raises(ValidationError) as excinfo:
        store.create_task({"title": "t", "project_id": bad_id})
    assert excinfo.value.details == {"field": "project_id"}

    with pytest.raises(ValidationError):
        store.list_tasks(project_id=bad_id)
    with pytest.raises(ValidationError):
        store.get_task(bad_id)
    with pytest.raises(ValidationError):
        store.update_project(bad_id, {"name": "x"})
    with pytest.raises(ValidationError):
        store.move_task(task["id"], bad_id)

    assert persister.save_count == saves


def test_get_task_expands_subtasks_on_request(store: TaskStore) -> None:
    project = store.create_project({"name": "Launch"})
    parent = store.create_task({"title": "parent", "project_id": project["id"]})
    child = store.create_task({"title": "child", "project_id": project["id"], "parent_task_id": parent["id"]})

    assert store.get_task(parent["id"])["subtasks"] == [child["id"]]

    expanded = store.get_task(parent["id"], expand_subtasks=True)
    assert expanded["subtasks"] == [store.get_task(child["id"])]
    assert store.get_task(parent["id"])["subtasks"] == [child["id"]]
