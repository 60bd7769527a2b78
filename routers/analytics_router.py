import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from core.auth import Principal, get_current_user
from core.config import Settings, get_settings
from storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])

TASK_STATUSES = ("todo", "in_progress", "done")
PROJECT_STATUSES = ("active", "on_hold", "completed")
PRIORITIES = ("high", "medium", "low")

# Served in development when the backend fails, so the dashboards stay populated.
MOCK_PROJECTS = [
    {"id": "mock1", "name": "Mock Project 1", "status": "active", "progress": 50},
    {"id": "mock2", "name": "Mock Project 2", "status": "completed", "progress": 100},
    {"id": "mock3", "name": "Mock Project 3", "status": "on_hold", "progress": 30},
]
MOCK_TASKS = [
    {"id": "task1", "status": "todo", "priority": "high", "project_id": "mock1"},
    {"id": "task2", "status": "in_progress", "priority": "medium", "project_id": "mock1"},
    {"id": "task3", "status": "done", "priority": "low", "project_id": "mock2"},
    {"id": "task4", "status": "todo", "priority": "high", "project_id": "mock3"},
    {"id": "task5", "status": "in_progress", "priority": "medium", "project_id": "mock2"},
]


def _field(item, name):
    return item[name] if isinstance(item, dict) else getattr(item, name)


def _count_by(items, name: str, keys) -> Dict[str, int]:
    counts = {k: 0 for k in keys}
    for item in items:
        value = _field(item, name)
        if value in counts:
            counts[value] += 1
    return counts


def _completion_rate(tasks) -> float:
    if not tasks:
        return 0
    done = sum(1 for t in tasks if _field(t, "status") == "done")
    return done / len(tasks) * 100


def summarize(projects: List[Any], tasks: List[Any]) -> Dict[str, Any]:
    completed = sum(1 for t in tasks if _field(t, "status") == "done")
    return {
        "taskDistribution": _count_by(tasks, "status", TASK_STATUSES),
        "projectStatus": _count_by(projects, "status", PROJECT_STATUSES),
        "taskPriority": _count_by(tasks, "priority", PRIORITIES),
        "summary": {
            "totalProjects": len(projects),
            "totalTasks": len(tasks),
            "completedTasks": completed,
            "completionRate": _completion_rate(tasks),
        },
    }


def _tasks_by_project(storage: Storage, projects) -> List[tuple]:
    return [(p, storage.get_tasks_by_project(_field(p, "id"))) for p in projects]


def _mock_tasks_by_project() -> List[tuple]:
    return [(p, [t for t in MOCK_TASKS if t["project_id"] == p["id"]]) for p in MOCK_PROJECTS]


@router.get("")
def overview(
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    current_user: Principal = Depends(get_current_user),
):
    try:
        projects = storage.get_projects(current_user.user_id)
        tasks = storage.get_tasks_for_analytics(current_user.user_id)
    except SQLAlchemyError:
        if not settings.is_development:
            raise
        logger.exception("Analytics query failed; serving mock analytics in development")
        projects, tasks = MOCK_PROJECTS, MOCK_TASKS
    return summarize(projects, tasks)


@router.get("/projects")
def project_analytics(
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    current_user: Principal = Depends(get_current_user),
):
    try:
        rows = _tasks_by_project(storage, storage.get_projects(current_user.user_id))
    except SQLAlchemyError:
        if not settings.is_development:
            raise
        logger.exception("Project analytics query failed; serving mock analytics in development")
        rows = _mock_tasks_by_project()

    result = []
    for project, tasks in rows:
        result.append({
            "id": _field(project, "id"),
            "name": _field(project, "name"),
            "status": _field(project, "status"),
            "progress": _field(project, "progress"),
            "totalTasks": len(tasks),
            "completedTasks": sum(1 for t in tasks if _field(t, "status") == "done"),
            "completionRate": _completion_rate(tasks),
        })
    return result


@router.get("/tasks")
def task_analytics(
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    current_user: Principal = Depends(get_current_user),
):
    try:
        rows = _tasks_by_project(storage, storage.get_projects(current_user.user_id))
    except SQLAlchemyError:
        if not settings.is_development:
            raise
        logger.exception("Task analytics query failed; serving mock analytics in development")
        rows = _mock_tasks_by_project()

    return [
        {
            "projectId": _field(project, "id"),
            "projectName": _field(project, "name"),
            "totalTasks": len(tasks),
            "statusDistribution": _count_by(tasks, "status", TASK_STATUSES),
            "priorityDistribution": _count_by(tasks, "priority", PRIORITIES),
        }
        for project, tasks in rows
    ]
