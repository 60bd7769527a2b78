"""
Entity validators.

Each validator takes a raw JSON-like dict (camelCase or snake_case keys),
checks the required fields, fills defaults and returns the pydantic model
that the storage layer persists. They never touch storage.
"""
from typing import Any

from pydantic import BaseModel, ValidationError

from schemas.chat_schema import ChatMessageCreate
from schemas.project_schema import ProjectCreate, ProjectUpdate
from schemas.task_schema import TaskCreate, TaskUpdate


class EntityValidationError(ValueError):
    """Raised when an entity payload is missing a required field or has a bad value."""


def _pick(data: dict, camel: str, snake: str) -> Any:
    value = data.get(camel)
    if value is None:
        value = data.get(snake)
    return value


def _build(model: type[BaseModel], payload: dict):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "payload"
        raise EntityValidationError(f"Invalid {field}: {first.get('msg')}") from e


def validate_project(data: dict) -> ProjectCreate:
    if not isinstance(data, dict) or not data.get("name"):
        raise EntityValidationError("Project name is required")
    return _build(ProjectCreate, {
        "name": data["name"],
        "description": data.get("description"),
        "manager_id": _pick(data, "managerId", "manager_id"),
        "deadline": data.get("deadline") or None,
        "priority": data.get("priority") or "medium",
        "status": data.get("status") or "active",
        "progress": data.get("progress") or 0,
        "tags": data.get("tags"),
        "image_url": _pick(data, "imageUrl", "image_url"),
        "test_user_assigned": bool(_pick(data, "testUserAssigned", "test_user_assigned")),
    })


def validate_task(data: dict) -> TaskCreate:
    if not isinstance(data, dict) or not data.get("title"):
        raise EntityValidationError("Task title is required")
    project_id = _pick(data, "projectId", "project_id")
    if not project_id:
        raise EntityValidationError("Project ID is required")
    return _build(TaskCreate, {
        "project_id": project_id,
        "title": data["title"],
        "description": data.get("description"),
        "assignee_id": _pick(data, "assigneeId", "assignee_id"),
        "status": data.get("status") or "todo",
        "priority": data.get("priority") or "medium",
        "due_date": _pick(data, "dueDate", "due_date") or None,
    })


def validate_chat_message(data: dict) -> ChatMessageCreate:
    if not isinstance(data, dict) or not data.get("content"):
        raise EntityValidationError("Message content is required")
    project_id = _pick(data, "projectId", "project_id")
    if not project_id:
        raise EntityValidationError("Project ID is required")
    user_id = _pick(data, "userId", "user_id")
    if not user_id:
        raise EntityValidationError("User ID is required")
    return _build(ChatMessageCreate, {
        "project_id": project_id,
        "user_id": user_id,
        "content": data["content"],
    })


def validate_project_update(data: dict) -> ProjectUpdate:
    # Unknown keys (id, createdAt, ...) are dropped by the model.
    if not isinstance(data, dict):
        raise EntityValidationError("Project update must be an object")
    return _build(ProjectUpdate, data)


def validate_task_update(data: dict) -> TaskUpdate:
    if not isinstance(data, dict):
        raise EntityValidationError("Task update must be an object")
    return _build(TaskUpdate, data)
