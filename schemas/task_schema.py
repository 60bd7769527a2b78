from datetime import datetime

from schemas.base import CamelModel, Priority, TaskStatus


class TaskBase(CamelModel):
    project_id: str
    title: str
    description: str | None = None
    assignee_id: str | None = None
    status: TaskStatus = "todo"
    priority: Priority = "medium"
    due_date: datetime | None = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(CamelModel):
    project_id: str | None = None
    title: str | None = None
    description: str | None = None
    assignee_id: str | None = None
    status: TaskStatus | None = None
    priority: Priority | None = None
    due_date: datetime | None = None


class TaskResponse(TaskBase):
    id: str
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
