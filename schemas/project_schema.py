from datetime import datetime

from pydantic import Field

from schemas.base import CamelModel, Priority, ProjectStatus


class ProjectBase(CamelModel):
    name: str
    description: str | None = None
    manager_id: str | None = None
    deadline: datetime | None = None
    priority: Priority = "medium"
    status: ProjectStatus = "active"
    progress: int = Field(default=0, ge=0, le=100)
    tags: str | None = None
    image_url: str | None = None
    test_user_assigned: bool = False


class ProjectCreate(ProjectBase):
    """Validated payload for a new project. The manager is inferred from auth."""
    pass


class ProjectUpdate(CamelModel):
    name: str | None = None
    description: str | None = None
    manager_id: str | None = None
    deadline: datetime | None = None
    priority: Priority | None = None
    status: ProjectStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    tags: str | None = None
    image_url: str | None = None
    test_user_assigned: bool | None = None


class ProjectResponse(ProjectBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
