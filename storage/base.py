"""
Repository interface shared by the storage backends.

Reads return model instances (or ``None`` when absent); deletes and
flag-updates return ``bool``. Partial updates take the validated
``*Update`` schema and merge only the fields the caller set.
"""
from abc import ABC, abstractmethod

from schemas.chat_schema import ChatMessageCreate, ChatMessageWithUser
from schemas.notification_schema import NotificationCreate
from schemas.project_schema import ProjectCreate, ProjectUpdate
from schemas.task_schema import TaskCreate, TaskUpdate
from schemas.base import MemberRole
from schemas.user_schema import UserCreate, UserResponse

# Columns that may not be cleared through a partial update.
PROJECT_REQUIRED = frozenset({"name", "priority", "status", "progress", "test_user_assigned"})
TASK_REQUIRED = frozenset({"project_id", "title", "status", "priority"})


def update_changes(payload, required: frozenset) -> dict:
    changes = payload.model_dump(exclude_unset=True)
    return {k: v for k, v in changes.items() if not (v is None and k in required)}


def with_user(message, user) -> ChatMessageWithUser:
    return ChatMessageWithUser(
        id=message.id,
        project_id=message.project_id,
        user_id=message.user_id,
        content=message.content,
        created_at=message.created_at,
        user=UserResponse.model_validate(user) if user is not None else None,
    )


class Storage(ABC):
    name = "abstract"

    # Users
    @abstractmethod
    def get_user(self, user_id: str): ...

    @abstractmethod
    def user_exists(self, user_id: str) -> bool: ...

    @abstractmethod
    def get_user_by_email(self, email: str): ...

    @abstractmethod
    def get_all_users(self) -> list: ...

    @abstractmethod
    def get_managers(self) -> list: ...

    @abstractmethod
    def create_user(self, data: UserCreate): ...

    @abstractmethod
    def upsert_user(self, data: UserCreate): ...

    # Projects
    @abstractmethod
    def get_projects(self, user_id: str) -> list: ...

    @abstractmethod
    def get_project_by_id(self, project_id: str): ...

    @abstractmethod
    def create_project(self, data: ProjectCreate): ...

    @abstractmethod
    def update_project(self, project_id: str, updates: ProjectUpdate): ...

    @abstractmethod
    def delete_project(self, project_id: str) -> bool: ...

    # Members
    @abstractmethod
    def get_project_members(self, project_id: str) -> list: ...

    @abstractmethod
    def add_project_member(self, project_id: str, user_id: str, role: MemberRole = "member"): ...

    # Tasks
    @abstractmethod
    def get_task_by_id(self, task_id: str): ...

    @abstractmethod
    def get_tasks_by_project(self, project_id: str) -> list: ...

    @abstractmethod
    def get_tasks_by_user(self, user_id: str) -> list: ...

    @abstractmethod
    def get_tasks_for_analytics(self, user_id: str) -> list: ...

    @abstractmethod
    def create_task(self, data: TaskCreate): ...

    @abstractmethod
    def update_task(self, task_id: str, updates: TaskUpdate): ...

    @abstractmethod
    def delete_task(self, task_id: str) -> bool: ...

    # Chat
    @abstractmethod
    def get_chat_messages(self, project_id: str) -> list[ChatMessageWithUser]: ...

    @abstractmethod
    def create_chat_message(self, data: ChatMessageCreate): ...

    # Notifications
    @abstractmethod
    def get_notifications(self, user_id: str) -> list: ...

    @abstractmethod
    def create_notification(self, data: NotificationCreate): ...

    @abstractmethod
    def mark_notification_as_read(self, notification_id: str) -> bool: ...

    # Local credentials
    @abstractmethod
    def set_password(self, user_id: str, hashed_password: str) -> None: ...

    @abstractmethod
    def get_password(self, user_id: str) -> str | None: ...

    @property
    def degraded(self) -> bool:
        return False
