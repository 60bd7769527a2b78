from models import PROJECT_CASCADE
from models.base import new_id, utcnow
from models.chat_message import ChatMessage
from models.notification import Notification
from models.project import Project
from models.project_member import ProjectMember
from models.task import Task
from models.user import User
from storage.base import Storage, PROJECT_REQUIRED, TASK_REQUIRED, update_changes, with_user


class MemoryStorage(Storage):
    """Process-lifetime storage over plain dicts of model instances; lost on restart."""

    name = "memory"

    def __init__(self):
        self.users: dict[str, User] = {}
        self.projects: dict[str, Project] = {}
        self.project_members: dict[str, ProjectMember] = {}
        self.tasks: dict[str, Task] = {}
        self.chat_messages: dict[str, ChatMessage] = {}
        self.notifications: dict[str, Notification] = {}
        self.passwords: dict[str, str] = {}
        self._tables = {
            Task: self.tasks,
            ProjectMember: self.project_members,
            ChatMessage: self.chat_messages,
        }

    # Users

    def get_user(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            # Unknown ids get a placeholder so author lookups never come back empty.
            now = utcnow()
            user = User(
                id=user_id,
                email=f"user-{user_id}@example.com",
                first_name="User",
                last_name=user_id[:5],
                created_at=now,
                updated_at=now,
            )
            self.users[user_id] = user
        return user

    def user_exists(self, user_id):
        return user_id in self.users

    def get_user_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def get_all_users(self):
        return list(self.users.values())

    def get_managers(self):
        ids = {p.manager_id for p in self.projects.values() if p.manager_id}
        ids |= {m.user_id for m in self.project_members.values() if m.role == "manager"}
        return [u for u in self.users.values() if u.id in ids]

    def create_user(self, data):
        now = utcnow()
        fields = data.model_dump(exclude={"id"})
        user = User(id=data.id or new_id(), created_at=now, updated_at=now, **fields)
        self.users[user.id] = user
        return user

    def upsert_user(self, data):
        existing = self.users.get(data.id) if data.id else None
        if existing is None:
            return self.create_user(data)
        for k, v in data.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(existing, k, v)
        existing.updated_at = utcnow()
        return existing

    # Projects

    def get_projects(self, user_id):
        member_of = {m.project_id for m in self.project_members.values() if m.user_id == user_id}
        return [
            p for p in self.projects.values()
            if p.manager_id == user_id or p.id in member_of
        ]

    def get_project_by_id(self, project_id):
        return self.projects.get(project_id)

    def create_project(self, data):
        now = utcnow()
        project = Project(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
        self.projects[project.id] = project
        return project

    def update_project(self, project_id, updates):
        project = self.projects.get(project_id)
        if project is None:
            return None
        for k, v in update_changes(updates, PROJECT_REQUIRED).items():
            setattr(project, k, v)
        project.updated_at = utcnow()
        return project

    def delete_project(self, project_id):
        if self.projects.pop(project_id, None) is None:
            return False
        for model in PROJECT_CASCADE:
            table = self._tables[model]
            for row_id in [k for k, row in table.items() if row.project_id == project_id]:
                del table[row_id]
        return True

    # Members

    def get_project_members(self, project_id):
        return [
            self.get_user(m.user_id)
            for m in self.project_members.values()
            if m.project_id == project_id
        ]

    def add_project_member(self, project_id, user_id, role="member"):
        member = ProjectMember(
            id=new_id(), project_id=project_id, user_id=user_id, role=role, joined_at=utcnow()
        )
        self.project_members[member.id] = member
        return member

    # Tasks

    def get_task_by_id(self, task_id):
        return self.tasks.get(task_id)

    def get_tasks_by_project(self, project_id):
        return [t for t in self.tasks.values() if t.project_id == project_id]

    def get_tasks_by_user(self, user_id):
        return [t for t in self.tasks.values() if t.assignee_id == user_id]

    def get_tasks_for_analytics(self, user_id):
        managed = {p.id for p in self.projects.values() if p.manager_id == user_id}
        return [
            t for t in self.tasks.values()
            if t.assignee_id == user_id or t.project_id in managed
        ]

    def create_task(self, data):
        now = utcnow()
        task = Task(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
        task.completed_at = now if task.status == "done" else None
        self.tasks[task.id] = task
        return task

    def update_task(self, task_id, updates):
        task = self.tasks.get(task_id)
        if task is None:
            return None
        task.apply_changes(update_changes(updates, TASK_REQUIRED))
        return task

    def delete_task(self, task_id):
        return self.tasks.pop(task_id, None) is not None

    # Chat

    def get_chat_messages(self, project_id):
        messages = sorted(
            (m for m in self.chat_messages.values() if m.project_id == project_id),
            key=lambda m: m.created_at,
        )
        return [with_user(m, self.get_user(m.user_id)) for m in messages]

    def create_chat_message(self, data):
        message = ChatMessage(id=new_id(), created_at=utcnow(), **data.model_dump())
        self.chat_messages[message.id] = message
        return message

    # Notifications

    def get_notifications(self, user_id):
        # Reversed first so equal timestamps still come out newest first.
        return sorted(
            (n for n in reversed(self.notifications.values()) if n.user_id == user_id),
            key=lambda n: n.created_at,
            reverse=True,
        )

    def create_notification(self, data):
        notification = Notification(id=new_id(), is_read=False, created_at=utcnow(), **data.model_dump())
        self.notifications[notification.id] = notification
        return notification

    def mark_notification_as_read(self, notification_id):
        notification = self.notifications.get(notification_id)
        if notification is None:
            return False
        notification.is_read = True
        return True

    # Local credentials

    def set_password(self, user_id, hashed_password):
        self.passwords[user_id] = hashed_password

    def get_password(self, user_id):
        return self.passwords.get(user_id)
