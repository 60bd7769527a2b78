import logging

from sqlalchemy.exc import SQLAlchemyError

from storage.base import Storage

logger = logging.getLogger(__name__)


class FallbackStorage(Storage):
    """
    Runs every call on ``primary`` and, when the database raises, re-runs the
    same call on ``secondary``.

    The switch is never silent: each fallback is logged with the DEGRADED
    tag and ``degraded`` stays true until ``reset()``, which the HTTP layer
    turns into an ``X-Storage-Degraded`` response header. The two backends
    drift apart while degraded; nothing reconciles them.
    """

    name = "fallback"

    def __init__(self, primary: Storage, secondary: Storage):
        self.primary = primary
        self.secondary = secondary
        self._degraded = False
        self.failures = 0

    @property
    def degraded(self) -> bool:
        return self._degraded

    def reset(self) -> None:
        self._degraded = False
        self.failures = 0

    def _call(self, op: str, *args, **kwargs):
        try:
            return getattr(self.primary, op)(*args, **kwargs)
        except SQLAlchemyError as e:
            self._degraded = True
            self.failures += 1
            logger.warning(
                f"DEGRADED: {self.primary.name}.{op} failed ({e.__class__.__name__}: {e}); "
                f"running on {self.secondary.name} instead"
            )
            return getattr(self.secondary, op)(*args, **kwargs)

    def get_user(self, user_id):
        return self._call("get_user", user_id)

    def user_exists(self, user_id):
        return self._call("user_exists", user_id)

    def get_user_by_email(self, email):
        return self._call("get_user_by_email", email)

    def get_all_users(self):
        return self._call("get_all_users")

    def get_managers(self):
        return self._call("get_managers")

    def create_user(self, data):
        return self._call("create_user", data)

    def upsert_user(self, data):
        return self._call("upsert_user", data)

    def get_projects(self, user_id):
        return self._call("get_projects", user_id)

    def get_project_by_id(self, project_id):
        return self._call("get_project_by_id", project_id)

    def create_project(self, data):
        return self._call("create_project", data)

    def update_project(self, project_id, updates):
        return self._call("update_project", project_id, updates)

    def delete_project(self, project_id):
        return self._call("delete_project", project_id)

    def get_project_members(self, project_id):
        return self._call("get_project_members", project_id)

    def add_project_member(self, project_id, user_id, role="member"):
        return self._call("add_project_member", project_id, user_id, role)

    def get_task_by_id(self, task_id):
        return self._call("get_task_by_id", task_id)

    def get_tasks_by_project(self, project_id):
        return self._call("get_tasks_by_project", project_id)

    def get_tasks_by_user(self, user_id):
        return self._call("get_tasks_by_user", user_id)

    def get_tasks_for_analytics(self, user_id):
        return self._call("get_tasks_for_analytics", user_id)

    def create_task(self, data):
        return self._call("create_task", data)

    def update_task(self, task_id, updates):
        return self._call("update_task", task_id, updates)

    def delete_task(self, task_id):
        return self._call("delete_task", task_id)

    def get_chat_messages(self, project_id):
        return self._call("get_chat_messages", project_id)

    def create_chat_message(self, data):
        return self._call("create_chat_message", data)

    def get_notifications(self, user_id):
        return self._call("get_notifications", user_id)

    def create_notification(self, data):
        return self._call("create_notification", data)

    def mark_notification_as_read(self, notification_id):
        return self._call("mark_notification_as_read", notification_id)

    def set_password(self, user_id, hashed_password):
        self._call("set_password", user_id, hashed_password)

    def get_password(self, user_id):
        return self._call("get_password", user_id)
