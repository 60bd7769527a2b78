from crud import account_crud, chat_crud, notification_crud, project_crud, task_crud, user_crud
from storage.base import Storage, PROJECT_REQUIRED, TASK_REQUIRED, update_changes, with_user


class SqlStorage(Storage):
    """Storage over SQLAlchemy; each call runs in its own short-lived session."""

    name = "sql"

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _run(self, fn, *args, **kwargs):
        with self.session_factory() as db:
            try:
                return fn(db, *args, **kwargs)
            except Exception:
                db.rollback()
                raise

    # Users

    def get_user(self, user_id):
        return self._run(user_crud.get_user, user_id)

    def user_exists(self, user_id):
        return self._run(user_crud.get_user, user_id) is not None

    def get_user_by_email(self, email):
        return self._run(user_crud.get_user_by_email, email)

    def get_all_users(self):
        return self._run(user_crud.list_users)

    def get_managers(self):
        return self._run(user_crud.list_managers)

    def create_user(self, data):
        return self._run(user_crud.create_user, data)

    def upsert_user(self, data):
        return self._run(user_crud.upsert_user, data)

    # Projects

    def get_projects(self, user_id):
        return self._run(project_crud.list_projects_for_user, user_id)

    def get_project_by_id(self, project_id):
        return self._run(project_crud.get_project, project_id)

    def create_project(self, data):
        return self._run(project_crud.create_project, data)

    def update_project(self, project_id, updates):
        return self._run(project_crud.update_project, project_id, update_changes(updates, PROJECT_REQUIRED))

    def delete_project(self, project_id):
        return self._run(project_crud.delete_project, project_id)

    # Members

    def get_project_members(self, project_id):
        return self._run(project_crud.list_project_members, project_id)

    def add_project_member(self, project_id, user_id, role="member"):
        return self._run(project_crud.add_project_member, project_id, user_id, role)

    # Tasks

    def get_task_by_id(self, task_id):
        return self._run(task_crud.get_task, task_id)

    def get_tasks_by_project(self, project_id):
        return self._run(task_crud.list_tasks, project_id=project_id)

    def get_tasks_by_user(self, user_id):
        return self._run(task_crud.list_tasks, assignee_id=user_id)

    def get_tasks_for_analytics(self, user_id):
        return self._run(task_crud.list_tasks_for_analytics, user_id)

    def create_task(self, data):
        return self._run(task_crud.create_task, data)

    def update_task(self, task_id, updates):
        return self._run(task_crud.update_task, task_id, update_changes(updates, TASK_REQUIRED))

    def delete_task(self, task_id):
        return self._run(task_crud.delete_task, task_id)

    # Chat

    def get_chat_messages(self, project_id):
        rows = self._run(chat_crud.list_chat_messages, project_id)
        return [with_user(message, user) for message, user in rows]

    def create_chat_message(self, data):
        return self._run(chat_crud.create_chat_message, data)

    # Notifications

    def get_notifications(self, user_id):
        return self._run(notification_crud.list_notifications, user_id)

    def create_notification(self, data):
        return self._run(notification_crud.create_notification, data)

    def mark_notification_as_read(self, notification_id):
        return self._run(notification_crud.mark_as_read, notification_id)

    # Local credentials

    def set_password(self, user_id, hashed_password):
        self._run(account_crud.set_password, user_id, hashed_password)

    def get_password(self, user_id):
        return self._run(account_crud.get_password, user_id)
