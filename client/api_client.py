import logging
from typing import Any, Callable, Iterable, Optional

import requests

from client import mock_data
from client.auth_errors import ApiError, AuthErrorHandler, UnauthorizedError, with_auth_error_handling
from client.query_cache import QueryCache, QueryKey
from client.token_provider import TokenProvider

logger = logging.getLogger(__name__)


class SynergyClient:
    """
    Client for the SynergySphere REST API.

    Reads go through the query cache. In development mode a read that fails
    on the network or with 401/403 returns canned mock data instead of
    raising; production mode raises. Writes never fall back.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token_provider: Optional[TokenProvider] = None,
        error_handler: Optional[AuthErrorHandler] = None,
        dev_mode: bool = False,
        cache: Optional[QueryCache] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.dev_mode = dev_mode
        self.token_provider = token_provider or TokenProvider(dev_mode=dev_mode)
        self.error_handler = error_handler or AuthErrorHandler(dev_mode=dev_mode)
        self.cache = cache or QueryCache()
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, data: Any = None) -> requests.Response:
        headers = {}
        token = self.token_provider.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        def call():
            resp = self.session.request(
                method,
                f"{self.base_url}{path}",
                json=data,
                headers=headers,
                timeout=self.timeout,
            )
            if resp.status_code in (401, 403):
                raise UnauthorizedError(resp.status_code, resp.text or resp.reason)
            if not resp.ok:
                raise ApiError(resp.status_code, resp.text or resp.reason)
            return resp

        return with_auth_error_handling(self.error_handler, call)

    def _read(self, key: QueryKey, path: str, mock: Callable[[], Any]):
        def load():
            try:
                return self._request("GET", path).json()
            except (requests.RequestException, ApiError) as e:
                if not self.dev_mode:
                    raise
                logger.warning(f"GET {path} failed ({e}); using mock data in development")
                return mock()

        return self.cache.fetch(key, load)

    def _write(self, method: str, path: str, data: Any = None, invalidate: Iterable[QueryKey] = ()):
        resp = self._request(method, path, data)
        for prefix in invalidate:
            self.cache.invalidate(prefix)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # Projects

    def get_projects(self):
        return self._read(("projects",), "/api/projects", mock_data.projects)

    def get_project(self, project_id: str):
        return self._read(("projects", project_id), f"/api/projects/{project_id}",
                          lambda: mock_data.project(project_id))

    def create_project(self, data: dict):
        return self._write("POST", "/api/projects", data, invalidate=[("projects",), ("analytics",)])

    def update_project(self, project_id: str, data: dict):
        return self._write("PUT", f"/api/projects/{project_id}", data, invalidate=[("projects",), ("analytics",)])

    def delete_project(self, project_id: str):
        return self._write("DELETE", f"/api/projects/{project_id}",
                           invalidate=[("projects",), ("tasks",), ("analytics",)])

    def get_project_tasks(self, project_id: str):
        return self._read(("projects", project_id, "tasks"), f"/api/projects/{project_id}/tasks",
                          lambda: mock_data.project_tasks(project_id))

    def get_project_members(self, project_id: str):
        return self._read(("projects", project_id, "members"), f"/api/projects/{project_id}/members",
                          mock_data.team_members)

    def get_chat_messages(self, project_id: str):
        return self._read(("projects", project_id, "chat"), f"/api/projects/{project_id}/chat", list)

    # Tasks

    def get_my_tasks(self):
        return self._read(("tasks", "my"), "/api/tasks/my", mock_data.tasks)

    def create_task(self, data: dict):
        return self._write("POST", "/api/tasks", data, invalidate=[("tasks",), ("projects",), ("analytics",)])

    def update_task(self, task_id: str, data: dict):
        return self._write("PUT", f"/api/tasks/{task_id}", data, invalidate=[("tasks",), ("projects",), ("analytics",)])

    def update_task_status(self, task_id: str, status: str):
        return self._write("PATCH", f"/api/tasks/{task_id}/status", {"status": status},
                           invalidate=[("tasks",), ("projects",), ("analytics",)])

    def delete_task(self, task_id: str):
        return self._write("DELETE", f"/api/tasks/{task_id}", invalidate=[("tasks",), ("projects",), ("analytics",)])

    # Team

    def get_team_members(self):
        return self._read(("team", "members"), "/api/team/members", mock_data.team_members)

    def get_managers(self):
        return self._read(("team", "managers"), "/api/team/managers", mock_data.team_members)

    def invite_member(self, email: str, role: str = "member"):
        return self._write("POST", "/api/team/invite", {"email": email, "role": role}, invalidate=[("team",)])

    # Notifications

    def get_notifications(self):
        return self._read(("notifications",), "/api/notifications", mock_data.notifications)

    def mark_notification_read(self, notification_id: str):
        return self._write("PATCH", f"/api/notifications/{notification_id}/read", invalidate=[("notifications",)])

    # Analytics

    def get_analytics(self):
        return self._read(("analytics",), "/api/analytics", mock_data.analytics)

    def get_project_analytics(self):
        return self._read(("analytics", "projects"), "/api/analytics/projects", mock_data.project_analytics)

    def get_task_analytics(self):
        return self._read(("analytics", "tasks"), "/api/analytics/tasks", mock_data.task_analytics)

    # Auth

    def register(self, first_name: str, last_name: str, email: str, password: str):
        return self._write("POST", "/api/auth/register", {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })

    def login(self, email: str, password: str):
        result = self._write("POST", "/api/auth/login", {"email": email, "password": password})
        self.cache.invalidate()
        self.error_handler.reset()
        return result

    def logout(self):
        result = self._write("POST", "/api/auth/logout")
        self.cache.invalidate()
        return result

    def get_me(self):
        return self._read(("auth", "me"), "/api/auth/me", mock_data.user)

    def get_current_user(self):
        return self._read(("auth", "user"), "/api/auth/user", mock_data.user)
