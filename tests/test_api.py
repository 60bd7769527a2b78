import unittest

from storage.memory import MemoryStorage

from helpers import DEV_USER_ID, make_client, sqlite_storage


class ProjectTaskFlow:
    """End-to-end REST behaviour, run against each storage backend."""

    def make_storage(self):
        raise NotImplementedError

    def setUp(self):
        self.storage = self.make_storage()
        self.client = make_client(self.storage)

    def _create_project(self, **body):
        response = self.client.post("/api/projects", json={"name": "Apollo", **body})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_health(self):
        self.assertEqual(self.client.get("/").json(), {"message": "SynergySphere API Ready"})

    def test_project_task_lifecycle(self):
        project = self._create_project(description="Moonshot", deadline="2030-01-01T00:00:00Z")
        self.assertEqual(project["managerId"], DEV_USER_ID)
        self.assertEqual(project["priority"], "medium")
        self.assertEqual(project["status"], "active")
        self.assertEqual(project["progress"], 0)

        listed = self.client.get("/api/projects").json()
        self.assertEqual([p["id"] for p in listed], [project["id"]])

        response = self.client.post("/api/tasks", json={
            "title": "Design homepage",
            "projectId": project["id"],
            "assigneeId": DEV_USER_ID,
        })
        self.assertEqual(response.status_code, 201, response.text)
        task = response.json()
        self.assertEqual(task["status"], "todo")
        self.assertIsNone(task["completedAt"])

        response = self.client.patch(f"/api/tasks/{task['id']}/status", json={"status": "done"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "done")
        self.assertIsNotNone(response.json()["completedAt"])

        response = self.client.put(f"/api/tasks/{task['id']}", json={"status": "in_progress"})
        self.assertIsNone(response.json()["completedAt"])

        mine = self.client.get("/api/tasks/my").json()
        self.assertEqual([t["id"] for t in mine], [task["id"]])
        self.assertEqual(len(self.client.get(f"/api/tasks/project/{project['id']}").json()), 1)

        self.assertEqual(self.client.delete(f"/api/projects/{project['id']}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/projects/{project['id']}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/projects/{project['id']}/tasks").json(), [])
        self.assertEqual(self.client.delete(f"/api/projects/{project['id']}").status_code, 404)

    def test_update_project(self):
        project = self._create_project()
        response = self.client.put(f"/api/projects/{project['id']}", json={
            "id": "hijack",
            "progress": 75,
            "status": "on_hold",
        })
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["id"], project["id"])
        self.assertEqual(body["progress"], 75)
        self.assertEqual(body["status"], "on_hold")
        self.assertEqual(body["name"], "Apollo")

        self.assertEqual(self.client.put("/api/projects/missing", json={"name": "x"}).status_code, 404)

    def test_validation_errors_are_400(self):
        response = self.client.post("/api/projects", json={"description": "nameless"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Project name is required"})

        response = self.client.post("/api/tasks", json={"projectId": "p1"})
        self.assertEqual(response.json(), {"detail": "Task title is required"})

        response = self.client.post("/api/projects", json={"name": "P", "progress": 101})
        self.assertEqual(response.status_code, 400)

    def test_task_requires_existing_project(self):
        response = self.client.post("/api/tasks", json={"title": "Orphan", "projectId": "missing"})
        self.assertEqual(response.status_code, 404)

    def test_website_redesign_walkthrough(self):
        project = self._create_project(name="Website Redesign", priority="high")
        self.assertEqual(project["status"], "active")
        self.assertEqual(project["progress"], 0)
        self.assertEqual(project["priority"], "high")

        response = self.client.post("/api/tasks", json={"projectId": project["id"], "title": "Design wireframes"})
        self.assertEqual(response.status_code, 201, response.text)
        task = response.json()
        self.assertEqual(task["status"], "todo")

        response = self.client.patch(f"/api/tasks/{task['id']}/status", json={"status": "done"})
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.json()["completedAt"])

        self.assertEqual(self.client.delete(f"/api/projects/{project['id']}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/projects/{project['id']}/tasks").json(), [])

    def test_task_update_rejects_unknown_project(self):
        project = self._create_project()
        task = self.client.post("/api/tasks", json={"title": "T", "projectId": project["id"]}).json()

        response = self.client.put(f"/api/tasks/{task['id']}", json={"projectId": "missing", "title": "Moved"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Project not found")

        stored = self.storage.get_task_by_id(task["id"])
        self.assertEqual(stored.project_id, project["id"])
        self.assertEqual(stored.title, "T")

        response = self.client.put("/api/tasks/missing", json={"projectId": project["id"]})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Task not found")

    def test_unknown_assignee_is_404(self):
        project = self._create_project()
        response = self.client.post("/api/tasks", json={"title": "T", "projectId": project["id"], "assigneeId": "ghost"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Assignee not found")
        self.assertEqual(self.storage.get_tasks_by_project(project["id"]), [])

        task = self.client.post("/api/tasks", json={
            "title": "T",
            "projectId": project["id"],
            "assigneeId": DEV_USER_ID,
        }).json()
        response = self.client.put(f"/api/tasks/{task['id']}", json={"assigneeId": "ghost"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.storage.get_task_by_id(task["id"]).assignee_id, DEV_USER_ID)

        response = self.client.put(f"/api/tasks/{task['id']}", json={"assigneeId": None})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["assigneeId"])

        self.assertFalse(self.storage.user_exists("ghost"))
        self.assertEqual(self.storage.get_notifications("ghost"), [])

    def test_unknown_members_are_skipped(self):
        project = self._create_project(memberIds=["ghost"])
        self.assertEqual(self.client.get(f"/api/projects/{project['id']}/members").json(), [])
        self.assertEqual(self.storage.get_notifications("ghost"), [])
        self.assertFalse(self.storage.user_exists("ghost"))

    def test_task_status_required(self):
        project = self._create_project()
        task = self.client.post("/api/tasks", json={"title": "T", "projectId": project["id"]}).json()
        response = self.client.patch(f"/api/tasks/{task['id']}/status", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Status is required")
        self.assertEqual(self.client.patch("/api/tasks/missing/status", json={"status": "done"}).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/tasks/{task['id']}").status_code, 204)
        self.assertEqual(self.client.delete(f"/api/tasks/{task['id']}").status_code, 404)

    def test_invite_then_add_to_project_and_assign(self):
        response = self.client.post("/api/team/invite", json={"email": "sam@example.com", "role": "member"})
        self.assertEqual(response.status_code, 201, response.text)
        invited = response.json()
        self.assertEqual(invited["email"], "sam@example.com")
        self.assertEqual(invited["firstName"], "sam")
        self.assertTrue(invited["id"].startswith("user-"))

        welcome = self.storage.get_notifications(invited["id"])
        self.assertEqual([n.type for n in welcome], ["team_invitation"])
        self.assertEqual(welcome[0].message, "You've been invited to join the team as a member.")

        emails = [u["email"] for u in self.client.get("/api/team/members").json()]
        self.assertIn("sam@example.com", emails)

        project = self._create_project(memberIds=[invited["id"], DEV_USER_ID])
        members = self.client.get(f"/api/projects/{project['id']}/members").json()
        self.assertEqual([m["id"] for m in members], [invited["id"]])

        self.client.post("/api/tasks", json={"title": "Review", "projectId": project["id"], "assigneeId": invited["id"]})
        types = [n.type for n in self.storage.get_notifications(invited["id"])]
        self.assertEqual(types, ["task_assigned", "project_created", "team_invitation"])

        managers = [u["id"] for u in self.client.get("/api/team/managers").json()]
        self.assertEqual(managers, [DEV_USER_ID])

    def test_invite_rejects_missing_and_duplicate_email(self):
        self.assertEqual(self.client.post("/api/team/invite", json={"role": "member"}).status_code, 400)
        self.client.post("/api/team/invite", json={"email": "dup@example.com"})
        response = self.client.post("/api/team/invite", json={"email": "dup@example.com"})
        self.assertEqual(response.status_code, 400)

    def test_notifications_mark_read(self):
        project = self._create_project()
        invited = self.client.post("/api/team/invite", json={"email": "kim@example.com"}).json()
        self.client.post("/api/tasks", json={"title": "Own task", "projectId": project["id"], "assigneeId": DEV_USER_ID})
        # Self-assignment does not notify.
        self.assertEqual(self.client.get("/api/notifications").json(), [])

        note = self.storage.get_notifications(invited["id"])[0]
        self.assertEqual(self.client.patch(f"/api/notifications/{note.id}/read").status_code, 204)
        self.assertTrue(self.storage.get_notifications(invited["id"])[0].is_read)
        self.assertEqual(self.client.patch("/api/notifications/missing/read").status_code, 404)

    def test_chat_history_route(self):
        project = self._create_project()
        self.assertEqual(self.client.get(f"/api/projects/{project['id']}/chat").json(), [])


class MemoryApiTest(ProjectTaskFlow, unittest.TestCase):
    def make_storage(self):
        return MemoryStorage()


class SqlApiTest(ProjectTaskFlow, unittest.TestCase):
    def make_storage(self):
        return sqlite_storage()
