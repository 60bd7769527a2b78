import logging
import unittest

from main import DEGRADED_HEADER
from schemas.user_schema import UserCreate
from schemas.validation import validate_project
from storage.fallback import FallbackStorage
from storage.memory import MemoryStorage

from helpers import broken_sql_storage, make_client, sqlite_storage


class FallbackStorageTest(unittest.TestCase):
    def setUp(self):
        self.secondary = MemoryStorage()
        self.storage = FallbackStorage(broken_sql_storage(), self.secondary)

    def test_healthy_primary_is_not_degraded(self):
        storage = FallbackStorage(sqlite_storage(), MemoryStorage())
        storage.create_user(UserCreate(id="u1", email="u1@example.com"))
        self.assertFalse(storage.degraded)
        self.assertEqual(storage.get_user("u1").email, "u1@example.com")

    def test_failure_switches_to_secondary_loudly(self):
        with self.assertLogs("storage.fallback", level=logging.WARNING) as logs:
            project = self.storage.create_project(validate_project({"name": "Apollo"}))

        self.assertTrue(self.storage.degraded)
        self.assertEqual(self.storage.failures, 1)
        self.assertIn("DEGRADED", logs.output[0])
        self.assertIn("create_project", logs.output[0])
        self.assertIs(self.secondary.get_project_by_id(project.id), project)

    def test_reset_clears_degraded_flag(self):
        self.storage.get_all_users()
        self.assertTrue(self.storage.degraded)
        self.storage.reset()
        self.assertFalse(self.storage.degraded)
        self.assertEqual(self.storage.failures, 0)


class DegradedHeaderTest(unittest.TestCase):
    def test_header_set_after_primary_failure(self):
        client = make_client(FallbackStorage(broken_sql_storage(), MemoryStorage()))
        response = client.get("/api/projects")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(response.headers.get(DEGRADED_HEADER), "true")

    def test_no_header_when_healthy(self):
        client = make_client(FallbackStorage(sqlite_storage(), MemoryStorage()))
        response = client.get("/api/projects")
        self.assertEqual(response.status_code, 200)
        self.assertNotIn(DEGRADED_HEADER, response.headers)
