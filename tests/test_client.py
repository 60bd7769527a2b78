import threading
import unittest
from unittest import mock

import requests

from client import (
    ApiError,
    AuthErrorHandler,
    AuthenticationHandled,
    QueryCache,
    SynergyClient,
    TokenProvider,
    UnauthorizedError,
)
from client.token_provider import DEV_MOCK_TOKEN


def fake_response(status_code=200, payload=None):
    resp = mock.Mock(status_code=status_code)
    resp.ok = status_code < 400
    resp.json.return_value = payload
    resp.content = b"" if payload is None else b"{}"
    resp.text = "" if payload is None else str(payload)
    resp.reason = "Error"
    return resp


class FakeTimer:
    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.daemon = False
        self.started = False

    def start(self):
        self.started = True


class TokenProviderTest(unittest.TestCase):
    def setUp(self):
        self.now = 0.0
        self.calls = 0

    def _getter(self):
        self.calls += 1
        return f"token-{self.calls}"

    def test_token_is_cached_until_expiry(self):
        provider = TokenProvider(self._getter, ttl=60, clock=lambda: self.now)
        self.assertEqual(provider.get_token(), "token-1")
        self.now = 59
        self.assertEqual(provider.get_token(), "token-1")
        self.now = 61
        self.assertEqual(provider.get_token(), "token-2")

    def test_getter_failure_clears_cache(self):
        def broken():
            raise RuntimeError("session gone")

        provider = TokenProvider(broken)
        self.assertIsNone(provider.get_token())

    def test_dev_mode_uses_mock_token(self):
        provider = TokenProvider(lambda: None, dev_mode=True)
        self.assertEqual(provider.get_token(), DEV_MOCK_TOKEN)

    def test_set_getter_drops_cached_token(self):
        provider = TokenProvider(lambda: "old", clock=lambda: self.now)
        provider.get_token()
        provider.set_getter(lambda: "new")
        self.assertEqual(provider.get_token(), "new")


class AuthErrorHandlerTest(unittest.TestCase):
    def setUp(self):
        self.notices = []
        self.redirects = []
        self.timers = []

        def timer_factory(delay, fn):
            timer = FakeTimer(delay, fn)
            self.timers.append(timer)
            return timer

        self.handler = AuthErrorHandler(
            on_unauthorized=lambda: self.redirects.append(True),
            notify=self.notices.append,
            timer_factory=timer_factory,
        )

    def test_unauthorized_is_handled_once(self):
        self.assertTrue(self.handler.handle_error(UnauthorizedError(401)))
        self.assertTrue(self.handler.handle_error(UnauthorizedError(403)))
        self.assertEqual(len(self.notices), 1)
        self.assertEqual(len(self.timers), 1)
        self.assertEqual(self.timers[0].delay, 2.0)

        self.timers[0].fn()
        self.assertEqual(self.redirects, [True])
        self.assertFalse(self.handler.is_handling_error)

    def test_other_errors_are_not_handled(self):
        self.assertFalse(self.handler.handle_error(ApiError(500)))
        self.assertFalse(self.handler.handle_error(ValueError("boom")))
        self.assertEqual(self.notices, [])

    def test_dev_mode_never_handles(self):
        handler = AuthErrorHandler(dev_mode=True, notify=self.notices.append)
        self.assertFalse(handler.handle_error(UnauthorizedError(401)))
        self.assertEqual(self.notices, [])

    def test_reset(self):
        self.handler.handle_error(UnauthorizedError(401))
        self.handler.reset()
        self.assertFalse(self.handler.banner_visible)
        self.assertFalse(self.handler.is_handling_error)


class QueryCacheTest(unittest.TestCase):
    def test_fetch_caches_until_invalidated(self):
        cache = QueryCache()
        loads = []

        def loader():
            loads.append(1)
            return len(loads)

        self.assertEqual(cache.fetch(("projects",), loader), 1)
        self.assertEqual(cache.fetch(("projects",), loader), 1)
        self.assertIn(("projects",), cache)

        self.assertEqual(cache.invalidate(("projects",)), 1)
        self.assertEqual(cache.fetch(("projects",), loader), 2)

    def test_prefix_invalidation(self):
        cache = QueryCache()
        cache.fetch(("projects",), lambda: [])
        cache.fetch(("projects", "p1", "tasks"), lambda: [])
        cache.fetch(("team", "members"), lambda: [])

        self.assertEqual(cache.invalidate(("projects",)), 2)
        self.assertIn(("team", "members"), cache)
        self.assertEqual(cache.invalidate(), 1)

    def test_failed_load_is_not_cached(self):
        cache = QueryCache()

        def failing():
            raise RuntimeError("down")

        with self.assertRaises(RuntimeError):
            cache.fetch(("k",), failing)
        self.assertNotIn(("k",), cache)

    def test_concurrent_fetches_share_one_load(self):
        cache = QueryCache()
        started = threading.Event()
        release = threading.Event()
        loads = []

        def slow_loader():
            loads.append(1)
            started.set()
            release.wait(5)
            return "value"

        results = []
        first = threading.Thread(target=lambda: results.append(cache.fetch(("k",), slow_loader)))
        first.start()
        started.wait(5)
        second = threading.Thread(target=lambda: results.append(cache.fetch(("k",), slow_loader)))
        second.start()
        release.set()
        first.join(5)
        second.join(5)

        self.assertEqual(results, ["value", "value"])
        self.assertEqual(len(loads), 1)


class SynergyClientTest(unittest.TestCase):
    def _client(self, dev_mode=False, **kwargs):
        session = mock.Mock()
        client = SynergyClient(
            "http://api.test",
            token_provider=TokenProvider(lambda: "tok"),
            dev_mode=dev_mode,
            session=session,
            **kwargs,
        )
        return client, session

    def test_reads_send_bearer_token_and_cache(self):
        client, session = self._client()
        session.request.return_value = fake_response(payload=[{"id": "p1"}])

        self.assertEqual(client.get_projects(), [{"id": "p1"}])
        self.assertEqual(client.get_projects(), [{"id": "p1"}])
        self.assertEqual(session.request.call_count, 1)

        method, url = session.request.call_args.args
        self.assertEqual((method, url), ("GET", "http://api.test/api/projects"))
        self.assertEqual(session.request.call_args.kwargs["headers"], {"Authorization": "Bearer tok"})

    def test_mutation_invalidates_related_reads(self):
        client, session = self._client()
        session.request.return_value = fake_response(payload=[])
        client.get_projects()
        client.get_team_members()

        session.request.return_value = fake_response(201, {"id": "p2"})
        self.assertEqual(client.create_project({"name": "New"}), {"id": "p2"})
        self.assertNotIn(("projects",), client.cache)
        self.assertIn(("team", "members"), client.cache)

    def test_delete_returns_none_for_no_content(self):
        client, session = self._client()
        session.request.return_value = fake_response(204)
        self.assertIsNone(client.delete_task("t1"))
        self.assertEqual(session.request.call_args.args, ("DELETE", "http://api.test/api/tasks/t1"))

    def test_dev_mode_falls_back_to_mock_on_network_error(self):
        client, session = self._client(dev_mode=True)
        session.request.side_effect = requests.ConnectionError("refused")

        projects = client.get_projects()
        self.assertEqual([p["id"] for p in projects], ["proj-1", "proj-2", "proj-3", "proj-4"])
        self.assertEqual(client.get_analytics()["summary"]["totalTasks"], 25)
        self.assertEqual(client.get_me()["id"], "user-dev-123")

    def test_dev_mode_falls_back_on_unauthorized(self):
        client, session = self._client(dev_mode=True)
        session.request.return_value = fake_response(401, {"detail": "Unauthorized"})
        self.assertEqual(len(client.get_notifications()), 3)

    def test_dev_mode_writes_do_not_fall_back(self):
        client, session = self._client(dev_mode=True)
        session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(requests.ConnectionError):
            client.create_task({"title": "T", "projectId": "p1"})

    def test_production_raises_network_errors(self):
        client, session = self._client()
        session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(requests.ConnectionError):
            client.get_projects()
        self.assertNotIn(("projects",), client.cache)

    def test_production_unauthorized_goes_through_handler(self):
        notices = []
        handler = AuthErrorHandler(notify=notices.append, timer_factory=FakeTimer)
        client, session = self._client(error_handler=handler)
        session.request.return_value = fake_response(403, {"detail": "Invalid or expired token"})

        with self.assertRaises(AuthenticationHandled):
            client.get_projects()
        self.assertEqual(len(notices), 1)

    def test_production_server_error_raises_api_error(self):
        client, session = self._client()
        session.request.return_value = fake_response(500, {"detail": "Internal server error"})
        with self.assertRaises(ApiError) as ctx:
            client.get_analytics()
        self.assertEqual(ctx.exception.status_code, 500)
