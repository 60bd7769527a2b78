import asyncio
import unittest
from types import SimpleNamespace

from fastapi.testclient import TestClient

from main import create_app
from routers.chat_gateway import ConnectionManager, chat_socket
from schemas.user_schema import UserCreate
from schemas.validation import validate_project
from storage.memory import MemoryStorage

from helpers import make_settings


class ChatGatewayTest(unittest.TestCase):
    def setUp(self):
        self.storage = MemoryStorage()
        self.storage.create_user(UserCreate(id="u1", email="u1@example.com", first_name="Uma", last_name="One"))
        self.project_id = self.storage.create_project(validate_project({"name": "Apollo", "managerId": "u1"})).id
        self.app = create_app(make_settings(), self.storage)

    def _frame(self, content, project_id=None, user_id="u1"):
        return {
            "type": "chat_message",
            "projectId": project_id or self.project_id,
            "userId": user_id,
            "content": content,
        }

    def test_message_is_broadcast_to_every_socket(self):
        with TestClient(self.app) as client:
            with client.websocket_connect("/ws") as sender, client.websocket_connect("/ws") as listener:
                sender.send_json(self._frame("hello team"))

                received = listener.receive_json()
                echoed = sender.receive_json()

        self.assertEqual(received, echoed)
        self.assertEqual(received["type"], "new_message")
        self.assertEqual(received["projectId"], self.project_id)
        self.assertEqual(received["message"]["content"], "hello team")
        self.assertEqual(received["message"]["userId"], "u1")
        self.assertEqual(received["message"]["user"]["firstName"], "Uma")

        history = self.storage.get_chat_messages(self.project_id)
        self.assertEqual([m.content for m in history], ["hello team"])
        self.assertEqual(received["message"]["id"], history[0].id)

    def test_bad_frames_are_ignored_and_socket_stays_open(self):
        with TestClient(self.app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_text("{not json")
                ws.send_json({"type": "typing", "projectId": self.project_id})
                ws.send_json({"type": "chat_message", "projectId": self.project_id, "userId": "u1"})
                ws.send_json(self._frame("still here"))

                message = ws.receive_json()

        self.assertEqual(message["message"]["content"], "still here")
        self.assertEqual(len(self.storage.get_chat_messages(self.project_id)), 1)

    def test_unknown_project_or_author_is_ignored(self):
        with TestClient(self.app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json(self._frame("nowhere", project_id="missing"))
                ws.send_json(self._frame("who?", user_id="ghost"))
                ws.send_json(self._frame("real"))

                message = ws.receive_json()

        self.assertEqual(message["message"]["content"], "real")
        self.assertEqual(len(self.storage.chat_messages), 1)
        self.assertNotIn("ghost", self.storage.users)

    def test_history_is_in_send_order(self):
        with TestClient(self.app) as client:
            with client.websocket_connect("/ws") as ws:
                for text in ("one", "two", "three"):
                    ws.send_json(self._frame(text))
                    ws.receive_json()

            response = client.get(f"/api/projects/{self.project_id}/chat")

        self.assertEqual([m["content"] for m in response.json()], ["one", "two", "three"])


class FakeSocket:
    def __init__(self, fail=False, manager=None):
        self.fail = fail
        self.accepted = False
        self.sent = []
        self.app = SimpleNamespace(state=SimpleNamespace(connections=manager, storage=MemoryStorage()))

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    async def receive_text(self):
        # Starlette raises KeyError on a binary frame.
        raise KeyError("text")


class ConnectionManagerTest(unittest.TestCase):
    def test_failed_sockets_are_dropped(self):
        manager = ConnectionManager()
        good, bad = FakeSocket(), FakeSocket(fail=True)

        async def scenario():
            await manager.connect(good)
            await manager.connect(bad)
            await manager.broadcast({"type": "new_message"})

        asyncio.run(scenario())
        self.assertTrue(good.accepted)
        self.assertEqual(good.sent, [{"type": "new_message"}])
        self.assertEqual(manager.connections, [good])

    def test_disconnect_is_idempotent(self):
        manager = ConnectionManager()
        ws = FakeSocket()
        asyncio.run(manager.connect(ws))
        manager.disconnect(ws)
        manager.disconnect(ws)
        self.assertEqual(manager.connections, [])

    def test_socket_is_released_when_receive_fails(self):
        manager = ConnectionManager()
        ws = FakeSocket(manager=manager)

        with self.assertRaises(KeyError):
            asyncio.run(chat_socket(ws))

        self.assertTrue(ws.accepted)
        self.assertEqual(manager.connections, [])
