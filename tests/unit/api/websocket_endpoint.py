"""End-to-end tests for the chat WebSocket endpoint."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from chatcore.config import WELCOME_MESSAGE, WS_CHAT_PATH
from chatcore.server import create_app
from tests.helpers.fakes import ADMIN_KEY, FakeGenerator, make_deps

_ADMIN = {"X-Admin-API-Key": ADMIN_KEY}


def _client(**overrides) -> TestClient:
    return TestClient(create_app(lambda: make_deps(**overrides)))


def _start(client: TestClient) -> str:
    return client.post("/api/chat/sessions").json()["data"]["sessionId"]


def test_visitor_flow_over_websocket() -> None:
    with _client(generator=FakeGenerator("Sure thing")) as client:
        sid = _start(client)
        with client.websocket_connect(WS_CHAT_PATH) as ws:
            ws.send_json({"type": "JOIN_SESSION", "payload": {"sessionId": sid}})
            joined = ws.receive_json()
            assert joined["type"] == "SESSION_JOINED"
            assert [m["content"] for m in joined["payload"]["messages"]] == [WELCOME_MESSAGE]

            ws.send_json({"type": "SEND_MESSAGE", "payload": {"content": "Can you help?"}})
            frames = [ws.receive_json() for _ in range(4)]
            assert [f["type"] for f in frames] == [
                "MESSAGE_RECEIVED",
                "TYPING_START",
                "TYPING_STOP",
                "AI_RESPONSE",
            ]
            assert frames[0]["payload"]["message"]["content"] == "Can you help?"
            assert frames[1]["payload"] == {"isAdmin": False}
            assert frames[3]["payload"]["message"]["content"] == "Sure thing"

            health = client.get("/healthz").json()
            assert health["connections"] == 1
            assert health["sessions"] == 1

        messages = client.get(f"/api/chat/sessions/{sid}/messages").json()["data"]["messages"]
        assert [m["content"] for m in messages] == [WELCOME_MESSAGE, "Can you help?", "Sure thing"]


def test_bad_frames_do_not_end_the_connection() -> None:
    with _client() as client:
        sid = _start(client)
        with client.websocket_connect(WS_CHAT_PATH) as ws:
            ws.send_text("{oops")
            assert ws.receive_json()["payload"]["code"] == "INVALID_MESSAGE"
            ws.send_json({"type": "PING"})
            assert ws.receive_json()["payload"]["code"] == "UNKNOWN_MESSAGE_TYPE"
            ws.send_json({"type": "SEND_MESSAGE", "payload": {"content": "hi"}})
            assert ws.receive_json()["payload"]["code"] == "NOT_IN_SESSION"

            ws.send_json({"type": "JOIN_SESSION", "payload": {"sessionId": sid}})
            assert ws.receive_json()["type"] == "SESSION_JOINED"


def test_admin_rest_actions_reach_live_members() -> None:
    with _client() as client:
        sid = _start(client)
        with client.websocket_connect(WS_CHAT_PATH) as ws:
            ws.send_json({"type": "JOIN_SESSION", "payload": {"sessionId": sid}})
            ws.receive_json()

            client.post(f"/api/chat/sessions/{sid}/reply", json={"content": "On it"}, headers=_ADMIN)
            pushed = ws.receive_json()
            assert pushed["type"] == "MESSAGE_RECEIVED"
            assert pushed["payload"]["message"]["content"].endswith("On it")

            client.post(f"/api/chat/sessions/{sid}/close", headers=_ADMIN)
            assert ws.receive_json() == {"type": "SESSION_CLOSED", "payload": {}}

            ws.send_json({"type": "SEND_MESSAGE", "payload": {"content": "hello?"}})
            assert ws.receive_json()["payload"]["code"] == "SESSION_CLOSED"


def test_connection_over_capacity_is_rejected() -> None:
    with _client(max_connections=1) as client:
        with client.websocket_connect(WS_CHAT_PATH):
            with client.websocket_connect(WS_CHAT_PATH) as rejected:
                error = rejected.receive_json()
                assert error["type"] == "ERROR"
                assert error["payload"]["code"] == "RATE_LIMITED"
                with pytest.raises(WebSocketDisconnect) as excinfo:
                    rejected.receive_json()
                assert excinfo.value.code == 1013


def test_rest_send_reaches_live_members() -> None:
    with _client(generator=FakeGenerator("Answer")) as client:
        sid = _start(client)
        with client.websocket_connect(WS_CHAT_PATH) as ws:
            ws.send_json({"type": "JOIN_SESSION", "payload": {"sessionId": sid}})
            ws.receive_json()

            resp = client.post("/api/chat/messages", json={"sessionId": sid, "content": "via rest"})
            assert resp.status_code == 200
            frames = [ws.receive_json() for _ in range(4)]
            assert [f["type"] for f in frames] == [
                "MESSAGE_RECEIVED",
                "TYPING_START",
                "TYPING_STOP",
                "AI_RESPONSE",
            ]
            assert frames[0]["payload"]["message"]["content"] == "via rest"
            assert frames[3]["payload"]["message"] == resp.json()["data"]["aiResponse"]
