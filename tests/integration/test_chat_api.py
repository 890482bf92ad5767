"""
HTTP 接口集成测试 - 进程内 TestClient，LLM 使用 mock

覆盖：
  - 对话：GET/POST /conversations, GET/DELETE /conversations/{id}
  - 聊天：POST /conversations/{id}/messages (SSE), POST /detect-emotion
  - 偏好：GET/PATCH /preferences
  - 游戏化：GET /gamification/stats|achievements|challenges
  - 系统：GET /status, GET /models
"""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import fake_stream

USER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}


# ─────────────────────── 工具函数 ───────────────────────


def parse_sse_events(text):
    """把 SSE 响应体拆成 data 字典列表"""
    events = []
    for frame in text.split("\n\n"):
        if frame.startswith("data: "):
            events.append(json.loads(frame[len("data: "):]))
    return events


@pytest.fixture
def client(engine):
    from main import create_app

    with TestClient(create_app(engine, configure_logging=False)) as c:
        yield c


def create_conversation(client, headers=USER, **body):
    r = client.post("/api/conversations", json=body, headers=headers)
    assert r.status_code == 201
    return r.json()["data"]


# ─────────────────────── 身份 ───────────────────────


class TestIdentity:

    def test_missing_user_header(self, client):
        r = client.get("/api/conversations")
        assert r.status_code == 401
        body = r.json()
        assert body["success"] is False
        assert body["error"]

    def test_path_like_user_id_rejected(self, client):
        r = client.get("/api/conversations", headers={"X-User-Id": "../etc"})
        assert r.status_code == 401


# ─────────────────────── 对话 ───────────────────────


class TestConversations:

    def test_create_list_get(self, client):
        created = create_conversation(client, title="Planning")
        assert created["title"] == "Planning"
        assert created["message_count"] == 0

        listed = client.get("/api/conversations", headers=USER).json()["data"]
        assert [c["id"] for c in listed] == [created["id"]]
        assert client.get("/api/conversations", headers=OTHER).json()["data"] == []

        detail = client.get(f"/api/conversations/{created['id']}", headers=USER).json()["data"]
        assert detail["messages"] == []

    def test_default_title(self, client):
        assert create_conversation(client)["title"] == "New Chat"

    def test_other_users_conversation_is_hidden(self, client):
        created = create_conversation(client)
        r = client.get(f"/api/conversations/{created['id']}", headers=OTHER)
        assert r.status_code == 404
        r = client.delete(f"/api/conversations/{created['id']}", headers=OTHER)
        assert r.status_code == 404

    def test_delete(self, client):
        created = create_conversation(client)
        assert client.delete(f"/api/conversations/{created['id']}", headers=USER).status_code == 204
        assert client.get(f"/api/conversations/{created['id']}", headers=USER).status_code == 404


# ─────────────────────── 聊天 (SSE) ───────────────────────


class TestSendMessage:

    def test_chat_stream(self, client):
        conv = create_conversation(client)
        r = client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "Why is the sky blue?"},
            headers=USER,
        )

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/event-stream")
        assert r.headers["cache-control"] == "no-cache"
        assert r.headers["x-accel-buffering"] == "no"

        events = parse_sse_events(r.text)
        assert events[0]["emotion"]["primaryEmotion"] == "curious"
        assert events[0]["emotion"]["suggestedMood"] == "thinking"
        assert "".join(e["content"] for e in events if "content" in e) == "Hello there, friend!"
        assert events[-1] == {"done": True}
        assert all(len(e) == 1 for e in events)

        detail = client.get(f"/api/conversations/{conv['id']}", headers=USER).json()["data"]
        assert detail["title"] == "Hello there friend"
        assert [m["role"] for m in detail["messages"]] == ["user", "assistant"]

    def test_game_stream_has_no_emotion_frame(self, client):
        conv = create_conversation(client)
        r = client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "play a game"},
            headers=USER,
        )

        events = parse_sse_events(r.text)
        assert len(events) == 2
        assert "Trivia Time!" in events[0]["content"]
        assert events[1] == {"done": True}

    def test_unknown_conversation_is_json_404(self, client):
        r = client.post(
            "/api/conversations/conv-missing/messages",
            json={"content": "hi"},
            headers=USER,
        )
        assert r.status_code == 404
        assert r.headers["content-type"].startswith("application/json")
        assert r.json()["success"] is False

    @pytest.mark.parametrize("body", [{"content": "   "}, {"content": ""}, {}])
    def test_invalid_body_is_400(self, client, body):
        conv = create_conversation(client)
        r = client.post(f"/api/conversations/{conv['id']}/messages", json=body, headers=USER)
        assert r.status_code == 400

    def test_unknown_model_is_400(self, client):
        conv = create_conversation(client)
        r = client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "hi", "model": "not-a-model"},
            headers=USER,
        )
        assert r.status_code == 400

    def test_llm_unavailable_is_503(self, client, mock_llm_service):
        from common.exceptions import LLMError

        mock_llm_service.open_stream.side_effect = LLMError("unavailable")
        conv = create_conversation(client)
        r = client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "hi"},
            headers=USER,
        )
        assert r.status_code == 503
        assert r.json()["success"] is False

    def test_mid_stream_error_frame(self, client, mock_llm_service):
        from common.exceptions import LLMError
        from core.engine import STREAM_ERROR_MESSAGE

        mock_llm_service.open_stream.side_effect = lambda **kwargs: fake_stream(
            ["Hel"], error=LLMError("reset")
        )
        conv = create_conversation(client)
        r = client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "hi"},
            headers=USER,
        )

        assert r.status_code == 200
        events = parse_sse_events(r.text)
        assert events[-1] == {"error": STREAM_ERROR_MESSAGE}
        assert {"done": True} not in events

    def test_detect_emotion(self, client):
        r = client.post("/api/detect-emotion", json={"content": "I'm so worried"}, headers=USER)
        data = r.json()["data"]
        assert data["primaryEmotion"] == "anxious"
        assert data["suggestedMood"] == "thinking"
        assert data["confidence"] == 1.0


# ─────────────────────── 偏好 ───────────────────────


class TestPreferences:

    def test_defaults(self, client):
        data = client.get("/api/preferences", headers=USER).json()["data"]
        assert data["response_mode"] == "balanced"
        assert data["communication_style"] == "friendly"
        assert data["user_context"] == ""

    def test_partial_update(self, client):
        r = client.patch(
            "/api/preferences",
            json={"response_mode": "expert", "favorite_topics": ["chess", " chess ", "jazz"]},
            headers=USER,
        )
        data = r.json()["data"]
        assert data["response_mode"] == "expert"
        assert data["communication_style"] == "friendly"
        assert data["favorite_topics"] == ["chess", "jazz"]

    def test_invalid_mode(self, client):
        r = client.patch("/api/preferences", json={"response_mode": "weird"}, headers=USER)
        assert r.status_code == 400


# ─────────────────────── 游戏化 / 系统 ───────────────────────


class TestGamificationAndSystem:

    def test_stats_after_message(self, client):
        conv = create_conversation(client)
        client.post(
            f"/api/conversations/{conv['id']}/messages",
            json={"content": "hello"},
            headers=USER,
        )

        stats = client.get("/api/gamification/stats", headers=USER).json()["data"]
        assert stats["counters"]["totalMessages"] == 1
        assert stats["current_streak"] == 1
        assert stats["total_points"] >= 10

        achievements = client.get("/api/gamification/achievements", headers=USER).json()["data"]
        first = next(a for a in achievements if a["code"] == "first_message")
        assert first["unlocked_at"] is not None

        challenges = client.get("/api/gamification/challenges", headers=USER).json()["data"]
        send = next(c for c in challenges if c["challenge_type"] == "send_messages")
        assert send["current_count"] == 1

    def test_status_and_models(self, client):
        status = client.get("/api/status").json()["data"]
        assert status["status"] == "running"
        assert status["active_games"] == 0

        models = client.get("/api/models").json()["data"]
        assert models["default"] in models["models"]
