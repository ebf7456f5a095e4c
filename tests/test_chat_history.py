from app.utils.cookies import SESSION_COOKIE
from tests.helpers import assert_cookie_cleared


def _message(**overrides):
    message = {
        "id": "m1",
        "role": "assistant",
        "content": "Here is what I found.",
        "sources": [{"title": "Docs", "url": "https://example.com/docs", "snippet": "..."}],
        "timestamp": "2026-01-01T10:00:00Z",
    }
    message.update(overrides)
    return message


def test_save_then_list_round_trips_sources(client, alice):
    _, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)

    saved = client.post("/api/chat/history", json={"chatbotId": "bot-1", "message": _message()})
    assert saved.status_code == 200
    assert saved.json() == {"success": True}

    response = client.get("/api/chat/history", params={"chatbotId": "bot-1"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    message = data["messages"][0]
    assert message["id"] == "m1"
    assert message["role"] == "assistant"
    assert message["sources"] == [{"title": "Docs", "url": "https://example.com/docs", "snippet": "..."}]
    assert message["capabilities"] == []


def test_messages_are_listed_oldest_first(client, alice):
    _, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)
    for message_id, timestamp in (("late", "2026-01-01T12:00:00Z"), ("early", "2026-01-01T09:00:00Z")):
        client.post(
            "/api/chat/history",
            json={"chatbotId": "bot-1", "message": _message(id=message_id, timestamp=timestamp)},
        )

    response = client.get("/api/chat/history/bot-1")

    assert response.status_code == 200
    assert [m["id"] for m in response.json()["messages"]] == ["early", "late"]


def test_corrupted_sources_degrade_to_empty_list(client, fake, alice):
    user_id, secret = alice
    fake.add_document(
        "messages",
        {"chatbotId": "bot-1", "userId": user_id, "role": "assistant", "content": "hi", "sources": "[{broken", "timestamp": "1"},
    )
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.get("/api/chat/history", params={"chatbotId": "bot-1"})

    assert response.status_code == 200
    assert response.json()["data"]["messages"][0]["sources"] == []


def test_history_is_isolated_per_user(client, alice, bob):
    _, alice_secret = alice
    _, bob_secret = bob

    client.cookies.set(SESSION_COOKIE, alice_secret)
    client.post("/api/chat/history", json={"chatbotId": "shared-bot", "message": _message(content="alice only")})

    client.cookies.set(SESSION_COOKIE, bob_secret)
    response = client.get("/api/chat/history", params={"chatbotId": "shared-bot"})

    assert response.status_code == 200
    assert response.json()["data"] == {"messages": [], "total": 0}


def test_save_ignores_client_supplied_user_id(client, fake, alice):
    user_id, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)

    client.post(
        "/api/chat/history",
        json={"chatbotId": "bot-1", "userId": "someone-else", "message": _message()},
    )

    (stored,) = fake.collections["messages"].values()
    assert stored["userId"] == user_id


def test_save_missing_chatbot_id_is_400_without_remote_calls(client, fake, alice):
    _, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.post("/api/chat/history", json={"message": _message()})

    assert response.status_code == 400
    assert "chatbotId" in response.json()["error"]
    assert fake.calls == []


def test_save_invalid_role_is_400(client, fake, alice):
    _, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.post("/api/chat/history", json={"chatbotId": "bot-1", "message": _message(role="system")})

    assert response.status_code == 400
    assert fake.calls == []


def test_list_requires_chatbot_id(client, fake, alice):
    _, secret = alice
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.get("/api/chat/history")

    assert response.status_code == 400
    assert fake.calls == []


def test_list_without_cookie_is_401(client, fake):
    response = client.get("/api/chat/history", params={"chatbotId": "bot-1"})

    assert response.status_code == 401
    assert fake.calls == []


def test_list_with_rejected_cookie_clears_it(client):
    client.cookies.set(SESSION_COOKIE, "stale")

    response = client.get("/api/chat/history", params={"chatbotId": "bot-1"})

    assert response.status_code == 401
    assert_cookie_cleared(response)


def test_list_returns_newest_messages_within_limit(client, fake, alice):
    user_id, secret = alice
    for i in range(5):
        fake.add_document(
            "messages",
            {"chatbotId": "bot-1", "userId": user_id, "role": "user", "content": str(i), "timestamp": f"2026-01-0{i + 1}"},
        )
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.get("/api/chat/history", params={"chatbotId": "bot-1", "limit": 2})

    assert [m["content"] for m in response.json()["data"]["messages"]] == ["3", "4"]


def test_chatbot_history_keeps_earliest_window(client, fake, alice):
    user_id, secret = alice
    for i in range(3):
        fake.add_document(
            "messages",
            {"chatbotId": "bot-1", "userId": user_id, "role": "user", "content": str(i), "timestamp": f"2026-01-0{i + 1}"},
        )
    client.cookies.set(SESSION_COOKIE, secret)

    response = client.get("/api/chat/history/bot-1")

    assert [m["content"] for m in response.json()["messages"]] == ["0", "1", "2"]


def test_message_with_null_content_and_role_is_served(client, fake, alice):
    user_id, secret = alice
    fake.add_document(
        "messages",
        {"chatbotId": "bot-1", "userId": user_id, "role": None, "content": None, "timestamp": "2026-01-01"},
    )
    client.cookies.set(SESSION_COOKIE, secret)

    listed = client.get("/api/chat/history", params={"chatbotId": "bot-1"})
    by_chatbot = client.get("/api/chat/history/bot-1")

    assert listed.status_code == 200
    assert by_chatbot.status_code == 200
    message = listed.json()["data"]["messages"][0]
    assert message["content"] == ""
    assert message["role"] == ""
    assert by_chatbot.json()["messages"][0]["content"] == ""
