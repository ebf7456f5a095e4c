import pytest

from app.utils.cookies import SESSION_COOKIE


def _chatbot(fake, owner, namespace, **fields):
    data = {
        "userId": owner,
        "namespace": namespace,
        "title": f"{namespace} bot",
        "published": False,
        "createdAt": "2026-01-01T00:00:00Z",
    }
    data.update(fields)
    return fake.add_document("chatbots", data)


@pytest.fixture
def signed_in(client, alice):
    client.cookies.set(SESSION_COOKIE, alice[1])
    return alice[0]


def test_list_returns_only_own_chatbots_newest_first(client, fake, signed_in, bob):
    _chatbot(fake, signed_in, "old", createdAt="2026-01-01T00:00:00Z")
    _chatbot(fake, signed_in, "new", createdAt="2026-03-01T00:00:00Z")
    _chatbot(fake, bob[0], "bobs")

    response = client.get("/api/chatbots")

    assert response.status_code == 200
    assert [c["namespace"] for c in response.json()["data"]] == ["new", "old"]


def test_list_without_cookie_is_401(client, fake):
    assert client.get("/api/chatbots").status_code == 401
    assert fake.calls == []


def test_get_by_document_id_and_by_namespace(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    by_id = client.get(f"/api/chatbots/{document['$id']}")
    by_namespace = client.get("/api/chatbots/acme")

    assert by_id.status_code == 200
    assert by_namespace.status_code == 200
    assert by_id.json()["data"]["$id"] == by_namespace.json()["data"]["$id"] == document["$id"]


def test_get_other_users_chatbot_is_404(client, fake, signed_in, bob):
    document = _chatbot(fake, bob[0], "bobs")

    response = client.get(f"/api/chatbots/{document['$id']}")

    assert response.status_code == 404
    assert response.json() == {"error": "Chatbot not found or access denied"}


def test_update_changes_only_allowed_fields(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    response = client.put(
        f"/api/chatbots/{document['$id']}",
        json={"title": "Renamed", "isActive": False, "userId": "hijack", "published": True},
    )

    assert response.status_code == 200
    stored = fake.collections["chatbots"][document["$id"]]
    assert stored["title"] == "Renamed"
    assert stored["isActive"] is False
    assert stored["userId"] == signed_in
    assert stored["published"] is False
    assert "lastUpdated" in stored


def test_delete_owned_chatbot(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    response = client.delete("/api/chatbots/acme")

    assert response.status_code == 200
    assert document["$id"] not in fake.collections["chatbots"]


def test_delete_other_users_chatbot_is_404(client, fake, signed_in, bob):
    document = _chatbot(fake, bob[0], "bobs")

    response = client.delete(f"/api/chatbots/{document['$id']}")

    assert response.status_code == 404
    assert document["$id"] in fake.collections["chatbots"]


def test_publish_and_unpublish(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    published = client.put(f"/api/chatbots/{document['$id']}/publish", json={"published": True})

    assert published.status_code == 200
    assert published.json() == {"success": True, "publicUrl": f"/p/{document['$id']}"}
    assert fake.collections["chatbots"][document["$id"]]["published"] is True

    unpublished = client.put(f"/api/chatbots/{document['$id']}/publish", json={"published": False})

    assert unpublished.json() == {"success": True, "publicUrl": ""}
    assert fake.collections["chatbots"][document["$id"]]["published"] is False


def test_publish_requires_boolean(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    response = client.put(f"/api/chatbots/{document['$id']}/publish", json={"published": "yes"})

    assert response.status_code == 400
    assert fake.calls == []


def test_publish_other_users_chatbot_is_403(client, fake, signed_in, bob):
    document = _chatbot(fake, bob[0], "bobs")

    response = client.put(f"/api/chatbots/{document['$id']}/publish", json={"published": True})

    assert response.status_code == 403
    assert fake.collections["chatbots"][document["$id"]]["published"] is False


def test_publish_unknown_chatbot_is_404(client, signed_in):
    response = client.put("/api/chatbots/missing/publish", json={"published": True})

    assert response.status_code == 404
    assert response.json() == {"error": "Chatbot not found"}


def test_update_rejects_non_json_body(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")

    response = client.put(
        f"/api/chatbots/{document['$id']}", content="title=x", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_responses_omit_storage_and_permission_attributes(client, fake, signed_in):
    document = _chatbot(fake, signed_in, "acme")
    hidden = {"$permissions", "$databaseId", "$collectionId"}

    listed = client.get("/api/chatbots").json()["data"][0]
    fetched = client.get(f"/api/chatbots/{document['$id']}").json()["data"]
    updated = client.put(f"/api/chatbots/{document['$id']}", json={"title": "Renamed"}).json()["data"]

    for chatbot in (listed, fetched, updated):
        assert hidden.isdisjoint(chatbot)
        assert chatbot["$id"] == document["$id"]
        assert "$createdAt" in chatbot
    assert updated["title"] == "Renamed"
