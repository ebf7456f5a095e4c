import pytest

from app.api.dependencies import get_rate_limiter, get_research_agent
from app.utils.cookies import SESSION_COOKIE
from tests.helpers import assert_cookie_cleared

MESSAGE = {"role": "user", "content": "hello", "timestamp": "2026-01-01T00:00:00Z"}

# Every route that requires a session, with a body that passes validation.
AUTHENTICATED_ROUTES = [
    ("get", "/api/auth/me", None),
    ("get", "/api/chatbots", None),
    ("get", "/api/chatbots/bot-1", None),
    ("put", "/api/chatbots/bot-1", {"title": "Renamed"}),
    ("delete", "/api/chatbots/bot-1", None),
    ("put", "/api/chatbots/bot-1/publish", {"published": True}),
    ("get", "/api/chat/history?chatbotId=bot-1", None),
    ("post", "/api/chat/history", {"chatbotId": "bot-1", "message": MESSAGE}),
    ("get", "/api/chat/history/bot-1", None),
    ("get", "/api/projects", None),
    ("post", "/api/projects", {"name": "Acme"}),
    ("get", "/api/projects/proj-1", None),
    ("put", "/api/projects/proj-1", {"name": "Acme"}),
    ("delete", "/api/projects/proj-1", None),
    ("post", "/api/projects/proj-1/research", {"company": "Acme"}),
    ("get", "/api/projects/proj-1/research", None),
]


def _send(client, method, path, body):
    if body is None:
        return client.request(method.upper(), path)
    return client.request(method.upper(), path, json=body)


@pytest.fixture
def guarded_client(app, client, limiter, agent):
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    app.dependency_overrides[get_research_agent] = lambda: agent
    return client


@pytest.mark.parametrize("method,path,body", AUTHENTICATED_ROUTES)
def test_rejected_cookie_is_401_and_cleared(guarded_client, fake, agent, method, path, body):
    guarded_client.cookies.set(SESSION_COOKIE, "revoked-secret")

    response = _send(guarded_client, method, path, body)

    assert response.status_code == 401
    assert_cookie_cleared(response)
    assert [call[0] for call in fake.calls] == ["account.get"]
    assert agent.runs == []


@pytest.mark.parametrize("method,path,body", AUTHENTICATED_ROUTES)
def test_missing_cookie_is_401_without_remote_calls(guarded_client, fake, method, path, body):
    response = _send(guarded_client, method, path, body)

    assert response.status_code == 401
    assert fake.calls == []
