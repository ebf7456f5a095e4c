import pytest
from fastapi.testclient import TestClient

from app.services.rate_limit_service import RateLimitResult
from tests.fake_appwrite import FakeAppwrite
from tests.helpers import StubAgent, StubLimiter, build_app, make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake() -> FakeAppwrite:
    return FakeAppwrite()


@pytest.fixture
def app(settings, fake):
    return build_app(settings, fake)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def limiter():
    return StubLimiter(RateLimitResult(success=True, limit=10, remaining=9, reset=0))


@pytest.fixture
def agent():
    return StubAgent()


@pytest.fixture
def alice(fake):
    """A signed-up user with an open session and a profile document."""
    user_id = fake.add_user("alice@example.com", name="Alice")
    fake.add_document("users", {"accountId": user_id, "email": "alice@example.com", "name": "Alice", "preferences": "{}"})
    return user_id, fake.open_session(user_id)


@pytest.fixture
def bob(fake):
    user_id = fake.add_user("bob@example.com", name="Bob")
    return user_id, fake.open_session(user_id)
