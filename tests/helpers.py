from fastapi import FastAPI

from app.api.dependencies import get_appwrite
from app.config.settings import Settings
from app.main import create_app
from app.schemas.research import ResearchResult
from app.services.rate_limit_service import RateLimiter, RateLimitResult
from tests.fake_appwrite import FakeAppwrite, FakeAppwriteFactory

APPWRITE_ENDPOINT = "http://appwrite.test/v1"


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "appwrite_endpoint": APPWRITE_ENDPOINT,
        "appwrite_project_id": "test-project",
        "appwrite_api_key": "test-key",
    }
    values.update(overrides)
    return Settings(**values)


def build_app(settings: Settings, fake: FakeAppwrite) -> FastAPI:
    """App whose Appwrite services are served by ``fake``."""
    app = create_app(settings)
    app.dependency_overrides[get_appwrite] = lambda: FakeAppwriteFactory(settings, fake)
    return app


def assert_cookie_cleared(response) -> None:
    header = response.headers.get("set-cookie", "")
    assert "appwrite-session=" in header
    assert "max-age=0" in header.lower()


class StubLimiter(RateLimiter):
    """Limiter returning a fixed result and recording every check."""

    def __init__(self, result: RateLimitResult):
        super().__init__({})
        self.result = result
        self.checks = []

    async def check(self, kind, identifier):
        self.checks.append((kind, identifier))
        return self.result


class FakeTavilyClient:
    """Async ``search`` with the keyword arguments of ``tavily.AsyncTavilyClient``."""

    def __init__(self, results_by_topic=None, failing_queries=(), answer=None):
        self.results_by_topic = results_by_topic or {}
        self.failing_queries = failing_queries
        self.answer = answer
        self.searches = []

    async def search(self, query, **kwargs):
        self.searches.append({"query": query, **kwargs})
        if any(marker in query for marker in self.failing_queries):
            raise RuntimeError("Tavily returned 500")
        return {"query": query, "answer": self.answer, "results": self.results_by_topic.get(kwargs.get("topic"), [])}


class StubAgent:
    """Research agent returning a canned result."""

    def __init__(self):
        self.runs = []

    async def run(self, request, user_id=None):
        self.runs.append((request, user_id))
        return ResearchResult(
            report="# Acme report",
            references=["https://acme.com"],
            company_info={"name": request.company},
        )
