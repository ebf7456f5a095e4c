"""FastAPI dependency providers.

Providers only assemble collaborators; none of them performs I/O, so request
validation always happens before any remote call.
"""

import httpx
from fastapi import Depends, Request
from app.config.appwrite import AppwriteFactory
from app.config.settings import Settings
from app.services.appwrite_client import DocumentStore
from app.services.llm_service import LLMClient, select_provider
from app.services.rate_limit_service import RateLimiter
from app.services.research_service import CompanyResearchAgent
from app.services.session_service import SessionResolver
from app.services.tavily_service import TavilySearch


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    return first or "anonymous"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_appwrite(settings: Settings = Depends(get_settings)) -> AppwriteFactory:
    return AppwriteFactory(settings)


def get_session_resolver(appwrite: AppwriteFactory = Depends(get_appwrite)) -> SessionResolver:
    return SessionResolver(appwrite)


class AdminStoreFactory:
    """Builds the admin document store on first use inside the handler."""

    def __init__(self, appwrite: AppwriteFactory):
        self.appwrite = appwrite

    def __call__(self) -> DocumentStore:
        return self.appwrite.documents(admin=True)


def get_admin_store_factory(appwrite: AppwriteFactory = Depends(get_appwrite)) -> AdminStoreFactory:
    return AdminStoreFactory(appwrite)


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_tavily(settings: Settings = Depends(get_settings)) -> TavilySearch:
    return TavilySearch(settings.tavily_api_key)


def get_research_agent(
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
    tavily: TavilySearch = Depends(get_tavily),
) -> CompanyResearchAgent:
    return CompanyResearchAgent(tavily, LLMClient(select_provider(settings), http))
