"""Application factory. Serve with `uvicorn --factory app.main:create_app`."""

import logging
from contextlib import asynccontextmanager
from typing import (
    Any,
    Dict,
    Optional,
)
import httpx
from fastapi import (
    FastAPI,
    Request,
)
from fastapi.middleware.cors import CORSMiddleware
from app.api.auth import router as auth_router
from app.api.chat_history import router as chat_history_router
from app.api.chatbots import router as chatbots_router
from app.api.error_handlers import register_exception_handlers
from app.api.projects import router as projects_router
from app.api.public import router as public_router
from app.api.research import router as research_router
from app.api.search import router as search_router
from app.api.system import router as system_router
from app.config.settings import Settings, get_settings
from app.services.rate_limit_service import RateLimiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the shared outbound HTTP client for the lifetime of the process."""
    # No timeout: a hung upstream call is bounded by the platform's request timeout.
    app.state.http_client = httpx.AsyncClient(timeout=None)
    logger.info("HTTP client started")
    yield
    await app.state.http_client.aclose()
    logger.info("HTTP client closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        description="Tavily Chatbot API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include API routers
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(chatbots_router, prefix="/api/chatbots")
    app.include_router(chat_history_router, prefix="/api/chat/history")
    app.include_router(projects_router, prefix="/api/projects")
    app.include_router(public_router, prefix="/api/public")
    app.include_router(research_router, prefix="/api")
    app.include_router(search_router, prefix="/api/tavily")
    app.include_router(system_router, prefix="/api")

    @app.get("/")
    async def root(request: Request):
        """Root endpoint returning basic API information."""
        return {"name": "Tavily Chatbot API", "version": "0.1.0", "status": "healthy"}

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
