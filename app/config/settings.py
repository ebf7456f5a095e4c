"""Application settings loaded once from the environment."""

import os
from functools import lru_cache
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, stripping whitespace and treating blanks as unset."""
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _normalize_endpoint(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    # Add https:// if missing
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url.rstrip("/")


class CollectionIds(BaseModel):
    """Appwrite collection ids used by the API."""

    model_config = ConfigDict(frozen=True)

    users: str = "users"
    chatbots: str = "chatbots"
    conversations: str = "conversations"
    messages: str = "messages"
    research_reports: str = "research_reports"


class Settings(BaseModel):
    """Immutable process-wide configuration.

    Built once at startup and handed to every component; nothing below the
    API layer reads the environment directly.
    """

    model_config = ConfigDict(frozen=True)

    environment: str = "development"
    log_level: str = "INFO"
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    appwrite_endpoint: Optional[str] = None
    appwrite_project_id: Optional[str] = None
    appwrite_api_key: Optional[str] = None
    appwrite_database_id: str = "main"
    collections: CollectionIds = Field(default_factory=CollectionIds)

    tavily_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    open_router_api_key: Optional[str] = None
    mem0_api_key: Optional[str] = None

    upstash_redis_rest_url: Optional[str] = None
    upstash_redis_rest_token: Optional[str] = None
    upstash_search_rest_url: Optional[str] = None
    upstash_search_rest_token: Optional[str] = None

    disable_chatbot_creation: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def appwrite_configured(self) -> bool:
        return bool(self.appwrite_endpoint and self.appwrite_project_id)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a .env file if present)."""
        origins = _env("CORS_ALLOW_ORIGINS", "*")
        return cls(
            environment=_env("ENVIRONMENT", "development"),
            log_level=_env("LOG_LEVEL", "INFO"),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
            appwrite_endpoint=_normalize_endpoint(_env("APPWRITE_ENDPOINT")),
            appwrite_project_id=_env("APPWRITE_PROJECT_ID"),
            appwrite_api_key=_env("APPWRITE_API_KEY"),
            appwrite_database_id=_env("APPWRITE_DATABASE_ID", "main"),
            collections=CollectionIds(
                users=_env("APPWRITE_USERS_COLLECTION_ID", "users"),
                chatbots=_env("APPWRITE_CHATBOTS_COLLECTION_ID", "chatbots"),
                conversations=_env("APPWRITE_CONVERSATIONS_COLLECTION_ID", "conversations"),
                messages=_env("APPWRITE_MESSAGES_COLLECTION_ID", "messages"),
                research_reports=_env("APPWRITE_RESEARCH_COLLECTION_ID", "research_reports"),
            ),
            tavily_api_key=_env("TAVILY_API_KEY"),
            openai_api_key=_env("OPENAI_API_KEY"),
            anthropic_api_key=_env("ANTHROPIC_API_KEY"),
            google_api_key=_env("GOOGLE_API_KEY"),
            groq_api_key=_env("GROQ_API_KEY"),
            open_router_api_key=_env("OPEN_ROUTER_API_KEY"),
            mem0_api_key=_env("MEM0_API_KEY"),
            upstash_redis_rest_url=_normalize_endpoint(_env("UPSTASH_REDIS_REST_URL")),
            upstash_redis_rest_token=_env("UPSTASH_REDIS_REST_TOKEN"),
            upstash_search_rest_url=_normalize_endpoint(_env("UPSTASH_SEARCH_REST_URL")),
            upstash_search_rest_token=_env("UPSTASH_SEARCH_REST_TOKEN"),
            disable_chatbot_creation=_env("DISABLE_CHATBOT_CREATION", "false").lower() == "true",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings.from_env()
