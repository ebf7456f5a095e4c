"""Environment and capability report."""

from typing import Any, Dict
from fastapi import APIRouter, Depends
from app.api.dependencies import get_settings
from app.config.settings import Settings

router = APIRouter(tags=["system"])


def environment_report(settings: Settings) -> Dict[str, Any]:
    env = {
        "TAVILY_API_KEY": bool(settings.tavily_api_key),
        "OPENAI_API_KEY": bool(settings.openai_api_key),
        "ANTHROPIC_API_KEY": bool(settings.anthropic_api_key),
        "GOOGLE_API_KEY": bool(settings.google_api_key),
        "GROQ_API_KEY": bool(settings.groq_api_key),
        "OPEN_ROUTER_API_KEY": bool(settings.open_router_api_key),
        "MEM0_API_KEY": bool(settings.mem0_api_key),
        "UPSTASH_REDIS_REST_URL": bool(settings.upstash_redis_rest_url),
        "UPSTASH_REDIS_REST_TOKEN": bool(settings.upstash_redis_rest_token),
        "UPSTASH_SEARCH_REST_URL": bool(settings.upstash_search_rest_url),
        "UPSTASH_SEARCH_REST_TOKEN": bool(settings.upstash_search_rest_token),
        "APPWRITE_ENDPOINT": bool(settings.appwrite_endpoint),
        "APPWRITE_PROJECT_ID": bool(settings.appwrite_project_id),
        "DISABLE_CHATBOT_CREATION": settings.disable_chatbot_creation,
    }
    features = {
        "ai": any(
            env[key]
            for key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY", "GROQ_API_KEY", "OPEN_ROUTER_API_KEY")
        ),
        "search": env["TAVILY_API_KEY"],
        "memory": env["MEM0_API_KEY"],
        "storage": env["UPSTASH_REDIS_REST_URL"] and env["UPSTASH_REDIS_REST_TOKEN"],
        "vectorDB": env["UPSTASH_SEARCH_REST_URL"] and env["UPSTASH_SEARCH_REST_TOKEN"],
        "appwrite": env["APPWRITE_ENDPOINT"] and env["APPWRITE_PROJECT_ID"],
    }
    warnings = [
        (features["search"], "Tavily API key not configured - search functionality will be limited"),
        (features["ai"], "No AI provider configured - please set at least one API key"),
        (features["vectorDB"], "Upstash Vector DB not configured - chatbot creation will fail"),
        (features["memory"], "Mem0 not configured - conversation memory features disabled"),
        (features["storage"], "Redis not configured - rate limiting disabled"),
        (features["appwrite"], "Appwrite not configured - authentication disabled"),
    ]
    return {
        "environmentStatus": env,
        "features": features,
        "ready": features["ai"] and features["search"] and features["vectorDB"],
        "warnings": [message for enabled, message in warnings if not enabled],
    }


@router.get("/check-env")
async def check_env_endpoint(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Which integrations are configured. Never reveals the values themselves."""
    return environment_report(settings)
