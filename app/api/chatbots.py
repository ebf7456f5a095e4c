"""Chatbot API routes for the signed-in owner."""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Cookie, Depends
from app.api.dependencies import get_session_resolver, get_settings
from app.config.settings import Settings
from app.schemas.chatbots import PublishRequest, UpdateChatbotRequest
from app.services.chatbot_service import (
    delete_chatbot,
    find_owned_chatbot,
    list_user_chatbots,
    set_published,
    update_chatbot,
)
from app.services.session_service import SessionResolver
from app.utils.cookies import SESSION_COOKIE
from app.utils.exceptions import NotFound, PermissionDenied, Unauthenticated, wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["chatbots"])


@router.get("")
async def list_chatbots_endpoint(
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """The caller's chatbots, newest first."""
    try:
        caller = await resolver.resolve(session_cookie)
        chatbots = await list_user_chatbots(settings, caller)
        return {"success": True, "data": chatbots}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Get chatbots error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to retrieve chatbots", e)


@router.get("/{chatbot_id}")
async def get_chatbot_endpoint(
    chatbot_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """One owned chatbot, by document id or namespace."""
    try:
        caller = await resolver.resolve(session_cookie)
        chatbot = await find_owned_chatbot(settings, caller, chatbot_id)
        return {"success": True, "data": chatbot}

    except (Unauthenticated, NotFound):
        raise
    except Exception as e:
        logger.error(f"Get chatbot error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to fetch chatbot", e)


@router.put("/{chatbot_id}")
async def update_chatbot_endpoint(
    chatbot_id: str,
    body: UpdateChatbotRequest,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """Update title, description or active flag of an owned chatbot."""
    try:
        caller = await resolver.resolve(session_cookie)
        updated = await update_chatbot(settings, caller, chatbot_id, body)
        return {"success": True, "data": updated}

    except (Unauthenticated, NotFound):
        raise
    except Exception as e:
        logger.error(f"Update chatbot error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to update chatbot", e)


@router.delete("/{chatbot_id}")
async def delete_chatbot_endpoint(
    chatbot_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        await delete_chatbot(settings, caller, chatbot_id)
        return {"success": True, "message": "Chatbot deleted successfully"}

    except (Unauthenticated, NotFound):
        raise
    except Exception as e:
        logger.error(f"Delete chatbot error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to delete chatbot", e)


@router.put("/{chatbot_id}/publish")
async def publish_chatbot_endpoint(
    chatbot_id: str,
    body: PublishRequest,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """Publish or unpublish an owned chatbot on the public route."""
    try:
        caller = await resolver.resolve(session_cookie)
        public_url = await set_published(settings, caller, chatbot_id, body.published)
        return {"success": True, "publicUrl": public_url}

    except NotFound:
        raise NotFound("Chatbot not found")
    except (Unauthenticated, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Publish error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to update chatbot", e)
