"""Chat history API routes."""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Cookie, Depends, Query
from app.api.dependencies import get_session_resolver, get_settings
from app.config.settings import Settings
from app.schemas.chat import SaveMessageRequest
from app.services.chat_history_service import (
    CHATBOT_HISTORY_LIMIT,
    DEFAULT_HISTORY_LIMIT,
    list_messages,
    save_message,
)
from app.services.session_service import SessionResolver
from app.utils.cookies import SESSION_COOKIE
from app.utils.exceptions import Unauthenticated, wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["chat"])


@router.get("")
async def get_history_endpoint(
    chatbot_id: str = Query(..., alias="chatbotId", min_length=1),
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=100),
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """The caller's latest messages for one chatbot, oldest first."""
    try:
        caller = await resolver.resolve(session_cookie)
        messages = await list_messages(settings, caller, chatbot_id, limit, newest=True)
        return {"success": True, "data": {"messages": messages, "total": len(messages)}}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Chat history error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to load chat history", e)


@router.post("")
async def save_history_endpoint(
    body: SaveMessageRequest,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """Store one message for the caller."""
    try:
        caller = await resolver.resolve(session_cookie)
        await save_message(settings, caller, body.chatbot_id, body.message)
        return {"success": True}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Save chat message error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to save chat message", e)


@router.get("/{chatbot_id}")
async def get_chatbot_history_endpoint(
    chatbot_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        messages = await list_messages(settings, caller, chatbot_id, CHATBOT_HISTORY_LIMIT)
        return {"success": True, "messages": messages}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Load chat history error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to load chat history", e)
