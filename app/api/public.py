"""Unauthenticated, read-only API routes."""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends
from app.api.dependencies import AdminStoreFactory, get_admin_store_factory, get_settings
from app.config.settings import Settings
from app.services.chatbot_service import get_public_chatbot
from app.utils.exceptions import NotFound, ValidationError, wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["public"])


@router.get("/chatbots/{namespace}")
async def get_public_chatbot_endpoint(
    namespace: str,
    settings: Settings = Depends(get_settings),
    admin_store: AdminStoreFactory = Depends(get_admin_store_factory),
) -> Dict[str, Any]:
    """
    Public view of a published chatbot.

    Unknown and unpublished namespaces produce the same 404.
    """
    if not namespace.strip():
        raise ValidationError("Chatbot ID is required")

    try:
        chatbot = await get_public_chatbot(settings, admin_store(), namespace)
    except Exception as e:
        logger.error(f"Get public chatbot error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to fetch chatbot", e)

    if chatbot is None:
        raise NotFound("Chatbot not found or not published")
    return {"success": True, "data": chatbot}
