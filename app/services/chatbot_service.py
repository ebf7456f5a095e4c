"""Chatbot reads and owner-only mutations."""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional
from appwrite.query import Query
from app.config.settings import Settings
from app.models.base import without_system_fields
from app.models.chatbot import Chatbot
from app.models.session import ResolvedSession
from app.schemas.chatbots import UpdateChatbotRequest
from app.services.appwrite_client import DocumentStore
from app.utils.exceptions import NotFound, PermissionDenied

logger = logging.getLogger(__name__)

USER_CHATBOT_LIMIT = 50


async def list_user_chatbots(settings: Settings, caller: ResolvedSession) -> List[Dict[str, Any]]:
    """The caller's chatbots, newest first."""
    documents = await caller.store.list_documents(
        settings.collections.chatbots,
        filters=[Query.equal("userId", caller.user_id)],
        ordering=[Query.order_desc("createdAt")],
        limit=USER_CHATBOT_LIMIT,
    )
    logger.info(f"Found {len(documents)} chatbots for user {caller.user_id}")
    return [without_system_fields(doc) for doc in documents]


async def find_owned_chatbot(settings: Settings, caller: ResolvedSession, chatbot_id: str) -> Dict[str, Any]:
    """
    Find a chatbot the caller owns by document id, falling back to its namespace.

    Raises:
        NotFound: Neither lookup yields a chatbot owned by the caller
    """
    collection = settings.collections.chatbots
    try:
        document = await caller.store.get_document(collection, chatbot_id)
        if document.get("userId") == caller.user_id:
            return without_system_fields(document)
        logger.debug(f"Chatbot {chatbot_id} is not owned by {caller.user_id}, trying namespace lookup")
    except (NotFound, PermissionDenied):
        logger.debug(f"Direct id lookup failed for {chatbot_id}, trying namespace lookup")

    documents = await caller.store.list_documents(
        collection,
        filters=[Query.equal("namespace", chatbot_id), Query.equal("userId", caller.user_id)],
        limit=1,
    )
    if not documents:
        raise NotFound("Chatbot not found or access denied")
    return without_system_fields(documents[0])


async def update_chatbot(
    settings: Settings, caller: ResolvedSession, chatbot_id: str, changes: UpdateChatbotRequest
) -> Dict[str, Any]:
    chatbot = await find_owned_chatbot(settings, caller, chatbot_id)

    allowed: Dict[str, Any] = {"lastUpdated": datetime.now(UTC).isoformat()}
    if changes.title:
        allowed["title"] = changes.title
    if changes.description:
        allowed["description"] = changes.description
    if changes.is_active is not None:
        allowed["isActive"] = changes.is_active

    logger.info(f"Updating chatbot {chatbot['$id']} fields: {sorted(allowed)}")
    updated = await caller.store.update_document(settings.collections.chatbots, chatbot["$id"], allowed)
    return without_system_fields(updated)


async def delete_chatbot(settings: Settings, caller: ResolvedSession, chatbot_id: str) -> None:
    chatbot = await find_owned_chatbot(settings, caller, chatbot_id)
    logger.info(f"Deleting chatbot {chatbot['$id']}")
    await caller.store.delete_document(settings.collections.chatbots, chatbot["$id"])


async def set_published(settings: Settings, caller: ResolvedSession, chatbot_id: str, published: bool) -> str:
    """
    Publish or unpublish a chatbot owned by the caller.

    Returns:
        The public URL, or an empty string when unpublished
    """
    collection = settings.collections.chatbots
    chatbot = await caller.store.get_document(collection, chatbot_id)
    if chatbot.get("userId") != caller.user_id:
        raise PermissionDenied("Access denied")

    public_url = f"/p/{chatbot_id}" if published else ""
    await caller.store.update_document(collection, chatbot_id, {"published": published, "publicUrl": public_url})
    logger.info(f"Chatbot {chatbot_id} published={published}")
    return public_url


async def get_public_chatbot(settings: Settings, admin_store: DocumentStore, namespace: str) -> Optional[Dict[str, Any]]:
    """
    Look up a published chatbot by namespace with the admin store.

    Returns ``None`` both when nothing matches and when the match is
    unpublished, so callers cannot tell the two apart.
    """
    documents = await admin_store.list_documents(
        settings.collections.chatbots,
        filters=[Query.equal("namespace", namespace), Query.equal("published", True)],
        limit=1,
    )
    if not documents:
        return None
    return Chatbot.from_appwrite(documents[0]).public_view()
