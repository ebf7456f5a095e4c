"""Chat message persistence scoped to (chatbot, user)."""

import logging
from typing import Any, Dict, List
from appwrite.query import Query
from app.config.settings import Settings
from app.models.message import ChatMessage
from app.models.session import ResolvedSession
from app.schemas.chat import ChatMessageIn
from app.utils.json_fields import dump_json_field

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
CHATBOT_HISTORY_LIMIT = 100


async def save_message(settings: Settings, caller: ResolvedSession, chatbot_id: str, message: ChatMessageIn) -> Dict[str, Any]:
    """Store one message for the caller. The user id always comes from the session."""
    document = ChatMessage(
        chatbot_id=chatbot_id,
        user_id=caller.user_id,
        message_id=message.id,
        role=message.role,
        content=message.content,
        sources=dump_json_field(message.sources),
        capabilities=dump_json_field(message.capabilities),
        timestamp=message.timestamp,
    )
    logger.debug(f"Saving {message.role} message for chatbot {chatbot_id}, user {caller.user_id}")
    return await caller.store.create_document(settings.collections.messages, document.to_appwrite())


async def list_messages(
    settings: Settings,
    caller: ResolvedSession,
    chatbot_id: str,
    limit: int = DEFAULT_HISTORY_LIMIT,
    newest: bool = False,
) -> List[Dict[str, Any]]:
    """
    The caller's messages for a chatbot, oldest first.

    With ``newest`` the window holds the latest ``limit`` messages instead of
    the earliest ones; the page is still returned in chronological order.
    """
    ordering = Query.order_desc("timestamp") if newest else Query.order_asc("timestamp")
    documents = await caller.store.list_documents(
        settings.collections.messages,
        filters=[Query.equal("chatbotId", chatbot_id), Query.equal("userId", caller.user_id)],
        ordering=[ordering],
        limit=limit,
    )
    if newest:
        documents = list(reversed(documents))
    logger.info(f"Loaded {len(documents)} messages for chatbot {chatbot_id}, user {caller.user_id}")
    return [ChatMessage.from_appwrite(doc).to_client() for doc in documents]
