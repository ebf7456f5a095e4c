"""This file contains the chat message document model."""

from datetime import UTC, datetime
from typing import Any, Dict, Optional
from pydantic import Field

from app.models.base import BaseModel
from app.utils.json_fields import parse_json_field


class ChatMessage(BaseModel):
    """Message document, owned by exactly one (chatbot, user) pair.

    ``sources`` and ``capabilities`` are stored as JSON strings; documents are
    written once and never updated.
    """

    chatbot_id: str = Field(..., alias="chatbotId")
    user_id: str = Field(..., alias="userId")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    role: Optional[str] = None
    content: Optional[str] = ""
    sources: Optional[str] = "[]"
    capabilities: Optional[str] = "[]"
    timestamp: Optional[Any] = None
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat(), alias="createdAt")

    def to_client(self) -> Dict[str, Any]:
        """Client-facing shape with JSON attributes decoded."""
        return {
            "id": self.message_id,
            "role": self.role or "",
            "content": self.content or "",
            "sources": parse_json_field(self.sources, list, "sources"),
            "capabilities": parse_json_field(self.capabilities, list, "capabilities"),
            "timestamp": self.timestamp,
        }
