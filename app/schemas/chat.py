"""Chat history schemas."""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class ChatMessageIn(BaseModel):
    """A message as produced by the chat UI."""

    id: Optional[str] = Field(None, description="Client-side message id")
    role: Literal["user", "assistant"]
    content: str
    sources: List[Dict[str, Any]] = Field(default_factory=list, description="Cited sources (title, url, snippet)")
    capabilities: List[Any] = Field(default_factory=list, description="Capabilities used to produce the message")
    timestamp: Optional[Any] = Field(None, description="Client timestamp used for ordering")


class SaveMessageRequest(BaseModel):
    """Payload for storing one chat message."""

    chatbot_id: str = Field(..., alias="chatbotId", min_length=1)
    message: ChatMessageIn
