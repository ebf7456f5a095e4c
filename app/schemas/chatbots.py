"""Chatbot management schemas."""

from typing import Optional
from pydantic import BaseModel, Field, StrictBool


class UpdateChatbotRequest(BaseModel):
    """Fields an owner may change; anything else in the body is ignored."""

    title: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[StrictBool] = Field(None, alias="isActive")


class PublishRequest(BaseModel):
    published: StrictBool
