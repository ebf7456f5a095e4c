"""This file contains the chatbot document model."""

from typing import Any, Dict, Optional
from pydantic import Field

from app.models.base import BaseModel

# Attributes exposed through the unauthenticated public route.
PUBLIC_FIELDS = (
    "id",
    "namespace",
    "title",
    "description",
    "companyName",
    "domain",
    "industry",
    "published",
    "createdAt",
    "pagesCrawled",
    "documentsStored",
)


class Chatbot(BaseModel):
    """Chatbot document.

    Attributes:
        user_id: Owner account id
        namespace: Public slug, unique across chatbots
        published: Whether the public route may serve this chatbot
    """

    user_id: Optional[str] = Field(default=None, alias="userId")
    namespace: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = Field(default=None, alias="companyName")
    domain: Optional[str] = None
    industry: Optional[str] = None
    published: bool = False
    public_url: Optional[str] = Field(default=None, alias="publicUrl")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    pages_crawled: Optional[Any] = Field(default=None, alias="pagesCrawled")
    documents_stored: Optional[Any] = Field(default=None, alias="documentsStored")

    def public_view(self) -> Dict[str, Any]:
        """Allow-listed projection for anonymous callers."""
        view = {
            "id": self.id,
            "namespace": self.namespace,
            "title": self.title,
            "description": self.description,
            "companyName": self.company_name or self.title,
            "domain": self.domain,
            "industry": self.industry or "general",
            "published": self.published,
            "createdAt": self.created_at,
            "pagesCrawled": self.pages_crawled,
            "documentsStored": self.documents_stored,
        }
        return {key: view[key] for key in PUBLIC_FIELDS}
