"""This file contains the project and research report document models."""

from typing import Any, Dict, Optional
from pydantic import Field

from app.models.base import BaseModel
from app.utils.json_fields import parse_json_field

PROJECT_TYPE = "company_research"


def _page_count(raw: Any) -> int:
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        return 0


class Project(BaseModel):
    """Company-research project, stored in the chatbots collection.

    ``companyData`` and ``settings`` are JSON strings; ``pagesCrawled`` is a
    numeric string.
    """

    user_id: Optional[str] = Field(default=None, alias="userId")
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    namespace: Optional[str] = None
    status: Optional[str] = None
    published: Optional[bool] = False
    public_url: Optional[str] = Field(default=None, alias="publicUrl")
    favicon: Optional[str] = None
    pages_crawled: Optional[Any] = Field(default="0", alias="pagesCrawled")
    company_data: Optional[Any] = Field(default=None, alias="companyData")
    settings: Optional[Any] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    system_created_at: Optional[str] = Field(default=None, alias="$createdAt")
    system_updated_at: Optional[str] = Field(default=None, alias="$updatedAt")

    def to_appwrite(self) -> Dict[str, Any]:
        return self.model_dump(
            by_alias=True, exclude={"id", "system_created_at", "system_updated_at"}, exclude_none=True
        )

    def to_client(self) -> Dict[str, Any]:
        company_data = parse_json_field(self.company_data, dict, "companyData") if self.company_data else None
        return {
            "$id": self.id,
            "name": self.name,
            "description": self.description or "",
            "url": self.url,
            "type": self.type or PROJECT_TYPE,
            "namespace": self.namespace,
            "status": self.status,
            "published": bool(self.published),
            "publicUrl": self.public_url or None,
            "favicon": self.favicon or None,
            "pagesCrawled": _page_count(self.pages_crawled),
            "documentsStored": 0,
            "companyData": company_data,
            "settings": parse_json_field(self.settings, dict, "settings"),
            "createdAt": self.created_at or self.system_created_at,
            "updatedAt": self.updated_at or self.system_updated_at,
        }


class ResearchReport(BaseModel):
    """Latest research run for one (project, user) pair."""

    chatbot_id: str = Field(..., alias="chatbotId")
    user_id: str = Field(..., alias="userId")
    company_name: Optional[str] = Field(default=None, alias="companyName")
    company_url: Optional[str] = Field(default="", alias="companyUrl")
    industry: Optional[str] = ""
    hq_location: Optional[str] = Field(default="", alias="hqLocation")
    research_report: Optional[str] = Field(default=None, alias="researchReport")
    company_info: Optional[str] = Field(default="{}", alias="companyInfo")
    references: Optional[str] = "[]"
    generated_at: Optional[str] = Field(default=None, alias="generatedAt")
    status: Optional[str] = "completed"
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    def company_data(self) -> Dict[str, Any]:
        return {
            "name": self.company_name,
            "url": self.company_url,
            "industry": self.industry or None,
            "hqLocation": self.hq_location or None,
            "researchReport": self.research_report or None,
            "companyInfo": parse_json_field(self.company_info, dict, "companyInfo"),
            "generatedAt": self.generated_at,
            "references": parse_json_field(self.references, list, "references"),
        }


def empty_company_data(project: Project) -> Dict[str, Any]:
    """Company data for a project that has not been researched yet."""
    return {
        "name": project.name,
        "url": project.url,
        "industry": None,
        "hqLocation": None,
        "researchReport": None,
        "companyInfo": {},
        "generatedAt": project.created_at,
        "references": [],
    }
