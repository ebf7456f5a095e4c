"""Project and search proxy schemas."""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field


class CreateProjectRequest(BaseModel):
    """New company-research project."""

    name: str = Field(..., min_length=1, description="Project name, also the namespace seed")
    description: Optional[str] = None
    url: Optional[str] = None


class UpdateProjectRequest(BaseModel):
    """Fields an owner may change; anything else in the body is ignored."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    url: Optional[str] = None
    status: Optional[str] = None
    company_data: Optional[Dict[str, Any]] = Field(None, alias="companyData")
    settings: Optional[Dict[str, Any]] = None


class SearchRequest(BaseModel):
    """Tavily search proxy request."""

    query: str = Field(..., min_length=1)
    search_depth: Literal["basic", "advanced"] = Field("basic", alias="searchDepth")
    max_results: int = Field(5, alias="maxResults", ge=1, le=20)
    include_financial: bool = Field(False, alias="includeFinancial", description="Restrict to financial news domains")
    topic: Literal["general", "news", "finance"] = "general"
