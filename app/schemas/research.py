"""Company research schemas."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CompanyResearchRequest(BaseModel):
    """Company research request."""

    company: str = Field(..., min_length=1, description="Company name")
    company_url: Optional[str] = Field(None, alias="companyUrl")
    industry: Optional[str] = None
    hq_location: Optional[str] = Field(None, alias="hqLocation")


class SearchResult(BaseModel):
    """One Tavily search hit."""

    url: str
    title: str = ""
    content: str = ""
    score: float = 0.0


class ResearchResult(BaseModel):
    """Output of the research agent."""

    report: str
    references: List[str] = Field(default_factory=list)
    company_info: Dict[str, Any] = Field(default_factory=dict)
