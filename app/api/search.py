"""Tavily search proxy routes."""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, Request
from app.api.dependencies import client_ip, get_rate_limiter, get_tavily
from app.schemas.projects import SearchRequest
from app.services.rate_limit_service import RateLimiter
from app.services.tavily_service import TavilySearch
from app.utils.exceptions import ServerMisconfigured, ValidationError, wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["search"])

FINANCIAL_DOMAINS = [
    "bloomberg.com",
    "reuters.com",
    "sec.gov",
    "finance.yahoo.com",
    "crunchbase.com",
    "pitchbook.com",
]


async def _search(body: SearchRequest, request: Request, limiter: RateLimiter, tavily: TavilySearch) -> Dict[str, Any]:
    await limiter.enforce("search", client_ip(request))
    if not tavily.enabled:
        raise ServerMisconfigured(
            "Server mis-configuration: missing TAVILY_API_KEY",
            details="TAVILY_API_KEY must be set",
        )

    try:
        response = await tavily.search(
            body.query,
            max_results=body.max_results,
            search_depth=body.search_depth,
            topic=body.topic,
            include_domains=FINANCIAL_DOMAINS if body.include_financial else None,
            include_answer=True,
        )
    except Exception as e:
        logger.error(f"Search API error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to perform search", e)

    return {
        "success": True,
        "results": [result.model_dump() for result in response.results],
        "answer": response.answer,
        "source": "tavily_api",
    }


@router.post("/search")
async def search_endpoint(
    body: SearchRequest,
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
    tavily: TavilySearch = Depends(get_tavily),
) -> Dict[str, Any]:
    """Web search, optionally restricted to financial news domains."""
    return await _search(body, request, limiter, tavily)


@router.get("/search")
async def search_get_endpoint(
    request: Request,
    q: Optional[str] = None,
    max_results: int = Query(10, alias="maxResults", ge=1, le=20),
    search_depth: str = Query("basic", alias="searchDepth", pattern="^(basic|advanced)$"),
    topic: str = Query("general", pattern="^(general|news|finance)$"),
    limiter: RateLimiter = Depends(get_rate_limiter),
    tavily: TavilySearch = Depends(get_tavily),
) -> Dict[str, Any]:
    """Query-string form of the search proxy."""
    if not q:
        raise ValidationError('Query parameter "q" is required')
    body = SearchRequest(query=q, maxResults=max_results, searchDepth=search_depth, topic=topic)
    return await _search(body, request, limiter, tavily)
