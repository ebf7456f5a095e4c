"""Company research API route."""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, Optional
from fastapi import APIRouter, Cookie, Depends, Request
from app.api.dependencies import client_ip, get_rate_limiter, get_research_agent, get_session_resolver
from app.schemas.research import CompanyResearchRequest
from app.services.rate_limit_service import RateLimiter
from app.services.research_service import CompanyResearchAgent
from app.services.session_service import SessionResolver
from app.utils.cookies import SESSION_COOKIE
from app.utils.exceptions import wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["research"])


@router.post("/company-research")
async def company_research_endpoint(
    body: CompanyResearchRequest,
    request: Request,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    limiter: RateLimiter = Depends(get_rate_limiter),
    resolver: SessionResolver = Depends(get_session_resolver),
    agent: CompanyResearchAgent = Depends(get_research_agent),
) -> Dict[str, Any]:
    """
    Research a company and return a markdown report with references.

    Rate limited per client IP. A valid session cookie attaches the caller's
    id to the run; without one the research runs anonymously.
    """
    await limiter.enforce("research", client_ip(request))

    try:
        caller = await resolver.resolve_optional(session_cookie)
        result = await agent.run(body, user_id=caller.user_id if caller else None)
        return {
            "success": True,
            "data": {
                "name": body.company,
                "url": body.company_url,
                "industry": body.industry,
                "hqLocation": body.hq_location,
                "researchReport": result.report,
                "references": result.references,
                "companyInfo": result.company_info,
                "generatedAt": datetime.now(UTC).isoformat(),
            },
        }

    except Exception as e:
        logger.error(f"Company research API error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Internal server error", e)
