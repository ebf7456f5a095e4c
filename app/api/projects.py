"""Company-research project API routes."""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Cookie, Depends, Request
from app.api.dependencies import (
    client_ip,
    get_rate_limiter,
    get_research_agent,
    get_session_resolver,
    get_settings,
)
from app.config.settings import Settings
from app.schemas.projects import CreateProjectRequest, UpdateProjectRequest
from app.schemas.research import CompanyResearchRequest
from app.services.project_service import (
    create_project,
    delete_project,
    get_owned_project,
    get_project_research,
    list_projects,
    save_research,
    update_project,
)
from app.services.rate_limit_service import RateLimiter
from app.services.research_service import CompanyResearchAgent
from app.services.session_service import SessionResolver
from app.utils.cookies import SESSION_COOKIE
from app.utils.exceptions import NotFound, PermissionDenied, RateLimited, Unauthenticated, wrap_unexpected

logger = logging.getLogger(__name__)
router = APIRouter(tags=["projects"])


@router.get("")
async def list_projects_endpoint(
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """The caller's projects, newest first."""
    try:
        caller = await resolver.resolve(session_cookie)
        projects = await list_projects(settings, caller)
        return {"success": True, "data": projects, "total": len(projects)}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Error fetching projects: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to fetch projects", e)


@router.post("")
async def create_project_endpoint(
    body: CreateProjectRequest,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        project = await create_project(settings, caller, body)
        return {"success": True, "data": project}

    except Unauthenticated:
        raise
    except Exception as e:
        logger.error(f"Error creating project: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to create project", e)


@router.get("/{project_id}")
async def get_project_endpoint(
    project_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        project = await get_owned_project(settings, caller, project_id)
        return {"success": True, "data": project.to_client()}

    except (Unauthenticated, NotFound, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Error fetching project: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to fetch project", e)


@router.put("/{project_id}")
async def update_project_endpoint(
    project_id: str,
    body: UpdateProjectRequest,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    """Update the allow-listed fields of an owned project."""
    try:
        caller = await resolver.resolve(session_cookie)
        project = await update_project(settings, caller, project_id, body)
        return {"success": True, "data": project}

    except (Unauthenticated, NotFound, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Error updating project: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to update project", e)


@router.delete("/{project_id}")
async def delete_project_endpoint(
    project_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        await delete_project(settings, caller, project_id)
        return {"success": True, "message": "Project deleted successfully"}

    except (Unauthenticated, NotFound, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Error deleting project: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to delete project", e)


@router.post("/{project_id}/research")
async def run_project_research_endpoint(
    project_id: str,
    body: CompanyResearchRequest,
    request: Request,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    limiter: RateLimiter = Depends(get_rate_limiter),
    resolver: SessionResolver = Depends(get_session_resolver),
    agent: CompanyResearchAgent = Depends(get_research_agent),
) -> Dict[str, Any]:
    """
    Research the project's company and save the result on the project.

    A second run replaces the saved research.
    """
    try:
        caller = await resolver.resolve(session_cookie)
        await limiter.enforce("research", client_ip(request))
        await get_owned_project(settings, caller, project_id)

        result = await agent.run(body, user_id=caller.user_id)
        research = await save_research(settings, caller, project_id, body, result)
        return {
            "success": True,
            "data": {
                "researchData": research,
                "companyInfo": result.company_info,
                "report": result.report,
                "references": result.references,
            },
        }

    except (Unauthenticated, RateLimited, NotFound, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Research generation error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to generate research", e)


@router.get("/{project_id}/research")
async def get_project_research_endpoint(
    project_id: str,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Dict[str, Any]:
    try:
        caller = await resolver.resolve(session_cookie)
        project = await get_project_research(settings, caller, project_id)
        return {"success": True, "data": project}

    except (Unauthenticated, NotFound, PermissionDenied):
        raise
    except Exception as e:
        logger.error(f"Get research error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Failed to get research data", e)
