"""Company-research projects and their saved research."""

import json
import logging
import re
import time
from datetime import UTC, datetime
from typing import Any, Dict, List
from appwrite.query import Query
from app.config.settings import Settings
from app.models.project import Project, ResearchReport, empty_company_data
from app.models.session import ResolvedSession
from app.schemas.projects import CreateProjectRequest, UpdateProjectRequest
from app.schemas.research import CompanyResearchRequest, ResearchResult
from app.utils.exceptions import NotFound, PermissionDenied

logger = logging.getLogger(__name__)

USER_PROJECT_LIMIT = 100


def make_namespace(name: str, now_ms: int) -> str:
    return f"{re.sub(r'[^a-z0-9]', '-', name.lower())}-{now_ms}"


async def list_projects(settings: Settings, caller: ResolvedSession) -> List[Dict[str, Any]]:
    """The caller's projects, newest first."""
    documents = await caller.store.list_documents(
        settings.collections.chatbots,
        filters=[Query.equal("userId", caller.user_id)],
        ordering=[Query.order_desc("$createdAt")],
        limit=USER_PROJECT_LIMIT,
    )
    logger.info(f"Found {len(documents)} projects for user {caller.user_id}")
    return [Project.from_appwrite(doc).to_client() for doc in documents]


async def create_project(settings: Settings, caller: ResolvedSession, request: CreateProjectRequest) -> Dict[str, Any]:
    now = datetime.now(UTC).isoformat()
    project = Project(
        user_id=caller.user_id,
        name=request.name,
        description=request.description or "",
        url=request.url or "",
        namespace=make_namespace(request.name, int(time.time() * 1000)),
        status="active",
        published=False,
        pages_crawled="0",
        created_at=now,
        updated_at=now,
    )
    logger.info(f"Creating project {project.namespace} for user {caller.user_id}")
    document = await caller.store.create_document(settings.collections.chatbots, project.to_appwrite())
    return Project.from_appwrite(document).to_client()


async def get_owned_project(settings: Settings, caller: ResolvedSession, project_id: str) -> Project:
    """
    Fetch a project and check that the caller owns it.

    Raises:
        NotFound: No such project
        PermissionDenied: The project belongs to another user
    """
    try:
        document = await caller.store.get_document(settings.collections.chatbots, project_id)
    except NotFound:
        raise NotFound("Project not found")
    if document.get("userId") != caller.user_id:
        logger.warning(f"User {caller.user_id} denied access to project {project_id}")
        raise PermissionDenied("Unauthorized")
    return Project.from_appwrite(document)


async def update_project(
    settings: Settings, caller: ResolvedSession, project_id: str, changes: UpdateProjectRequest
) -> Dict[str, Any]:
    await get_owned_project(settings, caller, project_id)

    fields: Dict[str, Any] = {"updatedAt": datetime.now(UTC).isoformat()}
    for key in ("name", "description", "url", "status"):
        value = getattr(changes, key)
        if value is not None:
            fields[key] = value
    if changes.company_data is not None:
        fields["companyData"] = json.dumps(changes.company_data)
    if changes.settings is not None:
        fields["settings"] = json.dumps(changes.settings)

    logger.info(f"Updating project {project_id} fields: {sorted(fields)}")
    document = await caller.store.update_document(settings.collections.chatbots, project_id, fields)
    return Project.from_appwrite(document).to_client()


async def delete_project(settings: Settings, caller: ResolvedSession, project_id: str) -> None:
    await get_owned_project(settings, caller, project_id)
    logger.info(f"Deleting project {project_id}")
    await caller.store.delete_document(settings.collections.chatbots, project_id)


async def _find_report(settings: Settings, caller: ResolvedSession, project_id: str) -> List[Dict[str, Any]]:
    return await caller.store.list_documents(
        settings.collections.research_reports,
        filters=[Query.equal("chatbotId", project_id), Query.equal("userId", caller.user_id)],
        limit=1,
    )


async def save_research(
    settings: Settings,
    caller: ResolvedSession,
    project_id: str,
    request: CompanyResearchRequest,
    result: ResearchResult,
) -> Dict[str, Any]:
    """
    Store the research for a project, replacing any earlier run.

    Returns:
        The research data in client shape
    """
    now = datetime.now(UTC).isoformat()
    report = ResearchReport(
        chatbot_id=project_id,
        user_id=caller.user_id,
        company_name=request.company,
        company_url=request.company_url or "",
        industry=request.industry or "",
        hq_location=request.hq_location or "",
        research_report=result.report,
        company_info=json.dumps(result.company_info or {}),
        references=json.dumps(result.references or []),
        generated_at=now,
        status="completed",
    )
    collection = settings.collections.research_reports

    existing = await _find_report(settings, caller, project_id)
    if existing:
        fields = report.to_appwrite()
        fields.pop("chatbotId")
        fields.pop("userId")
        document = await caller.store.update_document(collection, existing[0]["$id"], fields)
        logger.info(f"Updated research {document['$id']} for project {project_id}")
    else:
        report.created_at = now
        document = await caller.store.create_document(collection, report.to_appwrite())
        logger.info(f"Saved research {document['$id']} for project {project_id}")

    return {
        "$id": document["$id"],
        "chatbotId": project_id,
        "userId": caller.user_id,
        "name": request.company,
        "url": request.company_url,
        "industry": request.industry,
        "hqLocation": request.hq_location,
        "researchReport": result.report,
        "companyInfo": result.company_info or {},
        "references": result.references or [],
        "generatedAt": now,
    }


async def get_project_research(settings: Settings, caller: ResolvedSession, project_id: str) -> Dict[str, Any]:
    """A project with its latest research, or placeholder company data when none exists."""
    project = await get_owned_project(settings, caller, project_id)
    documents = await _find_report(settings, caller, project_id)
    if documents:
        company_data = ResearchReport.from_appwrite(documents[0]).company_data()
    else:
        company_data = empty_company_data(project)

    return {
        "$id": project.id,
        "name": project.name,
        "url": project.url,
        "description": project.description,
        "type": "company_research",
        "namespace": project.namespace,
        "createdAt": project.created_at,
        "companyData": company_data,
    }
