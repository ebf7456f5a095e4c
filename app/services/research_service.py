"""Company research agent: staged web searches followed by a written report."""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import urlparse
from app.schemas.research import CompanyResearchRequest, ResearchResult, SearchResult
from app.services.llm_service import LLMClient
from app.services.tavily_service import TavilySearch
from app.utils.exceptions import ApiError

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 500
REPORT_SECTIONS = [
    "Executive Summary",
    "Company Overview",
    "Financial Highlights",
    "Recent Developments",
    "Industry Position",
    "Key Strengths & Opportunities",
    "Risks & Challenges",
    "Conclusion",
]

SYSTEM_PROMPT = "You are an expert business analyst creating comprehensive company research reports."


class ResearchStep(NamedTuple):
    key: str
    title: str
    query: str
    max_results: int
    topic: str = "general"
    search_depth: str = "advanced"


def _domain_of(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    if "://" not in url:
        url = f"https://{url}"
    return urlparse(url).hostname


def build_steps(request: CompanyResearchRequest) -> List[ResearchStep]:
    """Search plan for one company."""
    company = request.company
    site = _domain_of(request.company_url)
    grounding_query = f"{company} company information"
    if site:
        grounding_query = f"{grounding_query} site:{site}"
    industry = request.industry or "industry"
    return [
        ResearchStep("grounding", "Company Overview", grounding_query, 5),
        ResearchStep(
            "financial",
            "Financial Highlights",
            f"{company} financial data revenue funding valuation earnings stock price",
            8,
        ),
        ResearchStep("news", "Recent Developments", f"{company} latest news announcements", 8, topic="news"),
        ResearchStep(
            "industry",
            "Industry Position",
            f"{company} {industry} market analysis competitors trends",
            8,
        ),
        ResearchStep(
            "company",
            "Company Profile",
            f"{company} products services leadership headquarters employees",
            8,
        ),
    ]


def unique_references(findings: Dict[str, List[SearchResult]]) -> List[str]:
    """All result URLs in step order, duplicates removed."""
    seen = set()
    references = []
    for results in findings.values():
        for result in results:
            if result.url not in seen:
                seen.add(result.url)
                references.append(result.url)
    return references


def extract_company_info(request: CompanyResearchRequest, findings: Dict[str, List[SearchResult]]) -> Dict[str, Any]:
    grounding = findings.get("grounding") or []
    website = request.company_url
    if not website and grounding:
        website = grounding[0].url
    description = grounding[0].content[:SNIPPET_CHARS] if grounding else ""
    return {
        "name": request.company,
        "domain": _domain_of(website) or "",
        "website": website or "",
        "description": description,
        "industry": request.industry or "",
        "hqLocation": request.hq_location or "",
    }


def _format_findings(steps: List[ResearchStep], findings: Dict[str, List[SearchResult]]) -> str:
    blocks = []
    for step in steps:
        results = findings.get(step.key) or []
        if not results:
            continue
        lines = [f"## {step.title}"]
        for result in results:
            lines.append(f"- {result.title} ({result.url}): {result.content[:SNIPPET_CHARS]}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def compile_report(
    request: CompanyResearchRequest,
    steps: List[ResearchStep],
    findings: Dict[str, List[SearchResult]],
) -> str:
    """Markdown report assembled directly from search snippets."""
    lines = [f"# {request.company} - Company Research Report", ""]
    subject = request.company
    if request.industry:
        subject = f"{subject} ({request.industry})"
    if request.hq_location:
        subject = f"{subject}, headquartered in {request.hq_location}"
    lines.append(f"Research summary for {subject}.")

    for step in steps:
        results = findings.get(step.key) or []
        lines.extend(["", f"## {step.title}", ""])
        if not results:
            lines.append("_No information found._")
            continue
        for result in results:
            snippet = result.content[:SNIPPET_CHARS].strip()
            lines.append(f"- **[{result.title or result.url}]({result.url})**: {snippet}")

    lines.extend(["", "---", "", f"*Generated {datetime.now(UTC).date().isoformat()} from web search results.*"])
    return "\n".join(lines)


class CompanyResearchAgent:
    """Runs the research workflow for one company."""

    def __init__(self, tavily: TavilySearch, llm: LLMClient):
        self.tavily = tavily
        self.llm = llm

    async def _run_step(self, step: ResearchStep) -> List[SearchResult]:
        try:
            response = await self.tavily.search(
                step.query,
                max_results=step.max_results,
                search_depth=step.search_depth,
                topic=step.topic,
            )
            return response.results
        except ApiError as e:
            logger.warning(f"Research step {step.key} failed: {e.message}")
            return []

    async def _write_report(
        self,
        request: CompanyResearchRequest,
        steps: List[ResearchStep],
        findings: Dict[str, List[SearchResult]],
    ) -> str:
        if not self.llm.enabled:
            logger.info("No AI provider configured, compiling report from search results")
            return compile_report(request, steps, findings)

        sections = "\n".join(f"{i}. {name}" for i, name in enumerate(REPORT_SECTIONS, 1))
        prompt = (
            f"Generate a comprehensive company research report for {request.company}.\n\n"
            f"Industry: {request.industry or 'unknown'}\n"
            f"Headquarters: {request.hq_location or 'unknown'}\n"
            f"Website: {request.company_url or 'unknown'}\n\n"
            f"Research findings:\n\n{_format_findings(steps, findings) or 'No search results available.'}\n\n"
            f"Create a detailed markdown report with the following sections:\n{sections}\n\n"
            "Make it professional, well-structured, and actionable."
        )
        try:
            return await self.llm.complete(SYSTEM_PROMPT, prompt)
        except ApiError as e:
            logger.warning(f"Report generation failed, compiling from search results: {e.message}")
            return compile_report(request, steps, findings)

    async def run(self, request: CompanyResearchRequest, user_id: Optional[str] = None) -> ResearchResult:
        logger.info(f"Starting company research for: {request.company} (user={user_id or 'anonymous'})")
        steps = build_steps(request)
        findings: Dict[str, List[SearchResult]] = {}
        for step in steps:
            findings[step.key] = await self._run_step(step)
            logger.debug(f"Step {step.key}: {len(findings[step.key])} results")

        report = await self._write_report(request, steps, findings)
        result = ResearchResult(
            report=report,
            references=unique_references(findings),
            company_info=extract_company_info(request, findings),
        )
        logger.info(f"Research completed for {request.company}: {len(result.references)} references")
        return result
