"""Web search through the Tavily SDK."""

import logging
from typing import List, Optional
from pydantic import BaseModel, Field
from tavily import AsyncTavilyClient
from app.schemas.research import SearchResult
from app.utils.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


class SearchResponse(BaseModel):
    results: List[SearchResult] = Field(default_factory=list)
    answer: Optional[str] = None


class TavilySearch:
    """Thin wrapper over ``AsyncTavilyClient`` returning typed results.

    The SDK client is built on first use; its constructor rejects a missing
    key, and an unconfigured key must only fail the request that needs it.
    """

    def __init__(self, api_key: Optional[str], client: Optional[AsyncTavilyClient] = None):
        self.api_key = api_key
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key or self._client)

    @property
    def client(self) -> AsyncTavilyClient:
        if self._client is None:
            if not self.api_key:
                raise UpstreamFailure("TAVILY_API_KEY environment variable is required")
            self._client = AsyncTavilyClient(api_key=self.api_key)
        return self._client

    async def search(
        self,
        query: str,
        max_results: int = 10,
        search_depth: str = "basic",
        topic: str = "general",
        include_domains: Optional[List[str]] = None,
        include_answer: bool = False,
    ) -> SearchResponse:
        """
        Run one search.

        Raises:
            UpstreamFailure: Missing API key or Tavily request failure
        """
        client = self.client
        logger.debug(f"Tavily search: {query!r} (depth={search_depth}, max={max_results})")
        try:
            data = await client.search(
                query=query,
                search_depth=search_depth,
                topic=topic,
                max_results=max_results,
                include_domains=include_domains or None,
                include_answer=include_answer,
            )
        except Exception as e:
            logger.error(f"Tavily search error: {str(e)}")
            raise UpstreamFailure("Tavily search failed", details=str(e))

        results = [
            SearchResult(
                url=item["url"],
                title=item.get("title") or "",
                content=item.get("content") or "",
                score=item.get("score") or 0.0,
            )
            for item in data.get("results", [])
            if item.get("url")
        ]
        logger.info(f"Tavily returned {len(results)} results for {query!r}")
        return SearchResponse(results=results, answer=data.get("answer") or None)
