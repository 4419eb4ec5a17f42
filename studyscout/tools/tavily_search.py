from __future__ import annotations

from dataclasses import dataclass

from tavily import AsyncTavilyClient

from studyscout.config import settings


@dataclass
class SearchResult:
    title: str
    url: str
    content: str
    score: float


async def search(query: str, *, max_results: int = 5) -> list[SearchResult]:
    """Execute a Tavily web search and return structured results."""
    if not settings.tavily_api_key:
        raise RuntimeError("TAVILY_API_KEY is not configured")

    client = AsyncTavilyClient(api_key=settings.tavily_api_key)
    response = await client.search(
        query=query,
        search_depth="basic",
        max_results=max_results,
        topic="general",
    )

    return [
        SearchResult(
            title=r.get("title", ""),
            url=r.get("url", ""),
            content=r.get("content", ""),
            score=r.get("score", 0.0),
        )
        for r in response.get("results", [])
    ]
