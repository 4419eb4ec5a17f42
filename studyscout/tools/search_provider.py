from __future__ import annotations

from dataclasses import dataclass

from studyscout.config import settings
from studyscout.tools import brave_search, tavily_search
from studyscout.tools.tavily_search import SearchResult


@dataclass
class SearchResponse:
    results: list[SearchResult]
    provider: str
    fallback_from: str | None = None
    fallback_reason: str | None = None


async def _tavily_fallback(query: str, max_results: int, reason: str) -> SearchResponse:
    results = await tavily_search.search(query, max_results=max_results)
    return SearchResponse(
        results=results,
        provider="tavily",
        fallback_from="brave",
        fallback_reason=reason,
    )


async def search(query: str, *, max_results: int = 5) -> SearchResponse:
    """Raw web search through the configured provider (Brave, optionally falling back to Tavily)."""
    provider = settings.search_provider.lower().strip()
    use_fallback = settings.search_fallback_to_tavily

    if provider == "tavily":
        results = await tavily_search.search(query, max_results=max_results)
        return SearchResponse(results=results, provider="tavily")

    if provider == "brave":
        try:
            results = await brave_search.search(query, max_results=max_results)
        except Exception as e:
            if not use_fallback:
                raise
            return await _tavily_fallback(query, max_results, str(e))
        if results or not use_fallback:
            return SearchResponse(results=results, provider="brave")
        return await _tavily_fallback(query, max_results, "brave returned zero results")

    raise ValueError(f"Unsupported SEARCH_PROVIDER: {settings.search_provider}")
