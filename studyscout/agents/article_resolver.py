"""Article candidates from a grounded model call, with an optional raw web-search fallback."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

from loguru import logger

from studyscout.models.resources import ArticleCandidate, ArticleResolution, Citation, GroundingChunk
from studyscout.services import logger as log_service
from studyscout.services.backoff import retry_with_backoff
from studyscout.services.prompt_store import render_prompt
from studyscout.services.structured_output import extract_json_array
from studyscout.tools import search_provider, web_utils

WebSearch = Callable[..., Awaitable[search_provider.SearchResponse]]


def parse_candidates(text: str) -> list[ArticleCandidate]:
    """Parse the first JSON array in ``text``; unparseable output gives no candidates."""
    items = extract_json_array(text)
    if items is None:
        logger.info("Could not parse articles JSON")
        return []

    candidates: list[ArticleCandidate] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        link = item.get("link")
        if not isinstance(link, str) or not link.strip():
            continue
        title = item.get("title")
        summary = item.get("summary")
        candidates.append(
            ArticleCandidate(
                title=title.strip() if isinstance(title, str) else "",
                link=link.strip(),
                summary=summary.strip() if isinstance(summary, str) else "",
            )
        )
    return candidates


def citations_from_chunks(chunks: Sequence[GroundingChunk]) -> list[Citation]:
    """One citation per web chunk; ``index`` is the 1-based chunk position."""
    citations: list[Citation] = []
    for position, chunk in enumerate(chunks):
        if chunk.web is None:
            continue
        citations.append(
            Citation(
                title=chunk.web.title or "Untitled",
                url=chunk.web.uri or "",
                index=position + 1,
            )
        )
    return sorted(citations, key=lambda c: c.index)


class ArticleCandidateResolver:
    name = "article_resolver"

    def __init__(
        self,
        client: Any,
        *,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        web_search_fallback: bool = False,
        web_search: WebSearch | None = None,
        max_fallback_queries: int = 3,
        max_results_per_query: int = 5,
    ):
        self.client = client
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.web_search_fallback = web_search_fallback
        self._web_search = web_search
        self.max_fallback_queries = max(int(max_fallback_queries), 1)
        self.max_results_per_query = max(int(max_results_per_query), 1)

    async def resolve(self, article_queries: Sequence[str]) -> ArticleResolution:
        resolution = await self._resolve_grounded(article_queries)
        if resolution.candidates or resolution.citations or not self.web_search_fallback:
            return resolution

        candidates = await self._resolve_web_search(article_queries)
        return ArticleResolution(candidates=candidates)

    async def _resolve_grounded(self, article_queries: Sequence[str]) -> ArticleResolution:
        prompt = render_prompt("article_resolver.prompt", queries=", ".join(article_queries))
        try:
            generation = await retry_with_backoff(
                lambda: self.client.generate(prompt, search_grounding=True, caller=self.name),
                max_retries=self.max_retries,
                base_delay_ms=self.base_delay_ms,
            )
        except Exception as e:
            log_service.log_stage_degraded(self.name, "grounded article call failed", error=str(e))
            return ArticleResolution()

        resolution = ArticleResolution(
            candidates=parse_candidates(generation.text or ""),
            citations=citations_from_chunks(generation.grounding_chunks),
        )
        log_service.log_pipeline_stage(
            self.name,
            "completed",
            {"candidates": len(resolution.candidates), "citations": len(resolution.citations)},
        )
        return resolution

    async def _resolve_web_search(self, article_queries: Sequence[str]) -> list[ArticleCandidate]:
        search = self._web_search or search_provider.search
        candidates: list[ArticleCandidate] = []
        for query in list(article_queries)[: self.max_fallback_queries]:
            try:
                response = await search(query, max_results=self.max_results_per_query)
            except Exception as e:
                log_service.log_stage_degraded(self.name, "web search fallback failed", query=query, error=str(e))
                continue
            kept = 0
            for result in response.results:
                if kept >= self.max_results_per_query:
                    break
                if not result.title or not web_utils.is_article_link(result.url):
                    continue
                candidates.append(
                    ArticleCandidate(
                        title=result.title,
                        link=result.url,
                        summary=result.content or f"{result.title} - learn more about this topic",
                    )
                )
                kept += 1
        log_service.log_pipeline_stage(
            self.name,
            "web_search_fallback",
            {"candidates": len(candidates)},
        )
        return candidates
