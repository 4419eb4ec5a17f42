from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence

from studyscout.models.resources import VideoCandidate
from studyscout.services import logger as log_service
from studyscout.tools import youtube_search

VideoSearch = Callable[..., Awaitable[list[VideoCandidate]]]


class VideoResolver:
    """Fan video queries out to the search surface and concatenate in query order.

    A failed or empty query never aborts the others. Results are not
    deduplicated here.
    """

    name = "video_resolver"

    def __init__(
        self,
        search: VideoSearch | None = None,
        *,
        max_queries: int = 3,
        max_results_per_query: int = 5,
    ):
        self._search = search
        self.max_queries = max(int(max_queries), 1)
        self.max_results_per_query = max(int(max_results_per_query), 1)

    async def _search_one(self, query: str) -> list[VideoCandidate]:
        search = self._search or youtube_search.search
        results = await search(query, max_results=self.max_results_per_query)
        return list(results or [])[: self.max_results_per_query]

    async def resolve(self, queries: Sequence[str]) -> list[VideoCandidate]:
        selected = list(queries)[: self.max_queries]
        if not selected:
            return []

        raw_results = await asyncio.gather(
            *(self._search_one(query) for query in selected),
            return_exceptions=True,
        )

        videos: list[VideoCandidate] = []
        for query, item in zip(selected, raw_results):
            if isinstance(item, BaseException):
                log_service.log_stage_degraded(self.name, "video search failed", query=query, error=str(item))
                continue
            if not item:
                log_service.log_stage_degraded(self.name, "video search returned no results", query=query)
                continue
            videos.extend(item)

        log_service.log_pipeline_stage(
            self.name,
            "completed",
            {"queries_run": len(selected), "results_count": len(videos)},
        )
        return videos
