from __future__ import annotations

import asyncio

import pytest

from studyscout.agents.video_resolver import VideoResolver
from studyscout.models.resources import VideoCandidate


def _videos(query: str, count: int) -> list[VideoCandidate]:
    return [
        VideoCandidate(title=f"{query} #{i}", link=f"https://www.youtube.com/watch?v={query}-{i}", summary="s")
        for i in range(count)
    ]


@pytest.mark.asyncio
async def test_results_follow_query_order_not_completion_order():
    delays = {"q1": 0.03, "q2": 0.0, "q3": 0.01}

    async def search(query: str, *, max_results: int = 5):
        await asyncio.sleep(delays[query])
        return _videos(query, 2)

    resolver = VideoResolver(search)
    videos = await resolver.resolve(["q1", "q2", "q3"])

    assert [v.title for v in videos] == ["q1 #0", "q1 #1", "q2 #0", "q2 #1", "q3 #0", "q3 #1"]


@pytest.mark.asyncio
async def test_only_first_three_queries_run_and_each_is_capped():
    seen: list[str] = []

    async def search(query: str, *, max_results: int = 5):
        seen.append(query)
        return _videos(query, 8)

    resolver = VideoResolver(search, max_queries=3, max_results_per_query=5)
    videos = await resolver.resolve(["a", "b", "c", "d", "e"])

    assert sorted(seen) == ["a", "b", "c"]
    assert len(videos) == 15


@pytest.mark.asyncio
async def test_failed_query_does_not_abort_others():
    async def search(query: str, *, max_results: int = 5):
        if query == "broken":
            raise RuntimeError("search down")
        if query == "empty":
            return []
        return _videos(query, 1)

    resolver = VideoResolver(search)
    videos = await resolver.resolve(["broken", "ok", "empty"])

    assert [v.title for v in videos] == ["ok #0"]


@pytest.mark.asyncio
async def test_all_queries_failing_yields_empty_list():
    async def search(query: str, *, max_results: int = 5):
        raise TimeoutError("slow")

    assert await VideoResolver(search).resolve(["a", "b"]) == []
