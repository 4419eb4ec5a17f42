"""Tests for the resource orchestrator."""
from __future__ import annotations

import json

import pytest

from studyscout.agents.article_resolver import ArticleCandidateResolver
from studyscout.agents.article_validator import ArticleValidator
from studyscout.agents.orchestrator import ResourceOrchestrator, dedupe_videos
from studyscout.agents.query_synthesizer import QuerySynthesizer
from studyscout.agents.summarizer import DEFAULT_INTRO, Summarizer
from studyscout.agents.video_resolver import VideoResolver
from studyscout.errors import QuerySynthesisFailed
from studyscout.models.resources import Generation, VideoCandidate

QUERIES = json.dumps({
    "youtubeQueries": ["ml basics", "ml intro", "ml crash course"],
    "articleQueries": ["ml tutorial", "ml guide", "ml overview"],
})


async def two_videos_per_query(query: str, *, max_results: int = 5):
    return [
        VideoCandidate(
            title=f"{query} video {i}",
            link=f"https://www.youtube.com/watch?v={query.replace(' ', '_')}_{i}",
            summary=f"about {query}",
        )
        for i in range(2)
    ]


def build(client, fetcher, video_search=two_videos_per_query) -> ResourceOrchestrator:
    return ResourceOrchestrator(
        synthesizer=QuerySynthesizer(client, base_delay_ms=1),
        video_resolver=VideoResolver(video_search),
        summarizer=Summarizer(client, base_delay_ms=1),
        article_resolver=ArticleCandidateResolver(client, base_delay_ms=1),
        validator=ArticleValidator(fetcher),
    )


def scripted_client(fake_client, articles_text: str, chunks=None):
    return fake_client({
        "query_synthesizer": QUERIES,
        "summarizer": "Machine learning lets computers learn from data.",
        "article_resolver": Generation(text=articles_text, grounding_chunks=chunks or []),
    })


@pytest.mark.asyncio
async def test_machine_learning_scenario_truncates_videos_in_query_order(fake_client, preview_fetcher, page):
    articles_text = json.dumps([
        {"title": f"Article {i}", "link": f"https://a{i}.com", "summary": "s"} for i in range(3)
    ])
    client = scripted_client(fake_client, articles_text)
    fetcher = preview_fetcher({f"https://a{i}.com": page(f"Fetched {i}", "d") for i in range(3)})

    result = await build(client, fetcher).run("machine learning basics")
    bundle = result.bundle

    assert [v.title for v in bundle.videos] == [
        "ml basics video 0",
        "ml basics video 1",
        "ml intro video 0",
        "ml intro video 1",
        "ml crash course video 0",
    ]
    assert [a.title for a in bundle.articles] == ["Fetched 0", "Fetched 1", "Fetched 2"]
    assert bundle.intro == "Machine learning lets computers learn from data."
    assert result.message == QUERIES


@pytest.mark.asyncio
async def test_no_candidates_and_no_citations_returns_empty_articles(fake_client, preview_fetcher):
    client = scripted_client(fake_client, "Sorry, nothing found.")
    fetcher = preview_fetcher({})

    result = await build(client, fetcher).run("obscure topic")

    assert result.bundle.articles == []
    assert fetcher.fetched == []
    assert len(result.bundle.videos) == 5


@pytest.mark.asyncio
async def test_citations_are_used_when_model_returns_no_candidates(
    fake_client, preview_fetcher, page, make_chunks
):
    chunks = make_chunks(("Cited A", "https://cited-a.com"), ("Cited B", "https://cited-b.com"))
    client = scripted_client(fake_client, "no json", chunks)
    fetcher = preview_fetcher({
        "https://cited-a.com": page("Page A", "About A"),
        "https://cited-b.com": page("Page B", "About B"),
    })

    result = await build(client, fetcher).run("topic")

    assert fetcher.fetched == ["https://cited-a.com", "https://cited-b.com"]
    assert [a.title for a in result.bundle.articles] == ["Page A", "Page B"]


@pytest.mark.asyncio
async def test_summary_failure_uses_default_intro(fake_client, preview_fetcher):
    client = fake_client({
        "query_synthesizer": QUERIES,
        "summarizer": RuntimeError("summary failed"),
        "article_resolver": "[]",
    })

    result = await build(client, preview_fetcher({})).run("topic")

    assert result.bundle.intro == DEFAULT_INTRO


@pytest.mark.asyncio
async def test_query_synthesis_failure_stops_the_pipeline(fake_client, preview_fetcher):
    client = fake_client({"query_synthesizer": "I can't help with that."})
    searched: list[str] = []

    async def video_search(query: str, *, max_results: int = 5):
        searched.append(query)
        return []

    with pytest.raises(QuerySynthesisFailed):
        await build(client, preview_fetcher({}), video_search).run("topic")

    assert searched == []
    assert client.calls_for("summarizer") == []
    assert client.calls_for("article_resolver") == []


@pytest.mark.asyncio
async def test_identical_upstream_responses_give_identical_bundles(fake_client, preview_fetcher, page):
    articles_text = json.dumps([
        {"title": f"Article {i}", "link": f"https://a{i}.com", "summary": "s"} for i in range(6)
    ])
    pages = {f"https://a{i}.com": page(f"Fetched {i}", "d", [f"https://a{i}.com/i.png"]) for i in range(6)}

    first = await build(scripted_client(fake_client, articles_text), preview_fetcher(pages)).run("topic")
    second = await build(scripted_client(fake_client, articles_text), preview_fetcher(pages)).run("topic")

    assert first == second
    assert len(first.bundle.articles) == 5


def test_dedupe_videos_keeps_first_occurrence():
    videos = [
        VideoCandidate(title="A", link="https://y/1", summary=""),
        VideoCandidate(title="B", link="https://y/2", summary=""),
        VideoCandidate(title="A again", link="https://y/1", summary=""),
    ]
    assert [v.title for v in dedupe_videos(videos)] == ["A", "B"]
