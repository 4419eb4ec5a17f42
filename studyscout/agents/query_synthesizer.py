"""Turn a user's learning request into video and article search queries."""

from __future__ import annotations

from typing import Any

from loguru import logger

from studyscout.errors import QuerySynthesisFailed
from studyscout.models.resources import SearchQuerySet
from studyscout.services.backoff import retry_with_backoff
from studyscout.services.prompt_store import render_prompt
from studyscout.services.structured_output import extract_json_object, string_list

MAX_QUERIES_PER_KIND = 5

VIDEO_KEYS = ("youtubeQueries", "videoQueries")
ARTICLE_KEYS = ("articleQueries",)


def _pick(payload: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def parse_query_set(text: str) -> SearchQuerySet:
    """Parse model output into a query set, or raise QuerySynthesisFailed.

    Never returns a partially populated set.
    """
    payload = extract_json_object(text)
    if payload is None:
        raise QuerySynthesisFailed("Failed to generate search queries", raw_text=text)

    raw_video = _pick(payload, VIDEO_KEYS)
    raw_article = _pick(payload, ARTICLE_KEYS)
    if not isinstance(raw_video, list) or not isinstance(raw_article, list):
        raise QuerySynthesisFailed("Invalid search queries format", raw_text=text)

    video_queries = string_list(raw_video, limit=MAX_QUERIES_PER_KIND)
    article_queries = string_list(raw_article, limit=MAX_QUERIES_PER_KIND)
    if not video_queries or not article_queries:
        raise QuerySynthesisFailed("Invalid search queries format", raw_text=text)

    return SearchQuerySet(
        video_queries=tuple(video_queries),
        article_queries=tuple(article_queries),
        raw_text=text,
    )


class QuerySynthesizer:
    name = "query_synthesizer"

    def __init__(self, client: Any, *, max_retries: int = 3, base_delay_ms: int = 1000):
        self.client = client
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms

    async def synthesize(self, message: str) -> SearchQuerySet:
        prompt = render_prompt("query_synthesizer.prompt", message=message)
        generation = await retry_with_backoff(
            lambda: self.client.generate(prompt, caller=self.name),
            max_retries=self.max_retries,
            base_delay_ms=self.base_delay_ms,
        )
        queries = parse_query_set(generation.text or "")
        logger.info(
            f"Synthesized {len(queries.video_queries)} video and "
            f"{len(queries.article_queries)} article queries"
        )
        return queries
