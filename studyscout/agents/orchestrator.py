from __future__ import annotations

from typing import Any, Sequence

from loguru import logger

from studyscout.agents.article_resolver import ArticleCandidateResolver
from studyscout.agents.article_validator import (
    ArticleSources,
    ArticleStrategy,
    ArticleValidator,
    default_ladder,
    resolve_articles,
)
from studyscout.agents.query_synthesizer import QuerySynthesizer
from studyscout.agents.summarizer import Summarizer
from studyscout.agents.video_resolver import VideoResolver
from studyscout.config import settings
from studyscout.llm_client import get_client
from studyscout.models.resources import PipelineResult, ResourceBundle, VideoCandidate
from studyscout.services import logger as log_service


def dedupe_videos(videos: Sequence[VideoCandidate]) -> list[VideoCandidate]:
    """Keep the first occurrence of each link, preserving order."""
    seen: set[str] = set()
    unique: list[VideoCandidate] = []
    for video in videos:
        if video.link in seen:
            continue
        seen.add(video.link)
        unique.append(video)
    return unique


class ResourceOrchestrator:
    """Runs the resource pipeline for one learning request.

    Flow:
      1. Synthesize video + article queries (fatal on failure)
      2. Fan out video searches for the first few video queries
      3. Best-effort grounded intro text
      4. Grounded article candidates + citations
      5. Validate candidate links, falling back to filtered candidates, then citations
      6. Assemble the bounded bundle

    Stages only fall forward: a degraded stage yields an empty or default
    value and never re-runs an earlier stage.
    """

    def __init__(
        self,
        *,
        synthesizer: QuerySynthesizer,
        video_resolver: VideoResolver,
        summarizer: Summarizer,
        article_resolver: ArticleCandidateResolver,
        validator: ArticleValidator,
        ladder: Sequence[tuple[str, ArticleStrategy]] | None = None,
        max_videos: int = 5,
        max_articles: int = 5,
    ):
        self.synthesizer = synthesizer
        self.video_resolver = video_resolver
        self.summarizer = summarizer
        self.article_resolver = article_resolver
        self.validator = validator
        self.ladder = list(ladder) if ladder is not None else default_ladder(validator)
        self.max_videos = max(int(max_videos), 0)
        self.max_articles = max(int(max_articles), 0)

    @classmethod
    def from_client(cls, client: Any) -> "ResourceOrchestrator":
        """Wire every stage from settings around one generative client."""
        retry = {
            "max_retries": settings.llm_max_retries,
            "base_delay_ms": settings.llm_retry_base_delay_ms,
        }
        return cls(
            synthesizer=QuerySynthesizer(client, **retry),
            video_resolver=VideoResolver(
                max_queries=settings.max_video_queries,
                max_results_per_query=settings.max_results_per_query,
            ),
            summarizer=Summarizer(client, **retry),
            article_resolver=ArticleCandidateResolver(
                client,
                web_search_fallback=settings.article_web_search_fallback,
                max_results_per_query=settings.max_results_per_query,
                **retry,
            ),
            validator=ArticleValidator(
                max_articles=settings.max_articles,
                timeout_seconds=settings.preview_timeout_seconds,
            ),
            max_videos=settings.max_videos,
            max_articles=settings.max_articles,
        )

    async def run(self, message: str, history: Sequence[Any] | None = None) -> PipelineResult:
        log_service.log_pipeline_stage(
            "pipeline",
            "started",
            {"message": message[:100], "history_len": len(history or [])},
        )

        queries = await self.synthesizer.synthesize(message)
        log_service.log_pipeline_stage(
            "query_synthesizer",
            "completed",
            {
                "video_queries": list(queries.video_queries),
                "article_queries": list(queries.article_queries),
            },
        )

        videos = await self.video_resolver.resolve(queries.video_queries)
        logger.info(f"YouTube results: {len(videos)}")

        intro = await self.summarizer.summarize(message)

        resolution = await self.article_resolver.resolve(queries.article_queries)
        urls = resolution.candidate_urls()
        logger.info(f"Validating and fetching article metadata for {len(urls)} URLs")

        articles, strategy = await resolve_articles(
            ArticleSources(
                urls=urls,
                candidates=resolution.candidates,
                citations=resolution.citations,
            ),
            self.ladder,
        )

        bundle = ResourceBundle(
            intro=intro,
            videos=dedupe_videos(videos)[: self.max_videos],
            articles=articles[: self.max_articles],
        )
        log_service.log_pipeline_stage(
            "pipeline",
            "completed",
            {
                "videos": len(bundle.videos),
                "articles": len(bundle.articles),
                "article_source": strategy,
            },
        )
        return PipelineResult(message=queries.raw_text, bundle=bundle)


def build_orchestrator() -> ResourceOrchestrator:
    """Build the pipeline from settings; raises ConfigurationMissing without an API key."""
    return ResourceOrchestrator.from_client(get_client())
