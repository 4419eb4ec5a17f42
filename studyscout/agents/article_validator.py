"""Confirm article links resolve to real pages and fall back when none do.

Validation fetches previews one candidate at a time and stops at the cap, so
no page past the boundary is ever requested. When nothing validates, the
ladder in ``resolve_articles`` tries progressively weaker sources of
articles until one produces a result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from loguru import logger

from studyscout.models.resources import ArticleCandidate, Citation, PagePreview, ValidatedArticle
from studyscout.services import logger as log_service
from studyscout.tools import link_preview, web_utils

MAX_ARTICLES = 5
PREVIEW_TIMEOUT_SECONDS = 5.0

DEFAULT_TITLE = "Untitled"
DEFAULT_SUMMARY = "Learn more about this article"

ERROR_PAGE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^Error \d{3}",
        r"not found",
        r"unsupported media type",
        r"server error",
        r"forbidden",
        r"unauthorized",
        r"bad gateway",
        r"service unavailable",
        r"gateway timeout",
    )
)

PreviewFetcher = Callable[..., Awaitable[PagePreview]]


def is_error_page(title: str | None, summary: str | None) -> bool:
    """True when title or summary looks like an HTTP error or placeholder page."""
    texts = [t for t in (title, summary) if t]
    return any(pattern.search(text) for pattern in ERROR_PAGE_PATTERNS for text in texts)


def filter_error_pages(candidates: Sequence[ArticleCandidate]) -> list[ArticleCandidate]:
    """Drop candidates missing a title or summary, or that read like error pages."""
    return [
        c
        for c in candidates
        if c.title and c.summary and not is_error_page(c.title, c.summary)
    ]


class ArticleValidator:
    name = "article_validator"

    def __init__(
        self,
        fetcher: PreviewFetcher | None = None,
        *,
        max_articles: int = MAX_ARTICLES,
        timeout_seconds: float = PREVIEW_TIMEOUT_SECONDS,
    ):
        self._fetcher = fetcher
        self.max_articles = max(int(max_articles), 1)
        self.timeout_seconds = timeout_seconds

    async def fetch_article(self, url: str) -> ValidatedArticle | None:
        """Preview one URL; None when the fetch fails or the page is an error page."""
        if not web_utils.is_valid_url(url):
            logger.info(f"Skipping invalid article URL: {url!r}")
            return None

        fetcher = self._fetcher or link_preview.preview
        try:
            preview = await fetcher(url, timeout=self.timeout_seconds, follow_redirects=True)
        except Exception as e:
            logger.info(f"Failed to fetch metadata for {url}: {e}")
            return None

        title = preview.title or DEFAULT_TITLE
        summary = preview.description or DEFAULT_SUMMARY
        if is_error_page(title, summary):
            logger.info(f"Skipping error page: {title}")
            return None

        return ValidatedArticle(
            title=title,
            link=url,
            summary=summary,
            image=preview.images[0] if preview.images else None,
        )

    async def validate(self, urls: Sequence[str]) -> list[ValidatedArticle]:
        """Validate in order, stopping once ``max_articles`` pages are confirmed."""
        results: list[ValidatedArticle] = []
        checked = 0
        for url in urls:
            if len(results) >= self.max_articles:
                break
            checked += 1
            article = await self.fetch_article(url)
            if article is not None:
                results.append(article)

        log_service.log_pipeline_stage(
            self.name,
            "completed",
            {"candidates": len(urls), "checked": checked, "valid": len(results)},
        )
        return results


# --- Fallback ladder ---


@dataclass(slots=True)
class ArticleSources:
    urls: list[str]
    candidates: list[ArticleCandidate]
    citations: list[Citation]


ArticleStrategy = Callable[[ArticleSources], Awaitable[list[ValidatedArticle]]]


def validated_strategy(validator: ArticleValidator) -> ArticleStrategy:
    async def run(sources: ArticleSources) -> list[ValidatedArticle]:
        if not sources.urls:
            return []
        return await validator.validate(sources.urls)

    return run


def filtered_candidates_strategy(limit: int = MAX_ARTICLES) -> ArticleStrategy:
    async def run(sources: ArticleSources) -> list[ValidatedArticle]:
        return [
            ValidatedArticle(title=c.title, link=c.link, summary=c.summary)
            for c in filter_error_pages(sources.candidates)[:limit]
        ]

    return run


def citations_strategy(limit: int = MAX_ARTICLES) -> ArticleStrategy:
    async def run(sources: ArticleSources) -> list[ValidatedArticle]:
        # Citations only stand in for a model answer that had no candidates.
        if sources.candidates:
            return []
        ordered = sorted(sources.citations, key=lambda c: c.index)
        return [
            ValidatedArticle(title=c.title, link=c.url, summary=f"Learn more about {c.title}")
            for c in ordered[:limit]
        ]

    return run


def default_ladder(validator: ArticleValidator) -> list[tuple[str, ArticleStrategy]]:
    limit = validator.max_articles
    return [
        ("validated", validated_strategy(validator)),
        ("filtered_candidates", filtered_candidates_strategy(limit)),
        ("citations", citations_strategy(limit)),
    ]


async def resolve_articles(
    sources: ArticleSources,
    ladder: Sequence[tuple[str, ArticleStrategy]],
) -> tuple[list[ValidatedArticle], str | None]:
    """Run strategies in order; return the first non-empty result and its strategy name."""
    for name, strategy in ladder:
        articles = await strategy(sources)
        if articles:
            if name != ladder[0][0]:
                log_service.log_stage_degraded("articles", f"using {name} fallback", count=len(articles))
            return articles, name
    return [], None
