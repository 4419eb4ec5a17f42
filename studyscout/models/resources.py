from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SearchQuerySet:
    video_queries: tuple[str, ...]
    article_queries: tuple[str, ...]
    raw_text: str = ""


@dataclass(slots=True)
class VideoCandidate:
    title: str
    link: str
    summary: str


@dataclass(slots=True)
class ArticleCandidate:
    """An article reference that has not been fetched yet."""

    title: str
    link: str
    summary: str


@dataclass(slots=True)
class Citation:
    title: str
    url: str
    index: int


@dataclass(slots=True)
class WebSource:
    title: str
    uri: str


@dataclass(slots=True)
class GroundingChunk:
    """One source attached to a grounded model answer; ``web`` is None for non-web sources."""

    web: WebSource | None = None


@dataclass(slots=True)
class Generation:
    text: str
    grounding_chunks: list[GroundingChunk] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(slots=True)
class PagePreview:
    url: str
    title: str | None = None
    description: str | None = None
    images: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ValidatedArticle:
    title: str
    link: str
    summary: str
    image: str | None = None


@dataclass(slots=True)
class ArticleResolution:
    candidates: list[ArticleCandidate] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)

    def candidate_urls(self) -> list[str]:
        """Candidate links when any candidate exists, else citation URLs."""
        if self.candidates:
            return [c.link for c in self.candidates]
        if self.citations:
            return [c.url for c in self.citations]
        return []


@dataclass(slots=True)
class ResourceBundle:
    intro: str
    videos: list[VideoCandidate] = field(default_factory=list)
    articles: list[ValidatedArticle] = field(default_factory=list)


@dataclass(slots=True)
class PipelineResult:
    message: str
    bundle: ResourceBundle
