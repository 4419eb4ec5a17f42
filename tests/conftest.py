from __future__ import annotations

from typing import Any

import pytest

from studyscout.models.resources import Generation, GroundingChunk, PagePreview, WebSource


class FakeGenerativeClient:
    """Scripted stand-in for the generative client, keyed by caller name.

    A scripted value may be a Generation, a plain string, an exception
    instance, or a list of those consumed one call at a time.
    """

    def __init__(self, responses: dict[str, Any]):
        self.responses = {key: value for key, value in responses.items()}
        self.calls: list[dict[str, Any]] = []

    async def generate(self, prompt: str, *, search_grounding: bool = False, caller: str = "pipeline"):
        self.calls.append({"prompt": prompt, "search_grounding": search_grounding, "caller": caller})
        scripted = self.responses.get(caller, "")
        if isinstance(scripted, list):
            scripted = scripted.pop(0)
        if isinstance(scripted, BaseException):
            raise scripted
        if isinstance(scripted, Generation):
            return scripted
        return Generation(text=str(scripted))

    def calls_for(self, caller: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["caller"] == caller]


def web_chunks(*sources: tuple[str, str]) -> list[GroundingChunk]:
    return [GroundingChunk(web=WebSource(title=title, uri=uri)) for title, uri in sources]


class FakePreviewFetcher:
    """Serves previews from a url -> PagePreview | Exception mapping and records fetches."""

    def __init__(self, pages: dict[str, Any]):
        self.pages = pages
        self.fetched: list[str] = []

    async def __call__(self, url: str, *, timeout: float | None = None, follow_redirects: bool = True):
        self.fetched.append(url)
        page = self.pages.get(url)
        if isinstance(page, BaseException):
            raise page
        if page is None:
            raise RuntimeError(f"unexpected fetch: {url}")
        return page


@pytest.fixture
def fake_client():
    return FakeGenerativeClient


@pytest.fixture
def preview_fetcher():
    return FakePreviewFetcher


@pytest.fixture
def make_chunks():
    return web_chunks


@pytest.fixture
def page():
    def build(title: str | None = None, description: str | None = None, images: list[str] | None = None):
        return PagePreview(url="", title=title, description=description, images=images or [])

    return build
