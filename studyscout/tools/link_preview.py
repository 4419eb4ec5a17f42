from __future__ import annotations

from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from studyscout.config import settings
from studyscout.models.resources import PagePreview
from studyscout.tools.web_utils import BROWSER_USER_AGENT, clean_text

TITLE_META = (("property", "og:title"), ("name", "twitter:title"))
DESCRIPTION_META = (
    ("property", "og:description"),
    ("name", "twitter:description"),
    ("name", "description"),
)
IMAGE_META = (
    ("property", "og:image"),
    ("property", "og:image:url"),
    ("name", "twitter:image"),
    ("name", "twitter:image:src"),
)


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str:
    tag = soup.find("meta", attrs={attr: value})
    if tag is None:
        return ""
    return clean_text(tag.get("content"))


def _first_meta(soup: BeautifulSoup, candidates: tuple[tuple[str, str], ...]) -> str:
    for attr, value in candidates:
        content = _meta_content(soup, attr, value)
        if content:
            return content
    return ""


def parse_preview(url: str, html: str) -> PagePreview:
    """Read title, description and images from page markup (Open Graph first)."""
    soup = BeautifulSoup(html, "html.parser")

    title = _first_meta(soup, TITLE_META)
    if not title and soup.title and soup.title.string:
        title = clean_text(soup.title.string)

    description = _first_meta(soup, DESCRIPTION_META)

    images: list[str] = []
    for attr, value in IMAGE_META:
        content = _meta_content(soup, attr, value)
        if content:
            images.append(urljoin(url, content))
    if not images:
        for img in soup.find_all("img", src=True)[:10]:
            src = str(img["src"]).strip()
            if src and not src.startswith("data:"):
                images.append(urljoin(url, src))

    return PagePreview(
        url=url,
        title=title or None,
        description=description or None,
        images=list(dict.fromkeys(images)),
    )


async def preview(url: str, *, timeout: float | None = None, follow_redirects: bool = True) -> PagePreview:
    """Fetch a page and return its preview metadata.

    Raises on network errors, timeouts and non-2xx responses.
    """
    timeout_seconds = timeout if timeout is not None else settings.preview_timeout_seconds
    async with httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=follow_redirects) as client:
        response = await client.get(
            url,
            headers={
                "User-Agent": BROWSER_USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
        )
        response.raise_for_status()
        content_type = response.headers.get("content-type", "")
        final_url = str(response.url)
        if content_type and "html" not in content_type and "xml" not in content_type:
            return PagePreview(url=final_url)
        return parse_preview(final_url, response.text)
