from __future__ import annotations

import json
import re
from typing import Any

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from studyscout.config import settings
from studyscout.models.resources import VideoCandidate
from studyscout.tools.web_utils import BROWSER_USER_AGENT

YOUTUBE_SEARCH_URL = "https://www.youtube.com/results"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

_INITIAL_DATA_RE = re.compile(r"var ytInitialData = ({[\s\S]*?});")


def _first_run_text(node: Any) -> str:
    runs = (node or {}).get("runs") or []
    if runs and isinstance(runs[0], dict):
        return str(runs[0].get("text") or "")
    return ""


def extract_initial_data(html: str) -> dict[str, Any] | None:
    """Find and parse the ``ytInitialData`` blob embedded in a results page."""
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        content = script.string or script.get_text() or ""
        if "var ytInitialData" not in content:
            continue
        match = _INITIAL_DATA_RE.search(content)
        if not match:
            continue
        try:
            payload = json.loads(match.group(1))
        except json.JSONDecodeError:
            logger.debug("Failed to parse ytInitialData")
            continue
        if isinstance(payload, dict):
            return payload
    return None


def parse_video_results(initial_data: dict[str, Any], *, max_results: int = 5) -> list[VideoCandidate]:
    """Map ``videoRenderer`` entries of the search payload to candidates."""
    sections = (
        initial_data.get("contents", {})
        .get("twoColumnSearchResultsRenderer", {})
        .get("primaryContents", {})
        .get("sectionListRenderer", {})
        .get("contents", [])
    )
    videos: list[VideoCandidate] = []
    for section in sections:
        items = (section.get("itemSectionRenderer") or {}).get("contents") or []
        for item in items:
            renderer = item.get("videoRenderer")
            if not renderer or not renderer.get("videoId"):
                continue
            title = _first_run_text(renderer.get("title"))
            if not title:
                continue
            description = _first_run_text(renderer.get("descriptionSnippet"))
            channel = _first_run_text(renderer.get("ownerText"))
            videos.append(
                VideoCandidate(
                    title=title,
                    link=YOUTUBE_WATCH_URL.format(video_id=renderer["videoId"]),
                    summary=description or f"Learn from {channel} - {title}",
                )
            )
            if len(videos) >= max_results:
                return videos
    return videos


async def search(query: str, *, max_results: int = 5) -> list[VideoCandidate]:
    """Search YouTube by scraping the public results page."""
    async with httpx.AsyncClient(
        timeout=settings.video_search_timeout_seconds,
        follow_redirects=True,
    ) as client:
        response = await client.get(
            YOUTUBE_SEARCH_URL,
            params={"search_query": query},
            headers={"User-Agent": BROWSER_USER_AGENT, "Accept-Language": "en-US,en;q=0.9"},
        )
        response.raise_for_status()
        html = response.text

    initial_data = extract_initial_data(html)
    if initial_data is None:
        logger.info(f"No ytInitialData found for query={query!r}")
        return []
    return parse_video_results(initial_data, max_results=max_results)
