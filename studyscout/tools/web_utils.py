from __future__ import annotations

import re
from urllib.parse import urlparse

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Hosts that never count as article results.
NON_ARTICLE_HOSTS = ("youtube.com", "youtu.be", "google.com")


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


def extract_domain(url: str) -> str:
    """Extract domain from URL for display."""
    try:
        return urlparse(url).netloc
    except Exception:
        return url


def is_article_link(url: str) -> bool:
    """http(s) link that does not point at a video or search host."""
    if not is_valid_url(url):
        return False
    host = extract_domain(url).lower()
    return not any(host == h or host.endswith("." + h) for h in NON_ARTICLE_HOSTS)


def clean_text(text: str | None) -> str:
    """Collapse whitespace."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()
