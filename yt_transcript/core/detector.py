"""YouTube reference detection in free-form Markdown note text.

WHY: Notes mention their video in many ways — a ``source:`` field in the
front-matter, a Markdown link or embed, or a bare URL pasted into the
body. The pipeline needs one ordered list of candidate URLs and, for any
URL, the canonical 11-character video ID.

HOW: find_youtube_urls() runs three independent strategies in priority
order (front-matter, Markdown link/embed, bare URL) and accumulates every
match into a single list, trimming trailing punctuation and dropping
exact duplicates. extract_video_id() tries an ordered list of URL-shape
patterns and returns the first captured ID.

RULES:
- Strategies are not short-circuited; all matches are collected
- Trailing ) ] , . > are stripped before the duplicate check
- Discovery order is preserved; detection is pure and repeatable
- Video IDs are exactly 11 characters of [A-Za-z0-9_-]
- A URL without a recognizable ID yields None, never an exception
"""

from __future__ import annotations

import re
from typing import List, Optional

# ---------------------------------------------------------------------------
# Video ID extraction
# ---------------------------------------------------------------------------

_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

# Tried in order; the first match wins.
VIDEO_ID_PATTERNS: List[re.Pattern] = [
    re.compile(r"(?<![\w-])youtube\.com/watch\?(?:[^#\s]*?&)?v=" + _ID),
    re.compile(r"(?<![\w-])youtu\.be/" + _ID),
    re.compile(r"(?<![\w-])youtube(?:-nocookie)?\.com/embed/" + _ID),
    re.compile(r"(?<![\w-])youtube\.com/v/" + _ID),
    re.compile(r"(?<![\w-])youtube\.com/shorts/" + _ID),
]


def extract_video_id(url: str) -> Optional[str]:
    """Return the 11-character video ID in ``url``, or None."""
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


# ---------------------------------------------------------------------------
# URL discovery
# ---------------------------------------------------------------------------

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---", re.DOTALL)

_SOURCE_FIELD_RE = re.compile(
    r"^\s*source:\s*[\"']?(https?://[^\s\"']*(?:youtube\.com|youtu\.be)[^\s\"']*)[\"']?",
    re.MULTILINE,
)

_MARKDOWN_LINK_RE = re.compile(
    r"!?\[.*?\]\((https?://(?:www\.|m\.)?(?:youtube\.com|youtube-nocookie\.com|youtu\.be)[/?][^\s)]*)\)"
)

_PLAIN_URL_RE = re.compile(
    r"(https?://(?:www\.|m\.)?(?:youtube\.com/watch\?v=|youtu\.be/)[A-Za-z0-9_-]{11}[^\s)\]>\"'<]*)"
)

_TRAILING_PUNCTUATION_RE = re.compile(r"[),.\]>]+$")


def _frontmatter_urls(content: str) -> List[str]:
    block = _FRONTMATTER_RE.match(content)
    if not block:
        return []
    source = _SOURCE_FIELD_RE.search(block.group(1))
    return [source.group(1)] if source else []


def find_youtube_urls(content: str) -> List[str]:
    """Find candidate YouTube URLs in note text, in discovery order.

    WHY: The orchestrator processes only the first reference, so the order
    matters — a front-matter ``source:`` field is the most deliberate
    statement of what the note is about and is checked first.

    HOW: Collects front-matter, Markdown link/embed, and bare-URL matches in
    that order, trims trailing punctuation from each, and skips any URL
    already collected.

    RULES:
    - Front-matter must start on the first line of the note
    - Only the first ``source:`` field is considered
    - Markdown links count only when their host is a YouTube domain
    - Bare URLs count only for watch and youtu.be shapes

    Args:
        content: Raw note text.

    Returns:
        Deduplicated list of URLs; empty when nothing was found.
    """
    urls: List[str] = []

    candidates = _frontmatter_urls(content)
    candidates += [m.group(1) for m in _MARKDOWN_LINK_RE.finditer(content)]
    candidates += [m.group(1) for m in _PLAIN_URL_RE.finditer(content)]

    for url in candidates:
        cleaned = _TRAILING_PUNCTUATION_RE.sub("", url)
        if cleaned and cleaned not in urls:
            urls.append(cleaned)

    return urls
