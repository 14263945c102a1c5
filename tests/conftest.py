"""Shared test fixtures for the yt_transcript test suite.

WHY: Several test modules need the same realistic YouTube responses — a
watch page with an embedded API key, a player API response listing
caption tracks, and a caption XML document — plus the two-entry sample
transcript used in the end-to-end scenarios.

HOW: Module-level constants hold the raw response bodies; pytest fixtures
hand out fresh copies. make_youtube_handler() builds an httpx.MockTransport
handler that routes the three endpoints to configurable responses and
records every request it sees.

RULES:
- No test touches the real network
- Video ID dQw4w9WgXcQ is used throughout
- Caption XML uses YouTube's double-encoded entities (&amp;#39;)
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from yt_transcript.core.ir import TranscriptEntry

VIDEO_ID = "dQw4w9WgXcQ"
API_KEY = "AIzaSyTestKey_123"

WATCH_PAGE_HTML = (
    "<!DOCTYPE html><html><head><title>Rick Astley - Never Gonna Give You Up</title>"
    '<script>ytcfg.set({"INNERTUBE_API_KEY":"' + API_KEY + '","INNERTUBE_CLIENT_NAME":"WEB"});</script>'
    "</head><body></body></html>"
)

WATCH_PAGE_ESCAPED_KEY_HTML = (
    "<html><script>var cfg = \"{\\\"INNERTUBE_API_KEY\\\":\\\"" + API_KEY + "\\\"}\";</script></html>"
)

BOT_CHALLENGE_HTML = '<html><body><form><div class="g-recaptcha" data-sitekey="x"></div></form></body></html>'

TRACK_URL_EN = (
    "https://www.youtube.com/api/timedtext?v=" + VIDEO_ID + "&lang=en&fmt=srv3&sig=abc123"
)
TRACK_URL_DE = (
    "https://www.youtube.com/api/timedtext?v=" + VIDEO_ID + "&lang=de&sig=def456"
)

PLAYER_RESPONSE: Dict[str, Any] = {
    "playabilityStatus": {"status": "OK"},
    "captions": {
        "playerCaptionsTracklistRenderer": {
            "captionTracks": [
                {"baseUrl": TRACK_URL_DE, "languageCode": "de", "name": {"runs": [{"text": "German"}]}},
                {"baseUrl": TRACK_URL_EN, "languageCode": "en", "name": {"runs": [{"text": "English"}]}},
            ],
        },
    },
}

CAPTION_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0" dur="2">We&amp;#39;re no strangers</text>'
    '<text start="2" dur="1">to love</text>'
    "</transcript>"
)


@pytest.fixture
def sample_entries() -> List[TranscriptEntry]:
    """The two-entry transcript used by the end-to-end scenarios."""
    return [
        TranscriptEntry(text="We're no strangers", offset_ms=0, duration_ms=2000, language_code="en"),
        TranscriptEntry(text="to love", offset_ms=2000, duration_ms=1000, language_code="en"),
    ]


@pytest.fixture
def player_response() -> Dict[str, Any]:
    """A fresh, mutable copy of the player API response."""
    return copy.deepcopy(PLAYER_RESPONSE)


def make_youtube_handler(
    watch: Optional[httpx.Response] = None,
    player: Optional[httpx.Response] = None,
    captions: Optional[httpx.Response] = None,
    requests: Optional[List[httpx.Request]] = None,
):
    """Build a MockTransport handler serving the three YouTube endpoints.

    Any endpoint not overridden gets the happy-path response. Every request
    is appended to ``requests`` when a list is given.
    """
    if watch is None:
        watch = httpx.Response(200, text=WATCH_PAGE_HTML)
    if player is None:
        player = httpx.Response(200, json=PLAYER_RESPONSE)
    if captions is None:
        captions = httpx.Response(200, text=CAPTION_XML)

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path
        if path == "/watch":
            return watch
        if path == "/youtubei/v1/player":
            return player
        if path == "/api/timedtext":
            return captions
        return httpx.Response(404, text="not found")

    return handler


def request_json(request: httpx.Request) -> Dict[str, Any]:
    """Decode the JSON body of a recorded request."""
    return json.loads(request.content.decode("utf-8"))
