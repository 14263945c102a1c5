"""Async HTTP client for YouTube's caption (timed-text) retrieval.

WHY: YouTube has no public caption API for arbitrary videos. Captions are
reachable only by replaying what its own apps do: scrape the watch page
for the Innertube API key, ask the player endpoint which caption tracks
exist, pick one, and download its XML. This module encapsulates that
negotiation behind a single client class so callers (the pipeline, the
CLI, tests) don't need to know HTTP details.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. YouTubeClient is an
async context manager — enter it to get a configured client, exit to close
the connection pool. Each protocol step is a separate method:
fetch_api_key → list_caption_tracks → select_track → fetch_caption_xml,
and fetch_transcript() runs them in order and parses the result.

RULES:
- Always use the async context manager (async with YouTubeClient() as client:)
- Steps run strictly in sequence; each needs the previous step's data
- Every failure raises exactly one typed TranscriptError subclass
- Transport errors and timeouts are failures of the step that hit them
- No retries — re-running the command is the retry mechanism
- Every request carries the fixed USER_AGENT and the requested Accept-Language
- The ``fmt=`` parameter is removed from track URLs so YouTube serves XML
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from yt_transcript.api.models import PlayerResponse
from yt_transcript.config import (
    API_KEY_PATTERNS,
    BOT_CHALLENGE_MARKERS,
    INNERTUBE_CLIENT,
    REQUEST_TIMEOUT_S,
    USER_AGENT,
    YOUTUBE_BASE_URL,
)
from yt_transcript.core.captions import parse_transcript_xml
from yt_transcript.core.errors import (
    ApiKeyNotFoundError,
    CaptionsDisabledError,
    FetchFailedError,
    NoCaptionTracksError,
    PlayerFetchFailedError,
    RateLimitedError,
    TranscriptsUnavailableError,
)
from yt_transcript.core.ir import CaptionTrack, TranscriptEntry

logger = logging.getLogger(__name__)

_HTTP_TOO_MANY_REQUESTS = 429

_RATE_LIMITED_MESSAGE = (
    "YouTube is receiving too many requests and wants a captcha solved. "
    "Try again later."
)


def _base_language(code: str) -> str:
    return code.replace("_", "-").split("-", 1)[0].lower()


TRACK_PREDICATES: List[Callable[[CaptionTrack, str], bool]] = [
    lambda track, lang: track.language_code == lang,
    lambda track, lang: bool(lang) and _base_language(track.language_code) == _base_language(lang),
    lambda track, lang: True,
]
"""Track selection tiers: exact code, same base language, anything."""


def select_track(tracks: List[CaptionTrack], language: str) -> CaptionTrack:
    """Choose the caption track that best matches ``language``.

    WHY: Videos often list regional variants ("en-US", "en-GB") or only
    an auto-generated track in another language. We prefer an exact
    match, then any track in the same base language, then whatever is
    listed first rather than failing.

    HOW: Tries each predicate in TRACK_PREDICATES against the tracks in
    list order and returns the first hit. Nothing is scored or ranked.

    RULES:
    - Ties always go to list order
    - Never fails as long as ``tracks`` is non-empty
    - Raises ValueError on an empty list (callers check first)
    """
    if not tracks:
        raise ValueError("select_track() needs at least one caption track")
    for predicate in TRACK_PREDICATES:
        for track in tracks:
            if predicate(track, language):
                return track
    # Unreachable: the last predicate accepts every track.
    return tracks[0]


def strip_format_param(url: str) -> str:
    """Remove every ``fmt=`` query parameter, leaving the rest byte-identical."""
    parts = urlsplit(url)
    params = [p for p in parts.query.split("&") if p and not p.startswith("fmt=")]
    return urlunsplit(parts._replace(query="&".join(params)))


class YouTubeClient:
    """Async client for the watch page → player API → caption XML workflow.

    WHY: Provides a clean, typed interface for the full caption negotiation.
    Handles headers, timeouts, response-shape checks, and error mapping.

    HOW: Wraps httpx.AsyncClient with the fixed User-Agent and a
    per-request timeout. Each protocol step is an async method. Use as an
    async context manager to ensure the connection pool is closed.

    RULES:
    - Use as: async with YouTubeClient() as client: ...
    - base_url defaults to YOUTUBE_BASE_URL from config
    - timeout defaults to REQUEST_TIMEOUT_S from config
    - transport is for tests (httpx.MockTransport); None uses the network
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or YOUTUBE_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else REQUEST_TIMEOUT_S
        self._user_agent = user_agent or USER_AGENT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> YouTubeClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": self._user_agent},
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "YouTubeClient must be used as an async context manager: "
                "async with YouTubeClient() as client: ..."
            )
        return self._client

    @staticmethod
    def _language_headers(language: str) -> Dict[str, str]:
        return {"Accept-Language": language} if language else {}

    # ------------------------------------------------------------------
    # Step 1: API key from the watch page
    # ------------------------------------------------------------------

    async def fetch_api_key(self, video_id: str, language: str = "") -> str:
        """Scrape the Innertube API key from the public watch page.

        WHY: The player endpoint only answers requests that carry the key
        YouTube embeds in every watch page.

        HOW: GETs /watch?v=ID, checks for a bot challenge, then tries each
        pattern in API_KEY_PATTERNS (the page HTML encodes the key in more
        than one way).

        RULES:
        - 429 or a bot-challenge marker raises RateLimitedError
        - Other non-2xx statuses and transport errors raise FetchFailedError
        - No pattern match raises ApiKeyNotFoundError
        """
        client = self._ensure_client()
        logger.debug("Fetching watch page for %s", video_id)

        try:
            resp = await client.get(
                "/watch",
                params={"v": video_id},
                headers=self._language_headers(language),
            )
        except httpx.HTTPError as e:
            logger.warning("Watch page request for %s failed: %s", video_id, e)
            raise FetchFailedError(
                "Could not load the YouTube page for video {}: {}".format(video_id, e)
            ) from e

        if resp.status_code == _HTTP_TOO_MANY_REQUESTS:
            raise RateLimitedError(_RATE_LIMITED_MESSAGE)
        if not resp.is_success:
            raise FetchFailedError(
                "Could not load the YouTube page for video {} (HTTP {})".format(
                    video_id, resp.status_code
                )
            )

        body = resp.text
        if any(marker in body for marker in BOT_CHALLENGE_MARKERS):
            logger.warning("Watch page for %s returned a bot challenge", video_id)
            raise RateLimitedError(_RATE_LIMITED_MESSAGE)

        for pattern in API_KEY_PATTERNS:
            match = pattern.search(body)
            if match:
                return match.group(1)

        raise ApiKeyNotFoundError(
            "Could not find the YouTube API key on the page for video {}".format(video_id)
        )

    # ------------------------------------------------------------------
    # Step 2: Caption track listing from the player API
    # ------------------------------------------------------------------

    async def list_caption_tracks(
        self,
        api_key: str,
        video_id: str,
        language: str = "",
    ) -> List[CaptionTrack]:
        """Ask the player API which caption tracks the video offers.

        WHY: Caption track URLs are signed and only handed out by the
        player endpoint. Some videos list captions only for the Android
        app, so the request impersonates that client profile.

        HOW: POSTs {"context": {"client": INNERTUBE_CLIENT}, "videoId": ID}
        to /youtubei/v1/player?key=KEY and reads the tracklist through
        PlayerResponse.

        RULES:
        - Non-2xx, transport errors, and non-JSON bodies raise PlayerFetchFailedError
        - No tracklist + playable video raises CaptionsDisabledError
        - No tracklist otherwise raises TranscriptsUnavailableError
        - An empty track list raises NoCaptionTracksError
        """
        client = self._ensure_client()
        logger.debug("Requesting caption tracklist for %s", video_id)

        body = {
            "context": {"client": dict(INNERTUBE_CLIENT)},
            "videoId": video_id,
        }

        try:
            resp = await client.post(
                "/youtubei/v1/player",
                params={"key": api_key},
                json=body,
                headers=self._language_headers(language),
            )
        except httpx.HTTPError as e:
            logger.warning("Player request for %s failed: %s", video_id, e)
            raise PlayerFetchFailedError(
                "Player API request failed for video {}: {}".format(video_id, e)
            ) from e

        if not resp.is_success:
            raise PlayerFetchFailedError(
                "Player API request failed for video {} (HTTP {})".format(
                    video_id, resp.status_code
                )
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise PlayerFetchFailedError(
                "Player API returned an unreadable response for video {}".format(video_id)
            ) from e

        player = PlayerResponse.from_dict(data)

        if not player.has_tracklist:
            if player.playable:
                raise CaptionsDisabledError(
                    "Transcripts are disabled for video {}".format(video_id)
                )
            raise TranscriptsUnavailableError(
                "No transcripts are available for video {}".format(video_id)
            )

        if not player.tracks:
            raise NoCaptionTracksError(
                "Video {} has no caption tracks".format(video_id)
            )

        logger.debug(
            "Video %s lists %d caption track(s): %s",
            video_id,
            len(player.tracks),
            ", ".join(t.language_code for t in player.tracks),
        )
        return player.tracks

    # ------------------------------------------------------------------
    # Step 3: Caption XML
    # ------------------------------------------------------------------

    async def fetch_caption_xml(self, track: CaptionTrack, language: str = "") -> str:
        """Download the caption XML for a selected track.

        RULES:
        - ``fmt=`` is stripped from the URL so the response is XML
        - 429 raises RateLimitedError
        - Other non-2xx, transport errors, and empty bodies raise FetchFailedError
        """
        client = self._ensure_client()
        url = strip_format_param(track.base_url)
        logger.debug("Downloading %s captions", track.language_code or "unlabelled")

        try:
            resp = await client.get(url, headers=self._language_headers(language))
        except httpx.HTTPError as e:
            logger.warning("Caption download failed: %s", e)
            raise FetchFailedError("Could not download captions: {}".format(e)) from e

        if resp.status_code == _HTTP_TOO_MANY_REQUESTS:
            raise RateLimitedError(_RATE_LIMITED_MESSAGE)
        if not resp.is_success:
            raise FetchFailedError(
                "Could not download captions (HTTP {})".format(resp.status_code)
            )

        xml = resp.text
        if not xml.strip():
            raise FetchFailedError("YouTube returned an empty caption document")
        return xml

    # ------------------------------------------------------------------
    # Full workflow
    # ------------------------------------------------------------------

    async def fetch_transcript(
        self,
        video_id: str,
        language: str = "en",
        on_status: Optional[Callable[[str], None]] = None,
    ) -> List[TranscriptEntry]:
        """Run the whole negotiation and return parsed transcript entries.

        Args:
            video_id: The 11-character YouTube video ID.
            language: Preferred caption language code.
            on_status: Optional callback for status updates.

        Returns:
            Entries in caption order, tagged with the selected track's language.

        Raises:
            TranscriptError: A typed subclass naming the step that failed.
        """
        if on_status:
            on_status("Loading video page...")
        api_key = await self.fetch_api_key(video_id, language)

        if on_status:
            on_status("Listing caption tracks...")
        tracks = await self.list_caption_tracks(api_key, video_id, language)

        track = select_track(tracks, language)
        if track.language_code != language:
            logger.info(
                "No %r captions for %s; using %r instead",
                language, video_id, track.language_code,
            )

        if on_status:
            on_status("Downloading {} captions...".format(track.language_code or "available"))
        xml = await self.fetch_caption_xml(track, language)

        return parse_transcript_xml(xml, track.language_code)
