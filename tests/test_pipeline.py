"""Tests for the insert_transcript() orchestration.

WHY: The pipeline is what the user actually runs. It must refuse to touch
notes that already have a transcript, report exactly one reason for every
failure, and produce the documented note text on success.

HOW: The network step is replaced with an AsyncMock fetch callable, so
every test is deterministic. One class exercises the real YouTubeClient
through httpx.MockTransport to cover the default fetcher wiring.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx

from tests.conftest import make_youtube_handler
from yt_transcript.api.client import YouTubeClient
from yt_transcript.config import TranscriptSettings
from yt_transcript.core.errors import (
    CaptionsDisabledError,
    FailureReason,
    RateLimitedError,
)
from yt_transcript.pipeline import (
    FETCH_FAILURE_PREFIX,
    MESSAGES,
    InsertResult,
    PipelineState,
    insert_transcript,
)

NOTE = "# Song notes\n\nhttps://www.youtube.com/watch?v=dQw4w9WgXcQ"
FRONTMATTER_NOTE = "---\nsource: https://www.youtube.com/watch?v=dQw4w9WgXcQ\n---\n\n# Song notes"


def _insert(content, settings=None, fetch=None, on_status=None) -> InsertResult:
    return asyncio.run(insert_transcript(content, settings, fetch=fetch, on_status=on_status))


class TestSuccess:
    """Successful runs append the fragment after one newline."""

    def test_paragraph_note(self, sample_entries):
        fetch = AsyncMock(return_value=sample_entries)
        result = _insert(NOTE, TranscriptSettings(language="en", include_timestamps=False), fetch)

        assert result.success
        assert result.state is PipelineState.DONE
        assert result.content == NOTE + "\n\n## Transcript\n\nWe're no strangers to love"
        assert result.message == "Transcript added (2 entries)"
        assert result.entry_count == 2
        assert result.video_id == "dQw4w9WgXcQ"
        fetch.assert_awaited_once_with("dQw4w9WgXcQ", "en")

    def test_timestamped_note(self, sample_entries):
        fetch = AsyncMock(return_value=sample_entries)
        settings = TranscriptSettings(language="en", include_timestamps=True)
        result = _insert(NOTE, settings, fetch)

        assert result.fragment == "\n## Transcript\n\n[0:00] We're no strangers\n[0:02] to love"
        assert result.content == NOTE + "\n" + result.fragment

    def test_frontmatter_note_paragraph(self, sample_entries):
        fetch = AsyncMock(return_value=sample_entries)
        settings = TranscriptSettings(language="en", include_timestamps=False)
        result = _insert(FRONTMATTER_NOTE, settings, fetch)

        assert result.success
        assert result.fragment == "\n## Transcript\n\nWe're no strangers to love"
        assert result.content == FRONTMATTER_NOTE + "\n" + result.fragment
        fetch.assert_awaited_once_with("dQw4w9WgXcQ", "en")

    def test_frontmatter_note_timestamped(self, sample_entries):
        fetch = AsyncMock(return_value=sample_entries)
        settings = TranscriptSettings(language="en", include_timestamps=True)
        result = _insert(FRONTMATTER_NOTE, settings, fetch)

        assert result.success
        assert result.fragment == "\n## Transcript\n\n[0:00] We're no strangers\n[0:02] to love"
        assert result.content == FRONTMATTER_NOTE + "\n" + result.fragment

    def test_custom_heading_and_language(self, sample_entries):
        fetch = AsyncMock(return_value=sample_entries)
        settings = TranscriptSettings(language="de", section_heading="### Captions")
        result = _insert(NOTE, settings, fetch)

        assert "\n### Captions\n\n" in result.content
        fetch.assert_awaited_once_with("dQw4w9WgXcQ", "de")

    def test_first_detected_url_is_used(self, sample_entries):
        content = "[first](https://youtu.be/AAAAAAAAAAA)\nthen https://youtu.be/BBBBBBBBBBB"
        fetch = AsyncMock(return_value=sample_entries)
        result = _insert(content, fetch=fetch)

        assert result.video_id == "AAAAAAAAAAA"
        fetch.assert_awaited_once_with("AAAAAAAAAAA", "en")

    def test_status_callback(self, sample_entries):
        messages = []
        _insert(NOTE, fetch=AsyncMock(return_value=sample_entries), on_status=messages.append)
        assert messages == ["Fetching transcript...", "Transcript added (2 entries)"]


class TestGuards:
    """Guards that abort before any network request."""

    def test_existing_section_left_unchanged(self):
        content = NOTE + "\n\n## Transcript\n\nOld transcript."
        fetch = AsyncMock()
        result = _insert(content, fetch=fetch)

        assert not result.success
        assert result.state is PipelineState.ABORTED
        assert result.reason is FailureReason.ALREADY_HAS_TRANSCRIPT
        assert result.message == MESSAGES[FailureReason.ALREADY_HAS_TRANSCRIPT]
        assert result.content == content
        fetch.assert_not_awaited()

    def test_existing_section_checked_before_url(self):
        """A note with the heading and no URL reports the heading, not the URL."""
        result = _insert("## Transcript\n\nHand-written.", fetch=AsyncMock())
        assert result.reason is FailureReason.ALREADY_HAS_TRANSCRIPT

    def test_custom_heading_guard(self):
        content = NOTE + "\n\n### Captions\n"
        settings = TranscriptSettings(section_heading="### Captions")
        result = _insert(content, settings, AsyncMock())
        assert result.reason is FailureReason.ALREADY_HAS_TRANSCRIPT

    def test_no_url(self):
        fetch = AsyncMock()
        result = _insert("# Notes\n\nNothing to see here.", fetch=fetch)

        assert result.reason is FailureReason.NO_URL_FOUND
        assert result.message == "No YouTube URL found in this note"
        fetch.assert_not_awaited()

    def test_invalid_video_id(self):
        content = "---\nsource: https://www.youtube.com/channel/UC38IQsAvIsxxjztdMZQtwHA\n---\n"
        fetch = AsyncMock()
        result = _insert(content, fetch=fetch)

        assert result.reason is FailureReason.INVALID_VIDEO_ID
        assert result.message == "Could not extract video ID from URL"
        assert result.content == content
        fetch.assert_not_awaited()

    def test_no_status_before_network(self):
        messages = []
        _insert("no links", fetch=AsyncMock(), on_status=messages.append)
        assert messages == []


class TestFetchFailures:
    """Failures from the fetch step keep the note unchanged."""

    def test_typed_error_keeps_reason(self):
        fetch = AsyncMock(side_effect=CaptionsDisabledError("Transcripts are disabled for video x"))
        result = _insert(NOTE, fetch=fetch)

        assert result.reason is FailureReason.CAPTIONS_DISABLED
        assert result.message == FETCH_FAILURE_PREFIX + "Transcripts are disabled for video x"
        assert result.content == NOTE
        assert result.video_id == "dQw4w9WgXcQ"

    def test_rate_limited(self):
        fetch = AsyncMock(side_effect=RateLimitedError("slow down"))
        result = _insert(NOTE, fetch=fetch)
        assert result.reason is FailureReason.RATE_LIMITED

    def test_empty_entries(self):
        result = _insert(NOTE, fetch=AsyncMock(return_value=[]))

        assert result.reason is FailureReason.NO_ENTRIES_FOUND
        assert result.message == "No transcript entries found"
        assert result.content == NOTE

    def test_unexpected_exception(self):
        fetch = AsyncMock(side_effect=RuntimeError("socket exploded"))
        result = _insert(NOTE, fetch=fetch)

        assert result.reason is FailureReason.UNKNOWN_ERROR
        assert result.message == "Failed to fetch transcript: socket exploded"
        assert result.content == NOTE

    def test_unexpected_exception_without_message(self):
        result = _insert(NOTE, fetch=AsyncMock(side_effect=KeyError()))
        assert result.reason is FailureReason.UNKNOWN_ERROR
        assert result.message == FETCH_FAILURE_PREFIX + "KeyError"


class TestDefaultFetcher:
    """Without an explicit fetch, the pipeline drives YouTubeClient."""

    def test_uses_youtube_client(self):
        transport = httpx.MockTransport(make_youtube_handler())

        def client_factory():
            return YouTubeClient(transport=transport)

        messages = []
        with patch("yt_transcript.pipeline.YouTubeClient", side_effect=client_factory):
            result = _insert(NOTE, on_status=messages.append)

        assert result.success
        assert result.content.endswith("\n## Transcript\n\nWe're no strangers to love")
        assert messages[0] == "Fetching transcript..."
        assert "Listing caption tracks..." in messages
