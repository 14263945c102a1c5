"""End-to-end orchestration: note text in, note text with transcript out.

WHY: Detection, retrieval, and formatting are independent pieces; the
user-facing command needs them run in a fixed order with every failure
turned into one short message and the note left untouched unless the
whole run succeeds.

HOW: insert_transcript() walks an explicit state sequence —
IDLE → DETECTING_REFERENCE → EXTRACTING_ID → FETCHING → FORMATTING → DONE —
and stops in ABORTED with a FailureReason at the first failed guard.
The network step is an injectable async callable so hosts and tests can
substitute their own retrieval.

RULES:
- The existing-section guard runs before anything else
- Only the first detected URL is used
- Typed retrieval errors keep their reason; their message is surfaced verbatim
- Any other exception becomes UnknownError carrying its message
- On success content = original + "\\n" + fragment; on failure content is
  the original text, unchanged
- No retries, no partial output
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import List, Optional

from yt_transcript.api.client import YouTubeClient
from yt_transcript.config import FALLBACK_LANGUAGE, TranscriptSettings
from yt_transcript.core.detector import find_youtube_urls
from yt_transcript.core.errors import FailureReason, TranscriptError
from yt_transcript.core.ir import FormatOptions, TranscriptEntry, VideoReference
from yt_transcript.formatters import format_transcript, has_transcript_section

logger = logging.getLogger(__name__)

FetchFunc = Callable[[str, str], Awaitable[List[TranscriptEntry]]]

MESSAGES = {
    FailureReason.ALREADY_HAS_TRANSCRIPT: "This note already has a transcript section",
    FailureReason.NO_URL_FOUND: "No YouTube URL found in this note",
    FailureReason.INVALID_VIDEO_ID: "Could not extract video ID from URL",
    FailureReason.NO_ENTRIES_FOUND: "No transcript entries found",
}

FETCH_FAILURE_PREFIX = "Failed to fetch transcript: "


class PipelineState(str, enum.Enum):
    """Stages of a single insert_transcript() run."""

    IDLE = "idle"
    DETECTING_REFERENCE = "detecting_reference"
    EXTRACTING_ID = "extracting_id"
    FETCHING = "fetching"
    FORMATTING = "formatting"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class InsertResult:
    """Outcome of one run, ready for the host to persist or display.

    RULES:
    - state is DONE on success, ABORTED otherwise
    - content is the text to persist (unchanged original on failure)
    - message is the user-facing notification for either outcome
    - fragment, video_id, entry_count describe what was added
    """

    state: PipelineState
    content: str
    message: str
    reason: Optional[FailureReason] = None
    fragment: Optional[str] = None
    video_id: Optional[str] = None
    entry_count: int = 0

    @property
    def success(self) -> bool:
        return self.state is PipelineState.DONE


def _client_fetcher(on_status: Optional[Callable[[str], None]]) -> FetchFunc:
    async def fetch(video_id: str, language: str) -> List[TranscriptEntry]:
        async with YouTubeClient() as client:
            return await client.fetch_transcript(video_id, language, on_status=on_status)

    return fetch


async def insert_transcript(
    content: str,
    settings: Optional[TranscriptSettings] = None,
    fetch: Optional[FetchFunc] = None,
    on_status: Optional[Callable[[str], None]] = None,
) -> InsertResult:
    """Fetch the transcript of the note's video and append it to the note.

    Args:
        content: Raw note text, as read by the host.
        settings: Language, timestamp toggle, and heading; defaults when None.
        fetch: Async ``(video_id, language) -> entries`` callable; defaults
               to a YouTubeClient run.
        on_status: Optional callback for progress updates.

    Returns:
        An InsertResult; never raises for pipeline failures.
    """
    settings = settings or TranscriptSettings()
    fetch = fetch or _client_fetcher(on_status)
    state = PipelineState.IDLE

    def advance(next_state: PipelineState) -> PipelineState:
        logger.debug("Pipeline %s -> %s", state.value, next_state.value)
        return next_state

    def abort(reason: FailureReason, message: str, video_id: Optional[str] = None) -> InsertResult:
        logger.info("Transcript insert aborted in %s: %s", state.value, reason.value)
        return InsertResult(
            state=PipelineState.ABORTED,
            content=content,
            message=message,
            reason=reason,
            video_id=video_id,
        )

    if has_transcript_section(content, settings.section_heading):
        return abort(
            FailureReason.ALREADY_HAS_TRANSCRIPT,
            MESSAGES[FailureReason.ALREADY_HAS_TRANSCRIPT],
        )

    state = advance(PipelineState.DETECTING_REFERENCE)
    urls = find_youtube_urls(content)
    if not urls:
        return abort(FailureReason.NO_URL_FOUND, MESSAGES[FailureReason.NO_URL_FOUND])

    state = advance(PipelineState.EXTRACTING_ID)
    reference = VideoReference.from_url(urls[0])
    if reference is None:
        return abort(FailureReason.INVALID_VIDEO_ID, MESSAGES[FailureReason.INVALID_VIDEO_ID])
    video_id = reference.video_id

    state = advance(PipelineState.FETCHING)
    if on_status:
        on_status("Fetching transcript...")
    language = settings.language or FALLBACK_LANGUAGE

    try:
        entries = await fetch(video_id, language)

        if not entries:
            return abort(
                FailureReason.NO_ENTRIES_FOUND,
                MESSAGES[FailureReason.NO_ENTRIES_FOUND],
                video_id,
            )

        state = advance(PipelineState.FORMATTING)
        fragment = format_transcript(
            entries,
            FormatOptions(
                include_timestamps=settings.include_timestamps,
                section_heading=settings.section_heading,
            ),
        )
    except TranscriptError as e:
        return abort(e.reason, FETCH_FAILURE_PREFIX + e.message, video_id)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("Unexpected error while fetching transcript for %s", video_id)
        detail = str(e) or type(e).__name__
        return abort(FailureReason.UNKNOWN_ERROR, FETCH_FAILURE_PREFIX + detail, video_id)

    state = advance(PipelineState.DONE)
    logger.info("Added %d transcript entries for %s", len(entries), video_id)
    message = "Transcript added ({} entries)".format(len(entries))
    if on_status:
        on_status(message)
    return InsertResult(
        state=state,
        content=content + "\n" + fragment,
        message=message,
        fragment=fragment,
        video_id=video_id,
        entry_count=len(entries),
    )
