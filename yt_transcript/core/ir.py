"""Intermediate representation dataclasses for fetched transcripts.

WHY: The retriever, the formatters, and the orchestrator all pass the same
few shapes around: timed caption entries, caption tracks, the detected
video reference, and formatting options. Typed dataclasses make these
contracts explicit and keep the stages decoupled.

HOW: Four dataclasses:
  TranscriptEntry — one timed caption line, decoded and immutable
  CaptionTrack    — one subtitle stream offered by YouTube (URL + language)
  VideoReference  — a URL found in a note plus its 11-character video ID
  FormatOptions   — how the transcript section should be rendered

RULES:
- All times are float milliseconds (converted from caption seconds)
- TranscriptEntry is produced only by the caption parser and never re-sorted
- CaptionTrack only lives during track selection; it is never persisted
- VideoReference.from_url returns None for foreign or malformed URLs
"""

from __future__ import annotations

from dataclasses import dataclass

from yt_transcript.core.detector import extract_video_id


@dataclass(frozen=True)
class TranscriptEntry:
    """A single timed caption line.

    RULES:
    - text: human-readable, entity references already decoded
    - offset_ms / duration_ms: float milliseconds, both >= 0
    - language_code: the tag of the track it was fetched from, not
      re-derived from the caption XML
    """

    text: str
    offset_ms: float
    duration_ms: float
    language_code: str


@dataclass
class CaptionTrack:
    """One caption track listed by the player API."""

    base_url: str
    language_code: str


@dataclass(frozen=True)
class VideoReference:
    """A YouTube URL discovered in a note, with its canonical video ID."""

    url: str
    video_id: str

    @classmethod
    def from_url(cls, url: str) -> VideoReference | None:
        """Build a reference from a URL, or None when no ID can be extracted."""
        video_id = extract_video_id(url)
        if video_id is None:
            return None
        return cls(url=url, video_id=video_id)


@dataclass
class FormatOptions:
    """Rendering options for the transcript section.

    RULES:
    - include_timestamps: prefix each line with [M:SS] / [H:MM:SS]
    - section_heading: literal heading, also used to detect an existing section
    """

    include_timestamps: bool
    section_heading: str
