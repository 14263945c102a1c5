"""Failure reasons and typed exceptions for the transcript pipeline.

WHY: Every stage of the pipeline can fail in a specific, nameable way —
YouTube rate-limited us, the page had no API key, the video has captions
turned off, the caption XML was empty. Callers (the orchestrator, the CLI,
tests) need to tell these apart without parsing message strings.

HOW: FailureReason enumerates every cause the user can see. TranscriptError
is the base exception; each retrieval/parse cause has its own subclass with
its reason fixed at class level, so ``except CaptionsDisabledError`` and
``err.reason is FailureReason.CAPTIONS_DISABLED`` are equivalent.

RULES:
- One reason per failure cause, one cause per reason
- Orchestrator-level reasons (AlreadyHasTranscript, NoUrlFound,
  InvalidVideoId, UnknownError) have no exception class — they are
  reported directly as results, never raised
- Messages are short and user-facing
"""

from __future__ import annotations

import enum


class FailureReason(str, enum.Enum):
    """Every way the transcript pipeline can abort.

    Inherits from str so values print and serialize cleanly.
    """

    ALREADY_HAS_TRANSCRIPT = "AlreadyHasTranscript"
    NO_URL_FOUND = "NoUrlFound"
    INVALID_VIDEO_ID = "InvalidVideoId"
    RATE_LIMITED = "RateLimited"
    API_KEY_NOT_FOUND = "ApiKeyNotFound"
    PLAYER_FETCH_FAILED = "PlayerFetchFailed"
    CAPTIONS_DISABLED = "CaptionsDisabled"
    TRANSCRIPTS_UNAVAILABLE = "TranscriptsUnavailable"
    NO_CAPTION_TRACKS = "NoCaptionTracks"
    FETCH_FAILED = "FetchFailed"
    NO_ENTRIES_FOUND = "NoEntriesFound"
    UNKNOWN_ERROR = "UnknownError"


class TranscriptError(Exception):
    """Base class for typed retrieval and parsing failures.

    RULES:
    - Subclasses set ``reason`` at class level
    - ``message`` is the user-facing text; str(err) returns it unchanged
    """

    reason: FailureReason = FailureReason.UNKNOWN_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RateLimitedError(TranscriptError):
    reason = FailureReason.RATE_LIMITED


class ApiKeyNotFoundError(TranscriptError):
    reason = FailureReason.API_KEY_NOT_FOUND


class PlayerFetchFailedError(TranscriptError):
    reason = FailureReason.PLAYER_FETCH_FAILED


class CaptionsDisabledError(TranscriptError):
    reason = FailureReason.CAPTIONS_DISABLED


class TranscriptsUnavailableError(TranscriptError):
    reason = FailureReason.TRANSCRIPTS_UNAVAILABLE


class NoCaptionTracksError(TranscriptError):
    reason = FailureReason.NO_CAPTION_TRACKS


class FetchFailedError(TranscriptError):
    reason = FailureReason.FETCH_FAILED


class NoEntriesFoundError(TranscriptError):
    reason = FailureReason.NO_ENTRIES_FOUND
