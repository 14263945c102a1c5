"""Typed view of the Innertube player API response.

WHY: The player endpoint returns a large, undocumented JSON document of
which we need three facts: is there a caption tracklist at all, is the
video playable, and which caption tracks are listed. Reading those facts
in one place keeps the client's step logic a flat sequence of checks and
makes shape mismatches fail gracefully instead of raising KeyError.

HOW: PlayerResponse.from_dict() walks the configured TRACKLIST_PATHS to
find the tracklist, reads ``playabilityStatus.status``, and converts each
usable track dict into a CaptionTrack.

RULES:
- Never raises on unexpected shapes — missing data becomes None / False / []
- has_tracklist is False only when no configured path yields a dict
- A track without a URL (``baseUrl`` or ``url``) is dropped
- A track without ``languageCode`` gets an empty language code
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from yt_transcript.config import PLAYABLE_STATUS, TRACKLIST_PATHS
from yt_transcript.core.ir import CaptionTrack


def _dig(data: Any, path: tuple) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _find_tracklist(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for path in TRACKLIST_PATHS:
        tracklist = _dig(data, path)
        if isinstance(tracklist, dict):
            return tracklist
    return None


def _track_from_dict(data: Any) -> Optional[CaptionTrack]:
    if not isinstance(data, dict):
        return None
    url = data.get("baseUrl") or data.get("url")
    if not isinstance(url, str) or not url:
        return None
    return CaptionTrack(base_url=url, language_code=str(data.get("languageCode") or ""))


@dataclass
class PlayerResponse:
    """The parts of the player API response the retriever relies on."""

    has_tracklist: bool
    playable: bool
    tracks: List[CaptionTrack] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> PlayerResponse:
        """Parse a PlayerResponse from the decoded player JSON."""
        if not isinstance(data, dict):
            return cls(has_tracklist=False, playable=False)

        playable = _dig(data, ("playabilityStatus", "status")) == PLAYABLE_STATUS
        tracklist = _find_tracklist(data)
        if tracklist is None:
            return cls(has_tracklist=False, playable=playable)

        raw_tracks = tracklist.get("captionTracks")
        if not isinstance(raw_tracks, list):
            raw_tracks = []

        tracks = [t for t in (_track_from_dict(item) for item in raw_tracks) if t is not None]
        return cls(has_tracklist=True, playable=playable, tracks=tracks)
