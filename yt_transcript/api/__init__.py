"""YouTube API client package — async caption retrieval.

WHY: Fetching captions means negotiating YouTube's undocumented web API
in several dependent steps. This package encapsulates all YouTube
communication behind one async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. YouTubeClient provides
one method per protocol step plus fetch_transcript() for the whole run.
The player API response is read through the PlayerResponse model.

RULES:
- All HTTP calls go through YouTubeClient (no direct httpx usage elsewhere)
- Failures are typed TranscriptError subclasses from core.errors
"""

from yt_transcript.api.client import YouTubeClient, select_track, strip_format_param
from yt_transcript.api.models import PlayerResponse

__all__ = ["PlayerResponse", "YouTubeClient", "select_track", "strip_format_param"]
