"""Configuration constants, known YouTube response shapes, and settings loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. YouTube's caption API is undocumented and changes without
notice, so the shapes we rely on (API-key encodings, bot-challenge markers,
where the caption tracklist lives, which client profile to impersonate)
are plain data tables here — not buried in the client — and can be
extended without touching pipeline logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings, tuples, and dicts, each overridable through an
environment variable where that makes sense. TranscriptSettings holds the
three user-facing options; load_settings() merges a persisted JSON
settings file over the defaults.

RULES:
- Defaults: language "en", timestamps off, heading "## Transcript"
- A blank language falls back to "en"; a blank heading to "## Transcript"
- Unknown keys in a settings file are ignored
- API_KEY_PATTERNS are tried in order; the first match wins
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _env_flag(name: str, default: str) -> bool:
    return _parse_flag(os.getenv(name, default))


# ---------------------------------------------------------------------------
# User-facing defaults
# ---------------------------------------------------------------------------

FALLBACK_LANGUAGE = "en"
FALLBACK_SECTION_HEADING = "## Transcript"

DEFAULT_LANGUAGE = os.getenv("YT_TRANSCRIPT_LANGUAGE", FALLBACK_LANGUAGE)
DEFAULT_INCLUDE_TIMESTAMPS = _env_flag("YT_TRANSCRIPT_TIMESTAMPS", "false")
DEFAULT_SECTION_HEADING = os.getenv("YT_TRANSCRIPT_HEADING", FALLBACK_SECTION_HEADING)

MARKDOWN_SUFFIXES: set[str] = {".md", ".markdown"}
"""Note file extensions the CLI accepts (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------

YOUTUBE_BASE_URL = os.getenv("YT_TRANSCRIPT_BASE_URL", "https://www.youtube.com")
REQUEST_TIMEOUT_S = float(os.getenv("YT_TRANSCRIPT_TIMEOUT", "15"))

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
"""Fixed browser User-Agent sent with every request."""

INNERTUBE_CLIENT: dict[str, str] = {
    "clientName": "ANDROID",
    "clientVersion": "20.10.38",
}
"""Client profile sent to the player API; some videos only list captions for it."""

# ---------------------------------------------------------------------------
# Known response shapes
# ---------------------------------------------------------------------------

API_KEY_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r'"INNERTUBE_API_KEY":"([^"]+)"'),
    re.compile(r'INNERTUBE_API_KEY\\":\\"([^\\"]+)\\"'),
)
"""Encodings of the Innertube API key seen in watch-page HTML."""

BOT_CHALLENGE_MARKERS: tuple[str, ...] = (
    'class="g-recaptcha"',
)
"""Substrings of a watch page that mean YouTube served a bot challenge."""

TRACKLIST_PATHS: tuple[tuple[str, ...], ...] = (
    ("captions", "playerCaptionsTracklistRenderer"),
    ("playerCaptionsTracklistRenderer",),
)
"""Key paths inside the player JSON where the caption tracklist may live."""

PLAYABLE_STATUS = "OK"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass
class TranscriptSettings:
    """The three user-facing options, as persisted by the host.

    RULES:
    - language: preferred caption language code (ISO-ish, e.g. "en", "pt-BR")
    - include_timestamps: one "[M:SS] text" line per entry instead of a paragraph
    - section_heading: heading literal used to render and to detect the section
    """

    language: str = DEFAULT_LANGUAGE
    include_timestamps: bool = DEFAULT_INCLUDE_TIMESTAMPS
    section_heading: str = DEFAULT_SECTION_HEADING

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TranscriptSettings:
        """Merge a persisted settings dict over the defaults.

        Accepts both snake_case keys and the camelCase keys the original
        note-taking plugin persisted (``includeTimestamps``,
        ``sectionHeading``). Blank strings fall back to the built-in values.
        """
        settings = cls()
        if not data:
            return settings

        aliases = {
            "includeTimestamps": "include_timestamps",
            "sectionHeading": "section_heading",
        }
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in known:
                setattr(settings, name, value)

        settings.language = str(settings.language or "").strip() or FALLBACK_LANGUAGE
        settings.section_heading = str(settings.section_heading or "") or FALLBACK_SECTION_HEADING
        settings.include_timestamps = _parse_flag(settings.include_timestamps)
        return settings


def load_settings(path: Optional[Path] = None) -> TranscriptSettings:
    """Load settings from a JSON file, falling back to defaults.

    RULES:
    - path=None or a missing file returns the defaults
    - The file must hold a JSON object; anything else raises ValueError
    """
    if path is None:
        return TranscriptSettings()

    path = Path(path)
    if not path.is_file():
        return TranscriptSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError("Settings file {} is not valid JSON: {}".format(path, e)) from e

    if not isinstance(data, dict):
        raise ValueError("Settings file {} must contain a JSON object".format(path))

    return TranscriptSettings.from_dict(data)
