"""Parser for YouTube's timed-text caption XML.

WHY: Once a caption track is fetched, its body is a flat XML document of
``<text start="1.23" dur="4.56">…</text>`` elements. The formatters need
typed entries with millisecond timing and readable text.

HOW: A single regex walks the ``<text>`` elements in document order.
Seconds are converted to milliseconds and the inner text goes through the
two-pass entity decoder. The language tag is supplied by the caller (the
selected track), not read from the XML.

RULES:
- Entries are emitted in document order — no sorting, no merging
- Elements whose start/dur are not non-negative numbers are skipped
- Zero entries raises NoEntriesFoundError; an empty list is never returned
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional

from yt_transcript.core.entities import decode_entities
from yt_transcript.core.errors import NoEntriesFoundError
from yt_transcript.core.ir import TranscriptEntry

logger = logging.getLogger(__name__)

_TEXT_ELEMENT_RE = re.compile(r'<text start="([^"]*)" dur="([^"]*)">([^<]*)</text>')


def _seconds_to_ms(value: str) -> Optional[float]:
    try:
        seconds = float(value)
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds * 1000


def parse_transcript_xml(xml: str, language_code: str) -> List[TranscriptEntry]:
    """Parse caption XML into an ordered list of TranscriptEntry.

    Args:
        xml: Raw caption XML as returned by the track URL.
        language_code: Language tag of the track the XML came from.

    Returns:
        Entries in document order.

    Raises:
        NoEntriesFoundError: When no well-formed ``<text>`` element exists.
    """
    entries: List[TranscriptEntry] = []

    for match in _TEXT_ELEMENT_RE.finditer(xml):
        start, dur, raw_text = match.groups()
        offset_ms = _seconds_to_ms(start)
        duration_ms = _seconds_to_ms(dur)
        if offset_ms is None or duration_ms is None:
            logger.debug("Skipping caption element with bad timing: start=%r dur=%r", start, dur)
            continue
        entries.append(
            TranscriptEntry(
                text=decode_entities(raw_text),
                offset_ms=offset_ms,
                duration_ms=duration_ms,
                language_code=language_code,
            )
        )

    if not entries:
        raise NoEntriesFoundError("No transcript entries found in response.")

    return entries
