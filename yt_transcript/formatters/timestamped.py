"""Timestamped formatter — one caption line per row with its start time.

WHY: Notes used for study or quoting need to point back at the moment in
the video where something was said.

HOW: Each entry becomes ``[timestamp] text``. The timestamp is the entry
offset floored to whole seconds, shown as ``M:SS`` below one hour and
``H:MM:SS`` from one hour on.

RULES:
- Minutes and seconds are zero-padded to two digits after a colon
- Hours, and minutes when they lead, are not padded ("0:45", "1:01:05")
- Lines are separated by a single newline
"""

from __future__ import annotations

from typing import List

from yt_transcript.core.ir import TranscriptEntry
from yt_transcript.formatters.base import BaseFormatter


def format_timestamp(ms: float) -> str:
    """Format a millisecond offset as ``M:SS`` or ``H:MM:SS``.

    Examples:
        >>> format_timestamp(125000)
        '2:05'
        >>> format_timestamp(3665000)
        '1:01:05'
    """
    total_seconds = int(ms // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return "{}:{:02d}:{:02d}".format(hours, minutes, seconds)
    return "{}:{:02d}".format(minutes, seconds)


class TimestampedFormatter(BaseFormatter):
    """Formatter that writes one ``[M:SS] text`` line per caption entry."""

    @property
    def name(self) -> str:
        return "Timestamped lines"

    def render(self, entries: List[TranscriptEntry]) -> str:
        lines = [
            "[{}] {}".format(format_timestamp(entry.offset_ms), entry.text)
            for entry in entries
        ]
        return "\n".join(lines)
