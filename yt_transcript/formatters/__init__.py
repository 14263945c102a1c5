"""Transcript formatter registry — pluggable section layouts.

WHY: The pipeline needs a single lookup to find the right body layout by
name. A central dict makes it trivial to add new layouts: create the
formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["paragraph"]()``.
format_transcript() and has_transcript_section() live in section.py and
are re-exported here.

RULES:
- Keys are snake_case identifiers
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from yt_transcript.formatters.paragraph import ParagraphFormatter
from yt_transcript.formatters.section import format_transcript, has_transcript_section
from yt_transcript.formatters.timestamped import TimestampedFormatter, format_timestamp

if TYPE_CHECKING:
    from yt_transcript.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "paragraph": ParagraphFormatter,
    "timestamped": TimestampedFormatter,
}

__all__ = [
    "FORMATTERS",
    "format_timestamp",
    "format_transcript",
    "has_transcript_section",
]
