"""Paragraph formatter — the whole transcript as one block of text.

WHY: Most readers want to skim what was said, not when. Caption lines
break mid-sentence, so keeping them as separate lines reads badly; one
continuous paragraph reads like prose.

HOW: Joins every entry's text with a single space, in caption order.

RULES:
- Exactly one space between entries, no other normalization
- Entry text is used verbatim (already decoded by the parser)
"""

from __future__ import annotations

from typing import List

from yt_transcript.core.ir import TranscriptEntry
from yt_transcript.formatters.base import BaseFormatter


class ParagraphFormatter(BaseFormatter):
    """Formatter that joins all caption lines into a single paragraph."""

    @property
    def name(self) -> str:
        return "Paragraph"

    def render(self, entries: List[TranscriptEntry]) -> str:
        return " ".join(entry.text for entry in entries)
