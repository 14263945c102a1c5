"""Transcript section rendering and the duplicate-section guard.

WHY: The transcript is appended to a note that the user keeps editing.
The section must look the same every time (blank line, heading, blank
line, body) and running the command twice must not add a second copy.

HOW: format_transcript() picks a formatter from the registry based on
FormatOptions.include_timestamps and wraps its body with the heading.
has_transcript_section() is a plain substring check for the heading.

RULES:
- Fragment layout: "\\n" + heading + "\\n\\n" + body
- include_timestamps=True uses "timestamped", otherwise "paragraph"
- An empty entry list is a caller bug and raises ValueError
- The presence check is an exact, case-sensitive substring match
"""

from __future__ import annotations

from typing import List

from yt_transcript.core.ir import FormatOptions, TranscriptEntry


def formatter_key(options: FormatOptions) -> str:
    """Registry key of the formatter selected by ``options``."""
    return "timestamped" if options.include_timestamps else "paragraph"


def format_transcript(entries: List[TranscriptEntry], options: FormatOptions) -> str:
    """Render entries into the transcript section appended to a note.

    Args:
        entries: Non-empty list of caption entries in caption order.
        options: Timestamp toggle and heading literal.

    Returns:
        The document fragment, starting with a blank line.
    """
    # Imported here: the registry module imports this one.
    from yt_transcript.formatters import FORMATTERS

    if not entries:
        raise ValueError("Cannot format an empty transcript")

    formatter = FORMATTERS[formatter_key(options)]()
    body = formatter.render(entries)
    return "\n{}\n\n{}".format(options.section_heading, body)


def has_transcript_section(content: str, section_heading: str) -> bool:
    """Return True when ``content`` already contains ``section_heading``."""
    return section_heading in content
