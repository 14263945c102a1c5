"""Abstract base formatter.

WHY: Every transcript rendering consumes the same TranscriptEntry list but
lays the lines out differently. This base class enforces a consistent
interface so the pipeline can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``render()`` method that turns entries into the body of the
transcript section. The heading and surrounding blank lines are added by
format_transcript() in section.py, not by formatters.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``render()``
- ``render()`` receives a non-empty entry list and returns the body only
- The body never starts or ends with a newline
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from yt_transcript.core.ir import TranscriptEntry


class BaseFormatter(ABC):
    """Abstract base for all transcript body formatters.

    To add a new layout:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement render() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Paragraph'."""

    @abstractmethod
    def render(self, entries: List[TranscriptEntry]) -> str:
        """Render the entries as the body of the transcript section.

        Args:
            entries: Caption entries in caption order.

        Returns:
            The section body, without heading or surrounding blank lines.
        """
