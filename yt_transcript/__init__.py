"""YouTube Transcript Inserter — append a video's captions to a Markdown note.

WHY: Notes about a YouTube video are far more useful with the spoken words
next to them. YouTube exposes captions only through an undocumented,
versioned web API, so fetching them by hand is tedious and fragile. This
package finds the video a note refers to, negotiates the caption API, and
appends a formatted transcript section to the note.

HOW: Three-stage pipeline — detect (find the video reference in the note),
retrieve (async API client + caption XML parser), format (pluggable
formatters). The orchestrator in pipeline.py wires the stages together and
turns every failure into a short, user-facing message.

RULES:
- The note text is never mutated in place; the pipeline returns new text
- Only the first detected video reference is processed
- A note that already contains the transcript heading is left untouched
"""

__version__ = "0.1.0"
