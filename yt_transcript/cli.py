"""Command-line interface: add a YouTube transcript to a Markdown note.

WHY: The pipeline needs a host that reads the note, supplies settings,
shows progress, and writes the result back. The CLI is that host for
plain Markdown files (an Obsidian vault, a notes folder, a static site).

HOW: Uses argparse to accept the note path and settings overrides.
Settings are layered: built-in defaults (from .env / environment), then
an optional JSON settings file, then explicit flags. Runs the async
pipeline via asyncio.run(). Status messages go to stderr; the note is
rewritten only when the pipeline succeeds.

RULES:
- Positional argument: path to a Markdown note (.md / .markdown)
- --language, --timestamps/--no-timestamps, --heading override settings
- --settings FILE reads persisted settings (JSON object)
- --dry-run prints the transcript section to stdout instead of writing
- --verbose turns on DEBUG logging
- Exit codes: 0 success, 1 failure, 130 cancelled
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from yt_transcript.config import MARKDOWN_SUFFIXES, TranscriptSettings, load_settings
from yt_transcript.pipeline import insert_transcript


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so --dry-run can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _resolve_settings(args: argparse.Namespace) -> TranscriptSettings:
    """Layer explicit flags over the settings file and defaults."""
    settings = load_settings(Path(args.settings) if args.settings else None)

    if args.language is not None:
        settings.language = args.language.strip() or settings.language
    if args.timestamps is not None:
        settings.include_timestamps = args.timestamps
    if args.heading is not None:
        settings.section_heading = args.heading or settings.section_heading

    return settings


async def _run(args: argparse.Namespace) -> int:
    """Read the note, run the pipeline, and persist the result.

    RULES:
    - Validate the note path before any network call
    - Write the note only on success, and only without --dry-run
    - Return the process exit code
    """
    note_path = Path(args.note).expanduser().resolve()

    if not note_path.is_file():
        print("Error: Note not found: {}".format(note_path), file=sys.stderr)
        return 1

    if note_path.suffix.lower() not in MARKDOWN_SUFFIXES:
        print(
            "Error: Not a Markdown note '{}'. Supported extensions: {}".format(
                note_path.name, ", ".join(sorted(MARKDOWN_SUFFIXES))
            ),
            file=sys.stderr,
        )
        return 1

    try:
        settings = _resolve_settings(args)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    content = note_path.read_text(encoding="utf-8")
    result = await insert_transcript(content, settings, on_status=_status)

    if not result.success:
        print("Error: {}".format(result.message), file=sys.stderr)
        return 1

    if args.dry_run:
        sys.stdout.write(result.fragment or "")
        sys.stdout.write("\n")
    else:
        note_path.write_text(result.content, encoding="utf-8")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="yt_transcript",
        description="Fetch the transcript of the YouTube video a Markdown note "
                    "refers to and append it to the note.",
    )

    parser.add_argument(
        "note",
        help="Path to the Markdown note.",
    )

    parser.add_argument(
        "--language",
        default=None,
        help="Preferred transcript language, e.g. en, es, pt-BR (default: from settings).",
    )

    parser.add_argument(
        "--timestamps",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Prefix each transcript line with [M:SS] (default: from settings).",
    )

    parser.add_argument(
        "--heading",
        default=None,
        help="Heading of the transcript section (default: from settings).",
    )

    parser.add_argument(
        "--settings",
        default=None,
        help="Path to a JSON settings file with language, includeTimestamps, "
             "and sectionHeading keys.",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the transcript section instead of modifying the note.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        exit_code = asyncio.run(_run(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
