"""Package entry point for ``python -m yt_transcript``.

WHY: Users run the inserter as ``python -m yt_transcript note.md``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from yt_transcript.cli import main

if __name__ == "__main__":
    main()
